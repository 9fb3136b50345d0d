"""Apply one file's edit set and persist the result."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import List, Sequence, Set, Tuple

from ..config.constants import CallShape
from ..config.settings import CheckerConfig
from ..exceptions import EditConflictError, SourceWriteError
from ..log_config import verbose_log
from ..models.edits import TextEdit
from ..utils import atomic_write_text
from .imports import ensure_imports, read_package_name
from .planner import FilePlan


@dataclass
class RewrittenFile:
    path: Path
    relative_path: str
    original: str
    text: str
    applied: int
    imports_added: Tuple[str, ...] = ()
    written: bool = False

    @property
    def changed(self) -> bool:
        return self.applied > 0 and self.text != self.original


def apply_edits(text: str, edits: Sequence[TextEdit]) -> str:
    """Apply ``edits`` to ``text`` from the highest offset down.

    Every later edit starts before the previous one, so offsets taken from the
    original buffer stay valid throughout.
    """

    ordered = sorted(edits, key=lambda edit: edit.sort_key)
    boundary = len(text)
    for edit in ordered:
        if edit.end > boundary or edit.offset < 0:
            raise EditConflictError(
                f"Edit at offset {edit.offset} overlaps a previously applied edit"
            )
        text = text[: edit.offset] + edit.replacement + text[edit.end :]
        boundary = edit.offset
    return text


class EditApplier:
    """File-local: applies edits, adds the localization import and writes."""

    def __init__(self, config: CheckerConfig, package_name: str | None = None) -> None:
        self._config = config
        self._package_name = package_name or read_package_name(config.project_root)

    @property
    def package_name(self) -> str:
        return self._package_name

    def imports_for(self, shapes: Set[CallShape]) -> List[str]:
        uris: List[str] = []
        if CallShape.STATIC in shapes:
            uris.append(self._config.localization_import)
        if CallShape.AMBIENT in shapes:
            uris.append(self._config.ambient_import.format(package=self._package_name))
        return uris

    def rewrite(self, path: Path, original: str, plan: FilePlan) -> RewrittenFile:
        edits = plan.edit_set.ordered()
        relative = self._config.relative_path(path)
        if not edits:
            return RewrittenFile(path, relative, original, original, applied=0)
        text = apply_edits(original, edits)
        text, added = ensure_imports(text, self.imports_for(plan.shapes))
        return RewrittenFile(
            path=path,
            relative_path=relative,
            original=original,
            text=text,
            applied=len(edits),
            imports_added=added,
        )

    def write(self, rewritten: RewrittenFile) -> RewrittenFile:
        if not rewritten.changed or self._config.dry_run:
            return rewritten
        try:
            atomic_write_text(rewritten.path, rewritten.text)
        except OSError as exc:
            raise SourceWriteError(f"Cannot write {rewritten.path}: {exc}") from exc
        rewritten.written = True
        verbose_log(
            "source_rewritten",
            {
                "path": rewritten.relative_path,
                "edits": rewritten.applied,
                "imports": list(rewritten.imports_added),
            },
        )
        return rewritten


__all__ = ["EditApplier", "RewrittenFile", "apply_edits"]
