"""Findings persistence and baseline comparison for external report renderers."""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterable, List, Sequence, Tuple

from .exceptions import ResourceFileError
from .log_config import verbose_log, warning_log
from .models.findings import Finding
from .schemas.findings import FindingSchema
from .utils import atomic_write_text, truncate_string

_SCHEMA = FindingSchema()


@dataclass(frozen=True, slots=True)
class BaselineComparison:
    new: Tuple[Finding, ...]
    resolved: Tuple[Finding, ...]

    @property
    def has_regressions(self) -> bool:
        return bool(self.new)


def dump_findings(findings: Iterable[Finding]) -> str:
    payload = _SCHEMA.dump(list(findings), many=True)
    return json.dumps(payload, ensure_ascii=False, indent=2) + "\n"


def write_findings(path: Path, findings: Sequence[Finding]) -> None:
    atomic_write_text(path, dump_findings(findings))
    verbose_log("findings_written", {"path": str(path), "count": len(findings)})


def load_findings(path: Path) -> List[Finding]:
    """Read a findings file; a missing file is an empty baseline."""

    if not path.exists():
        return []
    try:
        raw = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise ResourceFileError(f"Cannot read findings file {path}: {exc}") from exc
    if not raw.strip():
        return []
    try:
        decoded = json.loads(raw)
    except ValueError as exc:
        warning_log("findings_file_malformed", {"path": str(path), "error": repr(exc)})
        raise ResourceFileError(f"Malformed findings file {path}: {exc}") from exc
    return list(
        _SCHEMA.load_or_raise(decoded, ResourceFileError, what=f"findings file {path}", many=True)
    )


def compare_with_baseline(
    current: Sequence[Finding], baseline: Sequence[Finding]
) -> BaselineComparison:
    """Split findings into those absent from ``baseline`` and those gone since."""

    current_ids: Dict[str, Finding] = {finding.identity: finding for finding in current}
    baseline_ids: Dict[str, Finding] = {finding.identity: finding for finding in baseline}
    new = tuple(finding for key, finding in current_ids.items() if key not in baseline_ids)
    resolved = tuple(
        finding for key, finding in baseline_ids.items() if key not in current_ids
    )
    return BaselineComparison(new=new, resolved=resolved)


def format_finding(finding: Finding) -> str:
    content = truncate_string(finding.content, 80) or ""
    return (
        f'[MISSING] "{content}" → found in {finding.file}:{finding.line} '
        f"pattern: {finding.pattern}"
    )


__all__ = [
    "BaselineComparison",
    "compare_with_baseline",
    "dump_findings",
    "format_finding",
    "load_findings",
    "write_findings",
]
