"""Persistence of ARB resource files."""

from __future__ import annotations

import json
import threading
from pathlib import Path
from typing import Dict, Optional, Sequence

from ..config.constants import (
    ARB_GLOBAL_PREFIX,
    ARB_LOCALE_KEY,
    ARB_METADATA_PREFIX,
    TEMPLATE_VALUE_PREFIX,
)
from ..exceptions import ResourceFileError
from ..log_config import verbose_log, warning_log
from ..models.json_types import (
    JsonDict,
    JSONValue,
    clone_json_dict,
    clone_json_value,
    message_entries,
)
from ..models.resource import ResourceEntry
from ..utils import atomic_write_text


class ArbResourceStore:
    """Reads, merges and writes one locale's ARB file.

    Existing entries are never overwritten. Output is ordered deterministically:
    ``@@`` globals first, then keys alphabetically, each followed by its ``@key``
    metadata. No volatile fields are written.
    """

    def __init__(self, path: Path, locale: str) -> None:
        self._path = path
        self._locale = locale
        self._lock = threading.RLock()
        self._data: Optional[JsonDict] = None
        self._malformed = False

    @property
    def path(self) -> Path:
        return self._path

    @property
    def locale(self) -> str:
        return self._locale

    @property
    def malformed(self) -> bool:
        return self._malformed

    def load(self) -> JsonDict:
        """Return the persisted document; a malformed file degrades to empty."""

        with self._lock:
            if self._data is None:
                try:
                    self._data = self._read(self._path)
                except ResourceFileError as exc:
                    warning_log(
                        "resource_file_malformed", {"path": str(self._path), "error": str(exc)}
                    )
                    self._data = {}
                    self._malformed = True
            return clone_json_dict(self._data)

    @staticmethod
    def _read(path: Path) -> JsonDict:
        if not path.exists():
            return {}
        try:
            raw = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise ResourceFileError(f"Cannot read {path}: {exc}") from exc
        if not raw.strip():
            return {}
        try:
            decoded: JSONValue = json.loads(raw)
        except json.JSONDecodeError as exc:
            raise ResourceFileError(f"Invalid JSON in {path}: {exc}") from exc
        if not isinstance(decoded, dict):
            raise ResourceFileError(f"{path} does not contain a JSON object")
        return decoded

    def messages(self) -> Dict[str, str]:
        """Key to value for every translatable entry."""

        return message_entries(self.load(), ARB_METADATA_PREFIX)

    def merge(self, entries: Sequence[ResourceEntry]) -> JsonDict:
        data = self.load()
        for entry in entries:
            if entry.key in data:
                continue
            data[entry.key] = entry.value
            metadata = entry.metadata()
            if metadata is not None:
                data[f"{ARB_METADATA_PREFIX}{entry.key}"] = metadata
        return data

    def render(self, data: JsonDict, locale: Optional[str] = None) -> str:
        return serialize_arb(data, locale or self._locale)

    def write(self, entries: Sequence[ResourceEntry], *, dry_run: bool = False) -> bool:
        """Persist ``entries`` below the existing ones; untouched when nothing is new."""

        with self._lock:
            existing = self.load()
            fresh = [entry for entry in entries if entry.key not in existing]
            if not fresh:
                return False
            if self._malformed:
                raise ResourceFileError(
                    f"Refusing to overwrite malformed resource file {self._path}"
                )
            rendered = self.render(self.merge(fresh))
            if dry_run:
                verbose_log("resource_file_dry_run", {"path": str(self._path), "added": len(fresh)})
                return False
            atomic_write_text(self._path, rendered)
            self._data = None
        verbose_log("resource_file_written", {"path": str(self._path), "added": len(fresh)})
        return True

    def template_path(self, locale: str) -> Path:
        name = self._path.name
        suffix = f"_{self._locale}.arb"
        if name.endswith(suffix):
            return self._path.with_name(f"{name[: -len(suffix)]}_{locale}.arb")
        return self._path.with_name(f"app_{locale}.arb")

    def write_template(self, locale: str, *, dry_run: bool = False) -> Path:
        """Write ``locale``'s file with every missing key marked for translation.

        Keys already present in the target file keep their translations.
        """

        target = ArbResourceStore(self.template_path(locale), locale)
        existing = target.load()
        if target.malformed:
            raise ResourceFileError(
                f"Refusing to overwrite malformed resource file {target.path}"
            )
        data: JsonDict = {}
        for key, value in self.load().items():
            if key.startswith(ARB_GLOBAL_PREFIX):
                continue
            if key in existing:
                continue
            if key.startswith(ARB_METADATA_PREFIX):
                data[key] = clone_json_value(value)
            elif isinstance(value, str):
                data[key] = f"{TEMPLATE_VALUE_PREFIX}{value}"
        data.update(existing)
        data[ARB_LOCALE_KEY] = locale
        if not dry_run:
            atomic_write_text(target.path, serialize_arb(data, locale))
            verbose_log("resource_template_written", {"path": str(target.path), "locale": locale})
        return target.path


def serialize_arb(data: JsonDict, locale: str) -> str:
    globals_: JsonDict = {}
    messages: Dict[str, JSONValue] = {}
    metadata: Dict[str, JSONValue] = {}
    for key, value in data.items():
        if key.startswith(ARB_GLOBAL_PREFIX):
            globals_[key] = value
        elif key.startswith(ARB_METADATA_PREFIX):
            metadata[key[len(ARB_METADATA_PREFIX) :]] = value
        else:
            messages[key] = value

    ordered: JsonDict = {}
    if ARB_LOCALE_KEY not in globals_:
        ordered[ARB_LOCALE_KEY] = locale
    ordered.update(globals_)
    for key in sorted(set(messages) | set(metadata)):
        if key in messages:
            ordered[key] = messages[key]
        if key in metadata:
            ordered[f"{ARB_METADATA_PREFIX}{key}"] = metadata[key]
    return json.dumps(ordered, ensure_ascii=False, indent=2) + "\n"


__all__ = ["ArbResourceStore", "serialize_arb"]
