"""Catalog of keys and values that already have a localization binding."""

from __future__ import annotations

import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterator, Mapping

from ..config.constants import ARB_METADATA_PREFIX, CATALOG_SKIP_DIRS
from ..config.settings import CheckerConfig
from ..log_config import verbose_log, warning_log
from ..models.json_types import flatten_string_leaves, message_entries

_TRANSLATION_DIRS = frozenset({"i18n", "translations"})


@dataclass(frozen=True)
class KnownKeySnapshot:
    """Immutable view of every known key and translated value for one run."""

    keys: frozenset[str] = frozenset()
    values: frozenset[str] = frozenset()

    def contains(self, content: str) -> bool:
        text = content.strip()
        return bool(text) and (text in self.values or text in self.keys)

    def __len__(self) -> int:
        return len(self.keys)

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, str]) -> "KnownKeySnapshot":
        return cls(
            keys=frozenset(mapping),
            values=frozenset(value.strip() for value in mapping.values() if value.strip()),
        )


class KnownKeyCatalog:
    """Scan a project for resource files and collect their keys and values."""

    def __init__(self, config: CheckerConfig) -> None:
        self._root = config.project_root
        self._excluded = tuple(item.strip("/") for item in config.exclude_dirs if item.strip("/"))

    def load(self) -> KnownKeySnapshot:
        keys: set[str] = set()
        values: set[str] = set()
        files = 0
        for path in self.iter_resource_files():
            entries = self._read(path)
            if entries is None:
                continue
            files += 1
            for key, value in entries.items():
                keys.add(key)
                if value.strip():
                    values.add(value.strip())
        verbose_log(
            "known_keys_loaded",
            {"files": files, "keys": len(keys), "values": len(values)},
        )
        return KnownKeySnapshot(keys=frozenset(keys), values=frozenset(values))

    def iter_resource_files(self) -> Iterator[Path]:
        for directory, dirnames, filenames in os.walk(self._root):
            current = Path(directory)
            dirnames[:] = sorted(
                name
                for name in dirnames
                if name not in CATALOG_SKIP_DIRS and not self._is_excluded(current / name)
            )
            for filename in sorted(filenames):
                if filename.endswith(".arb"):
                    yield current / filename
                elif filename.endswith(".json") and current.name in _TRANSLATION_DIRS:
                    yield current / filename

    def _is_excluded(self, path: Path) -> bool:
        relative = path.relative_to(self._root).as_posix()
        return any(
            relative == excluded or relative.startswith(f"{excluded}/")
            for excluded in self._excluded
        )

    def _read(self, path: Path) -> Dict[str, str] | None:
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
            warning_log("catalog_file_skipped", {"path": str(path), "error": str(exc)})
            return None
        if not isinstance(data, dict):
            warning_log("catalog_file_skipped", {"path": str(path), "error": "not an object"})
            return None
        if path.suffix == ".arb":
            return message_entries(data, ARB_METADATA_PREFIX)
        return flatten_string_leaves(data)


__all__ = ["KnownKeyCatalog", "KnownKeySnapshot"]
