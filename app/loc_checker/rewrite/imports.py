"""Localization import detection and insertion."""

from __future__ import annotations

import re
from pathlib import Path
from typing import Iterable, List, Optional, Tuple

from ..config.constants import DEFAULT_PACKAGE_NAME
from ..log_config import verbose_log

_IMPORT_RE = re.compile(r"^import\s+(['\"])(.+?)\1[^;]*;", re.MULTILINE | re.DOTALL)
_LIBRARY_RE = re.compile(r"^library\b[^;]*;", re.MULTILINE)
_PART_OF_RE = re.compile(r"^\s*part\s+of\b", re.MULTILINE)
_PUBSPEC_NAME_RE = re.compile(r"^name:\s*['\"]?([A-Za-z_][\w]*)['\"]?\s*$", re.MULTILINE)
_LEADING_TRIVIA_RE = re.compile(r"\A(?:\s*(?://[^\n]*(?:\n|\Z)|/\*.*?\*/))*", re.DOTALL)


def read_package_name(project_root: Path) -> str:
    pubspec = project_root / "pubspec.yaml"
    try:
        text = pubspec.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        verbose_log("pubspec_unreadable", {"path": str(pubspec), "error": repr(exc)})
        return DEFAULT_PACKAGE_NAME
    match = _PUBSPEC_NAME_RE.search(text)
    return match.group(1) if match else DEFAULT_PACKAGE_NAME


def is_part_file(text: str) -> bool:
    return bool(_PART_OF_RE.search(text))


def imported_uris(text: str) -> List[str]:
    return [match.group(2) for match in _IMPORT_RE.finditer(text)]


def has_import(text: str, uri: str) -> bool:
    """Match by full URI, or by file name for relative imports of the same file."""

    file_name = uri.rsplit("/", 1)[-1]
    for existing in imported_uris(text):
        if existing == uri or existing.rsplit("/", 1)[-1] == file_name:
            return True
    return False


def line_ending(text: str) -> str:
    return "\r\n" if "\r\n" in text else "\n"


def insertion_point(text: str) -> Tuple[int, str, str]:
    """Return ``(offset, before, after)`` wrapping a new import statement.

    The separators follow the file's own line ending.
    """

    newline = line_ending(text)
    last_import: Optional[re.Match[str]] = None
    for last_import in _IMPORT_RE.finditer(text):
        pass
    if last_import is not None:
        return last_import.end(), newline, ""
    library = _LIBRARY_RE.search(text)
    if library is not None:
        return library.end(), newline * 2, ""
    trivia = _LEADING_TRIVIA_RE.match(text)
    offset = trivia.end() if trivia else 0
    if offset == 0:
        return 0, "", newline * 2
    if not text[offset - 1 : offset] == "\n":
        return offset, newline * 2, newline
    return offset, newline, newline


def ensure_imports(text: str, uris: Iterable[str]) -> Tuple[str, Tuple[str, ...]]:
    """Add each missing import; files that are ``part of`` a library are left alone."""

    if is_part_file(text):
        return text, ()
    added: List[str] = []
    for uri in uris:
        if has_import(text, uri):
            continue
        offset, before, after = insertion_point(text)
        text = f"{text[:offset]}{before}import '{uri}';{after}{text[offset:]}"
        added.append(uri)
    return text, tuple(added)


__all__ = [
    "ensure_imports",
    "has_import",
    "imported_uris",
    "insertion_point",
    "is_part_file",
    "line_ending",
    "read_package_name",
]
