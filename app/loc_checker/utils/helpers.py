from __future__ import annotations

import re
from datetime import datetime, timezone
from typing import Iterable, Optional

_PLACEHOLDER_TOKEN_RE = re.compile(r"\{param\d+\}")
_ICU_SYNTAX_RE = re.compile(r"[{}]")


def truncate_string(value: Optional[str], limit: int = 800) -> Optional[str]:
    if not value:
        return None
    text = value.strip()
    if len(text) <= limit:
        return text
    return text[: limit - 3].rstrip() + "..."


def now_iso() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


def placeholder_token(index: int) -> str:
    return f"{{param{index}}}"


def placeholder_name(index: int) -> str:
    return f"param{index}"


def strip_placeholders(text: str) -> str:
    return _PLACEHOLDER_TOKEN_RE.sub(" ", text)


def icu_escape(text: str) -> str:
    """Quote literal braces so a message formatter does not read them as arguments.

    >>> icu_escape("Use {braces}")
    "Use '{'braces'}'"
    """

    if not _ICU_SYNTAX_RE.search(text):
        return text
    return _ICU_SYNTAX_RE.sub(lambda match: f"'{match.group()}'", text.replace("'", "''"))


def lower_camel_case(words: Iterable[str]) -> str:
    parts = [word for word in words if word]
    if not parts:
        return ""
    head = parts[0].lower()
    return head + "".join(part[:1].upper() + part[1:].lower() for part in parts[1:])


__all__ = [
    "icu_escape",
    "lower_camel_case",
    "now_iso",
    "placeholder_name",
    "placeholder_token",
    "strip_placeholders",
    "truncate_string",
]
