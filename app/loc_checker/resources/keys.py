"""Resource key derivation from normalized literal content."""

from __future__ import annotations

import re
from typing import List

from ..config.constants import FALLBACK_KEY, MAX_KEY_LENGTH, MAX_KEY_WORDS
from ..utils import lower_camel_case, strip_placeholders

_PUNCTUATION_RE = re.compile(r"[^\w\s]")
_NON_ASCII_ALNUM_RE = re.compile(r"[^A-Za-z0-9]")

DART_RESERVED_WORDS = frozenset(
    {
        "abstract", "as", "assert", "async", "await", "base", "break", "case",
        "catch", "class", "const", "continue", "covariant", "default", "deferred",
        "do", "dynamic", "else", "enum", "export", "extends", "extension",
        "external", "factory", "false", "final", "finally", "for", "function",
        "get", "hide", "if", "implements", "import", "in", "interface", "is",
        "late", "library", "mixin", "new", "null", "of", "on", "operator", "part",
        "required", "rethrow", "return", "sealed", "set", "show", "static",
        "super", "switch", "sync", "this", "throw", "true", "try", "typedef",
        "var", "void", "when", "while", "with", "yield",
        # Members generated on the localizations class itself.
        "delegate", "localeName", "localizationsDelegates", "supportedLocales",
    }
)


def key_words(content: str) -> List[str]:
    text = _PUNCTUATION_RE.sub("", strip_placeholders(content)).lower()
    words = (_NON_ASCII_ALNUM_RE.sub("", word) for word in text.split())
    return [word for word in words if word][:MAX_KEY_WORDS]


def derive_key(content: str) -> str:
    """Derive a lower-camel-case identifier for ``content``.

    >>> derive_key("Hello World")
    'helloWorld'
    >>> derive_key("Welcome, {param0}!")
    'welcome'
    """

    key = lower_camel_case(key_words(content))
    if not key:
        return FALLBACK_KEY
    if not key[0].isalpha():
        key = FALLBACK_KEY + key[0].upper() + key[1:]
    key = key[:MAX_KEY_LENGTH]
    if key in DART_RESERVED_WORDS:
        key = f"{key}Text"
    return key


__all__ = ["DART_RESERVED_WORDS", "derive_key", "key_words"]
