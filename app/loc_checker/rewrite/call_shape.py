"""Choose between the ambient and static localization call shapes.

This is a wider, line-based backward scan, separate from the narrow window the
classifier looks at. The ambient shape resolves through a ``context`` already
in scope, so it is only chosen on strong evidence; anything else falls back to
the static shape.
"""

from __future__ import annotations

import re
from typing import List, Optional, Sequence, Tuple

from ..config.constants import DEFAULT_REWRITE_SCAN_LINES, CallShape

_STRING_RE = re.compile(r"'(?:\\.|[^'\\])*'|\"(?:\\.|[^\"\\])*\"")
_OPENERS = {"(": ")", "[": "]", "{": "}"}
_CLOSERS = frozenset(_OPENERS.values())

_CLASS_HEADER_RE = re.compile(r"^\s*(?:abstract\s+|sealed\s+|base\s+|final\s+)*(?:class|mixin|extension|enum)\b")
_BUILD_SIGNATURE_RE = re.compile(r"\bbuild\s*\(\s*BuildContext\s+context\b")
_BUILDER_CALLBACK_RE = re.compile(r"\w*[bB]uilder\s*:\s*\(\s*(?:BuildContext\s+)?context\b")
_OVERLAY_CALL_RE = re.compile(
    r"(?<![\w.])(?:showDialog|showModalBottomSheet|showCupertinoDialog|showCupertinoModalPopup|"
    r"showGeneralDialog|AlertDialog|SimpleDialog|BottomSheet|CupertinoAlertDialog)\s*(?:<[^<>]*>)?\s*\("
)
_METHOD_HEADER_RE = re.compile(
    r"(?<![\w.])(?P<name>[A-Za-z_]\w*)\s*(?:<[^<>]*>)?\s*\((?P<params>[^()]*)\)\s*"
    r"(?:async\*?|sync\*)?\s*(?:\{|=>)"
)
_CONTROL_WORDS = frozenset({"if", "for", "while", "switch", "catch", "return", "when"})


def _mask(line: str) -> str:
    masked = _STRING_RE.sub(lambda match: " " * len(match.group()), line)
    comment = masked.find("//")
    return masked if comment == -1 else masked[:comment]


class RewriteContextScanner:
    """Backward scan over enclosing scopes to pick a call shape."""

    def __init__(self, scan_lines: int = DEFAULT_REWRITE_SCAN_LINES) -> None:
        self._scan_lines = max(1, scan_lines)

    def explain(self, lines: Sequence[str], line: int, column: int) -> Tuple[CallShape, str]:
        """Return the call shape and the evidence label behind it.

        ``line`` and ``column`` are 1-based, as reported on occurrences.
        """

        pending: List[str] = []
        first = max(0, line - self._scan_lines)
        index = min(line - 1, len(lines) - 1)
        while index >= first:
            text = _mask(lines[index])
            if index == line - 1:
                text = text[: max(0, column - 1)]
            header_end = self._enclosing_opener(text, pending)
            if header_end is not None:
                header, index = self._header(lines, index, text[: header_end + 1], pending)
                verdict = self._judge(header)
                if verdict is not None:
                    return verdict
            index -= 1
        return CallShape.STATIC, "scan_exhausted"

    @staticmethod
    def _enclosing_opener(text: str, pending: List[str]) -> Optional[int]:
        """Consume ``text`` right to left; return the rightmost enclosing opener."""

        found: Optional[int] = None
        for position in range(len(text) - 1, -1, -1):
            char = text[position]
            if char in _CLOSERS:
                pending.append(char)
            elif char in _OPENERS:
                if pending and pending[-1] == _OPENERS[char]:
                    pending.pop()
                elif pending:
                    # Mismatched nesting; drop the stale closer.
                    pending.pop()
                elif found is None:
                    found = position
        return found

    @classmethod
    def _header(
        cls, lines: Sequence[str], index: int, text: str, pending: List[str]
    ) -> Tuple[str, int]:
        """Join a wrapped header onto one line; return it with its first line index.

        A formatted signature may leave ``) {`` on a line of its own. Lines
        pulled in here are also fed through the bracket stack so the closers
        they balance do not leak into the rest of the scan.
        """

        parts = [text]
        depth = text.count(")") - text.count("(")
        cursor = index
        while depth > 0 and cursor > 0 and len(parts) < 8:
            cursor -= 1
            previous = _mask(lines[cursor])
            parts.insert(0, previous)
            depth += previous.count(")") - previous.count("(")
            cls._enclosing_opener(previous, pending)
        return " ".join(part.strip() for part in parts), cursor

    @staticmethod
    def _judge(header: str) -> Optional[Tuple[CallShape, str]]:
        if _CLASS_HEADER_RE.search(header):
            return CallShape.STATIC, "class_scope"
        if _BUILD_SIGNATURE_RE.search(header):
            return CallShape.AMBIENT, "build_method"
        if _BUILDER_CALLBACK_RE.search(header):
            return CallShape.AMBIENT, "builder_callback"
        if _OVERLAY_CALL_RE.search(header):
            return CallShape.AMBIENT, "overlay"
        for match in _METHOD_HEADER_RE.finditer(header):
            if match.group("name") not in _CONTROL_WORDS:
                return CallShape.STATIC, "method_scope"
        return None


__all__ = ["RewriteContextScanner"]
