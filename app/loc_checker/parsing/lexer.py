"""Character-level tokenizer for Dart source text."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple, Union

from ..exceptions import SourceParseError

_IDENTIFIER_RE = re.compile(r"[A-Za-z_$][A-Za-z0-9_$]*")
_SIMPLE_INTERPOLATION_RE = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")
_NUMBER_RE = re.compile(
    r"0[xX][0-9a-fA-F]+|\d+(?:\.\d+)?(?:[eE][+-]?\d+)?|\.\d+(?:[eE][+-]?\d+)?"
)

# Longest operators first. '>' and '<' stay single so nested type arguments
# such as List<List<int>> close one level at a time.
_OPERATORS: Tuple[str, ...] = (
    "...?",
    "?..",
    "...",
    "??=",
    "~/=",
    "..",
    "?.",
    "??",
    "=>",
    "==",
    "!=",
    "<=",
    "&&",
    "||",
    "++",
    "--",
    "+=",
    "-=",
    "*=",
    "/=",
    "%=",
    "&=",
    "|=",
    "^=",
    "~/",
)

_SIMPLE_ESCAPES = {
    "n": "\n",
    "t": "\t",
    "r": "\r",
    "b": "\b",
    "f": "\f",
    "v": "\v",
}


class TokenKind(str, Enum):
    IDENTIFIER = "identifier"
    NUMBER = "number"
    STRING = "string"
    OPERATOR = "operator"
    EOF = "eof"


@dataclass(frozen=True, slots=True)
class Interpolation:
    """An embedded ``$name`` or ``${expression}`` inside a string literal."""

    source: str
    start: int
    end: int
    braced: bool


StringPart = Union[str, Interpolation]


@dataclass(frozen=True, slots=True)
class Comment:
    start: int
    end: int
    text: str
    block: bool


@dataclass(slots=True)
class Token:
    kind: TokenKind
    start: int
    end: int
    text: str
    parts: Tuple[StringPart, ...] = ()
    raw: bool = False

    def is_op(self, *values: str) -> bool:
        return self.kind is TokenKind.OPERATOR and self.text in values

    def is_word(self, *values: str) -> bool:
        return self.kind is TokenKind.IDENTIFIER and self.text in values


@dataclass
class LexResult:
    tokens: List[Token]
    comments: List[Comment] = field(default_factory=list)


class DartLexer:
    """Turn Dart source into tokens, keeping comments aside as trivia.

    Raises :class:`SourceParseError` on unterminated strings or comments.
    """

    def __init__(self, text: str) -> None:
        self._text = text
        self._length = len(text)

    def tokenize(self) -> LexResult:
        text = self._text
        tokens: List[Token] = []
        comments: List[Comment] = []
        pos = 0
        while pos < self._length:
            char = text[pos]
            if char.isspace():
                pos += 1
                continue
            if text.startswith("//", pos):
                end = text.find("\n", pos)
                end = self._length if end == -1 else end
                comments.append(Comment(pos, end, text[pos:end], block=False))
                pos = end
                continue
            if text.startswith("/*", pos):
                end = self._skip_block_comment(pos)
                comments.append(Comment(pos, end, text[pos:end], block=True))
                pos = end
                continue
            if char == "r" and pos + 1 < self._length and text[pos + 1] in "'\"":
                token = self._scan_string(pos, raw=True)
                tokens.append(token)
                pos = token.end
                continue
            if char in "'\"":
                token = self._scan_string(pos, raw=False)
                tokens.append(token)
                pos = token.end
                continue
            match = _IDENTIFIER_RE.match(text, pos)
            if match:
                tokens.append(Token(TokenKind.IDENTIFIER, pos, match.end(), match.group()))
                pos = match.end()
                continue
            match = _NUMBER_RE.match(text, pos)
            if match:
                tokens.append(Token(TokenKind.NUMBER, pos, match.end(), match.group()))
                pos = match.end()
                continue
            operator = self._match_operator(pos)
            tokens.append(Token(TokenKind.OPERATOR, pos, pos + len(operator), operator))
            pos += len(operator)
        tokens.append(Token(TokenKind.EOF, self._length, self._length, ""))
        return LexResult(tokens=tokens, comments=comments)

    def _match_operator(self, pos: int) -> str:
        for operator in _OPERATORS:
            if self._text.startswith(operator, pos):
                return operator
        return self._text[pos]

    def _skip_block_comment(self, pos: int) -> int:
        # Dart block comments nest.
        depth = 0
        index = pos
        while index < self._length:
            if self._text.startswith("/*", index):
                depth += 1
                index += 2
                continue
            if self._text.startswith("*/", index):
                depth -= 1
                index += 2
                if depth == 0:
                    return index
                continue
            index += 1
        raise SourceParseError("Unterminated block comment", pos)

    def _scan_string(self, pos: int, *, raw: bool) -> Token:
        text = self._text
        start = pos
        if raw:
            pos += 1
        quote_char = text[pos]
        triple = text.startswith(quote_char * 3, pos)
        quote = quote_char * 3 if triple else quote_char
        pos += len(quote)
        parts: List[StringPart] = []
        buffer: List[str] = []

        def flush() -> None:
            if buffer:
                parts.append("".join(buffer))
                buffer.clear()

        while True:
            if pos >= self._length:
                raise SourceParseError("Unterminated string literal", start)
            if text.startswith(quote, pos):
                pos += len(quote)
                break
            char = text[pos]
            if char == "\n" and not triple:
                raise SourceParseError("Unterminated string literal", start)
            if char == "\\" and not raw:
                decoded, pos = self._decode_escape(pos, start)
                buffer.append(decoded)
                continue
            if char == "$" and not raw:
                interpolation = self._scan_interpolation(pos, start)
                if interpolation is not None:
                    flush()
                    parts.append(interpolation)
                    pos = interpolation.end
                    continue
            buffer.append(char)
            pos += 1
        flush()
        return Token(
            TokenKind.STRING,
            start,
            pos,
            text[start:pos],
            parts=tuple(parts),
            raw=raw,
        )

    def _decode_escape(self, pos: int, string_start: int) -> Tuple[str, int]:
        text = self._text
        if pos + 1 >= self._length:
            raise SourceParseError("Unterminated string literal", string_start)
        code = text[pos + 1]
        if code in _SIMPLE_ESCAPES:
            return _SIMPLE_ESCAPES[code], pos + 2
        if code == "x":
            digits = text[pos + 2 : pos + 4]
            if len(digits) == 2 and _is_hex(digits):
                return chr(int(digits, 16)), pos + 4
            return "x", pos + 2
        if code == "u":
            if pos + 2 < self._length and text[pos + 2] == "{":
                close = text.find("}", pos + 3)
                digits = text[pos + 3 : close] if close != -1 else ""
                if digits and len(digits) <= 6 and _is_hex(digits):
                    return chr(int(digits, 16)), close + 1
                return "u", pos + 2
            digits = text[pos + 2 : pos + 6]
            if len(digits) == 4 and _is_hex(digits):
                return chr(int(digits, 16)), pos + 6
            return "u", pos + 2
        if code == "\n":
            return "", pos + 2
        return code, pos + 2

    def _scan_interpolation(self, pos: int, string_start: int) -> Optional[Interpolation]:
        text = self._text
        if text.startswith("${", pos):
            end = self._skip_braced_expression(pos + 2, string_start)
            source = text[pos + 2 : end - 1].strip()
            return Interpolation(source=source, start=pos, end=end, braced=True)
        match = _SIMPLE_INTERPOLATION_RE.match(text, pos + 1)
        if not match:
            return None
        return Interpolation(source=match.group(), start=pos, end=match.end(), braced=False)

    def _skip_braced_expression(self, pos: int, string_start: int) -> int:
        """Return the offset just past the ``}`` closing a ``${`` expression."""

        text = self._text
        depth = 1
        while pos < self._length:
            char = text[pos]
            if char == "r" and pos + 1 < self._length and text[pos + 1] in "'\"":
                pos = self._scan_string(pos, raw=True).end
                continue
            if char in "'\"":
                pos = self._scan_string(pos, raw=False).end
                continue
            if text.startswith("//", pos):
                newline = text.find("\n", pos)
                pos = self._length if newline == -1 else newline
                continue
            if text.startswith("/*", pos):
                pos = self._skip_block_comment(pos)
                continue
            if char == "{":
                depth += 1
            elif char == "}":
                depth -= 1
                if depth == 0:
                    return pos + 1
            pos += 1
        raise SourceParseError("Unterminated string interpolation", string_start)


def _is_hex(value: str) -> bool:
    return all(char in "0123456789abcdefABCDEF" for char in value)


__all__ = [
    "Comment",
    "DartLexer",
    "Interpolation",
    "LexResult",
    "StringPart",
    "Token",
    "TokenKind",
]
