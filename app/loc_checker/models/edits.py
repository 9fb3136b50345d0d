"""Text edits and localization call plans."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

from ..config.constants import CallShape


@dataclass(frozen=True, slots=True)
class TextEdit:
    offset: int
    length: int
    replacement: str
    origin: str = "literal"

    @property
    def end(self) -> int:
        return self.offset + self.length

    @property
    def sort_key(self) -> Tuple[int, int]:
        return (-self.offset, -self.length)

    def same_change(self, other: "TextEdit") -> bool:
        return (
            self.offset == other.offset
            and self.length == other.length
            and self.replacement == other.replacement
        )

    def overlaps(self, other: "TextEdit") -> bool:
        if self.length and other.length:
            return self.offset < other.end and other.offset < self.end
        if not self.length and not other.length:
            return self.offset == other.offset
        point, span = (self, other) if not self.length else (other, self)
        return span.offset < point.offset < span.end


@dataclass(frozen=True, slots=True)
class LocalizationCallPlan:
    shape: CallShape
    accessor: str
    key: str
    arguments: Tuple[str, ...] = ()

    def render(self) -> str:
        call = f"{self.accessor}.{self.key}"
        if self.arguments:
            call += f"({', '.join(self.arguments)})"
        return call


__all__ = ["LocalizationCallPlan", "TextEdit"]
