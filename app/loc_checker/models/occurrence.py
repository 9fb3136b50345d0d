"""Literal occurrences harvested from one parsed source file."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

from ..config.constants import Placement


@dataclass(frozen=True, slots=True)
class ArgumentRole:
    """Where a literal sits inside its enclosing call: a label or a position."""

    label: Optional[str] = None
    position: Optional[int] = None

    @property
    def is_named(self) -> bool:
        return self.label is not None

    def describe(self) -> str:
        if self.label is not None:
            return self.label
        return f"#{self.position}"


@dataclass(frozen=True, slots=True)
class LiteralOccurrence:
    path: str
    content: str
    offset: int
    length: int
    line: int
    column: int
    raw_text: str
    callee: Optional[str] = None
    role: Optional[ArgumentRole] = None
    variables: Tuple[str, ...] = ()
    is_template: bool = False
    placement: Placement = Placement.CODE
    preceded_by: Optional[str] = None
    followed_by: Optional[str] = None
    trailing_member: Optional[str] = None
    container: Optional[str] = None
    node_index: Optional[int] = None
    message: str = ""

    @property
    def resource_message(self) -> str:
        """The ICU message stored for this literal; literal braces arrive quoted."""

        return self.message or self.content

    @property
    def end(self) -> int:
        return self.offset + self.length

    @property
    def is_rewritable(self) -> bool:
        return self.placement is Placement.CODE and self.node_index is not None

    @property
    def is_first_positional(self) -> bool:
        return self.role is not None and self.role.label is None and self.role.position == 0

    @property
    def sort_key(self) -> Tuple[str, int]:
        return (self.path, self.offset)


__all__ = ["ArgumentRole", "LiteralOccurrence"]
