from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple


@dataclass(frozen=True, slots=True)
class Finding:
    """A kept occurrence, shaped for an external report renderer."""

    file: str
    line: int
    column: int
    content: str
    context: Tuple[str, ...] = ()
    pattern: str = ""
    reason: str = ""
    rewritable: bool = True

    @property
    def identity(self) -> str:
        return f"{self.file}:{self.line}:{self.content}"


__all__ = ["Finding"]
