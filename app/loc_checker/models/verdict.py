"""Tagged classification outcomes."""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar, Optional

from ..config.constants import Decision, VerdictReason


@dataclass(frozen=True, slots=True)
class Verdict:
    reason: VerdictReason
    rule: int
    detail: Optional[str] = None

    decision: ClassVar[Decision]

    @property
    def is_keep(self) -> bool:
        return self.decision is Decision.KEEP

    def describe(self) -> str:
        suffix = f" ({self.detail})" if self.detail else ""
        return f"{self.decision.value}:{self.reason.value}{suffix}"


@dataclass(frozen=True, slots=True)
class Keep(Verdict):
    decision: ClassVar[Decision] = Decision.KEEP


@dataclass(frozen=True, slots=True)
class Skip(Verdict):
    decision: ClassVar[Decision] = Decision.SKIP


__all__ = ["Keep", "Skip", "Verdict"]
