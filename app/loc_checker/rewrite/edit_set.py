"""Per-file collection of non-overlapping text edits."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Sequence, Tuple

from ..exceptions import EditConflictError
from ..log_config import warning_log
from ..models.edits import TextEdit


@dataclass(frozen=True, slots=True)
class DroppedGroup:
    path: str
    edits: Tuple[TextEdit, ...]
    reason: str


class EditSet:
    """Edits for one file, accepted a group at a time.

    A group is one occurrence's literal replacement plus its ancestor
    modifier edits. It is accepted only if each of its edits is identical to,
    or disjoint from, every edit already accepted; otherwise the whole group
    is dropped.
    """

    def __init__(self, path: str) -> None:
        self._path = path
        self._edits: List[TextEdit] = []
        self._dropped: List[DroppedGroup] = []

    @property
    def path(self) -> str:
        return self._path

    def __len__(self) -> int:
        return len(self._edits)

    def __bool__(self) -> bool:
        return bool(self._edits)

    def _conflict(self, edit: TextEdit, others: Sequence[TextEdit]) -> bool:
        for other in others:
            if other.same_change(edit):
                continue
            if other.overlaps(edit):
                return True
        return False

    def fits(self, group: Sequence[TextEdit]) -> bool:
        """True when ``group`` can be added without touching accepted edits.

        Spans decide conflicts, so a group can be checked with a provisional
        literal replacement before its key is allocated.
        """

        for index, edit in enumerate(group):
            if self._conflict(edit, group[:index]) or self._conflict(edit, self._edits):
                return False
        return True

    def add_group(self, group: Sequence[TextEdit], *, strict: bool = False) -> bool:
        if not self.fits(group):
            if strict:
                raise EditConflictError(
                    f"Edit group at offset {group[0].offset} overlaps accepted edits in {self._path}"
                )
            self.drop(group, "overlap")
            return False
        for edit in group:
            if any(accepted.same_change(edit) for accepted in self._edits):
                continue
            self._edits.append(edit)
        return True

    def drop(self, group: Sequence[TextEdit], reason: str) -> None:
        dropped = DroppedGroup(path=self._path, edits=tuple(group), reason=reason)
        self._dropped.append(dropped)
        warning_log(
            "edit_group_dropped",
            {
                "path": self._path,
                "offset": group[0].offset if group else None,
                "reason": reason,
            },
        )

    def ordered(self) -> List[TextEdit]:
        """Accepted edits in application order: descending start offset."""

        return sorted(self._edits, key=lambda edit: edit.sort_key)

    @property
    def dropped(self) -> Tuple[DroppedGroup, ...]:
        return tuple(self._dropped)


__all__ = ["DroppedGroup", "EditSet"]
