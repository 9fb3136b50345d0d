"""Cross-file key allocation for kept occurrences."""

from __future__ import annotations

import threading
from typing import Dict, List, Mapping, Optional, Set, Tuple

from ..log_config import debug_verbose
from ..models.occurrence import LiteralOccurrence
from ..models.resource import KeyAssignment, PlaceholderDescriptor, ResourceEntry
from ..utils import placeholder_name
from .keys import derive_key


class ResourceKeyManager:
    """Turns kept occurrences into deduplicated resource keys.

    Identical messages always resolve to one key: first against keys minted
    earlier in the batch, then against values already persisted in the
    resource file. Only a genuinely new message mints a key, with ``2``, ``3``,
    ... appended when the derived key is taken by a different message.

    Allocation order decides which occurrence gets the undecorated key, so
    callers feed occurrences in a stable (path, offset) order. The lock keeps
    the namespace consistent if a caller shares the manager across threads.
    """

    def __init__(self, existing: Optional[Mapping[str, str]] = None) -> None:
        self._lock = threading.RLock()
        self._existing: Dict[str, str] = dict(existing or {})
        self._existing_by_value: Dict[str, str] = {}
        for key in sorted(self._existing):
            self._existing_by_value.setdefault(self._existing[key], key)
        self._batch_by_message: Dict[str, str] = {}
        self._taken: Set[str] = set(self._existing)
        self._new_entries: Dict[str, ResourceEntry] = {}
        self._assignments: List[KeyAssignment] = []

    def lookup(self, message: str) -> Optional[str]:
        """Return the key ``message`` already resolves to, without allocating."""

        with self._lock:
            if message in self._batch_by_message:
                return self._batch_by_message[message]
            return self._existing_by_value.get(message)

    def assign(self, occurrence: LiteralOccurrence) -> KeyAssignment:
        message = occurrence.resource_message
        with self._lock:
            key = self._batch_by_message.get(message)
            if key is not None:
                assignment = KeyAssignment(key=key, content=message, reused=True)
            elif message in self._existing_by_value:
                key = self._existing_by_value[message]
                self._batch_by_message[message] = key
                assignment = KeyAssignment(key=key, content=message, reused=True)
            else:
                key = self._free_key(derive_key(occurrence.content))
                entry = ResourceEntry(
                    key=key,
                    value=message,
                    placeholders=self._placeholders(occurrence),
                    provenance=f"{occurrence.path}:{occurrence.line}",
                )
                self._taken.add(key)
                self._batch_by_message[message] = key
                self._new_entries[key] = entry
                assignment = KeyAssignment(key=key, content=message, reused=False, entry=entry)
            self._assignments.append(assignment)
        debug_verbose(
            "key_assigned",
            {"key": assignment.key, "reused": assignment.reused, "source": occurrence.path},
        )
        return assignment

    def _free_key(self, base: str) -> str:
        if base not in self._taken:
            return base
        counter = 2
        while f"{base}{counter}" in self._taken:
            counter += 1
        return f"{base}{counter}"

    @staticmethod
    def _placeholders(occurrence: LiteralOccurrence) -> Tuple[PlaceholderDescriptor, ...]:
        return tuple(
            PlaceholderDescriptor(name=placeholder_name(index), example=variable)
            for index, variable in enumerate(occurrence.variables)
        )

    @property
    def new_entries(self) -> Tuple[ResourceEntry, ...]:
        with self._lock:
            return tuple(self._new_entries.values())

    @property
    def assignments(self) -> Tuple[KeyAssignment, ...]:
        with self._lock:
            return tuple(self._assignments)

    @property
    def known_keys(self) -> frozenset[str]:
        with self._lock:
            return frozenset(self._taken)


__all__ = ["ResourceKeyManager"]
