"""Resource entries and key assignments."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

from ..config.constants import PLACEHOLDER_TYPE
from .json_types import JsonDict, JSONValue


@dataclass(frozen=True, slots=True)
class PlaceholderDescriptor:
    name: str
    example: Optional[str] = None
    type: str = PLACEHOLDER_TYPE

    def to_json(self) -> JsonDict:
        payload: JsonDict = {"type": self.type}
        if self.example:
            payload["example"] = self.example
        return payload


@dataclass(frozen=True, slots=True)
class ResourceEntry:
    key: str
    value: str
    placeholders: Tuple[PlaceholderDescriptor, ...] = ()
    provenance: Optional[str] = None

    def metadata(self) -> Optional[JsonDict]:
        if not self.placeholders:
            return None
        placeholders: dict[str, JSONValue] = {
            descriptor.name: descriptor.to_json() for descriptor in self.placeholders
        }
        return {"placeholders": placeholders}


@dataclass(frozen=True, slots=True)
class KeyAssignment:
    """The key an occurrence is rewritten against.

    ``entry`` is set only when the key was newly minted in this run; reused
    keys (same content in the batch or in the persisted resource file) carry
    ``entry=None``.
    """

    key: str
    content: str
    reused: bool
    entry: Optional[ResourceEntry] = None


__all__ = ["KeyAssignment", "PlaceholderDescriptor", "ResourceEntry"]
