"""Resource key derivation, allocation and ARB persistence."""

from .arb_store import ArbResourceStore, serialize_arb
from .key_manager import ResourceKeyManager
from .keys import DART_RESERVED_WORDS, derive_key

__all__ = [
    "ArbResourceStore",
    "DART_RESERVED_WORDS",
    "ResourceKeyManager",
    "derive_key",
    "serialize_arb",
]
