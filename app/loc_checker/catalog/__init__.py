from .known_keys import KnownKeyCatalog, KnownKeySnapshot

__all__ = ["KnownKeyCatalog", "KnownKeySnapshot"]
