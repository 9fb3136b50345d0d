"""JSON aliases and helpers for resource documents."""

from __future__ import annotations

from typing import Dict, Mapping, TypeAlias

JSONPrimitive: TypeAlias = str | int | float | bool | None
JSONValue: TypeAlias = JSONPrimitive | list["JSONValue"] | dict[str, "JSONValue"]
JsonDict: TypeAlias = dict[str, JSONValue]


def clone_json_value(value: JSONValue) -> JSONValue:
    """Copy nested lists and dicts so callers never share a cached document."""

    if isinstance(value, list):
        return [clone_json_value(item) for item in value]
    if isinstance(value, dict):
        return {key: clone_json_value(item) for key, item in value.items()}
    return value


def clone_json_dict(value: Mapping[str, JSONValue]) -> JsonDict:
    return {key: clone_json_value(item) for key, item in value.items()}


def message_entries(document: Mapping[str, JSONValue], metadata_prefix: str = "@") -> Dict[str, str]:
    """Top-level string messages of an ARB document, metadata excluded."""

    return {
        key: value
        for key, value in document.items()
        if not key.startswith(metadata_prefix) and isinstance(value, str)
    }


def flatten_string_leaves(value: JSONValue, prefix: str = "") -> Dict[str, str]:
    """Map dotted paths to string leaves: ``{"a": {"b": "x"}}`` -> ``{"a.b": "x"}``."""

    flat: Dict[str, str] = {}
    if isinstance(value, dict):
        for key, item in value.items():
            flat.update(flatten_string_leaves(item, f"{prefix}.{key}" if prefix else str(key)))
    elif isinstance(value, str) and prefix:
        flat[prefix] = value
    return flat


__all__ = [
    "JSONPrimitive",
    "JSONValue",
    "JsonDict",
    "clone_json_dict",
    "clone_json_value",
    "flatten_string_leaves",
    "message_entries",
]
