"""Domain models shared across the harvesting, classification and rewrite stages."""

from .edits import LocalizationCallPlan, TextEdit
from .findings import Finding
from .json_types import JSONValue, JsonDict, clone_json_dict, clone_json_value
from .occurrence import ArgumentRole, LiteralOccurrence
from .resource import KeyAssignment, PlaceholderDescriptor, ResourceEntry
from .verdict import Keep, Skip, Verdict

__all__ = [
    "ArgumentRole",
    "Finding",
    "JSONValue",
    "JsonDict",
    "Keep",
    "KeyAssignment",
    "LiteralOccurrence",
    "LocalizationCallPlan",
    "PlaceholderDescriptor",
    "ResourceEntry",
    "Skip",
    "TextEdit",
    "Verdict",
    "clone_json_dict",
    "clone_json_value",
]
