from .files import atomic_write_text
from .helpers import (
    icu_escape,
    lower_camel_case,
    now_iso,
    placeholder_name,
    placeholder_token,
    strip_placeholders,
    truncate_string,
)

__all__ = [
    "atomic_write_text",
    "icu_escape",
    "lower_camel_case",
    "now_iso",
    "placeholder_name",
    "placeholder_token",
    "strip_placeholders",
    "truncate_string",
]
