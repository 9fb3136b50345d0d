"""Keep/skip classification of literal occurrences."""

from .engine import ClassificationEngine, ContextWindow
from .patterns import (
    UI_PATTERN_TABLE,
    UNKNOWN_UI_PATTERN,
    UiPattern,
    describe_ui_pattern,
    match_localization_accessor,
    match_technical_content,
    match_ui_pattern,
)

__all__ = [
    "ClassificationEngine",
    "ContextWindow",
    "UI_PATTERN_TABLE",
    "UNKNOWN_UI_PATTERN",
    "UiPattern",
    "describe_ui_pattern",
    "match_localization_accessor",
    "match_technical_content",
    "match_ui_pattern",
]
