from __future__ import annotations

from enum import Enum
from typing import Final, FrozenSet, Tuple

# ---------------------------------------------------------------------------
# Source discovery defaults
# ---------------------------------------------------------------------------
SOURCE_SUFFIX: Final[str] = ".dart"
DEFAULT_SCAN_PATH: Final[str] = "lib"
DEFAULT_EXCLUDE_DIRS: Final[Tuple[str, ...]] = (
    "build",
    ".dart_tool",
    ".pub",
    ".git",
    "test",
    "bin",
)
CATALOG_SKIP_DIRS: Final[FrozenSet[str]] = frozenset(
    {"build", ".dart_tool", ".pub", ".git", ".idea", "node_modules"}
)

# ---------------------------------------------------------------------------
# Classification defaults
# ---------------------------------------------------------------------------
DEFAULT_CONTEXT_BEFORE: Final[int] = 2
DEFAULT_CONTEXT_AFTER: Final[int] = 1

DEFAULT_USER_FACING_PARAMS: Final[Tuple[str, ...]] = (
    "title",
    "subtitle",
    "label",
    "labelText",
    "hintText",
    "helperText",
    "errorText",
    "counterText",
    "prefixText",
    "suffixText",
    "placeholder",
    "tooltip",
    "message",
    "semanticLabel",
    "semanticsLabel",
    "hint",
    "errorMessage",
    "validationMessage",
    "confirmText",
    "cancelText",
    "helpText",
)

UI_CALLEE_SUFFIXES: Final[Tuple[str, ...]] = (
    "Text",
    "Label",
    "Title",
    "Caption",
    "Heading",
    "Message",
)

DEFAULT_NON_UI_SEGMENTS: Final[Tuple[str, ...]] = (
    "data",
    "domain",
    "models",
    "entities",
    "repositories",
    "services",
    "api",
    "dto",
    "usecases",
    "bloc",
    "cubit",
)
DEFAULT_NON_UI_SUFFIXES: Final[Tuple[str, ...]] = (
    "_model",
    "_entity",
    "_repository",
    "_service",
    "_api",
    "_dto",
    "_usecase",
    "_bloc",
    "_cubit",
    "_state",
    "_event",
)

# ---------------------------------------------------------------------------
# Resource file conventions
# ---------------------------------------------------------------------------
DEFAULT_LOCALE: Final[str] = "en"
DEFAULT_RESOURCE_FILE: Final[str] = "lib/l10n/app_en.arb"
ARB_GLOBAL_PREFIX: Final[str] = "@@"
ARB_METADATA_PREFIX: Final[str] = "@"
ARB_LOCALE_KEY: Final[str] = "@@locale"
PLACEHOLDER_TYPE: Final[str] = "Object"
TEMPLATE_VALUE_PREFIX: Final[str] = "[TODO: TRANSLATE] "
MAX_KEY_LENGTH: Final[int] = 50
MAX_KEY_WORDS: Final[int] = 8
FALLBACK_KEY: Final[str] = "text"

# ---------------------------------------------------------------------------
# Rewrite conventions
# ---------------------------------------------------------------------------
DEFAULT_AMBIENT_ACCESSOR: Final[str] = "context.l10n"
DEFAULT_STATIC_ACCESSOR: Final[str] = "AppLocalizations.of(context)!"
DEFAULT_LOCALIZATION_IMPORT: Final[str] = (
    "package:flutter_gen/gen_l10n/app_localizations.dart"
)
DEFAULT_AMBIENT_IMPORT: Final[str] = (
    "package:{package}/l10n/app_localizations_extension.dart"
)
DEFAULT_PACKAGE_NAME: Final[str] = "app"
DEFAULT_REWRITE_SCAN_LINES: Final[int] = 80
DEFAULT_MAX_WORKERS: Final[int] = 8


class Decision(str, Enum):
    KEEP = "keep"
    SKIP = "skip"


class VerdictReason(str, Enum):
    """Why an occurrence was kept or skipped; ordered by rule."""

    SEMANTIC_PARAMETER = "semantic_parameter"
    SEMANTIC_CALLEE = "semantic_callee"
    NEGATIVE_CALLEE = "negative_callee"
    TRANSLATION_ACCESSOR = "translation_accessor"
    NON_UI_LAYER = "non_ui_layer"
    TECHNICAL_CONTENT = "technical_content"
    TECHNICAL_USAGE = "technical_usage"
    UI_CONTEXT = "ui_context"
    CUSTOM_UI_CONTEXT = "custom_ui_context"
    LOCALIZED_ACCESSOR = "localized_accessor"
    KNOWN_KEY = "known_key"
    COMMENT_LINE = "comment_line"
    NO_EVIDENCE = "no_evidence"

    def __str__(self) -> str:  # pragma: no cover - trivial
        return str(self.value)


class Placement(str, Enum):
    CODE = "code"
    CONSTANT_REQUIRED = "constant_required"
    COMMENT = "comment"


class CallShape(str, Enum):
    AMBIENT = "ambient"
    STATIC = "static"


__all__ = [
    "ARB_GLOBAL_PREFIX",
    "ARB_LOCALE_KEY",
    "ARB_METADATA_PREFIX",
    "CATALOG_SKIP_DIRS",
    "CallShape",
    "DEFAULT_AMBIENT_ACCESSOR",
    "DEFAULT_AMBIENT_IMPORT",
    "DEFAULT_CONTEXT_AFTER",
    "DEFAULT_CONTEXT_BEFORE",
    "DEFAULT_EXCLUDE_DIRS",
    "DEFAULT_LOCALE",
    "DEFAULT_LOCALIZATION_IMPORT",
    "DEFAULT_MAX_WORKERS",
    "DEFAULT_NON_UI_SEGMENTS",
    "DEFAULT_NON_UI_SUFFIXES",
    "DEFAULT_PACKAGE_NAME",
    "DEFAULT_RESOURCE_FILE",
    "DEFAULT_REWRITE_SCAN_LINES",
    "DEFAULT_SCAN_PATH",
    "DEFAULT_STATIC_ACCESSOR",
    "DEFAULT_USER_FACING_PARAMS",
    "Decision",
    "FALLBACK_KEY",
    "MAX_KEY_LENGTH",
    "MAX_KEY_WORDS",
    "PLACEHOLDER_TYPE",
    "Placement",
    "SOURCE_SUFFIX",
    "TEMPLATE_VALUE_PREFIX",
    "UI_CALLEE_SUFFIXES",
    "VerdictReason",
]
