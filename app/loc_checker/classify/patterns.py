"""Pattern tables used by the classification engine.

Every table is data: ordered tuples evaluated once per line, so a category can
be extended or unit-tested without touching the rule chain.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterable, Optional, Pattern, Sequence, Tuple

_WORD_BOUNDARY = r"(?<![A-Za-z0-9_])"


@dataclass(frozen=True, slots=True)
class UiPattern:
    category: str
    token: str
    priority: int
    label: str
    regex: Pattern[str]

    def matches(self, line: str) -> bool:
        return bool(self.regex.search(line))


def _compile_token(token: str) -> Pattern[str]:
    if token.endswith("("):
        body = re.escape(token[:-1])
        return re.compile(_WORD_BOUNDARY + body + r"\s*(?:<[^>()]*>)?\s*\(")
    if token.endswith(":"):
        return re.compile(_WORD_BOUNDARY + re.escape(token[:-1]) + r"\s*:(?!:)")
    if token.endswith("."):
        return re.compile(_WORD_BOUNDARY + re.escape(token[:-1]) + r"\s*\.")
    return re.compile(_WORD_BOUNDARY + re.escape(token))


def _rows(
    category: str, priority: int, entries: Sequence[Tuple[str, str]]
) -> Tuple[UiPattern, ...]:
    return tuple(
        UiPattern(category, token, priority, label, _compile_token(token))
        for token, label in entries
    )


UI_PATTERN_TABLE: Tuple[UiPattern, ...] = (
    *_rows(
        "display",
        90,
        (
            ("Text(", "Text widget"),
            ("RichText(", "Rich text"),
            ("SelectableText(", "Selectable text"),
            ("AutoSizeText(", "Text widget"),
            ("TextSpan(", "Text span"),
            ("AppBar(", "AppBar title/actions"),
            ("SliverAppBar(", "AppBar title/actions"),
            ("ListTile(", "ListTile content"),
            ("ExpansionTile(", "ListTile content"),
            ("Card(", "Card content"),
            ("Chip(", "Chip label"),
            ("Tooltip(", "Tooltip text"),
            ("Banner(", "Banner text"),
            ("MaterialBanner(", "Banner text"),
            ("DataColumn(", "Table header"),
            ("Tab(", "Tab label"),
            ("BottomNavigationBarItem(", "Navigation item"),
            ("NavigationDestination(", "Navigation item"),
            ("ElevatedButton(", "Button text"),
            ("TextButton(", "Button text"),
            ("OutlinedButton(", "Button text"),
            ("FilledButton(", "Button text"),
            ("IconButton(", "Button text"),
            ("FloatingActionButton(", "FAB text"),
            ("PopupMenuItem(", "Menu item"),
        ),
    ),
    *_rows(
        "input",
        85,
        (
            ("TextFormField(", "TextFormField"),
            ("TextField(", "Text input"),
            ("InputDecoration(", "Input decoration"),
            ("DropdownMenuItem(", "Dropdown item"),
            ("DropdownButtonFormField(", "Dropdown field"),
            ("CheckboxListTile(", "Checkbox label"),
            ("RadioListTile(", "Radio label"),
            ("SwitchListTile(", "Switch label"),
            ("Stepper(", "Stepper"),
            ("Step(", "Stepper"),
            ("FormBuilderTextField(", "Text input"),
            ("validator:", "Form validation"),
        ),
    ),
    *_rows(
        "overlay",
        80,
        (
            ("SnackBar(", "SnackBar message"),
            ("AlertDialog(", "AlertDialog content"),
            ("SimpleDialog(", "Dialog content"),
            ("Dialog(", "Dialog content"),
            ("BottomSheet(", "Bottom sheet"),
            ("showDialog(", "Dialog display"),
            ("showModalBottomSheet(", "Bottom sheet"),
            ("showSnackBar(", "SnackBar message"),
            ("showAboutDialog(", "Dialog display"),
            ("showGeneralDialog(", "Dialog display"),
            ("showMenu(", "Menu item"),
            ("ScaffoldMessenger.", "SnackBar message"),
            ("Flushbar(", "Toast message"),
            ("FlutterToast.", "Toast message"),
            ("Fluttertoast.", "Toast message"),
            ("EasyLoading.", "Toast message"),
        ),
    ),
    *_rows(
        "navigation",
        60,
        (
            ("Navigator.", "Navigation"),
            ("MaterialPageRoute(", "Navigation"),
            ("CupertinoPageRoute(", "Navigation"),
            ("context.go(", "GoRouter navigation"),
            ("context.push(", "GoRouter navigation"),
            ("Drawer(", "Drawer content"),
            ("TabBar(", "Tab label"),
            ("BottomNavigationBar(", "Navigation item"),
            ("NavigationBar(", "Navigation item"),
            ("NavigationRail(", "Navigation item"),
        ),
    ),
    *_rows(
        "state_builder",
        50,
        (
            ("BlocBuilder(", "Bloc state management"),
            ("BlocConsumer(", "Bloc state management"),
            ("BlocListener(", "Bloc state management"),
            ("Consumer(", "Provider state management"),
            ("GetBuilder(", "GetX state management"),
            ("Obx(", "GetX state management"),
            ("ValueListenableBuilder(", "Builder content"),
            ("StreamBuilder(", "Builder content"),
            ("FutureBuilder(", "Builder content"),
        ),
    ),
    *_rows(
        "accessibility",
        70,
        (
            ("Semantics(", "Accessibility label"),
            ("MergeSemantics(", "Accessibility label"),
            ("semanticLabel:", "Accessibility label"),
            ("semanticsLabel:", "Accessibility label"),
        ),
    ),
    *_rows(
        "animation",
        40,
        (
            ("AnimatedSwitcher(", "Animated content"),
            ("AnimatedOpacity(", "Animated content"),
            ("AnimatedContainer(", "Animated content"),
            ("Hero(", "Animated content"),
        ),
    ),
    *_rows(
        "platform",
        75,
        (
            ("CupertinoAlertDialog(", "AlertDialog content"),
            ("CupertinoActionSheet(", "Action sheet"),
            ("CupertinoButton(", "Button text"),
            ("CupertinoNavigationBar(", "Navigation title"),
            ("CupertinoTextField(", "Text input"),
            ("CupertinoDialogAction(", "Dialog action"),
        ),
    ),
    *_rows(
        "property",
        65,
        (
            ("labelText:", "Input label"),
            ("hintText:", "Input hint"),
            ("helperText:", "Input helper"),
            ("errorText:", "Error message"),
            ("title:", "Title property"),
            ("subtitle:", "Subtitle property"),
            ("label:", "Label property"),
            ("tooltip:", "Tooltip text"),
            ("content:", "Content property"),
            ("placeholder:", "Placeholder text"),
        ),
    ),
)

UNKNOWN_UI_PATTERN = "Unknown UI context"


def match_ui_pattern(lines: Iterable[str]) -> Optional[UiPattern]:
    """Return the highest-priority row matching any line, earliest row on ties."""

    best: Optional[UiPattern] = None
    for line in lines:
        for row in UI_PATTERN_TABLE:
            if best is not None and row.priority <= best.priority:
                continue
            if row.matches(line):
                best = row
    return best


def describe_ui_pattern(lines: Iterable[str]) -> str:
    row = match_ui_pattern(lines)
    return row.label if row is not None else UNKNOWN_UI_PATTERN


def match_custom_pattern(lines: Iterable[str], patterns: Sequence[str]) -> Optional[str]:
    for line in lines:
        for pattern in patterns:
            if pattern and pattern in line:
                return pattern
    return None


# ---------------------------------------------------------------------------
# Technical content
# ---------------------------------------------------------------------------
TECHNICAL_CONTENT_PATTERNS: Tuple[Tuple[str, Pattern[str]], ...] = (
    ("numeric", re.compile(r"^[\d\s.,:;%+\-*/x×()]+$")),
    ("symbols", re.compile(r"^[\W_]+$")),
    ("url", re.compile(r"^(?:[a-z][a-z0-9+.\-]*://|www\.)\S*$", re.IGNORECASE)),
    ("email", re.compile(r"^[\w.+\-]+@[\w\-]+(?:\.[\w\-]+)+$")),
    ("hex_color", re.compile(r"^(?:#|0x)(?:[0-9a-fA-F]{3,4}|[0-9a-fA-F]{6}|[0-9a-fA-F]{8})$")),
    (
        "uuid",
        re.compile(
            r"^[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}$"
        ),
    ),
    ("file_path", re.compile(r"^(?:\.{0,2}/|assets/|packages/|lib/|images/|fonts/)\S*$")),
    (
        "file_name",
        re.compile(
            r"^[\w\-./]+\.(?:png|jpe?g|gif|svg|webp|ico|json|dart|arb|ya?ml|xml|html?|css|js|"
            r"ttf|otf|woff2?|mp3|mp4|wav|ogg|pdf|txt|csv|zip|db|sqlite|log)$",
            re.IGNORECASE,
        ),
    ),
    ("file_extension", re.compile(r"^\.[A-Za-z0-9]{1,5}$")),
    ("boolean_null", re.compile(r"^(?:true|false|null|undefined|none|nil)$", re.IGNORECASE)),
    (
        "mime_type",
        re.compile(r"^(?:application|text|image|audio|video|multipart|font)/[\w.+\-]+$"),
    ),
    ("http_verb", re.compile(r"^(?:GET|POST|PUT|PATCH|DELETE|HEAD|OPTIONS|TRACE|CONNECT)$")),
    ("camel_case", re.compile(r"^_?[a-z][a-z0-9]*(?:[A-Z][a-z0-9]*)+$")),
    ("snake_case", re.compile(r"^_?[a-z0-9]+(?:_[a-z0-9]+)+$")),
    ("constant_case", re.compile(r"^[A-Z][A-Z0-9]*(?:_[A-Z0-9]+)+$")),
    ("kebab_case", re.compile(r"^[a-z0-9]+(?:-[a-z0-9]+)+$")),
    ("dotted_key", re.compile(r"^[a-z_][\w]*(?:\.[\w]+)+$")),
    ("short_token", re.compile(r"^[b-df-hj-np-tv-xzB-DF-HJ-NP-TV-XZ0-9]{1,3}$")),
    ("date_format", re.compile(r"^[yMdHhmsSaEz]+(?:[\s\-/.:,][yMdHhmsSaEz]+)+$")),
)


def match_technical_content(text: str) -> Optional[str]:
    """Return the name of the first technical shape ``text`` matches."""

    stripped = text.strip()
    if not stripped:
        return "empty"
    if len(stripped) == 1:
        return "single_character"
    for name, pattern in TECHNICAL_CONTENT_PATTERNS:
        if pattern.match(stripped):
            return name
    return None


# ---------------------------------------------------------------------------
# Callee conventions
# ---------------------------------------------------------------------------
_LOGGER_SEGMENT_RE = re.compile(
    r"^_?(?:log|logger|logging|logs|print|debugprint|printerror|developer|console|"
    r"crashlytics|sentry|talker)$",
    re.IGNORECASE,
)
_EXCEPTION_SEGMENT_RE = re.compile(r"^[A-Z]\w*(?:Exception|Error|Failure)$")
_ERROR_SINK_SEGMENTS = frozenset({"addError", "completeError", "assert", "throwError"})

TRANSLATION_CALLEES = frozenset(
    {
        "tr",
        "trParams",
        "translate",
        "plural",
        "gender",
        "Intl.message",
        "Intl.plural",
        "Intl.gender",
        "Intl.select",
        "Intl.pluralLogic",
        "LocaleKeys.tr",
    }
)
TRANSLATION_MEMBERS = frozenset({"tr", "trParams", "i18n", "plural", "tr_", "trArgs"})


def callee_segments(callee: str) -> Tuple[str, ...]:
    return tuple(
        segment.replace("()", "").strip() for segment in callee.split(".") if segment.strip()
    )


def match_negative_callee(callee: Optional[str]) -> Optional[str]:
    """Return the offending segment when ``callee`` logs, throws or reports errors."""

    if not callee:
        return None
    for segment in callee_segments(callee):
        if _LOGGER_SEGMENT_RE.match(segment):
            return segment
        if _EXCEPTION_SEGMENT_RE.match(segment):
            return segment
        if segment in _ERROR_SINK_SEGMENTS:
            return segment
    return None


def match_translation_callee(callee: Optional[str]) -> Optional[str]:
    if not callee:
        return None
    normalized = ".".join(callee_segments(callee))
    if normalized in TRANSLATION_CALLEES:
        return normalized
    segments = callee_segments(callee)
    if segments and segments[-1] in ("tr", "trParams", "translate"):
        return segments[-1]
    return None


def matches_ui_suffix(callee: Optional[str], suffixes: Sequence[str]) -> Optional[str]:
    """``<Prefix><Suffix>``: the suffix alone (e.g. a bare ``Text``) does not count."""

    if not callee:
        return None
    segments = callee_segments(callee)
    if not segments:
        return None
    name = segments[-1]
    if len(segments) > 1 and segments[-2][:1].isupper() and not name[:1].isupper():
        # Named constructors such as ``Foo.rich``: judge the type name.
        name = segments[-2]
    for suffix in suffixes:
        if name.endswith(suffix) and len(name) > len(suffix) and name[:1].isupper():
            return suffix
    return None


# ---------------------------------------------------------------------------
# Localization accessor grammar
# ---------------------------------------------------------------------------
LOCALIZATION_ACCESSOR_PATTERNS: Tuple[Tuple[str, Pattern[str]], ...] = tuple(
    (name, re.compile(pattern))
    for name, pattern in (
        ("app_localizations_of", r"AppLocalizations\s*\.\s*of\s*\(\s*[^)]+\s*\)\s*!?\s*\.\s*\w+"),
        ("app_localizations", r"AppLocalizations\s*\.\s*\w+"),
        ("tr_member", r"\.tr\s*(?=\()"),
        ("tr_params", r"\.trParams\s*(?=\()"),
        ("locale_keys", r"LocaleKeys\s*\.\s*\w+\s*\.\s*tr\s*\(\s*\)"),
        ("tr_call", r"(?<![\w.])tr\s*\(\s*\w+\s*\)"),
        ("intl_message", r"Intl\s*\.\s*message\s*\("),
        ("intl_plural", r"Intl\s*\.\s*plural\s*\("),
        ("intl_select", r"Intl\s*\.\s*select\s*\("),
        ("i18n_of", r"I18n\s*\.\s*of\s*\(\s*[^)]+\s*\)\s*\.\s*\w+"),
        ("s_of", r"(?<![\w.])S\s*\.\s*of\s*\(\s*[^)]+\s*\)\s*\.\s*\w+"),
        ("s_current", r"(?<![\w.])S\s*\.\s*current\s*\.\s*\w+"),
        ("context_l10n", r"context\s*\.\s*l10n\s*\.\s*\w+"),
        ("translate_call", r"(?<![\w.])translate\s*\(\s*\w+\s*\)"),
    )
)


def match_localization_accessor(line: str) -> Optional[str]:
    for name, pattern in LOCALIZATION_ACCESSOR_PATTERNS:
        if pattern.search(line):
            return name
    return None


def is_comment_line(line: str) -> bool:
    stripped = line.strip()
    return (
        stripped.startswith("//")
        or stripped.startswith("/*")
        or stripped.startswith("* ")
        or stripped == "*"
        or stripped.endswith("*/")
    )


__all__ = [
    "LOCALIZATION_ACCESSOR_PATTERNS",
    "TECHNICAL_CONTENT_PATTERNS",
    "TRANSLATION_CALLEES",
    "TRANSLATION_MEMBERS",
    "UI_PATTERN_TABLE",
    "UNKNOWN_UI_PATTERN",
    "UiPattern",
    "callee_segments",
    "describe_ui_pattern",
    "is_comment_line",
    "match_custom_pattern",
    "match_localization_accessor",
    "match_negative_callee",
    "match_technical_content",
    "match_translation_callee",
    "match_ui_pattern",
    "matches_ui_suffix",
]
