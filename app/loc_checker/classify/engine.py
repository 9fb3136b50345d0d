"""Layered keep/skip classification of harvested literal occurrences."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import PurePosixPath
from typing import Optional, Sequence, Tuple

from ..catalog.known_keys import KnownKeySnapshot
from ..config.constants import UI_CALLEE_SUFFIXES, Placement, VerdictReason
from ..config.settings import CheckerConfig
from ..models.occurrence import LiteralOccurrence
from ..models.verdict import Keep, Skip, Verdict
from ..parsing.tree import LineIndex, NodeKind
from ..utils import strip_placeholders
from .patterns import (
    TRANSLATION_MEMBERS,
    is_comment_line,
    match_custom_pattern,
    match_localization_accessor,
    match_negative_callee,
    match_technical_content,
    match_translation_callee,
    match_ui_pattern,
    matches_ui_suffix,
)

_COMPARISON_OPERATORS = frozenset({"==", "!="})
_MAP_KEY_LEADS = frozenset({"{", ","})
_DIRECT_VALUE_BLOCKERS = frozenset(
    {NodeKind.INDEX.value, NodeKind.SET_OR_MAP_LITERAL.value}
)


@dataclass(frozen=True, slots=True)
class ContextWindow:
    """Source lines around an occurrence; ``line`` is the occurrence's own line."""

    lines: Tuple[str, ...]
    first_line: int
    line: int

    @classmethod
    def around(
        cls, line_index: LineIndex, line: int, before: int, after: int
    ) -> "ContextWindow":
        first = max(1, line - before)
        last = min(line_index.line_count, line + after)
        return cls(lines=tuple(line_index.lines(first, last)), first_line=first, line=line)

    @classmethod
    def from_lines(cls, lines: Sequence[str], line: int = 1, first_line: int = 1) -> "ContextWindow":
        return cls(lines=tuple(lines), first_line=first_line, line=line)

    @property
    def enclosing_line(self) -> str:
        index = self.line - self.first_line
        if 0 <= index < len(self.lines):
            return self.lines[index]
        return ""


class ClassificationEngine:
    """Decide whether an occurrence is unlocalized user-facing text.

    Rules run in a fixed priority order and the first match wins. The engine
    holds only read-only configuration, so a single instance can be shared
    across worker threads.
    """

    def __init__(self, config: CheckerConfig) -> None:
        self._config = config
        self._user_facing_params = frozenset(config.user_facing_params)
        self._force_keep_callees = frozenset(config.force_keep_callees)
        self._non_ui_segments = frozenset(segment.lower() for segment in config.non_ui_segments)
        self._non_ui_suffixes = tuple(config.non_ui_suffixes)
        self._custom_patterns = tuple(config.custom_ui_patterns)

    def classify(
        self,
        occurrence: LiteralOccurrence,
        window: ContextWindow,
        snapshot: KnownKeySnapshot,
    ) -> Verdict:
        for rule in (
            self._semantic_override,
            self._negative_override,
            self._architectural_layer,
            self._technical_content,
            self._ui_evidence,
        ):
            verdict = rule(occurrence, window)
            if verdict is not None:
                return verdict
        verdict = self._already_localized(occurrence, window, snapshot)
        if verdict is not None:
            return verdict
        return Skip(VerdictReason.NO_EVIDENCE, 7)

    # Rule 1
    def _semantic_override(
        self, occurrence: LiteralOccurrence, window: ContextWindow
    ) -> Optional[Verdict]:
        if occurrence.role is None or occurrence.container in _DIRECT_VALUE_BLOCKERS:
            return None
        label = occurrence.role.label
        if label is not None and label in self._user_facing_params:
            return Keep(VerdictReason.SEMANTIC_PARAMETER, 1, label)
        if not occurrence.is_first_positional:
            return None
        callee = occurrence.callee or ""
        if callee in self._force_keep_callees:
            return Keep(VerdictReason.SEMANTIC_CALLEE, 1, callee)
        suffix = matches_ui_suffix(callee, UI_CALLEE_SUFFIXES)
        if suffix is not None:
            return Keep(VerdictReason.SEMANTIC_CALLEE, 1, f"{callee} (*{suffix})")
        return None

    # Rule 2
    def _negative_override(
        self, occurrence: LiteralOccurrence, window: ContextWindow
    ) -> Optional[Verdict]:
        if occurrence.trailing_member in TRANSLATION_MEMBERS:
            return Skip(VerdictReason.TRANSLATION_ACCESSOR, 2, f".{occurrence.trailing_member}")
        if occurrence.role is not None:
            accessor = match_translation_callee(occurrence.callee)
            if accessor is not None:
                return Skip(VerdictReason.TRANSLATION_ACCESSOR, 2, accessor)
        segment = match_negative_callee(occurrence.callee)
        if segment is not None:
            return Skip(VerdictReason.NEGATIVE_CALLEE, 2, segment)
        return None

    # Rule 3
    def _architectural_layer(
        self, occurrence: LiteralOccurrence, window: ContextWindow
    ) -> Optional[Verdict]:
        path = PurePosixPath(occurrence.path)
        for directory in path.parts[:-1]:
            if directory.lower() in self._non_ui_segments:
                return Skip(VerdictReason.NON_UI_LAYER, 3, directory)
        stem = path.stem
        for suffix in self._non_ui_suffixes:
            if stem.endswith(suffix):
                return Skip(VerdictReason.NON_UI_LAYER, 3, suffix)
        return None

    # Rule 4
    def _technical_content(
        self, occurrence: LiteralOccurrence, window: ContextWindow
    ) -> Optional[Verdict]:
        text = strip_placeholders(occurrence.content) if occurrence.is_template else occurrence.content
        shape = match_technical_content(text)
        if shape is not None:
            return Skip(VerdictReason.TECHNICAL_CONTENT, 4, shape)
        usage = self._technical_usage(occurrence)
        if usage is not None:
            return Skip(VerdictReason.TECHNICAL_USAGE, 4, usage)
        return None

    @staticmethod
    def _technical_usage(occurrence: LiteralOccurrence) -> Optional[str]:
        if occurrence.placement is Placement.COMMENT:
            return None
        if (
            occurrence.preceded_by in _COMPARISON_OPERATORS
            or occurrence.followed_by in _COMPARISON_OPERATORS
        ):
            return "comparison"
        if occurrence.preceded_by == "case":
            return "case_label"
        if (
            occurrence.container == NodeKind.SET_OR_MAP_LITERAL.value
            and occurrence.followed_by == ":"
            and occurrence.preceded_by in _MAP_KEY_LEADS
        ):
            return "map_key"
        if (
            occurrence.container == NodeKind.INDEX.value
            and occurrence.preceded_by == "["
            and occurrence.followed_by == "]"
        ):
            return "index_key"
        return None

    # Rule 5
    def _ui_evidence(
        self, occurrence: LiteralOccurrence, window: ContextWindow
    ) -> Optional[Verdict]:
        row = match_ui_pattern(window.lines)
        if row is not None:
            return Keep(VerdictReason.UI_CONTEXT, 5, f"{row.category}:{row.token}")
        custom = match_custom_pattern(window.lines, self._custom_patterns)
        if custom is not None:
            return Keep(VerdictReason.CUSTOM_UI_CONTEXT, 5, custom)
        return None

    # Rule 6
    def _already_localized(
        self,
        occurrence: LiteralOccurrence,
        window: ContextWindow,
        snapshot: KnownKeySnapshot,
    ) -> Optional[Verdict]:
        line = window.enclosing_line
        accessor = match_localization_accessor(line)
        if accessor is not None:
            return Skip(VerdictReason.LOCALIZED_ACCESSOR, 6, accessor)
        if snapshot.contains(occurrence.content):
            return Skip(VerdictReason.KNOWN_KEY, 6, occurrence.content.strip())
        if not self._config.include_comments and is_comment_line(line):
            return Skip(VerdictReason.COMMENT_LINE, 6)
        return None


__all__ = ["ClassificationEngine", "ContextWindow"]
