"""Harvest string-literal occurrences from a parsed Dart file."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from ..config.constants import Placement
from ..log_config import debug_verbose, warning_log
from ..models.occurrence import ArgumentRole, LiteralOccurrence
from ..parsing.lexer import Interpolation
from ..parsing.parser import DartParser, ParseFailure
from ..parsing.tree import CONTAINER_KINDS, Node, NodeKind, SyntaxTree
from ..utils import icu_escape, placeholder_token, strip_placeholders

_COMMENT_STRING_RE = re.compile(r"'([^'\n]+)'|\"([^\"\n]+)\"")
_CONSTANT_OWNERS = frozenset({NodeKind.SIGNATURE, NodeKind.ANNOTATION})
_CALL_OWNERS = frozenset({NodeKind.CALL, NodeKind.SIGNATURE, NodeKind.ANNOTATION})
_PATTERN_LEADS = frozenset({"{", ","})


@dataclass
class HarvestResult:
    path: str
    tree: Optional[SyntaxTree] = None
    occurrences: List[LiteralOccurrence] = field(default_factory=list)
    failure: Optional[ParseFailure] = None


@dataclass(frozen=True, slots=True)
class _Enclosure:
    callee: Optional[str]
    role: Optional[ArgumentRole]
    container: Optional[str]
    placement: Placement


class LiteralHarvester:
    """Read-only pass turning string nodes into :class:`LiteralOccurrence` records."""

    def __init__(self, include_comments: bool = False, parser: Optional[DartParser] = None) -> None:
        self._include_comments = include_comments
        self._parser = parser or DartParser()

    def harvest_text(self, path: str, text: str) -> HarvestResult:
        result = self._parser.parse(text)
        if result.tree is None:
            failure = result.failure or ParseFailure("Unparsable source", 1, 1)
            warning_log("parse_failed", {"path": path, "error": failure.describe()})
            return HarvestResult(path=path, failure=failure)
        occurrences = self.harvest(path, result.tree)
        debug_verbose("file_harvested", {"path": path, "occurrences": len(occurrences)})
        return HarvestResult(path=path, tree=result.tree, occurrences=occurrences)

    def harvest(self, path: str, tree: SyntaxTree) -> List[LiteralOccurrence]:
        occurrences: List[LiteralOccurrence] = []
        for node in tree.iter_kind(NodeKind.STRING, NodeKind.ADJACENT_STRINGS):
            parent = tree.parent(node.index)
            if node.kind is NodeKind.STRING and parent is not None and (
                parent.kind is NodeKind.ADJACENT_STRINGS
            ):
                continue
            occurrence = self._occurrence(path, tree, node)
            if occurrence is not None:
                occurrences.append(occurrence)
        if self._include_comments:
            occurrences.extend(self._comment_occurrences(path, tree))
        occurrences.sort(key=lambda item: item.offset)
        return occurrences

    def _occurrence(
        self, path: str, tree: SyntaxTree, node: Node
    ) -> Optional[LiteralOccurrence]:
        if any(ancestor.kind is NodeKind.DIRECTIVE for ancestor in tree.ancestors(node.index)):
            return None
        content, message, variables = self._reconstruct(node)
        if not strip_placeholders(content).strip():
            return None
        enclosure = self._enclosure(tree, node)
        line, column = tree.location(node.start)
        return LiteralOccurrence(
            path=path,
            content=content,
            offset=node.start,
            length=node.end - node.start,
            line=line,
            column=column,
            raw_text=tree.source(node),
            callee=enclosure.callee,
            role=enclosure.role,
            variables=variables,
            is_template=bool(variables),
            placement=enclosure.placement,
            preceded_by=node.preceded_by,
            followed_by=node.followed_by,
            trailing_member=node.trailing_member,
            container=enclosure.container,
            node_index=node.index,
            message=message,
        )

    @staticmethod
    def _reconstruct(node: Node) -> Tuple[str, str, Tuple[str, ...]]:
        """Return display content, the ICU message and the interpolated sources."""

        pieces: List[str] = []
        escaped: List[str] = []
        variables: List[str] = []
        for part in node.parts:
            if isinstance(part, Interpolation):
                token = placeholder_token(len(variables))
                pieces.append(token)
                escaped.append(token)
                variables.append(part.source)
            else:
                pieces.append(part)
                escaped.append(icu_escape(part))
        return "".join(pieces), "".join(escaped), tuple(variables)

    @staticmethod
    def _enclosure(tree: SyntaxTree, node: Node) -> _Enclosure:
        callee: Optional[str] = None
        role: Optional[ArgumentRole] = None
        container: Optional[str] = None
        placement = Placement.CODE
        block: Optional[Node] = None
        for ancestor in tree.ancestors(node.index):
            if ancestor.kind is NodeKind.BLOCK:
                block = ancestor
                break
            if ancestor.kind in _CONSTANT_OWNERS:
                placement = Placement.CONSTANT_REQUIRED
            if ancestor.kind is NodeKind.ARGUMENT and role is None:
                owner = tree.parent(ancestor.index)
                if owner is not None and owner.kind in _CALL_OWNERS:
                    role = ArgumentRole(label=ancestor.label, position=ancestor.position)
                    callee = owner.callee
                continue
            if ancestor.kind in CONTAINER_KINDS and container is None and role is None:
                container = ancestor.kind.value
        if node.preceded_by == "case":
            placement = Placement.CONSTANT_REQUIRED
        if block is not None and block.callee == "enum":
            placement = Placement.CONSTANT_REQUIRED
        if (
            block is not None
            and block.callee == "switch"
            and node.followed_by == "=>"
            and node.preceded_by in _PATTERN_LEADS
        ):
            placement = Placement.CONSTANT_REQUIRED
        return _Enclosure(callee=callee, role=role, container=container, placement=placement)

    @staticmethod
    def _comment_occurrences(path: str, tree: SyntaxTree) -> List[LiteralOccurrence]:
        occurrences: List[LiteralOccurrence] = []
        for comment in tree.comments:
            for match in _COMMENT_STRING_RE.finditer(comment.text):
                content = match.group(1) if match.group(1) is not None else match.group(2)
                if not content.strip():
                    continue
                offset = comment.start + match.start()
                line, column = tree.location(offset)
                occurrences.append(
                    LiteralOccurrence(
                        path=path,
                        content=content,
                        offset=offset,
                        length=match.end() - match.start(),
                        line=line,
                        column=column,
                        raw_text=match.group(0),
                        placement=Placement.COMMENT,
                    )
                )
        return occurrences


__all__ = ["HarvestResult", "LiteralHarvester"]
