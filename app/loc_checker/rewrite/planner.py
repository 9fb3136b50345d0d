"""Turn kept occurrences into localization call edits."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Sequence, Set, Tuple

from ..config.constants import CallShape
from ..config.settings import CheckerConfig
from ..log_config import debug_verbose
from ..models.edits import LocalizationCallPlan, TextEdit
from ..models.occurrence import LiteralOccurrence
from ..models.resource import KeyAssignment
from ..parsing.tree import Node, NodeKind, SyntaxTree
from ..resources.key_manager import ResourceKeyManager
from .call_shape import RewriteContextScanner
from .edit_set import EditSet

_CONST_STRIPPED_KINDS = frozenset(
    {NodeKind.CALL, NodeKind.LIST_LITERAL, NodeKind.SET_OR_MAP_LITERAL}
)


@dataclass
class FilePlan:
    path: str
    edit_set: EditSet
    shapes: Set[CallShape] = field(default_factory=set)
    assignments: List[KeyAssignment] = field(default_factory=list)

    @property
    def has_edits(self) -> bool:
        return bool(self.edit_set)


def modifier_edits(tree: SyntaxTree, node: Node) -> Tuple[TextEdit, ...]:
    """Edits invalidating compile-time-constant assertions above ``node``.

    ``const`` instance creations and collection literals lose the keyword
    (plus one trailing space); ``const`` declaration lists become ``final``.
    The walk stops at the first enclosing block.
    """

    text = tree.text
    edits: List[TextEdit] = []
    for ancestor in tree.ancestors(node.index):
        if ancestor.kind is NodeKind.BLOCK:
            break
        if not ancestor.is_const or ancestor.keyword_span is None:
            continue
        start, end = ancestor.keyword_span
        if ancestor.kind in _CONST_STRIPPED_KINDS:
            if text[end : end + 1] == " ":
                end += 1
            edits.append(TextEdit(start, end - start, "", origin="const"))
        elif ancestor.kind is NodeKind.DECLARATION:
            edits.append(TextEdit(start, end - start, "final", origin="declaration"))
    return tuple(edits)


class RewritePlanner:
    """Plans one file at a time; key allocation happens here, single-threaded."""

    def __init__(self, config: CheckerConfig, key_manager: ResourceKeyManager) -> None:
        self._config = config
        self._key_manager = key_manager
        self._scanner = RewriteContextScanner(config.rewrite_scan_lines)

    def accessor_for(self, shape: CallShape) -> str:
        if shape is CallShape.AMBIENT:
            return self._config.ambient_accessor
        return self._config.static_accessor

    def plan_file(
        self, path: str, tree: SyntaxTree, occurrences: Sequence[LiteralOccurrence]
    ) -> FilePlan:
        plan = FilePlan(path=path, edit_set=EditSet(path))
        lines = [line.rstrip("\r") for line in tree.text.split("\n")]
        for occurrence in sorted(occurrences, key=lambda item: item.offset):
            if not occurrence.is_rewritable or occurrence.node_index is None:
                continue
            node = tree.node(occurrence.node_index)
            modifiers = modifier_edits(tree, node)
            provisional = TextEdit(occurrence.offset, occurrence.length, "", origin="literal")
            if not plan.edit_set.fits((provisional, *modifiers)):
                plan.edit_set.drop((provisional, *modifiers), "overlap")
                continue
            assignment = self._key_manager.assign(occurrence)
            shape, evidence = self._scanner.explain(lines, occurrence.line, occurrence.column)
            call = LocalizationCallPlan(
                shape=shape,
                accessor=self.accessor_for(shape),
                key=assignment.key,
                arguments=occurrence.variables,
            )
            replacement = TextEdit(
                occurrence.offset, occurrence.length, call.render(), origin="literal"
            )
            plan.edit_set.add_group((replacement, *modifiers), strict=True)
            plan.shapes.add(shape)
            plan.assignments.append(assignment)
            debug_verbose(
                "rewrite_planned",
                {
                    "path": path,
                    "line": occurrence.line,
                    "key": assignment.key,
                    "shape": shape.value,
                    "evidence": evidence,
                    "modifiers": len(modifiers),
                },
            )
        return plan


__all__ = ["FilePlan", "RewritePlanner", "modifier_edits"]
