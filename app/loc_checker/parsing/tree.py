"""Arena syntax tree: nodes addressed by index with an explicit parent index."""

from __future__ import annotations

from bisect import bisect_right
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, List, Optional, Sequence, Tuple

from .lexer import Comment, StringPart


class NodeKind(str, Enum):
    COMPILATION_UNIT = "compilation_unit"
    DIRECTIVE = "directive"
    BLOCK = "block"
    PAREN = "paren"
    SIGNATURE = "signature"
    ANNOTATION = "annotation"
    CALL = "call"
    ARGUMENT = "argument"
    LIST_LITERAL = "list_literal"
    SET_OR_MAP_LITERAL = "set_or_map_literal"
    INDEX = "index"
    DECLARATION = "declaration"
    STRING = "string"
    ADJACENT_STRINGS = "adjacent_strings"


CONTAINER_KINDS = frozenset(
    {
        NodeKind.LIST_LITERAL,
        NodeKind.SET_OR_MAP_LITERAL,
        NodeKind.INDEX,
        NodeKind.DECLARATION,
        NodeKind.PAREN,
    }
)


@dataclass(slots=True)
class Node:
    index: int
    kind: NodeKind
    start: int
    end: int
    parent: Optional[int]
    children: List[int] = field(default_factory=list)
    # CALL: callee text. PAREN: leading keyword. BLOCK: owner (class, enum, switch...).
    callee: Optional[str] = None
    # ARGUMENT: named label or positional index.
    label: Optional[str] = None
    position: Optional[int] = None
    # CALL, collection literals and DECLARATION: the const/final/var keyword.
    keyword: Optional[str] = None
    keyword_span: Optional[Tuple[int, int]] = None
    # STRING / ADJACENT_STRINGS.
    parts: Tuple[StringPart, ...] = ()
    raw: bool = False
    preceded_by: Optional[str] = None
    followed_by: Optional[str] = None
    trailing_member: Optional[str] = None

    @property
    def is_const(self) -> bool:
        return self.keyword == "const" and self.keyword_span is not None


class LineIndex:
    """Resolve character offsets to 1-based (line, column) pairs."""

    def __init__(self, text: str) -> None:
        self._starts = [0]
        for index, char in enumerate(text):
            if char == "\n":
                self._starts.append(index + 1)
        self._text = text

    @property
    def line_count(self) -> int:
        return len(self._starts)

    def location(self, offset: int) -> Tuple[int, int]:
        line = bisect_right(self._starts, offset)
        return line, offset - self._starts[line - 1] + 1

    def line_start(self, line: int) -> int:
        return self._starts[line - 1]

    def line_text(self, line: int) -> str:
        if line < 1 or line > len(self._starts):
            return ""
        start = self._starts[line - 1]
        end = self._starts[line] - 1 if line < len(self._starts) else len(self._text)
        return self._text[start:end].rstrip("\r")

    def lines(self, first: int, last: int) -> List[str]:
        first = max(first, 1)
        last = min(last, len(self._starts))
        return [self.line_text(line) for line in range(first, last + 1)]


@dataclass
class SyntaxTree:
    text: str
    nodes: List[Node]
    comments: Sequence[Comment]
    line_index: LineIndex

    @property
    def root(self) -> Node:
        return self.nodes[0]

    def node(self, index: int) -> Node:
        return self.nodes[index]

    def parent(self, index: int) -> Optional[Node]:
        parent = self.nodes[index].parent
        return None if parent is None else self.nodes[parent]

    def ancestors(self, index: int) -> Iterator[Node]:
        """Yield every ancestor of ``index``, nearest first."""

        parent = self.nodes[index].parent
        while parent is not None:
            node = self.nodes[parent]
            yield node
            parent = node.parent

    def iter_kind(self, *kinds: NodeKind) -> Iterator[Node]:
        for node in self.nodes:
            if node.kind in kinds:
                yield node

    def node_at(self, offset: int) -> Node:
        """Return the innermost node whose span contains ``offset``."""

        current = self.root
        while True:
            for child_index in current.children:
                child = self.nodes[child_index]
                if child.start <= offset < child.end:
                    current = child
                    break
            else:
                return current

    def source(self, node: Node) -> str:
        return self.text[node.start : node.end]

    def location(self, offset: int) -> Tuple[int, int]:
        return self.line_index.location(offset)

    def line_text(self, line: int) -> str:
        return self.line_index.line_text(line)


__all__ = ["CONTAINER_KINDS", "LineIndex", "Node", "NodeKind", "SyntaxTree"]
