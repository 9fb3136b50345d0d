"""Structural Dart parser producing an arena :class:`SyntaxTree`.

The parser does not attempt full Dart grammar coverage. It recovers the
shapes the checker reasons about: calls and instance creations with their
arguments, collection literals, declaration lists, blocks, signatures,
annotations, directives and string literals. Anything else is consumed as
opaque tokens.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import FrozenSet, List, Optional

from ..exceptions import SourceParseError
from .lexer import DartLexer, Token, TokenKind
from .tree import LineIndex, Node, NodeKind, SyntaxTree

_CLOSERS = {")": "(", "]": "[", "}": "{"}
_DIRECTIVE_WORDS = frozenset({"import", "export", "part", "library"})
_DECLARATION_WORDS = frozenset({"const", "final", "var"})
_DECLARATION_MODIFIERS = frozenset({"static", "late", "external", "covariant", "abstract"})
_PAREN_KEYWORDS = frozenset(
    {"if", "for", "while", "switch", "catch", "return", "when", "await", "yield", "throw", "in"}
)
_CLASS_WORDS = frozenset({"class", "mixin", "extension", "enum"})
_NON_EXPRESSION_WORDS = frozenset(
    {
        "const",
        "return",
        "yield",
        "await",
        "in",
        "else",
        "case",
        "final",
        "var",
        "is",
        "as",
        "new",
        "throw",
        "when",
        "default",
    }
)
_COLLECTION_PRECEDERS = frozenset(
    {
        "=",
        "(",
        ",",
        ":",
        "[",
        "=>",
        "?",
        "??",
        "??=",
        "&&",
        "||",
        "!",
        "+",
        "==",
        "!=",
        "...",
        "...?",
    }
)
_OPERATOR_LIKE = _COLLECTION_PRECEDERS | {"return", "await", "yield", "throw", "..", "?.."}
_MEMBER_ACCESS = frozenset({".", "?.", "..", "?.."})
_STATEMENT_SCOPES = frozenset({"unit", "class", "function"})
_SOFT_CONTAINERS = frozenset({NodeKind.DECLARATION})
_MAX_TYPE_ARGUMENT_TOKENS = 64


@dataclass(frozen=True, slots=True)
class ParseFailure:
    message: str
    line: int
    column: int
    offset: int = 0

    def describe(self) -> str:
        return f"{self.message} at {self.line}:{self.column}"


@dataclass(frozen=True, slots=True)
class ParseResult:
    tree: Optional[SyntaxTree] = None
    failure: Optional[ParseFailure] = None

    @property
    def ok(self) -> bool:
        return self.tree is not None


class DartParser:
    """Parser service: source text in, tree or typed failure out."""

    def parse(self, text: str) -> ParseResult:
        line_index = LineIndex(text)
        try:
            lexed = DartLexer(text).tokenize()
            nodes = _TreeBuilder(lexed.tokens).build(len(text))
        except SourceParseError as exc:
            line, column = line_index.location(exc.offset)
            return ParseResult(
                failure=ParseFailure(exc.message, line, column, exc.offset)
            )
        tree = SyntaxTree(
            text=text,
            nodes=nodes,
            comments=tuple(lexed.comments),
            line_index=line_index,
        )
        return ParseResult(tree=tree)


class _TreeBuilder:
    def __init__(self, tokens: List[Token]) -> None:
        self._tokens = tokens
        self._pos = 0
        self._nodes: List[Node] = []

    def build(self, length: int) -> List[Node]:
        unit = self._new(NodeKind.COMPILATION_UNIT, 0, None)
        self._sequence(unit, frozenset(), "unit")
        unit.end = length
        return self._nodes

    # ------------------------------------------------------------------
    # helpers
    # ------------------------------------------------------------------
    def _new(self, kind: NodeKind, start: int, parent: Optional[Node], **attrs: object) -> Node:
        node = Node(
            index=len(self._nodes),
            kind=kind,
            start=start,
            end=start,
            parent=None if parent is None else parent.index,
            **attrs,  # type: ignore[arg-type]
        )
        self._nodes.append(node)
        if parent is not None:
            parent.children.append(node.index)
        return node

    def _token(self, index: int) -> Token:
        if index < 0:
            return self._tokens[0]
        return self._tokens[min(index, len(self._tokens) - 1)]

    def _previous(self, index: Optional[int] = None) -> Optional[Token]:
        index = self._pos if index is None else index
        return self._tokens[index - 1] if index > 0 else None

    def _expect(self, text: str, opener: Token) -> Token:
        token = self._token(self._pos)
        if not token.is_op(text):
            if token.kind is TokenKind.EOF:
                raise SourceParseError(f"Missing closing '{text}'", opener.start)
            raise SourceParseError(f"Expected '{text}' but found '{token.text}'", token.start)
        self._pos += 1
        return token

    @staticmethod
    def _ends_expression(token: Optional[Token]) -> bool:
        if token is None:
            return False
        if token.kind is TokenKind.IDENTIFIER:
            return token.text not in _NON_EXPRESSION_WORDS
        if token.kind in (TokenKind.STRING, TokenKind.NUMBER):
            return True
        return token.is_op(")", "]", "!")

    # ------------------------------------------------------------------
    # sequences
    # ------------------------------------------------------------------
    def _sequence(self, parent: Node, stops: FrozenSet[str], scope: str) -> Token:
        statement_start = self._pos
        while True:
            token = self._token(self._pos)
            if token.kind is TokenKind.EOF:
                if parent.kind is NodeKind.COMPILATION_UNIT:
                    return token
                raise SourceParseError("Unexpected end of file", parent.start)
            if token.kind is TokenKind.OPERATOR and token.text in stops:
                return token
            if token.kind is TokenKind.OPERATOR and token.text in _CLOSERS:
                if parent.kind in _SOFT_CONTAINERS:
                    return token
                raise SourceParseError(f"Unexpected '{token.text}'", token.start)

            at_statement_start = scope in _STATEMENT_SCOPES and (
                self._pos == statement_start or self._only_modifiers(statement_start)
            )

            if token.kind is TokenKind.STRING:
                self._strings(parent)
                continue
            if (
                scope == "unit"
                and self._pos == statement_start
                and token.is_word(*_DIRECTIVE_WORDS)
                and self._is_directive()
            ):
                self._directive(parent)
                statement_start = self._pos
                continue
            if token.is_op("@"):
                self._annotation(parent)
                if at_statement_start:
                    statement_start = self._pos
                continue
            if (
                at_statement_start
                and token.is_word(*_DECLARATION_WORDS)
                and self._is_declaration()
            ):
                self._declaration(parent)
                statement_start = self._pos
                continue
            if token.kind is TokenKind.IDENTIFIER:
                self._identifier(parent, scope)
                continue
            if token.is_op("("):
                self._paren(parent, None)
                continue
            if token.is_op("["):
                self._collection(parent, self._pos, self._previous())
                continue
            if token.is_op("{"):
                if self._brace(parent, scope, statement_start):
                    statement_start = self._pos
                continue
            if token.is_op("<") and self._typed_collection(parent):
                continue
            self._pos += 1
            if token.is_op(";"):
                statement_start = self._pos

    def _only_modifiers(self, statement_start: int) -> bool:
        if self._pos <= statement_start:
            return False
        return all(
            token.is_word(*_DECLARATION_MODIFIERS)
            for token in self._tokens[statement_start : self._pos]
        )

    def _strings(self, parent: Node) -> None:
        first = self._pos
        run: List[Token] = []
        while self._token(self._pos).kind is TokenKind.STRING:
            run.append(self._token(self._pos))
            self._pos += 1
        previous = self._previous(first)
        following = self._token(self._pos)
        trailing_member = None
        if following.is_op(".", "?.") and self._token(self._pos + 1).kind is TokenKind.IDENTIFIER:
            trailing_member = self._token(self._pos + 1).text
        context = {
            "preceded_by": previous.text if previous else None,
            "followed_by": following.text or None,
            "trailing_member": trailing_member,
        }
        if len(run) == 1:
            token = run[0]
            node = self._new(
                NodeKind.STRING, token.start, parent, parts=token.parts, raw=token.raw, **context
            )
            node.end = token.end
            return
        parts = tuple(part for token in run for part in token.parts)
        group = self._new(
            NodeKind.ADJACENT_STRINGS, run[0].start, parent, parts=parts, **context
        )
        group.end = run[-1].end
        for token in run:
            child = self._new(NodeKind.STRING, token.start, group, parts=token.parts, raw=token.raw)
            child.end = token.end

    # ------------------------------------------------------------------
    # directives, annotations, declarations
    # ------------------------------------------------------------------
    def _is_directive(self) -> bool:
        token = self._token(self._pos)
        following = self._token(self._pos + 1)
        if token.text == "library":
            return following.kind is TokenKind.IDENTIFIER or following.is_op(";")
        if token.text == "part" and following.is_word("of"):
            return True
        return following.kind is TokenKind.STRING

    def _directive(self, parent: Node) -> None:
        first = self._token(self._pos)
        keyword = first.text
        if keyword == "part" and self._token(self._pos + 1).is_word("of"):
            keyword = "part of"
        node = self._new(NodeKind.DIRECTIVE, first.start, parent, keyword=keyword)
        while True:
            token = self._token(self._pos)
            if token.kind is TokenKind.EOF:
                raise SourceParseError("Unterminated directive", first.start)
            self._pos += 1
            if token.is_op(";"):
                node.end = token.end
                return

    def _annotation(self, parent: Node) -> None:
        at = self._token(self._pos)
        self._pos += 1
        name_end = self._chain_end(self._pos)
        if name_end is None:
            node = self._new(NodeKind.ANNOTATION, at.start, parent, callee="")
            node.end = at.end
            return
        name = self._chain_text(self._pos, name_end)
        node = self._new(NodeKind.ANNOTATION, at.start, parent, callee=f"@{name}")
        self._pos = name_end + 1
        node.end = self._token(name_end).end
        if self._token(self._pos).is_op("("):
            node.end = self._arguments(node)

    def _is_declaration(self) -> bool:
        depth = 0
        index = self._pos + 1
        while True:
            token = self._token(index)
            if token.kind is TokenKind.EOF:
                return False
            if token.kind is TokenKind.OPERATOR:
                if token.text in ("[", "{"):
                    depth += 1
                elif token.text in ("]", "}"):
                    depth -= 1
                    if depth < 0:
                        return False
                elif depth == 0 and token.text == "(":
                    return False
                elif depth == 0 and token.text in ("=", ";", ","):
                    return True
                elif depth == 0 and token.text == "=>":
                    return False
            index += 1

    def _declaration(self, parent: Node) -> None:
        keyword = self._token(self._pos)
        node = self._new(
            NodeKind.DECLARATION,
            keyword.start,
            parent,
            keyword=keyword.text,
            keyword_span=(keyword.start, keyword.end),
        )
        self._pos += 1
        stop = self._sequence(node, frozenset({";"}), "expression")
        if stop.is_op(";"):
            self._pos += 1
            node.end = stop.end
        else:
            previous = self._previous()
            node.end = previous.end if previous else keyword.end

    # ------------------------------------------------------------------
    # identifiers and calls
    # ------------------------------------------------------------------
    def _chain_end(self, index: int) -> Optional[int]:
        if self._token(index).kind is not TokenKind.IDENTIFIER:
            return None
        while self._token(index + 1).is_op(".", "?.") and (
            self._token(index + 2).kind is TokenKind.IDENTIFIER
        ):
            index += 2
        return index

    def _chain_text(self, first: int, last: int) -> str:
        return "".join(
            "." if token.is_op("?.") else token.text
            for token in self._tokens[first : last + 1]
        )

    def _match_type_arguments(self, index: int) -> Optional[int]:
        """Return the index of the ``>`` closing the ``<`` at ``index``."""

        depth = 0
        limit = index + _MAX_TYPE_ARGUMENT_TOKENS
        while index < limit:
            token = self._token(index)
            if token.is_op("<"):
                depth += 1
            elif token.is_op(">"):
                depth -= 1
                if depth == 0:
                    return index
            elif token.kind is TokenKind.IDENTIFIER:
                pass
            elif not token.is_op(".", ",", "?", "(", ")"):
                return None
            index += 1
        return None

    def _identifier(self, parent: Node, scope: str) -> None:
        first = self._pos
        token = self._token(first)
        following = self._token(first + 1)
        if token.text in _PAREN_KEYWORDS and following.is_op("("):
            self._pos += 1
            self._paren(parent, token.text)
            return

        chain_last = self._chain_end(first)
        if chain_last is None:
            self._pos += 1
            return
        after = chain_last + 1
        if self._token(after).is_op("<"):
            close = self._match_type_arguments(after)
            if close is not None and self._token(close + 1).is_op("("):
                after = close + 1
        if not self._token(after).is_op("("):
            self._pos = chain_last + 1
            return

        chain = self._chain_text(first, chain_last)
        callee = self._qualified_callee(parent, first, chain)
        previous = self._previous(first)
        start = token.start
        keyword: Optional[str] = None
        keyword_span = None
        lead_index = first
        if previous is not None and previous.is_word("const", "new"):
            keyword = previous.text
            keyword_span = (previous.start, previous.end)
            start = previous.start
            lead_index = first - 1

        node = self._new(
            NodeKind.CALL,
            start,
            parent,
            callee=callee,
            keyword=keyword,
            keyword_span=keyword_span,
        )
        self._pos = after
        node.end = self._arguments(node)
        if self._is_signature(scope, lead_index):
            node.kind = NodeKind.SIGNATURE

    def _qualified_callee(self, parent: Node, first: int, chain: str) -> str:
        accessor = self._previous(first)
        if accessor is None or not accessor.is_op(*_MEMBER_ACCESS):
            return chain
        receiver_end = self._previous(first - 1)
        if receiver_end is not None and receiver_end.is_op("!"):
            receiver_end = self._previous(first - 2)
        if receiver_end is not None and parent.children:
            sibling = self._nodes[parent.children[-1]]
            if sibling.kind is NodeKind.CALL and sibling.end == receiver_end.end:
                return f"{sibling.callee}().{chain}"
        return chain

    def _is_signature(self, scope: str, lead_index: int) -> bool:
        following = self._token(self._pos)
        if following.is_op("{", "=>") or following.is_word("async", "sync"):
            return True
        if scope == "class" and following.is_op(";", ":"):
            lead = self._previous(lead_index)
            return lead is None or not (
                lead.text in _OPERATOR_LIKE or lead.is_op(*_MEMBER_ACCESS)
            )
        return False

    def _arguments(self, owner: Node) -> int:
        opener = self._expect("(", self._token(self._pos))
        position = 0
        while True:
            token = self._token(self._pos)
            if token.is_op(")"):
                self._pos += 1
                return token.end
            if token.kind is TokenKind.EOF:
                raise SourceParseError("Missing closing ')'", opener.start)
            label: Optional[str] = None
            if token.kind is TokenKind.IDENTIFIER and self._token(self._pos + 1).is_op(":"):
                label = token.text
            argument = self._new(
                NodeKind.ARGUMENT,
                token.start,
                owner,
                label=label,
                position=None if label else position,
            )
            if label:
                self._pos += 2
            else:
                position += 1
            stop = self._sequence(argument, frozenset({",", ")"}), "expression")
            previous = self._previous()
            argument.end = previous.end if previous else token.end
            if stop.is_op(","):
                self._pos += 1

    # ------------------------------------------------------------------
    # brackets
    # ------------------------------------------------------------------
    def _paren(self, parent: Node, keyword: Optional[str]) -> Node:
        opener = self._token(self._pos)
        node = self._new(NodeKind.PAREN, opener.start, parent, callee=keyword)
        self._pos += 1
        self._sequence(node, frozenset({")"}), "expression")
        node.end = self._expect(")", opener).end
        return node

    def _collection(
        self, parent: Node, opener_index: int, lead: Optional[Token], start: Optional[int] = None
    ) -> None:
        opener = self._token(opener_index)
        keyword = None
        keyword_span = None
        if lead is not None and lead.is_word("const"):
            keyword = "const"
            keyword_span = (lead.start, lead.end)
        if opener.text == "[":
            kind = (
                NodeKind.INDEX
                if start is None and self._ends_expression(lead)
                else NodeKind.LIST_LITERAL
            )
            closer = "]"
        else:
            kind = NodeKind.SET_OR_MAP_LITERAL
            closer = "}"
        node = self._new(
            kind,
            opener.start if start is None else start,
            parent,
            keyword=keyword,
            keyword_span=keyword_span,
        )
        self._pos = opener_index + 1
        self._sequence(node, frozenset({closer}), "expression")
        node.end = self._expect(closer, opener).end

    def _typed_collection(self, parent: Node) -> bool:
        lead = self._previous()
        if self._ends_expression(lead):
            return False
        close = self._match_type_arguments(self._pos)
        if close is None or not self._token(close + 1).is_op("[", "{"):
            return False
        start = self._token(self._pos).start
        self._collection(parent, close + 1, lead, start=start)
        return True

    def _brace(self, parent: Node, scope: str, statement_start: int) -> bool:
        """Parse a ``{``; return True when it opened a block."""

        lead = self._previous()
        if lead is not None and (
            lead.is_word("const", "return", "yield", "await")
            or (lead.kind is TokenKind.OPERATOR and lead.text in _COLLECTION_PRECEDERS)
        ):
            self._collection(parent, self._pos, lead)
            return False

        opener = self._token(self._pos)
        owner = self._block_owner(parent, lead, statement_start)
        block = self._new(NodeKind.BLOCK, opener.start, parent, callee=owner)
        self._pos += 1
        inner_scope = "class" if owner in _CLASS_WORDS else "function"
        self._sequence(block, frozenset({"}"}), inner_scope)
        block.end = self._expect("}", opener).end
        return True

    def _block_owner(self, parent: Node, lead: Optional[Token], statement_start: int) -> Optional[str]:
        if lead is not None and lead.is_op(")") and parent.children:
            sibling = self._nodes[parent.children[-1]]
            if sibling.end == lead.end:
                if sibling.kind is NodeKind.PAREN and sibling.callee:
                    return sibling.callee
                if sibling.kind is NodeKind.SIGNATURE:
                    return "function"
        for token in self._tokens[statement_start : self._pos]:
            if token.is_word(*_CLASS_WORDS):
                return token.text
        return None


__all__ = ["DartParser", "ParseFailure", "ParseResult"]
