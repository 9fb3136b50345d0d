"""Dart source parsing: tokenizer, arena syntax tree and parser service."""

from .lexer import Comment, DartLexer, Interpolation, StringPart, Token, TokenKind
from .parser import DartParser, ParseFailure, ParseResult
from .tree import CONTAINER_KINDS, LineIndex, Node, NodeKind, SyntaxTree

__all__ = [
    "CONTAINER_KINDS",
    "Comment",
    "DartLexer",
    "DartParser",
    "Interpolation",
    "LineIndex",
    "Node",
    "NodeKind",
    "ParseFailure",
    "ParseResult",
    "StringPart",
    "SyntaxTree",
    "Token",
    "TokenKind",
]
