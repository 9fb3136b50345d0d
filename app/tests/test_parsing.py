from __future__ import annotations

from unittest import TestCase

import pytest

from loc_checker.exceptions import SourceParseError
from loc_checker.parsing import (
    DartLexer,
    DartParser,
    Interpolation,
    LineIndex,
    NodeKind,
    SyntaxTree,
    TokenKind,
)

WIDGET_SOURCE = """import 'package:flutter/material.dart';

class HomePage extends StatelessWidget {
  const HomePage({super.key});

  @override
  Widget build(BuildContext context) {
    return Scaffold(
      body: Text('Hello World'),
    );
  }
}
"""


def _parse(text: str) -> SyntaxTree:
    result = DartParser().parse(text)
    assert result.ok, result.failure
    assert result.tree is not None
    return result.tree


def _string_parts(text: str) -> tuple:
    tokens = DartLexer(text).tokenize().tokens
    assert tokens[0].kind is TokenKind.STRING
    return tokens[0].parts


class LexerTests(TestCase):
    def test_decodes_escapes(self) -> None:
        self.assertEqual(_string_parts("'Tab\\there'"), ("Tab\there",))
        self.assertEqual(_string_parts("'It\\'s'"), ("It's",))
        self.assertEqual(_string_parts("'\\u{1F600} smile'"), ("\U0001F600 smile",))
        self.assertEqual(_string_parts("'\\x41\\u0042'"), ("AB",))
        self.assertEqual(_string_parts("'cost: \\$5'"), ("cost: $5",))

    def test_simple_and_braced_interpolation(self) -> None:
        parts = _string_parts("'${user.name} has $count items'")

        self.assertEqual(len(parts), 4)
        first, second, third, fourth = parts
        assert isinstance(first, Interpolation)
        assert isinstance(third, Interpolation)
        self.assertEqual(first.source, "user.name")
        self.assertTrue(first.braced)
        self.assertEqual(second, " has ")
        self.assertEqual(third.source, "count")
        self.assertFalse(third.braced)
        self.assertEqual(fourth, " items")

    def test_nested_strings_and_braces_inside_interpolation(self) -> None:
        parts = _string_parts("'a ${map['k'] ?? {'x': 1}['x']} b'")

        self.assertEqual(parts[0], "a ")
        assert isinstance(parts[1], Interpolation)
        self.assertEqual(parts[1].source, "map['k'] ?? {'x': 1}['x']")
        self.assertEqual(parts[2], " b")

    def test_raw_strings_do_not_interpolate(self) -> None:
        tokens = DartLexer("r'$notInterpolated\\n'").tokenize().tokens

        self.assertTrue(tokens[0].raw)
        self.assertEqual(tokens[0].parts, ("$notInterpolated\\n",))

    def test_triple_quoted_strings_span_lines(self) -> None:
        parts = _string_parts("'''First line\nSecond line'''")

        self.assertEqual(parts, ("First line\nSecond line",))

    def test_nested_block_comments_are_one_comment(self) -> None:
        result = DartLexer("/* outer /* inner */ still */ final x = 1;").tokenize()

        self.assertEqual(len(result.comments), 1)
        self.assertTrue(result.comments[0].block)
        self.assertEqual(result.tokens[0].text, "final")

    def test_unterminated_string_raises(self) -> None:
        with self.assertRaises(SourceParseError):
            DartLexer("final x = 'oops;\n").tokenize()


def test_line_index_resolves_one_based_locations() -> None:
    index = LineIndex("ab\ncd\n")

    assert index.line_count == 3
    assert index.location(0) == (1, 1)
    assert index.location(3) == (2, 1)
    assert index.location(4) == (2, 2)
    assert index.line_text(2) == "cd"
    assert index.lines(1, 5) == ["ab", "cd", ""]


def test_parser_recovers_widget_shapes() -> None:
    tree = _parse(WIDGET_SOURCE)

    signatures = {node.callee for node in tree.iter_kind(NodeKind.SIGNATURE)}
    calls = {node.callee for node in tree.iter_kind(NodeKind.CALL)}
    owners = {node.callee for node in tree.iter_kind(NodeKind.BLOCK)}
    directives = list(tree.iter_kind(NodeKind.DIRECTIVE))

    assert signatures == {"HomePage", "build"}
    assert {"Scaffold", "Text"} <= calls
    assert {"class", "function"} <= owners
    assert [node.keyword for node in directives] == ["import"]


def test_parser_links_strings_to_arguments_through_parent_indexes() -> None:
    tree = _parse(WIDGET_SOURCE)
    # The directive URI is the first string.
    string = list(tree.iter_kind(NodeKind.STRING))[-1]

    kinds = [ancestor.kind for ancestor in tree.ancestors(string.index)]

    assert tree.source(string) == "'Hello World'"
    assert kinds[:3] == [NodeKind.ARGUMENT, NodeKind.CALL, NodeKind.ARGUMENT]
    assert tree.parent(string.index) is not None
    assert tree.node_at(string.start + 1).index == string.index


def test_parser_records_const_keyword_spans() -> None:
    text = "void main() {\n  const greeting = 'Hi';\n  final items = const ['a'];\n}\n"
    tree = _parse(text)

    declarations = list(tree.iter_kind(NodeKind.DECLARATION))
    lists = list(tree.iter_kind(NodeKind.LIST_LITERAL))

    assert [node.keyword for node in declarations] == ["const", "final"]
    assert declarations[0].is_const
    start, end = declarations[0].keyword_span or (0, 0)
    assert text[start:end] == "const"
    assert len(lists) == 1 and lists[0].is_const


def test_parser_distinguishes_index_from_list_literal() -> None:
    tree = _parse("final name = json['name'];\nfinal values = ['a', 'b'];\n")

    assert len(list(tree.iter_kind(NodeKind.INDEX))) == 1
    assert len(list(tree.iter_kind(NodeKind.LIST_LITERAL))) == 1


def test_parser_groups_adjacent_strings() -> None:
    tree = _parse("final t = Text('Hello ' 'World');\n")

    groups = list(tree.iter_kind(NodeKind.ADJACENT_STRINGS))

    assert len(groups) == 1
    assert groups[0].parts == ("Hello ", "World")
    assert len(groups[0].children) == 2


def test_parser_qualifies_chained_calls() -> None:
    tree = _parse("void go(BuildContext context) {\n  Navigator.of(context).push(route);\n}\n")

    calls = [node.callee for node in tree.iter_kind(NodeKind.CALL)]

    assert calls == ["Navigator.of", "Navigator.of().push"]


def test_parser_marks_switch_and_enum_blocks() -> None:
    text = (
        "enum Destination { home('Home'), settings('Settings'); "
        "const Destination(this.label); final String label; }\n"
        "String label(String kind) {\n  switch (kind) {\n    case 'draft':\n"
        "      return 'Draft';\n  }\n  return '';\n}\n"
    )
    tree = _parse(text)

    owners = [node.callee for node in tree.iter_kind(NodeKind.BLOCK)]

    assert "enum" in owners
    assert "switch" in owners


@pytest.mark.parametrize(
    "source, message",
    [
        ("void main() {\n  print('oops);\n}\n", "Unterminated string literal"),
        ("void main() {\n  print('ok');\n", "Unexpected end of file"),
        ("final x = Text('a']);\n", "Unexpected ']'"),
        ("/* never closed\n", "Unterminated block comment"),
    ],
)
def test_parser_reports_failures_instead_of_raising(source: str, message: str) -> None:
    result = DartParser().parse(source)

    assert not result.ok
    assert result.failure is not None
    assert result.failure.message.startswith(message)


def test_parse_failure_carries_line_and_column() -> None:
    result = DartParser().parse("void main() {\n  print('oops);\n}\n")

    assert result.failure is not None
    assert (result.failure.line, result.failure.column) == (2, 9)
    assert result.failure.describe().endswith("at 2:9")
