from __future__ import annotations

from typing import List

from loc_checker.config.constants import Placement
from loc_checker.harvest import LiteralHarvester
from loc_checker.models.occurrence import LiteralOccurrence
from loc_checker.parsing.parser import DartParser, ParseResult


def _harvest(source: str, *, include_comments: bool = False) -> List[LiteralOccurrence]:
    result = LiteralHarvester(include_comments=include_comments).harvest_text(
        "lib/screens/sample.dart", source
    )
    assert result.failure is None
    return result.occurrences


def _by_content(occurrences: List[LiteralOccurrence]) -> dict[str, LiteralOccurrence]:
    return {occurrence.content: occurrence for occurrence in occurrences}


def test_records_callee_and_positional_role() -> None:
    source = "Widget title() {\n  return Text('Hello World');\n}\n"

    (occurrence,) = _harvest(source)

    assert occurrence.content == "Hello World"
    assert occurrence.callee == "Text"
    assert occurrence.is_first_positional
    assert (occurrence.line, occurrence.column) == (2, 15)
    assert occurrence.raw_text == "'Hello World'"
    assert source[occurrence.offset : occurrence.end] == "'Hello World'"
    assert occurrence.placement is Placement.CODE
    assert occurrence.is_rewritable


def test_records_named_parameter_of_nearest_call() -> None:
    source = (
        "Widget field() {\n"
        "  return TextField(\n"
        "    decoration: InputDecoration(hintText: 'Email address'),\n"
        "  );\n"
        "}\n"
    )

    (occurrence,) = _harvest(source)

    assert occurrence.callee == "InputDecoration"
    assert occurrence.role is not None
    assert occurrence.role.label == "hintText"


def test_interpolation_becomes_numbered_placeholders() -> None:
    source = "void f() {\n  show('${user.name} has $count items');\n}\n"

    (occurrence,) = _harvest(source)

    assert occurrence.content == "{param0} has {param1} items"
    assert occurrence.variables == ("user.name", "count")
    assert occurrence.is_template


def test_literal_braces_are_quoted_in_the_message() -> None:
    source = "void f() {\n  show('Use {braces} for $name');\n}\n"

    (occurrence,) = _harvest(source)

    assert occurrence.content == "Use {braces} for {param0}"
    assert occurrence.resource_message == "Use '{'braces'}' for {param0}"
    assert occurrence.variables == ("name",)


def test_pure_interpolation_is_discarded() -> None:
    assert _harvest("void f() {\n  show('$name');\n  show('${a}${b}');\n}\n") == []


def test_directive_uris_are_not_harvested() -> None:
    source = (
        "library screens;\n"
        "import 'package:flutter/material.dart';\n"
        "export 'src/widgets.dart';\n"
        "part 'sample.g.dart';\n"
    )

    assert _harvest(source) == []


def test_adjacent_strings_form_one_occurrence() -> None:
    (occurrence,) = _harvest("final t = Text('Hello ' 'World');\n")

    assert occurrence.content == "Hello World"
    assert occurrence.raw_text == "'Hello ' 'World'"


def test_constant_positions_are_not_rewritable() -> None:
    source = (
        "@Deprecated('Use fetchAll instead')\n"
        "void fetch({String name = 'Guest user'}) {}\n"
        "enum Destination { home('Home screen'), settings('Settings screen'); "
        "const Destination(this.label); final String label; }\n"
        "String label(String kind) {\n"
        "  switch (kind) {\n"
        "    case 'draft':\n"
        "      return 'Draft copy';\n"
        "  }\n"
        "  return 'Unknown';\n"
        "}\n"
    )

    occurrences = _by_content(_harvest(source))

    for content in ("Use fetchAll instead", "Guest user", "Home screen", "Settings screen", "draft"):
        assert occurrences[content].placement is Placement.CONSTANT_REQUIRED, content
        assert not occurrences[content].is_rewritable
    assert occurrences["Draft copy"].placement is Placement.CODE
    assert occurrences["Unknown"].placement is Placement.CODE
    assert occurrences["Use fetchAll instead"].callee == "@Deprecated"


def test_switch_expression_patterns_are_constant() -> None:
    source = (
        "String describe(String code) {\n"
        "  return switch (code) {\n"
        "    'ok' => 'All good',\n"
        "    _ => 'Something else',\n"
        "  };\n"
        "}\n"
    )

    occurrences = _by_content(_harvest(source))

    assert occurrences["ok"].placement is Placement.CONSTANT_REQUIRED
    assert occurrences["All good"].placement is Placement.CODE
    assert occurrences["Something else"].placement is Placement.CODE


def test_records_neighbouring_tokens_and_trailing_member() -> None:
    source = (
        "void f(Map json, String status) {\n"
        "  final a = 'greeting'.tr();\n"
        "  final b = json['name'];\n"
        "  final c = {'home': 'Home page'};\n"
        "  if (status == 'active') {}\n"
        "}\n"
    )

    occurrences = _by_content(_harvest(source))

    assert occurrences["greeting"].trailing_member == "tr"
    assert occurrences["name"].container == "index"
    assert (occurrences["name"].preceded_by, occurrences["name"].followed_by) == ("[", "]")
    assert occurrences["home"].container == "set_or_map_literal"
    assert occurrences["home"].followed_by == ":"
    assert occurrences["active"].preceded_by == "=="


def test_comment_strings_only_when_enabled() -> None:
    source = "// Shows 'Hello there' on start\nvoid f() {}\n"

    assert _harvest(source) == []
    (occurrence,) = _harvest(source, include_comments=True)

    assert occurrence.content == "Hello there"
    assert occurrence.placement is Placement.COMMENT
    assert not occurrence.is_rewritable


def test_occurrences_are_sorted_by_offset() -> None:
    source = "void f() {\n  a('First one');\n  b('Second one');\n  c('Third one');\n}\n"

    offsets = [occurrence.offset for occurrence in _harvest(source)]

    assert offsets == sorted(offsets)
    assert len(offsets) == 3


def test_parse_failure_is_reported_not_raised() -> None:
    result = LiteralHarvester().harvest_text("lib/broken.dart", "void f() {\n  a('oops);\n}\n")

    assert result.tree is None
    assert result.occurrences == []
    assert result.failure is not None
    assert result.failure.line == 2


def test_parse_failure_without_detail_falls_back_to_file_start() -> None:
    class SilentParser(DartParser):
        def parse(self, text: str) -> ParseResult:
            return ParseResult()

    result = LiteralHarvester(parser=SilentParser()).harvest_text("lib/odd.dart", "x")

    assert result.tree is None
    assert result.failure is not None
    assert (result.failure.line, result.failure.column) == (1, 1)
