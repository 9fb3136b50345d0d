from __future__ import annotations

import json
from pathlib import Path

import pytest

from conftest import make_occurrence
from loc_checker.exceptions import ResourceFileError
from loc_checker.models.resource import PlaceholderDescriptor, ResourceEntry
from loc_checker.resources import ArbResourceStore, ResourceKeyManager, derive_key, serialize_arb


@pytest.mark.parametrize(
    "content, expected",
    [
        ("Hello World", "helloWorld"),
        ("Welcome, {param0}!", "welcome"),
        ("Don't have an account?", "dontHaveAnAccount"),
        ("404 not found", "text404NotFound"),
        ("Continue", "continueText"),
        ("!!!", "text"),
        ("Café ñandú", "cafAnd"),
        (
            "one two three four five six seven eight nine ten",
            "oneTwoThreeFourFiveSixSevenEight",
        ),
    ],
)
def test_derive_key(content: str, expected: str) -> None:
    assert derive_key(content) == expected


def test_derive_key_is_bounded() -> None:
    key = derive_key("Supercalifragilisticexpialidocious antidisestablishmentarianism forever")

    assert len(key) == 50
    assert key.startswith("supercalifragilisticexpialidociousAntidis")


class TestResourceKeyManager:
    def test_identical_content_maps_to_one_key(self) -> None:
        manager = ResourceKeyManager()

        first = manager.assign(make_occurrence("Hello World", path="lib/a.dart", line=3))
        second = manager.assign(make_occurrence("Hello World", path="lib/b.dart", line=9))

        assert first.key == second.key == "helloWorld"
        assert not first.reused
        assert second.reused
        assert [entry.key for entry in manager.new_entries] == ["helloWorld"]
        assert manager.new_entries[0].provenance == "lib/a.dart:3"
        assert len(manager.assignments) == 2

    def test_collision_with_different_content_is_disambiguated(self) -> None:
        manager = ResourceKeyManager()

        keys = [
            manager.assign(make_occurrence(content)).key
            for content in ("Save", "Save!", "save?")
        ]

        assert keys == ["save", "save2", "save3"]

    def test_existing_values_are_reused_and_existing_keys_are_reserved(self) -> None:
        manager = ResourceKeyManager({"save": "Save", "cancel": "Dismiss"})

        reused = manager.assign(make_occurrence("Save"))
        minted = manager.assign(make_occurrence("Cancel"))

        assert reused.key == "save" and reused.reused and reused.entry is None
        assert minted.key == "cancel2"
        assert [entry.key for entry in manager.new_entries] == ["cancel2"]
        assert manager.lookup("Cancel") == "cancel2"
        assert manager.lookup("Unknown") is None
        assert {"save", "cancel", "cancel2"} <= manager.known_keys

    def test_literal_braces_do_not_reuse_a_placeholder_key(self) -> None:
        manager = ResourceKeyManager()

        template = manager.assign(make_occurrence("Hi {param0}", variables=("name",)))
        literal = manager.assign(make_occurrence("Hi {param0}", message="Hi '{'param0'}'"))

        assert (template.key, literal.key) == ("hi", "hi2")
        assert [entry.value for entry in manager.new_entries] == [
            "Hi {param0}",
            "Hi '{'param0'}'",
        ]
        assert manager.new_entries[1].placeholders == ()

    def test_placeholders_follow_interpolation_variables(self) -> None:
        manager = ResourceKeyManager()

        assignment = manager.assign(
            make_occurrence("{param0} has {param1} items", variables=("user.name", "count"))
        )

        assert assignment.entry is not None
        assert assignment.entry.placeholders == (
            PlaceholderDescriptor("param0", "user.name"),
            PlaceholderDescriptor("param1", "count"),
        )
        assert assignment.entry.metadata() == {
            "placeholders": {
                "param0": {"type": "Object", "example": "user.name"},
                "param1": {"type": "Object", "example": "count"},
            }
        }


def _arb(path: Path, data: dict) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")


class TestArbResourceStore:
    def test_writes_new_file_in_deterministic_order(self, tmp_path: Path) -> None:
        store = ArbResourceStore(tmp_path / "lib" / "l10n" / "app_en.arb", "en")
        entries = [
            ResourceEntry("welcome", "Welcome, {param0}!", (PlaceholderDescriptor("param0", "name"),)),
            ResourceEntry("helloWorld", "Hello World"),
        ]

        assert store.write(entries) is True

        assert store.path.read_text(encoding="utf-8") == (
            "{\n"
            '  "@@locale": "en",\n'
            '  "helloWorld": "Hello World",\n'
            '  "welcome": "Welcome, {param0}!",\n'
            '  "@welcome": {\n'
            '    "placeholders": {\n'
            '      "param0": {\n'
            '        "type": "Object",\n'
            '        "example": "name"\n'
            "      }\n"
            "    }\n"
            "  }\n"
            "}\n"
        )

    def test_merges_below_existing_entries_without_overwriting(self, tmp_path: Path) -> None:
        path = tmp_path / "app_en.arb"
        _arb(
            path,
            {
                "@@locale": "en",
                "@@last_modified": "2024-01-01",
                "zeta": "Zeta",
                "@zeta": {"description": "Last letter"},
                "alpha": "Original",
            },
        )
        store = ArbResourceStore(path, "en")

        store.write([ResourceEntry("alpha", "Replacement"), ResourceEntry("beta", "Beta")])

        data = json.loads(path.read_text(encoding="utf-8"))
        assert list(data) == ["@@locale", "@@last_modified", "alpha", "beta", "zeta", "@zeta"]
        assert data["alpha"] == "Original"
        assert data["@zeta"] == {"description": "Last letter"}

    def test_untouched_when_nothing_is_new(self, tmp_path: Path) -> None:
        path = tmp_path / "app_en.arb"
        original = '{"save": "Save",   "@@locale": "en"}'
        path.write_text(original, encoding="utf-8")
        store = ArbResourceStore(path, "en")

        assert store.write([]) is False
        assert store.write([ResourceEntry("save", "Save")]) is False
        assert path.read_text(encoding="utf-8") == original

    def test_dry_run_writes_nothing(self, tmp_path: Path) -> None:
        store = ArbResourceStore(tmp_path / "app_en.arb", "en")

        assert store.write([ResourceEntry("hello", "Hello")], dry_run=True) is False
        assert not store.path.exists()

    def test_malformed_file_degrades_to_empty_and_is_not_overwritten(
        self, tmp_path: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        path = tmp_path / "app_en.arb"
        path.write_text("{not json", encoding="utf-8")
        store = ArbResourceStore(path, "en")

        assert store.messages() == {}
        assert store.malformed
        assert "resource_file_malformed" in capsys.readouterr().err
        with pytest.raises(ResourceFileError):
            store.write([ResourceEntry("hello", "Hello")])
        assert path.read_text(encoding="utf-8") == "{not json"

    def test_messages_skip_metadata(self, tmp_path: Path) -> None:
        path = tmp_path / "app_en.arb"
        _arb(path, {"@@locale": "en", "save": "Save", "@save": {"description": "x"}})

        assert ArbResourceStore(path, "en").messages() == {"save": "Save"}

    def test_identical_inputs_give_identical_bytes(self, tmp_path: Path) -> None:
        entries = [ResourceEntry("b", "B"), ResourceEntry("a", "A"), ResourceEntry("c", "C")]
        first = ArbResourceStore(tmp_path / "one" / "app_en.arb", "en")
        second = ArbResourceStore(tmp_path / "two" / "app_en.arb", "en")

        first.write(entries)
        second.write(list(reversed(entries)))

        assert first.path.read_bytes() == second.path.read_bytes()

    def test_write_template_marks_missing_translations(self, tmp_path: Path) -> None:
        source = tmp_path / "app_en.arb"
        _arb(
            source,
            {
                "@@locale": "en",
                "save": "Save",
                "welcome": "Welcome, {param0}!",
                "@welcome": {"placeholders": {"param0": {"type": "Object"}}},
            },
        )
        _arb(tmp_path / "app_es.arb", {"@@locale": "es", "save": "Guardar"})
        store = ArbResourceStore(source, "en")

        target = store.write_template("es")

        assert target == tmp_path / "app_es.arb"
        data = json.loads(target.read_text(encoding="utf-8"))
        assert data["@@locale"] == "es"
        assert data["save"] == "Guardar"
        assert data["welcome"] == "[TODO: TRANSLATE] Welcome, {param0}!"
        assert data["@welcome"] == {"placeholders": {"param0": {"type": "Object"}}}


def test_serialize_arb_adds_locale_first() -> None:
    rendered = serialize_arb({"b": "B", "@a": {"description": "orphan"}, "a": "A"}, "fr")

    assert list(json.loads(rendered)) == ["@@locale", "a", "@a", "b"]
    assert rendered.endswith("}\n")
