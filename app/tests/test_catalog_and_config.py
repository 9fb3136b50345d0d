from __future__ import annotations

import json
from pathlib import Path

import pytest

from loc_checker.catalog import KnownKeyCatalog, KnownKeySnapshot
from loc_checker.config import CheckerConfig, load_config, validate_config
from loc_checker.exceptions import InvalidConfigurationError
from loc_checker.pipeline import iter_source_files


def _write(path: Path, text: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")


def test_catalog_collects_arb_and_translation_json(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    _write(
        tmp_path / "lib" / "l10n" / "app_en.arb",
        json.dumps({"@@locale": "en", "hello": "Hello", "@hello": {"description": "Greeting"}}),
    )
    _write(
        tmp_path / "assets" / "i18n" / "en.json",
        json.dumps({"home": {"title": "Home", "subtitle": "Start here"}}),
    )
    _write(tmp_path / "assets" / "config" / "settings.json", json.dumps({"theme": "Dark"}))
    _write(tmp_path / "build" / "stale.arb", json.dumps({"stale": "Stale"}))
    _write(tmp_path / "lib" / "l10n" / "broken.arb", "{oops")

    snapshot = KnownKeyCatalog(CheckerConfig(project_root=tmp_path)).load()

    assert snapshot.keys == frozenset({"hello", "home.title", "home.subtitle"})
    assert snapshot.values == frozenset({"Hello", "Home", "Start here"})
    assert snapshot.contains("Home")
    assert snapshot.contains(" hello ")
    assert not snapshot.contains("Dark")
    assert not snapshot.contains("Stale")
    assert "catalog_file_skipped" in capsys.readouterr().err


def test_catalog_honours_excluded_directories(tmp_path: Path) -> None:
    _write(tmp_path / "legacy" / "app_en.arb", json.dumps({"old": "Old text"}))

    config = CheckerConfig(project_root=tmp_path, exclude_dirs=("legacy",))

    assert len(KnownKeyCatalog(config).load()) == 0


def test_snapshot_from_mapping_ignores_blank_values() -> None:
    snapshot = KnownKeySnapshot.from_mapping({"a": "  Alpha ", "b": ""})

    assert snapshot.values == frozenset({"Alpha"})
    assert not snapshot.contains("")
    assert len(snapshot) == 2


def test_load_config_reads_camel_case_payload(tmp_path: Path) -> None:
    (tmp_path / "lib").mkdir()

    config = load_config(
        {
            "projectRoot": str(tmp_path),
            "scanPaths": ["lib"],
            "excludeFiles": [".g.dart"],
            "includeComments": True,
            "maxWorkers": 2,
            "customUiPatterns": ["MyCard("],
            "somethingElse": 1,
        }
    )

    assert config.scan_paths == (tmp_path / "lib",)
    assert config.exclude_files == (".g.dart",)
    assert config.include_comments is True
    assert config.max_workers == 2
    assert config.custom_ui_patterns == ("MyCard(",)
    assert config.resource_path == tmp_path / "lib" / "l10n" / "app_en.arb"
    assert config.locale == "en"
    assert config.rewrite_scan_lines == 80
    assert "title" in config.user_facing_params


@pytest.mark.parametrize(
    "payload",
    [
        {"projectRoot": "/definitely/not/here"},
        {"scanPaths": ["lib"]},
        {"projectRoot": "{root}", "contextBefore": -1},
        {"projectRoot": "{root}", "scanPaths": ["missing"]},
    ],
)
def test_load_config_rejects_invalid_payloads(tmp_path: Path, payload: dict) -> None:
    (tmp_path / "lib").mkdir()
    resolved = {
        key: value.format(root=tmp_path) if isinstance(value, str) else value
        for key, value in payload.items()
    }

    with pytest.raises(InvalidConfigurationError):
        load_config(resolved)


def test_validate_config_rejects_non_positive_workers(tmp_path: Path) -> None:
    (tmp_path / "lib").mkdir()

    with pytest.raises(InvalidConfigurationError):
        validate_config(CheckerConfig(project_root=tmp_path, max_workers=-1))


def test_environment_supplies_defaults(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("LOC_CHECKER_MAX_WORKERS", "3")
    monkeypatch.setenv("LOC_CHECKER_LOCALE", "DE")
    monkeypatch.setenv("LOC_CHECKER_RESOURCE_FILE", "l10n/strings_de.arb")

    config = CheckerConfig(project_root=tmp_path)

    assert config.max_workers == 3
    assert config.locale == "de"
    assert config.resource_path == tmp_path / "l10n" / "strings_de.arb"
    assert config.copy_with(max_workers=5).max_workers == 5


def test_resource_path_without_resource_file_is_a_configuration_error(tmp_path: Path) -> None:
    config = CheckerConfig(project_root=tmp_path)
    object.__setattr__(config, "resource_file", None)

    with pytest.raises(InvalidConfigurationError):
        config.resource_path


def test_iter_source_files_applies_exclusions(tmp_path: Path) -> None:
    for relative in (
        "lib/main.dart",
        "lib/screens/home.dart",
        "lib/screens/home.g.dart",
        "lib/generated/intl.dart",
        "lib/README.md",
    ):
        _write(tmp_path / relative, "")
    config = CheckerConfig(
        project_root=tmp_path,
        exclude_dirs=("lib/generated",),
        exclude_files=(".g.dart",),
    )

    files = [config.relative_path(path) for path in iter_source_files(config)]

    assert files == ["lib/main.dart", "lib/screens/home.dart"]
