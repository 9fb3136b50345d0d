from __future__ import annotations

import json
from pathlib import Path

import pytest

from loc_checker.exceptions import ResourceFileError
from loc_checker.models.findings import Finding
from loc_checker.report import (
    compare_with_baseline,
    format_finding,
    load_findings,
    write_findings,
)


def _finding(content: str, line: int = 4, file: str = "lib/home.dart") -> Finding:
    return Finding(
        file=file,
        line=line,
        column=12,
        content=content,
        context=("return Scaffold(", f"  body: Text('{content}'),"),
        pattern="Text widget",
        reason="ui_context",
    )


def test_findings_file_uses_camel_case_schema(tmp_path: Path) -> None:
    path = tmp_path / "reports" / "findings.json"
    findings = [_finding("Hello World"), _finding("Café ☕", line=9)]

    write_findings(path, findings)

    raw = json.loads(path.read_text(encoding="utf-8"))
    assert raw[0] == {
        "file": "lib/home.dart",
        "line": 4,
        "column": 12,
        "content": "Hello World",
        "context": ["return Scaffold(", "  body: Text('Hello World'),"],
        "pattern": "Text widget",
        "reason": "ui_context",
        "rewritable": True,
    }
    assert "Café ☕" in path.read_text(encoding="utf-8")
    assert load_findings(path) == findings


def test_load_findings_missing_and_malformed(tmp_path: Path) -> None:
    assert load_findings(tmp_path / "absent.json") == []

    broken = tmp_path / "broken.json"
    broken.write_text('[{"file": "lib/a.dart"}]', encoding="utf-8")

    with pytest.raises(ResourceFileError):
        load_findings(broken)


def test_compare_with_baseline_reports_new_and_resolved() -> None:
    baseline = [_finding("Hello World"), _finding("Old text", line=20)]
    current = [_finding("Hello World"), _finding("Fresh text", line=30)]

    comparison = compare_with_baseline(current, baseline)

    assert [finding.content for finding in comparison.new] == ["Fresh text"]
    assert [finding.content for finding in comparison.resolved] == ["Old text"]
    assert comparison.has_regressions
    assert not compare_with_baseline(baseline, baseline).has_regressions


def test_format_finding() -> None:
    assert format_finding(_finding("Hello World")) == (
        '[MISSING] "Hello World" → found in lib/home.dart:4 pattern: Text widget'
    )
