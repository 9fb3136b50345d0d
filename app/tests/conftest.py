from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Callable, Dict, Iterator, Optional

import pytest

APP_ROOT = Path(__file__).resolve().parents[1]
if str(APP_ROOT) not in sys.path:
    sys.path.insert(0, str(APP_ROOT))

from loc_checker.config import CheckerConfig, get_checker_environment
from loc_checker.models.occurrence import ArgumentRole, LiteralOccurrence

ProjectFactory = Callable[..., Path]


@pytest.fixture(autouse=True)
def _fresh_environment() -> Iterator[None]:
    get_checker_environment.cache_clear()
    yield
    get_checker_environment.cache_clear()


@pytest.fixture
def make_project(tmp_path: Path) -> ProjectFactory:
    """Lay out a Flutter-style project below ``tmp_path``."""

    def _make(
        sources: Dict[str, str],
        *,
        name: str = "demo_app",
        arb: Optional[Dict[str, object]] = None,
        root: Optional[Path] = None,
    ) -> Path:
        project = root or tmp_path / "project"
        (project / "lib").mkdir(parents=True, exist_ok=True)
        (project / "pubspec.yaml").write_text(
            f"name: {name}\ndescription: Test app\n", encoding="utf-8"
        )
        for relative, text in sources.items():
            path = project / relative
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(text, encoding="utf-8")
        if arb is not None:
            arb_path = project / "lib" / "l10n" / "app_en.arb"
            arb_path.parent.mkdir(parents=True, exist_ok=True)
            arb_path.write_text(json.dumps(arb, indent=2) + "\n", encoding="utf-8")
        return project

    return _make


@pytest.fixture
def config(tmp_path: Path) -> CheckerConfig:
    return CheckerConfig(project_root=tmp_path)


def make_occurrence(
    content: str,
    *,
    path: str = "lib/screens/home_page.dart",
    line: int = 1,
    callee: Optional[str] = None,
    label: Optional[str] = None,
    position: Optional[int] = None,
    variables: tuple[str, ...] = (),
    **extra: object,
) -> LiteralOccurrence:
    role = None
    if label is not None or position is not None:
        role = ArgumentRole(label=label, position=position)
    return LiteralOccurrence(
        path=path,
        content=content,
        offset=extra.pop("offset", 0),  # type: ignore[arg-type]
        length=extra.pop("length", len(content) + 2),  # type: ignore[arg-type]
        line=line,
        column=1,
        raw_text=f"'{content}'",
        callee=callee,
        role=role,
        variables=variables,
        is_template=bool(variables),
        **extra,  # type: ignore[arg-type]
    )
