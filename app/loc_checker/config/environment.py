from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Dict, Optional

_DEFAULTS: Dict[str, str] = {
    "LOC_CHECKER_VERBOSE": "false",
    "LOC_CHECKER_DEBUG": "false",
    "LOC_CHECKER_MAX_WORKERS": "8",
    "LOC_CHECKER_LOCALE": "en",
    "LOC_CHECKER_RESOURCE_FILE": "lib/l10n/app_en.arb",
    "LOC_CHECKER_REWRITE_SCAN_LINES": "80",
}

_TRUTHY = {"1", "true", "yes", "y", "on"}


@dataclass(frozen=True)
class CheckerEnvironment:
    verbose: bool
    debug: bool
    log_file: Optional[str]
    max_workers: int
    locale: str
    resource_file: str
    rewrite_scan_lines: int


def _coalesce_env(key: str) -> str:
    default = _DEFAULTS.get(key)
    value = os.getenv(key)
    if value is None:
        if default is None:
            raise RuntimeError(f"Missing environment variable '{key}'")
        return default
    trimmed = value.strip()
    if not trimmed:
        if default is not None:
            return default
        raise RuntimeError(f"Environment variable '{key}' cannot be empty")
    return trimmed


def _parse_int(key: str) -> int:
    raw = _coalesce_env(key)
    try:
        return int(raw)
    except ValueError as exc:
        raise RuntimeError(f"Environment variable '{key}' must be an integer") from exc


def _parse_flag(key: str) -> bool:
    return _coalesce_env(key).lower() in _TRUTHY


def _optional_env(key: str) -> Optional[str]:
    raw = os.getenv(key)
    if raw is None:
        return None
    return raw.strip() or None


@lru_cache(maxsize=1)
def get_checker_environment() -> CheckerEnvironment:
    return CheckerEnvironment(
        verbose=_parse_flag("LOC_CHECKER_VERBOSE"),
        debug=_parse_flag("LOC_CHECKER_DEBUG"),
        log_file=_optional_env("LOC_CHECKER_LOG_FILE"),
        max_workers=_parse_int("LOC_CHECKER_MAX_WORKERS"),
        locale=_coalesce_env("LOC_CHECKER_LOCALE").lower(),
        resource_file=_coalesce_env("LOC_CHECKER_RESOURCE_FILE"),
        rewrite_scan_lines=_parse_int("LOC_CHECKER_REWRITE_SCAN_LINES"),
    )


__all__ = ["CheckerEnvironment", "get_checker_environment"]
