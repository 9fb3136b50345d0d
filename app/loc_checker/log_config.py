"""Logging helpers for the localization checker."""

from __future__ import annotations

import os
import sys
from typing import Any

from .config.environment import get_checker_environment
from .utils import now_iso

_ENV = get_checker_environment()

DEBUG = _ENV.debug
VERBOSE = _ENV.verbose
LOG_FILE = _ENV.log_file


def _emit(prefix: str, label: str, payload: Any, *, to_stderr: bool = False) -> None:
    timestamp = now_iso()
    message = f"[{prefix}][{timestamp}] {label}: {payload}"
    if to_stderr or DEBUG:
        _write_stderr(message)
    _append_log(message)


def _write_stderr(message: str) -> None:
    encoding = getattr(sys.stderr, "encoding", None) or "utf-8"
    safe_message = message.encode(encoding, errors="replace").decode(encoding)
    sys.stderr.write(f"{safe_message}\n")


def _append_log(message: str) -> None:
    if not LOG_FILE:
        return
    directory = os.path.dirname(LOG_FILE)
    if directory:
        os.makedirs(directory, exist_ok=True)
    with open(LOG_FILE, "a", encoding="utf-8") as log_file:
        log_file.write(f"{message}\n")


def verbose_log(label: str, payload: Any) -> None:
    """Emit structured logs when verbose mode is enabled."""
    if not VERBOSE:
        return
    _emit("VERBOSE", label, payload)


def debug_verbose(label: str, payload: Any) -> None:
    """Emit debug logs when debug mode is active, or always in verbose mode."""
    if not (DEBUG or VERBOSE):
        return
    _emit("DEBUG", label, payload)


def warning_log(label: str, payload: Any) -> None:
    """Emit a warning; warnings are never silenced."""
    _emit("WARNING", label, payload, to_stderr=True)


__all__ = ["DEBUG", "VERBOSE", "verbose_log", "debug_verbose", "warning_log"]
