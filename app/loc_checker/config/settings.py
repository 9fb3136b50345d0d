"""Typed checker configuration loaded through a Marshmallow schema."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Mapping, Tuple

from marshmallow import fields, post_load, validate

from ..exceptions import InvalidConfigurationError
from ..schemas.base import LocSchema
from .constants import (
    DEFAULT_AMBIENT_ACCESSOR,
    DEFAULT_AMBIENT_IMPORT,
    DEFAULT_CONTEXT_AFTER,
    DEFAULT_CONTEXT_BEFORE,
    DEFAULT_EXCLUDE_DIRS,
    DEFAULT_LOCALIZATION_IMPORT,
    DEFAULT_NON_UI_SEGMENTS,
    DEFAULT_NON_UI_SUFFIXES,
    DEFAULT_SCAN_PATH,
    DEFAULT_STATIC_ACCESSOR,
    DEFAULT_USER_FACING_PARAMS,
)
from .environment import get_checker_environment


def _default_tuple(values: Tuple[str, ...]) -> Any:
    return lambda: tuple(values)


@dataclass(frozen=True)
class CheckerConfig:
    """Read-only configuration shared by every stage of a run."""

    project_root: Path
    scan_paths: Tuple[Path, ...] = ()
    exclude_dirs: Tuple[str, ...] = field(default_factory=_default_tuple(DEFAULT_EXCLUDE_DIRS))
    exclude_files: Tuple[str, ...] = ()
    include_comments: bool = False
    custom_ui_patterns: Tuple[str, ...] = ()
    user_facing_params: Tuple[str, ...] = field(
        default_factory=_default_tuple(DEFAULT_USER_FACING_PARAMS)
    )
    force_keep_callees: Tuple[str, ...] = ()
    non_ui_segments: Tuple[str, ...] = field(
        default_factory=_default_tuple(DEFAULT_NON_UI_SEGMENTS)
    )
    non_ui_suffixes: Tuple[str, ...] = field(
        default_factory=_default_tuple(DEFAULT_NON_UI_SUFFIXES)
    )
    resource_file: Path | None = None
    locale: str = ""
    context_before: int = DEFAULT_CONTEXT_BEFORE
    context_after: int = DEFAULT_CONTEXT_AFTER
    rewrite_scan_lines: int = 0
    max_workers: int = 0
    dry_run: bool = False
    ambient_accessor: str = DEFAULT_AMBIENT_ACCESSOR
    static_accessor: str = DEFAULT_STATIC_ACCESSOR
    localization_import: str = DEFAULT_LOCALIZATION_IMPORT
    ambient_import: str = DEFAULT_AMBIENT_IMPORT

    def __post_init__(self) -> None:
        env = get_checker_environment()
        root = Path(self.project_root)
        object.__setattr__(self, "project_root", root)
        scan_paths = tuple(
            path if path.is_absolute() else root / path
            for path in (Path(item) for item in self.scan_paths)
        )
        object.__setattr__(self, "scan_paths", scan_paths or (root / DEFAULT_SCAN_PATH,))
        resource = Path(self.resource_file) if self.resource_file else Path(env.resource_file)
        if not resource.is_absolute():
            resource = root / resource
        object.__setattr__(self, "resource_file", resource)
        if not self.locale:
            object.__setattr__(self, "locale", env.locale)
        if self.rewrite_scan_lines <= 0:
            object.__setattr__(self, "rewrite_scan_lines", env.rewrite_scan_lines)
        if self.max_workers == 0:
            object.__setattr__(self, "max_workers", env.max_workers)

    @property
    def resource_path(self) -> Path:
        if self.resource_file is None:
            raise InvalidConfigurationError("No resource file configured")
        return self.resource_file

    def relative_path(self, path: Path) -> str:
        try:
            return path.resolve().relative_to(self.project_root.resolve()).as_posix()
        except ValueError:
            return path.as_posix()

    def copy_with(self, **changes: Any) -> "CheckerConfig":
        return replace(self, **changes)


class CheckerConfigSchema(LocSchema):
    project_root = fields.String(required=True)
    scan_paths = fields.List(fields.String(), load_default=list)
    exclude_dirs = fields.List(fields.String(), load_default=lambda: list(DEFAULT_EXCLUDE_DIRS))
    exclude_files = fields.List(fields.String(), load_default=list)
    include_comments = fields.Boolean(load_default=False)
    custom_ui_patterns = fields.List(fields.String(), load_default=list)
    user_facing_params = fields.List(
        fields.String(), load_default=lambda: list(DEFAULT_USER_FACING_PARAMS)
    )
    force_keep_callees = fields.List(fields.String(), load_default=list)
    non_ui_segments = fields.List(
        fields.String(), load_default=lambda: list(DEFAULT_NON_UI_SEGMENTS)
    )
    non_ui_suffixes = fields.List(
        fields.String(), load_default=lambda: list(DEFAULT_NON_UI_SUFFIXES)
    )
    resource_file = fields.String(load_default=None, allow_none=True)
    locale = fields.String(load_default="")
    context_before = fields.Integer(
        load_default=DEFAULT_CONTEXT_BEFORE, validate=validate.Range(min=0)
    )
    context_after = fields.Integer(
        load_default=DEFAULT_CONTEXT_AFTER, validate=validate.Range(min=0)
    )
    rewrite_scan_lines = fields.Integer(load_default=0, validate=validate.Range(min=0))
    max_workers = fields.Integer(load_default=0, validate=validate.Range(min=0))
    dry_run = fields.Boolean(load_default=False)
    ambient_accessor = fields.String(load_default=DEFAULT_AMBIENT_ACCESSOR)
    static_accessor = fields.String(load_default=DEFAULT_STATIC_ACCESSOR)
    localization_import = fields.String(load_default=DEFAULT_LOCALIZATION_IMPORT)
    ambient_import = fields.String(load_default=DEFAULT_AMBIENT_IMPORT)

    @post_load
    def _build(self, data: dict[str, Any], **_: Any) -> CheckerConfig:
        for key, value in list(data.items()):
            if isinstance(value, list):
                data[key] = tuple(value)
        data["project_root"] = Path(data["project_root"])
        data["scan_paths"] = tuple(Path(item) for item in data["scan_paths"])
        if data.get("resource_file"):
            data["resource_file"] = Path(data["resource_file"])
        return CheckerConfig(**data)


def load_config(payload: Mapping[str, Any]) -> CheckerConfig:
    """Build a validated configuration from a camelCase mapping."""

    config = CheckerConfigSchema().load_or_raise(
        dict(payload), InvalidConfigurationError, what="configuration"
    )
    validate_config(config)
    return config


def validate_config(config: CheckerConfig) -> None:
    """Raise for configuration problems that must stop a run before it starts."""

    if not config.project_root.is_dir():
        raise InvalidConfigurationError(
            f"Project directory does not exist: {config.project_root}"
        )
    for scan_path in config.scan_paths:
        if not scan_path.exists():
            raise InvalidConfigurationError(f"Scan path does not exist: {scan_path}")
    if config.max_workers < 1:
        raise InvalidConfigurationError("maxWorkers must be a positive integer")
    if config.context_before < 0 or config.context_after < 0:
        raise InvalidConfigurationError("Context window sizes cannot be negative")
    if config.rewrite_scan_lines < 1:
        raise InvalidConfigurationError("rewriteScanLines must be a positive integer")


__all__ = ["CheckerConfig", "CheckerConfigSchema", "load_config", "validate_config"]
