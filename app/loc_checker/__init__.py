"""Localization checker for Dart/Flutter sources."""

from .config import CheckerConfig, load_config  # noqa: F401
from .pipeline import LocalizationPipeline, PipelineResult, run_pipeline  # noqa: F401
from .report import compare_with_baseline, load_findings, write_findings  # noqa: F401

__all__ = [
    "CheckerConfig",
    "LocalizationPipeline",
    "PipelineResult",
    "compare_with_baseline",
    "load_config",
    "load_findings",
    "run_pipeline",
    "write_findings",
]
