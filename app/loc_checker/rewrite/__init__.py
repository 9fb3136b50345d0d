"""Rewrite planning and application."""

from .applier import EditApplier, RewrittenFile, apply_edits
from .call_shape import RewriteContextScanner
from .edit_set import DroppedGroup, EditSet
from .extension import ensure_extension_file
from .imports import ensure_imports, has_import, read_package_name
from .planner import FilePlan, RewritePlanner, modifier_edits

__all__ = [
    "DroppedGroup",
    "EditApplier",
    "EditSet",
    "FilePlan",
    "RewriteContextScanner",
    "RewritePlanner",
    "RewrittenFile",
    "apply_edits",
    "ensure_extension_file",
    "ensure_imports",
    "has_import",
    "modifier_edits",
    "read_package_name",
]
