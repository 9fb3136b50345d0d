"""Serialization schema for report findings."""

from __future__ import annotations

from typing import Any

from marshmallow import fields, post_load

from ..models.findings import Finding
from .base import LocSchema


class FindingSchema(LocSchema):
    file = fields.String(required=True)
    line = fields.Integer(required=True)
    column = fields.Integer(required=True)
    content = fields.String(required=True)
    context = fields.List(fields.String(), load_default=list)
    pattern = fields.String(load_default="")
    reason = fields.String(load_default="")
    rewritable = fields.Boolean(load_default=True)

    @post_load
    def _build(self, data: dict[str, Any], **_: Any) -> Finding:
        data["context"] = tuple(data.get("context") or ())
        return Finding(**data)


__all__ = ["FindingSchema"]
