"""Base Marshmallow schema for configuration and report payloads."""

from __future__ import annotations

from typing import Any, Mapping, Sequence, Type

from marshmallow import EXCLUDE, Schema, ValidationError  # type: ignore[import-not-found]

from ..exceptions import LocCheckerError


def _camel_case(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.capitalize() for part in rest)


class LocSchema(Schema):
    """camelCase keys on the wire; unknown keys are dropped on load."""

    class Meta:
        unknown = EXCLUDE

    def on_bind_field(self, field_name: str, field_obj: Any) -> None:  # type: ignore[override]
        super().on_bind_field(field_name, field_obj)
        if not getattr(field_obj, "data_key", None):
            field_obj.data_key = _camel_case(field_name)

    def load_or_raise(
        self,
        payload: Mapping[str, Any] | Sequence[Any],
        error: Type[LocCheckerError],
        *,
        what: str,
        many: bool = False,
    ) -> Any:
        """Load ``payload``, turning validation failures into ``error``."""

        try:
            return self.load(payload, many=many)
        except ValidationError as exc:
            raise error(f"Invalid {what}: {exc.messages}") from exc


__all__ = ["LocSchema"]
