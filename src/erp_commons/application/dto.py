"""Application – DTO base helpers shared by the entity services."""
from __future__ import annotations

import dataclasses
from typing import Any, Self

__all__ = ["EntityDto", "FieldErrors", "require_email", "require_text"]

type FieldErrors = list[dict[str, Any]]


class EntityDto:
    """Mixin for dataclass DTOs that are copied attribute-by-attribute from an entity."""

    @classmethod
    def from_entity(cls, entity: Any) -> Self:
        return cls(**{f.name: getattr(entity, f.name) for f in dataclasses.fields(cls)})  # type: ignore[arg-type]


def require_text(errors: FieldErrors, field: str, value: str | None, *, max_length: int | None = None) -> None:
    if value is None or not value.strip():
        errors.append({"field": field, "message": "is required"})
    elif max_length is not None and len(value) > max_length:
        errors.append({"field": field, "message": f"must be at most {max_length} characters"})


def require_email(errors: FieldErrors, field: str, value: str | None) -> None:
    require_text(errors, field, value, max_length=255)
    if value and value.strip() and "@" not in value:
        errors.append({"field": field, "message": "is not a valid email address"})
