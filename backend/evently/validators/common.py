"""
Field helpers shared by the event and booking pipelines.
"""

from typing import Any, Type

import pydantic

from evently.core.errors import ValidationError


def require_string(value: Any, field: str) -> str:
    """Return the trimmed value, rejecting non-strings and blank strings."""
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"{field} is required and must be a non-empty string.", field=field)
    return value.strip()


def normalize_string_list(value: Any, field: str) -> list[str]:
    """
    Trim every entry and drop the ones left empty.
    A missing value counts as an empty list; the result must not be empty.
    """
    if value is None:
        value = []
    if not isinstance(value, (list, tuple)):
        raise ValidationError(f"{field} is required and must be a non-empty array.", field=field)

    items = []
    for item in value:
        if not isinstance(item, str):
            raise ValidationError(f"{field} must contain strings.", field=field)
        item = item.strip()
        if item:
            items.append(item)

    if not items:
        raise ValidationError(f"{field} is required and must be a non-empty array.", field=field)
    return items


def validate_schema(schema: Type[pydantic.BaseModel], fields: dict) -> dict:
    """Check stored bounds (lengths, ranges) and return the validated fields."""
    try:
        return schema.model_validate(fields).model_dump()
    except pydantic.ValidationError as e:
        error = e.errors()[0]
        loc = error.get("loc", ())
        location = ".".join(str(part) for part in loc)
        raise ValidationError(
            f"{location}: {error['msg']}",
            field=str(loc[0]) if loc else None,
        ) from e
