"""
Booking validation pipeline.

validate_booking() runs right before every create/update:

  1. email must be a non-empty string with a basic local@domain.tld shape;
     it is stored trimmed and lowercased
  2. event_id must be a valid positive identifier
  3. on create, or when event_id changes, the referenced event must exist

Uniqueness of (event_id, email) is left to the composite unique index.
"""

import re
from typing import Any, Mapping, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from evently.core.errors import ValidationError
from evently.models.booking import Booking
from evently.schemas.booking import BookingFields
from evently.services.event_service import event_exists
from evently.validators.common import require_string, validate_schema

EMAIL_PATTERN = re.compile(r"[^\s@]+@[^\s@]+\.[^\s@]+")
DIGITS = re.compile(r"[0-9]+")


def normalize_email(value: Any) -> str:
    email = require_string(value, "email")
    if not EMAIL_PATTERN.fullmatch(email):
        raise ValidationError("Invalid email format.", field="email")
    return email.lower()


def parse_event_id(value: Any) -> int:
    """Accept a positive int or a string of decimal digits."""
    if isinstance(value, str) and DIGITS.fullmatch(value.strip()):
        value = int(value.strip())
    # bool is an int subclass but never an identifier
    if isinstance(value, int) and not isinstance(value, bool) and value > 0:
        return value
    raise ValidationError("event_id must be a valid identifier.", field="event_id")


async def validate_booking(
    db: AsyncSession,
    data: Mapping[str, Any],
    existing: Optional[Booking] = None,
) -> dict:
    """Return the canonical booking fields or raise ValidationError."""
    fields = validate_schema(
        BookingFields,
        {
            "email": normalize_email(data.get("email")),
            "event_id": parse_event_id(data.get("event_id")),
        },
    )

    # Skip the lookup on updates that keep the same event
    if existing is None or existing.event_id != fields["event_id"]:
        if not await event_exists(db, fields["event_id"]):
            raise ValidationError("Referenced event does not exist.", field="event_id")

    return fields
