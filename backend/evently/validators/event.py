"""
Event normalization pipeline.

normalize_event() runs right before every create/update and returns the
canonical field set, or raises ValidationError and nothing is written:

  1. required string fields are trimmed and must be non-empty
  2. agenda and tags are trimmed, empties dropped, and must stay non-empty
  3. date is stored as YYYY-MM-DD
  4. time is stored as 24-hour HH:MM
  5. slug is re-derived from the title when the title changed or no slug exists,
     otherwise the given slug is canonicalized
  6. stored length bounds are checked

Slug uniqueness is left to the unique index on events.slug.
"""

import re
from datetime import datetime
from typing import Any, Mapping, Optional

from evently.core.errors import ValidationError
from evently.models.event import Event
from evently.schemas.event import EventFields
from evently.validators.common import normalize_string_list, require_string, validate_schema

REQUIRED_STRING_FIELDS = (
    "title",
    "description",
    "overview",
    "image",
    "venue",
    "location",
    "date",
    "time",
    "mode",
    "audience",
    "organizer",
)

# Tried in order; month names are matched in the C locale
DATE_FORMATS = (
    "%Y-%m-%d",      # ISO 8601
    "%m/%d/%Y",      # US format
    "%m-%d-%Y",      # US format with dashes
    "%B %d, %Y",     # Full month name
    "%b %d, %Y",     # Abbreviated month name
    "%d %B %Y",      # Day first, full month name
    "%d %b %Y",      # Day first, abbreviated month name
    "%Y/%m/%d",      # Alternative ISO format
)

TWELVE_HOUR = re.compile(r"(0?[1-9]|1[0-2]):([0-5]\d)\s*(am|pm)", re.ASCII)
TWENTY_FOUR_HOUR = re.compile(r"([01]?\d|2[0-3]):([0-5]\d)", re.ASCII)


def to_slug(value: str) -> str:
    """
    Lowercase, drop everything but letters, digits, whitespace and hyphens,
    then join words with single hyphens.

    >>> to_slug("Node.js Meetup!!")
    'nodejs-meetup'
    """
    slug = value.lower().strip()
    slug = re.sub(r"[^a-z0-9\s-]", "", slug)
    slug = re.sub(r"\s+", "-", slug)
    return re.sub(r"-+", "-", slug)


def normalize_date(value: str) -> str:
    """Parse a calendar date and return its ISO form (YYYY-MM-DD)."""
    value = value.strip()

    for fmt in DATE_FORMATS:
        try:
            return datetime.strptime(value, fmt).date().isoformat()
        except ValueError:
            continue

    # Full ISO timestamps: keep the date portion, drop time-of-day and offset
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00")).date().isoformat()
    except ValueError:
        raise ValidationError("Invalid date format.", field="date") from None


def normalize_time(value: str) -> str:
    """Convert 'h:mm am/pm' or 'H:MM' to zero-padded 24-hour HH:MM."""
    trimmed = value.strip().lower()

    match = TWELVE_HOUR.fullmatch(trimmed)
    if match:
        hour, minutes, meridiem = int(match.group(1)), match.group(2), match.group(3)
        if meridiem == "pm" and hour != 12:
            hour += 12
        elif meridiem == "am" and hour == 12:
            hour = 0
        return f"{hour:02d}:{minutes}"

    match = TWENTY_FOUR_HOUR.fullmatch(trimmed)
    if match:
        return f"{int(match.group(1)):02d}:{match.group(2)}"

    raise ValidationError("Invalid time format. Use HH:MM or HH:MM AM/PM.", field="time")


def normalize_event(data: Mapping[str, Any], existing: Optional[Event] = None) -> dict:
    """
    Return the canonical field set for an event about to be written.

    `existing` is the stored event on update; the slug is only re-derived when
    the title differs from the stored one or no slug is set.
    """
    fields: dict[str, Any] = {}
    for field in REQUIRED_STRING_FIELDS:
        fields[field] = require_string(data.get(field), field)

    fields["agenda"] = normalize_string_list(data.get("agenda"), "agenda")
    fields["tags"] = normalize_string_list(data.get("tags"), "tags")

    fields["date"] = normalize_date(fields["date"])
    fields["time"] = normalize_time(fields["time"])

    slug = data.get("slug")
    title_changed = existing is None or fields["title"] != existing.title
    if isinstance(slug, str) and slug.strip() and not title_changed:
        # Kept or caller-supplied slugs get the same canonical form
        source, slug = "slug", to_slug(slug)
    else:
        source, slug = "title", to_slug(fields["title"])
    if not slug:
        raise ValidationError(f"{source} must contain at least one letter or digit.", field=source)
    fields["slug"] = slug

    return validate_schema(EventFields, fields)
