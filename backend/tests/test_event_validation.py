"""
Tests for the event normalization pipeline (no database needed).
"""

import pytest

from evently.core.errors import ValidationError
from evently.models.event import Event
from evently.validators.event import normalize_date, normalize_event, normalize_time, to_slug


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("12:00 AM", "00:00"),
        ("12:30 PM", "12:30"),
        ("1:05 am", "01:05"),
        ("11:59pm", "23:59"),
        (" 6:30 Pm ", "18:30"),
        ("9:30", "09:30"),
        ("00:00", "00:00"),
        ("23:05", "23:05"),
    ],
)
def test_normalize_time(raw, expected):
    assert normalize_time(raw) == expected


@pytest.mark.parametrize("raw", ["25:00", "noon", "9:60", "930", "13:00 pm", "0:30 am", "12:00 noon", ""])
def test_normalize_time_rejects_other_shapes(raw):
    with pytest.raises(ValidationError, match="Invalid time format"):
        normalize_time(raw)


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("March 5, 2024", "2024-03-05"),
        ("Mar 5, 2024", "2024-03-05"),
        ("5 March 2024", "2024-03-05"),
        ("2024-03-05", "2024-03-05"),
        ("03/05/2024", "2024-03-05"),
        ("2024/03/05", "2024-03-05"),
        ("2024-03-05T23:30:00-08:00", "2024-03-05"),
        ("2024-03-05T10:00:00Z", "2024-03-05"),
    ],
)
def test_normalize_date(raw, expected):
    assert normalize_date(raw) == expected


@pytest.mark.parametrize("raw", ["not a date", "2024-02-30", "tomorrow", "32/13/2024", "13/06/2024"])
def test_normalize_date_rejects_unparseable(raw):
    with pytest.raises(ValidationError, match="Invalid date format"):
        normalize_date(raw)


def test_to_slug():
    assert to_slug("Node.js Meetup!!") == "nodejs-meetup"
    assert to_slug("  React   Conf -- 2025 ") == "react-conf-2025"
    assert to_slug("Café Night") == "caf-night"


@pytest.mark.parametrize("title", ["Node.js Meetup!!", "  A  --  B ", "PyCon 2025: Day 1", "already-a-slug"])
def test_to_slug_is_idempotent(title):
    assert to_slug(to_slug(title)) == to_slug(title)


def test_normalize_event_canonicalizes_fields(event_payload):
    fields = normalize_event(event_payload)

    assert fields["title"] == "Node.js Meetup!!"
    assert fields["venue"] == "Tech Hub"
    assert fields["slug"] == "nodejs-meetup"
    assert fields["date"] == "2024-03-05"
    assert fields["time"] == "18:30"
    assert fields["agenda"] == ["Doors open", "Keynote"]
    assert fields["tags"] == ["node", "javascript"]


@pytest.mark.parametrize("field", ["title", "venue", "date", "organizer"])
def test_blank_required_string_rejected(event_payload, field):
    event_payload[field] = "   "
    with pytest.raises(ValidationError, match=f"{field} is required and must be a non-empty string") as exc:
        normalize_event(event_payload)
    assert exc.value.field == field


def test_non_string_field_rejected(event_payload):
    event_payload["mode"] = 3
    with pytest.raises(ValidationError, match="mode is required"):
        normalize_event(event_payload)


def test_missing_field_rejected(event_payload):
    del event_payload["overview"]
    with pytest.raises(ValidationError, match="overview is required"):
        normalize_event(event_payload)


@pytest.mark.parametrize("field", ["agenda", "tags"])
def test_whitespace_only_list_rejected(event_payload, field):
    event_payload[field] = ["  ", "", "\t"]
    with pytest.raises(ValidationError, match=f"{field} is required and must be a non-empty array"):
        normalize_event(event_payload)


@pytest.mark.parametrize("field", ["agenda", "tags"])
def test_list_with_non_string_rejected(event_payload, field):
    event_payload[field] = ["ok", 42]
    with pytest.raises(ValidationError, match=f"{field} must contain strings"):
        normalize_event(event_payload)


def test_missing_list_rejected(event_payload):
    event_payload["tags"] = None
    with pytest.raises(ValidationError, match="tags is required"):
        normalize_event(event_payload)


def test_title_length_bound(event_payload):
    event_payload["title"] = "a" * 180
    assert normalize_event(event_payload)["title"] == "a" * 180

    event_payload["title"] = "a" * 181
    with pytest.raises(ValidationError) as exc:
        normalize_event(event_payload)
    assert exc.value.field == "title"


def test_tag_length_bound(event_payload):
    event_payload["tags"] = ["x" * 101]
    with pytest.raises(ValidationError) as exc:
        normalize_event(event_payload)
    assert exc.value.field == "tags"


def test_title_without_letters_or_digits_rejected(event_payload):
    event_payload["title"] = "!!!"
    with pytest.raises(ValidationError, match="at least one letter or digit"):
        normalize_event(event_payload)


def test_slug_kept_when_title_unchanged(event_payload):
    existing = Event(title="Node.js Meetup!!", slug="custom-slug")
    event_payload["slug"] = "custom-slug"

    assert normalize_event(event_payload, existing=existing)["slug"] == "custom-slug"


def test_slug_rederived_when_title_changes(event_payload):
    existing = Event(title="Old Title", slug="old-title")
    event_payload["slug"] = "old-title"

    assert normalize_event(event_payload, existing=existing)["slug"] == "nodejs-meetup"


def test_slug_derived_when_missing(event_payload):
    existing = Event(title="Node.js Meetup!!", slug="")
    event_payload["slug"] = ""

    assert normalize_event(event_payload, existing=existing)["slug"] == "nodejs-meetup"


def test_supplied_slug_ignored_on_create(event_payload):
    event_payload["slug"] = "something-else"
    assert normalize_event(event_payload)["slug"] == "nodejs-meetup"


def test_supplied_slug_canonicalized(event_payload):
    existing = Event(title="Node.js Meetup!!", slug="nodejs-meetup")
    event_payload["slug"] = "  My Slug! "

    assert normalize_event(event_payload, existing=existing)["slug"] == "my-slug"


def test_supplied_slug_without_letters_or_digits_rejected(event_payload):
    existing = Event(title="Node.js Meetup!!", slug="nodejs-meetup")
    event_payload["slug"] = "???"

    with pytest.raises(ValidationError, match="slug must contain at least one letter or digit") as exc:
        normalize_event(event_payload, existing=existing)
    assert exc.value.field == "slug"


def test_day_first_slash_dates_rejected():
    # Slash dates are always month first
    assert normalize_date("05/06/2024") == "2024-05-06"
    with pytest.raises(ValidationError, match="Invalid date format"):
        normalize_date("13/06/2024")
