"""
Event service handling CRUD operations.

Every create/update runs the normalization pipeline first, then writes under
a savepoint. Nothing here commits; the caller owns the transaction.
"""

from typing import Any, Mapping, Optional

from sqlalchemy import select, exists
from sqlalchemy.ext.asyncio import AsyncSession

from evently.core.errors import ValidationError
from evently.core.logging import bind_operation, get_logger
from evently.core.metrics import record_db_operation, record_validation_failure
from evently.models.event import Event
from evently.services.persistence import unique_write
from evently.validators.event import normalize_event

logger = get_logger(__name__)

EVENT_FIELDS = (
    "title",
    "slug",
    "description",
    "overview",
    "image",
    "venue",
    "location",
    "date",
    "time",
    "mode",
    "audience",
    "agenda",
    "organizer",
    "tags",
)


def _normalize(data: Mapping[str, Any], existing: Optional[Event] = None) -> dict:
    try:
        return normalize_event(data, existing=existing)
    except ValidationError as e:
        record_validation_failure("event")
        logger.info("event_rejected", field=e.field, reason=e.message)
        raise


async def create_event(db: AsyncSession, data: Mapping[str, Any]) -> Event:
    """Normalize and insert a new event. Raises UniqueConstraintError on a slug clash."""
    with bind_operation("event", "create"):
        fields = _normalize(data)
        async with unique_write(db, "event", ("slug",)):
            event = Event(**fields)
            db.add(event)
        record_db_operation("insert")

        logger.info("event_created", event_id=event.id, slug=event.slug)
        return event


async def update_event(db: AsyncSession, event: Event, changes: Mapping[str, Any]) -> Event:
    """
    Re-save an event with `changes` applied.
    The whole record goes through the pipeline again, not just the changed fields.
    On a slug clash the event is reloaded to its stored state and can be resubmitted.
    """
    with bind_operation("event", "update", event_id=event.id):
        merged = {field: getattr(event, field) for field in EVENT_FIELDS}
        merged.update(changes)
        fields = _normalize(merged, existing=event)

        async with unique_write(db, "event", ("slug",), refresh=(event,)):
            for field, value in fields.items():
                setattr(event, field, value)
        record_db_operation("update")

        logger.info("event_updated", slug=event.slug)
        return event


async def get_event(db: AsyncSession, event_id: int) -> Optional[Event]:
    record_db_operation("read")
    result = await db.execute(select(Event).where(Event.id == event_id))
    return result.scalar_one_or_none()


async def get_event_by_slug(db: AsyncSession, slug: str) -> Optional[Event]:
    """Look an event up by its slug (uses the unique slug index)."""
    record_db_operation("read")
    result = await db.execute(select(Event).where(Event.slug == slug.strip().lower()))
    return result.scalar_one_or_none()


async def event_exists(db: AsyncSession, event_id: int) -> bool:
    """Existence check without loading the row."""
    record_db_operation("exists")
    result = await db.execute(select(exists().where(Event.id == event_id)))
    return bool(result.scalar())


async def list_events(
    db: AsyncSession,
    limit: int = 20,
    offset: int = 0,
    tag: Optional[str] = None,
) -> list[Event]:
    """
    List events, newest first.
    Tag filtering happens in Python since tags are stored as a JSON list.
    """
    record_db_operation("read")
    query = select(Event).order_by(Event.created_at.desc(), Event.id.desc())

    if tag is None:
        result = await db.execute(query.offset(offset).limit(limit))
        return list(result.scalars().all())

    result = await db.execute(query)
    tagged = [event for event in result.scalars().all() if tag.strip() in event.tags]
    return tagged[offset:offset + limit]


async def delete_event(db: AsyncSession, event: Event) -> None:
    """Delete an event. Bookings referencing it are left untouched."""
    await db.delete(event)
    await db.flush()
    record_db_operation("delete")

    logger.info("event_deleted", event_id=event.id, slug=event.slug)
