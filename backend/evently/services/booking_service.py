"""
Booking service.

Bookings are validated against the events table at write time only:
the existence lookup runs on create and whenever event_id changes.
Duplicate (event_id, email) pairs are rejected by the composite unique index,
after email has been lowercased, so addresses differing only by case collide.
"""

from typing import Any, Mapping, Optional

from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from evently.core.errors import ValidationError
from evently.core.logging import bind_operation, get_logger
from evently.core.metrics import record_db_operation, record_validation_failure
from evently.models.booking import Booking
from evently.services.persistence import unique_write
from evently.validators.booking import validate_booking

logger = get_logger(__name__)

UNIQUE_FIELDS = ("event_id", "email")


async def _validate(
    db: AsyncSession,
    data: Mapping[str, Any],
    existing: Optional[Booking] = None,
) -> dict:
    try:
        return await validate_booking(db, data, existing=existing)
    except ValidationError as e:
        record_validation_failure("booking")
        logger.info("booking_rejected", field=e.field, reason=e.message)
        raise


async def create_booking(db: AsyncSession, data: Mapping[str, Any]) -> Booking:
    """Validate and insert a booking for an existing event."""
    with bind_operation("booking", "create"):
        fields = await _validate(db, data)
        async with unique_write(db, "booking", UNIQUE_FIELDS):
            booking = Booking(**fields)
            db.add(booking)
        record_db_operation("insert")

        logger.info("booking_created", booking_id=booking.id, event_id=booking.event_id)
        return booking


async def update_booking(db: AsyncSession, booking: Booking, changes: Mapping[str, Any]) -> Booking:
    """Re-save a booking with `changes` applied, re-running validation."""
    with bind_operation("booking", "update", booking_id=booking.id):
        merged = {"event_id": booking.event_id, "email": booking.email}
        merged.update(changes)
        fields = await _validate(db, merged, existing=booking)

        async with unique_write(db, "booking", UNIQUE_FIELDS, refresh=(booking,)):
            booking.event_id = fields["event_id"]
            booking.email = fields["email"]
        record_db_operation("update")

        logger.info("booking_updated", event_id=booking.event_id)
        return booking


async def get_event_bookings(db: AsyncSession, event_id: int) -> list[Booking]:
    """All bookings for an event, oldest first (uses ix_bookings_event_id)."""
    record_db_operation("read")
    result = await db.execute(
        select(Booking)
        .where(Booking.event_id == event_id)
        .order_by(Booking.created_at.asc(), Booking.id.asc())
    )
    return list(result.scalars().all())


async def count_event_bookings(db: AsyncSession, event_id: int) -> int:
    record_db_operation("read")
    result = await db.execute(
        select(func.count()).select_from(Booking).where(Booking.event_id == event_id)
    )
    return result.scalar_one()
