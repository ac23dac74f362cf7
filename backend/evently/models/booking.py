"""
Booking model representing an email's reservation for an event.

Key design decisions:
- Unique constraint on (event_id, email) prevents duplicate bookings
- event_id is validated at write time only; there is no foreign key, so
  deleting an event leaves its bookings in place
"""

from sqlalchemy import Column, Integer, String, UniqueConstraint

from evently.db.base import Base, TimestampMixin


class Booking(Base, TimestampMixin):
    __tablename__ = "bookings"

    id = Column(Integer, primary_key=True, index=True)
    event_id = Column(Integer, nullable=False, index=True)
    email = Column(String(254), nullable=False)

    __table_args__ = (
        # One booking per email per event
        UniqueConstraint("event_id", "email", name="uq_bookings_event_email"),
    )

    def __repr__(self) -> str:
        return f"<Booking(id={self.id}, event={self.event_id}, email={self.email})>"
