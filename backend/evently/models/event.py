"""
Event model.

Key design decisions:
- `slug` is derived from the title and carries a unique index for routing/lookup
- `date` and `time` are stored as canonical strings (YYYY-MM-DD, HH:MM)
- `agenda` and `tags` are ordered string lists stored as JSON
"""

from sqlalchemy import Column, Integer, String, Text, JSON, UniqueConstraint

from evently.db.base import Base, TimestampMixin


class Event(Base, TimestampMixin):
    __tablename__ = "events"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(180), nullable=False)
    slug = Column(String(200), nullable=False)
    description = Column(Text, nullable=False)
    overview = Column(Text, nullable=False)
    image = Column(String(2048), nullable=False)
    venue = Column(String(500), nullable=False)
    location = Column(String(500), nullable=False)
    date = Column(String(30), nullable=False)
    time = Column(String(30), nullable=False)
    mode = Column(String(50), nullable=False)
    audience = Column(String(200), nullable=False)
    agenda = Column(JSON, nullable=False)
    organizer = Column(String(200), nullable=False)
    tags = Column(JSON, nullable=False)

    __table_args__ = (
        # Keep slug unique for routing and lookup efficiency
        UniqueConstraint("slug", name="uq_events_slug"),
    )

    def __repr__(self) -> str:
        return f"<Event(id={self.id}, slug={self.slug}, date={self.date} {self.time})>"
