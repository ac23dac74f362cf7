"""
Pytest fixtures for the test database, sessions and sample records.

Each test gets a fresh in-memory SQLite database created through the same
open_database() path production uses.
"""

from typing import AsyncGenerator

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession

from evently.core.config import Settings
from evently.db.session import Database, open_database
from evently.models.event import Event
from evently.services.event_service import create_event

TEST_DATABASE_URL = "sqlite+aiosqlite://"


@pytest.fixture
def settings() -> Settings:
    return Settings(DATABASE_URL=TEST_DATABASE_URL, DB_SERVER_SELECTION_TIMEOUT=5.0)


@pytest_asyncio.fixture
async def database(settings: Settings) -> AsyncGenerator[Database, None]:
    """Open the database, create tables, dispose afterwards."""
    database = await open_database(TEST_DATABASE_URL, settings)
    await database.create_all()
    yield database
    await database.dispose()


@pytest_asyncio.fixture
async def db_session(database: Database) -> AsyncGenerator[AsyncSession, None]:
    async with database.session() as session:
        yield session


@pytest.fixture
def event_payload() -> dict:
    """Raw event input the way an API layer would hand it over."""
    return {
        "title": "  Node.js Meetup!!  ",
        "description": "An evening of talks about the Node.js runtime.",
        "overview": "Talks, demos and pizza.",
        "image": "/images/node-meetup.png",
        "venue": " Tech Hub ",
        "location": "Berlin, Germany",
        "date": "March 5, 2024",
        "time": "6:30 PM",
        "mode": "offline",
        "audience": "Developers",
        "agenda": ["  Doors open ", "", "Keynote", "   "],
        "organizer": "Node Berlin",
        "tags": ["node", " javascript "],
    }


@pytest_asyncio.fixture
async def test_event(db_session: AsyncSession, event_payload: dict) -> Event:
    """A committed event."""
    event = await create_event(db_session, event_payload)
    await db_session.commit()
    return event
