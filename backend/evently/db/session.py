"""
Database connection handling.

CONNECTION STRATEGY
===================

One ConnectionCache is constructed at process start and handed to every
consumer that needs storage. It holds two slots:

  - database: the live handle (engine + session factory), once established
  - pending:  the in-flight establishment task, while one is running

acquire() returns the live handle without suspending when it exists. Otherwise
the first caller creates the pending task *before* its first await, so every
caller that arrives during establishment awaits the same task instead of
opening a second engine. A failed attempt clears the pending slot without
caching the failure; the next acquire() starts a fresh attempt.

Engine options fixed at establishment:
  - pool of 10 connections, no overflow, 15s checkout timeout
  - pre-ping on checkout so dead connections are replaced
  - initial SELECT 1 bounded by DB_SERVER_SELECTION_TIMEOUT (15s)
"""

import asyncio
from dataclasses import dataclass
from typing import Awaitable, Callable, Optional

from sqlalchemy import event, text
from sqlalchemy.engine import make_url
from sqlalchemy.exc import ArgumentError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from evently import models  # noqa: F401 - registers tables on Base.metadata
from evently.core.config import Settings, get_settings
from evently.core.errors import ConfigurationError, DatabaseConnectionError
from evently.core.logging import get_logger
from evently.core.metrics import record_connection_attempt
from evently.db.base import Base

logger = get_logger(__name__)


@dataclass
class Database:
    """Live database handle shared by all consumers."""

    engine: AsyncEngine
    sessionmaker: async_sessionmaker

    def session(self) -> AsyncSession:
        return self.sessionmaker()

    async def create_all(self) -> None:
        """Create the events/bookings tables and their indexes if missing."""
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def dispose(self) -> None:
        await self.engine.dispose()


async def _ping(engine: AsyncEngine) -> None:
    async with engine.connect() as conn:
        await conn.execute(text("SELECT 1"))


def _use_explicit_transactions(engine: AsyncEngine) -> None:
    """
    Make SQLite emit BEGIN itself so SAVEPOINTs nest inside a real transaction.
    Otherwise the driver defers BEGIN and releasing the first savepoint commits.
    """

    @event.listens_for(engine.sync_engine, "connect")
    def disable_driver_begin(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine.sync_engine, "begin")
    def emit_begin(conn):
        conn.exec_driver_sql("BEGIN")


async def open_database(url: str, settings: Optional[Settings] = None) -> Database:
    """
    Create the engine and verify it can reach the server.
    Raises DatabaseConnectionError if the server is not reachable in time.
    """
    settings = settings or get_settings()

    try:
        backend = make_url(url).get_backend_name()
    except ArgumentError as e:
        raise ConfigurationError(f"DATABASE_URL is not a valid database URL: {e}") from e

    engine_kwargs = {"echo": settings.DB_ECHO, "pool_pre_ping": True}
    if backend != "sqlite":
        # SQLite uses a static/single-file pool that takes no sizing options
        engine_kwargs.update(
            pool_size=settings.DB_POOL_SIZE,
            max_overflow=0,
            pool_timeout=settings.DB_POOL_TIMEOUT,
        )
    engine = create_async_engine(url, **engine_kwargs)
    if backend == "sqlite":
        _use_explicit_transactions(engine)

    try:
        await asyncio.wait_for(_ping(engine), timeout=settings.DB_SERVER_SELECTION_TIMEOUT)
    except Exception as e:
        await engine.dispose()
        reason = str(e) or type(e).__name__
        raise DatabaseConnectionError(f"Could not connect to the database: {reason}") from e

    return Database(
        engine=engine,
        sessionmaker=async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False),
    )


Connector = Callable[[str, Settings], Awaitable[Database]]


class ConnectionCache:
    """Memoizes a single Database handle for the lifetime of the process."""

    def __init__(self, settings: Optional[Settings] = None, connect: Connector = open_database):
        self._settings = settings or get_settings()
        self._connect = connect
        self._database: Optional[Database] = None
        self._pending: Optional[asyncio.Task] = None

    @property
    def database(self) -> Optional[Database]:
        return self._database

    async def acquire(self) -> Database:
        """Return the live handle, establishing it on first use."""
        if self._database is not None:
            return self._database

        if self._pending is None:
            url = self._settings.DATABASE_URL
            if not url:
                raise ConfigurationError("DATABASE_URL environment variable is not set.")
            # Must be set before the first await so concurrent callers share it
            self._pending = asyncio.ensure_future(self._establish(url))

        return await asyncio.shield(self._pending)

    async def _establish(self, url: str) -> Database:
        logger.info("database_connecting", pool_size=self._settings.DB_POOL_SIZE)
        try:
            database = await self._connect(url, self._settings)
        except Exception as e:
            # Allow retries on subsequent calls after a failed attempt
            self._pending = None
            record_connection_attempt(success=False)
            logger.error("database_connection_failed", error=str(e))
            raise

        self._database = database
        self._pending = None
        record_connection_attempt(success=True)
        logger.info("database_connected")
        return database

    async def close(self) -> None:
        """Dispose the cached handle; the next acquire() reconnects."""
        pending = self._pending
        if pending is not None:
            # Let an in-flight attempt settle so its engine is disposed below
            await asyncio.wait([pending])
        database, self._database = self._database, None
        if database is not None:
            await database.dispose()
            logger.info("database_closed")
