"""
Process lifecycle for the data layer.

The host (web server, worker, script) enters lifespan() once at startup and
passes the yielded ConnectionCache to everything that needs storage:

    async with lifespan() as connections:
        database = await connections.acquire()
        async with database.session() as db:
            event = await create_event(db, payload)
            await db.commit()
"""

from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from evently.core.config import Settings, get_settings
from evently.core.logging import setup_logging, get_logger
from evently.db.session import ConnectionCache


@asynccontextmanager
async def lifespan(
    settings: Optional[Settings] = None,
    create_tables: bool = False,
) -> AsyncIterator[ConnectionCache]:
    """Startup and shutdown hooks around a single ConnectionCache."""
    settings = settings or get_settings()
    setup_logging(settings)
    logger = get_logger(__name__)

    logger.info(
        "data_layer_starting",
        app=settings.APP_NAME,
        version=settings.APP_VERSION,
        environment=settings.ENVIRONMENT,
    )

    connections = ConnectionCache(settings=settings)
    if create_tables:
        database = await connections.acquire()
        await database.create_all()
        logger.info("tables_ready")

    try:
        yield connections
    finally:
        await connections.close()
        logger.info("data_layer_shutdown")
