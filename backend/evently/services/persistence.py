"""
Write helper shared by the event and booking services.

Unique indexes are the source of truth for slug and (event_id, email)
uniqueness; their violations are surfaced as UniqueConstraintError.

Each write runs inside a SAVEPOINT: a rejected write only undoes itself, the
caller's transaction and everything it already flushed stay intact.
"""

from contextlib import asynccontextmanager
from typing import AsyncIterator, Sequence

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from evently.core.errors import UniqueConstraintError
from evently.core.logging import get_logger
from evently.core.metrics import record_unique_violation

logger = get_logger(__name__)

# SQLSTATE for unique_violation (PostgreSQL)
UNIQUE_VIOLATION = "23505"


def is_unique_violation(error: IntegrityError) -> bool:
    orig = error.orig
    code = getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)
    if code == UNIQUE_VIOLATION:
        return True
    # SQLite reports it only in the message
    return "UNIQUE constraint failed" in str(orig)


@asynccontextmanager
async def unique_write(
    db: AsyncSession,
    record: str,
    fields: Sequence[str],
    refresh: Sequence[object] = (),
) -> AsyncIterator[None]:
    """
    Add or modify objects inside the block; they are flushed under a savepoint
    when the block exits.

    The savepoint must be opened before the changes are made, since opening it
    flushes whatever is already pending. On a unique index violation only the
    savepoint is rolled back, objects in `refresh` are reloaded to their stored
    state, and UniqueConstraintError is raised. Other integrity errors
    propagate unchanged.
    """
    try:
        async with db.begin_nested():
            yield
    except IntegrityError as e:
        if not is_unique_violation(e):
            raise
        # Objects changed inside the savepoint were expired by its rollback
        for obj in refresh:
            await db.refresh(obj)
        record_unique_violation(record)
        logger.warning("unique_constraint_violated", record=record, fields=list(fields))
        raise UniqueConstraintError(
            f"A {record} with the same {', '.join(fields)} already exists.",
            fields=fields,
        ) from e
