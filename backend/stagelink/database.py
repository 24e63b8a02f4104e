"""
StageLink Backend — Database Session Management
==================================================

What:  Async SQLAlchemy engine, session factory, and FastAPI dependency.
Why:   Centralizes all database connection logic in one place.
How:   Creates an async engine with connection pooling, provides a session
       dependency that auto-commits on success and auto-rolls-back on error.
Who:   Used by route handlers via FastAPI's dependency injection system.
When:  Engine is created at module import; sessions are created per-request.

Connection Pooling Strategy (PostgreSQL):
    pool_size=20:      Persistent connections for normal load
    max_overflow=10:   Temporary connections for traffic spikes (total max = 30)
    pool_pre_ping:     Validates connections before use
    pool_recycle=3600: Recycles connections every hour

    SQLite URLs (tests, local tinkering) skip the sizing arguments and get
    `PRAGMA foreign_keys=ON` on every connection so cascades and FK checks
    behave like PostgreSQL.
"""

import logging
from typing import Any, AsyncGenerator, Dict

from sqlalchemy import event
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from stagelink.config import settings
from stagelink.exceptions import ConflictError, DatabaseError

logger = logging.getLogger(__name__)


def _engine_options() -> Dict[str, Any]:
    options: Dict[str, Any] = {
        "pool_pre_ping": settings.db_pool_pre_ping,
        # Echo SQL queries in DEBUG mode for development visibility
        "echo": settings.log_level == "DEBUG",
    }
    if settings.is_sqlite:
        return options
    options.update(
        pool_size=settings.db_pool_size,
        max_overflow=settings.db_max_overflow,
        pool_recycle=3600,
    )
    return options


def enable_sqlite_foreign_keys(target: AsyncEngine) -> None:
    """
    Turn on FK enforcement for every new SQLite connection.

    SQLite ships with foreign keys disabled; without this, ON DELETE CASCADE
    (profile → media, job → applications, group → members) silently does nothing.
    """
    if target.dialect.name != "sqlite":
        return

    @event.listens_for(target.sync_engine, "connect")
    def _set_sqlite_pragma(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


# ── Engine Configuration ──────────────────────────────────────────────────
engine = create_async_engine(settings.database_url, **_engine_options())
enable_sqlite_foreign_keys(engine)

# ── Session Factory ───────────────────────────────────────────────────────
# expire_on_commit=False: attributes stay readable after commit, which the
# group-creation flow relies on (it commits between its two statements)
async_session_factory = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


# ── Base Model ────────────────────────────────────────────────────────────
class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy ORM models.

    All models inherit from this class to register with the shared metadata
    that Alembic reads for migrations and tests use for `create_all`.
    """
    pass


# ── Session Dependency ────────────────────────────────────────────────────
async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency that provides a database session per request.

    How it works:
        1. Creates a new session from the factory
        2. Yields it to the route handler (the handler performs queries)
        3. On success: commits the transaction
        4. On error: rolls back the transaction
        5. Always: closes the session (returns connection to pool)

    Example usage in a route:
        @router.get("/venues")
        async def list_venues(db: AsyncSession = Depends(get_db_session)):
            ...
    """
    async with async_session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()


def _violated_constraint(exc: IntegrityError, constraint: str) -> bool:
    """
    Whether `exc` was raised by the named constraint or unique index.

    PostgreSQL drivers expose the constraint name (asyncpg on the wrapped
    cause, and both quote it in the message). SQLite only lists the columns,
    as "UNIQUE constraint failed: table.col, table.col", so the name is
    resolved through the model metadata and compared in that form.
    """
    orig = exc.orig
    name = getattr(orig, "constraint_name", None) or getattr(
        getattr(orig, "__cause__", None), "constraint_name", None
    )
    if name:
        return name == constraint

    text = str(orig)
    if constraint in text:
        return True

    for table in Base.metadata.tables.values():
        for candidate in (*table.constraints, *table.indexes):
            if candidate.name != constraint:
                continue
            columns = ", ".join(f"{table.name}.{column.name}" for column in candidate.columns)
            return f"UNIQUE constraint failed: {columns}" in text
    return False


async def flush_or_conflict(
    db: AsyncSession,
    message: str,
    constraint: str,
) -> None:
    """
    Flush pending writes, translating a constraint violation into ConflictError.

    What:  The single place where IntegrityError becomes a user-facing
           "already applied" / "already a member" style message.
    Why:   Each insert site knows which constraint it can trip, so the caller
           supplies the message; the raw driver error is only logged.
    How:   Rolls back the failed statement so the session stays usable for
           the error response. A violation of `constraint` raises
           ConflictError; any other integrity failure raises DatabaseError.

    Args:
        db:         Session with the pending insert/update
        message:    User-facing conflict message
        constraint: Name of the constraint that means "already exists"

    Raises:
        ConflictError: `constraint` rejected the write (409)
        DatabaseError: Some other constraint rejected the write (500)
    """
    try:
        await db.flush()
    except IntegrityError as exc:
        await db.rollback()
        if not _violated_constraint(exc, constraint):
            logger.error("Unexpected constraint violation (expected %s): %s", constraint, exc.orig)
            raise DatabaseError(context={"expected_constraint": constraint}) from exc
        logger.info("Constraint %s rejected write: %s", constraint, exc.orig)
        raise ConflictError(message=message, context={"constraint": constraint})


# ── Lifecycle Helpers ─────────────────────────────────────────────────────
async def dispose_engine() -> None:
    """Gracefully closes all connections in the pool on shutdown."""
    await engine.dispose()
