"""
Plant API — Database Engine & Session Management
=================================================

What:  Async SQLAlchemy engine, session factory, declarative base and the
       per-request session dependency.
How:   `create_app()` builds one engine and one session factory per process
       and stores them on `app.state`. `get_db_session` opens a session per
       request, commits on success and rolls back on any error.
Who:   Route handlers receive sessions through `Depends(get_db_session)`.

Connection Pooling (PostgreSQL):
    pool_size=10:      Persistent connections for normal load
    max_overflow=5:    Temporary connections for spikes (total max = 15)
    pool_pre_ping:     Validates connections before use
    pool_recycle=3600: Recycles connections every hour

SQLite URLs (tests, local experiments) use SQLAlchemy's default pool.
"""

from typing import AsyncGenerator, Optional

from fastapi import Request
from sqlalchemy import event
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from plant_api.config import Settings

# PostgreSQL SQLSTATE codes for the integrity violations we classify
UNIQUE_VIOLATION = "23505"
FOREIGN_KEY_VIOLATION = "23503"


class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy ORM models.

    Shares one metadata object, which Alembic reads for migrations and the
    test suite uses to create tables on SQLite.
    """
    pass


# ── Engine / Session Factory ──────────────────────────────────────────────

def _enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:
    # SQLite ignores REFERENCES clauses unless this is set per connection
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def build_engine(settings: Settings) -> AsyncEngine:
    """
    Create the async engine for the configured database URL.

    Pool sizing only applies to server databases; SQLite drivers pick
    their own pool class.
    """
    url = settings.sqlalchemy_database_url
    echo = settings.log_level == "DEBUG"

    if url.startswith("sqlite"):
        engine = create_async_engine(url, echo=echo)
        event.listen(engine.sync_engine, "connect", _enable_sqlite_foreign_keys)
        return engine

    return create_async_engine(
        url,
        pool_size=settings.db_pool_size,
        max_overflow=settings.db_max_overflow,
        pool_pre_ping=settings.db_pool_pre_ping,
        pool_recycle=3600,
        echo=echo,
    )


def build_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    # expire_on_commit=False: row attributes stay readable after commit
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


# ── Session Dependency ────────────────────────────────────────────────────

async def get_db_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency that provides a database session per request.

    How it works:
        1. Opens a session from the factory stored on app.state
        2. Yields it to the route handler
        3. On success: commits the transaction
        4. On error: rolls back and re-raises for the global handlers
        5. Always: closes the session (returns the connection to the pool)
    """
    session_factory: async_sessionmaker[AsyncSession] = request.app.state.session_factory
    async with session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()


# ── Integrity Error Classification ────────────────────────────────────────

def classify_integrity_error(exc: IntegrityError) -> Optional[str]:
    """
    Tell a unique violation from a foreign-key violation.

    Returns "unique", "foreign_key" or None when the error is some other
    constraint (NOT NULL, CHECK, ...).

    asyncpg exposes the SQLSTATE on the wrapped driver error; SQLite only
    reports it in the message text.
    """
    orig = exc.orig
    sqlstate = getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)
    if sqlstate:
        if sqlstate == UNIQUE_VIOLATION:
            return "unique"
        if sqlstate == FOREIGN_KEY_VIOLATION:
            return "foreign_key"
        return None

    text = str(orig).upper()
    if "UNIQUE CONSTRAINT" in text:
        return "unique"
    if "FOREIGN KEY CONSTRAINT" in text:
        return "foreign_key"
    return None
