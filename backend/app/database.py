"""
Tourlist Backend - Database Client & Session Management
========================================================

What:  Async SQLAlchemy engine, session factory, declarative base and the
       FastAPI session dependency.
How:   `Database` wraps one engine + session factory. create_app() builds a
       single instance and stores it on `app.state.database`; the
       `get_db_session` dependency opens one session per request from it,
       commits on success and rolls back on error. The lifespan handler
       disposes it at shutdown.
Who:   Route handlers (via Depends), the health check, the seed script, tests.

Connection Pooling (PostgreSQL / asyncpg):
    pool_size=20:      Persistent connections for normal load
    max_overflow=10:   Temporary connections for traffic spikes (total max = 30)
    pool_pre_ping:     Validates connections before use
    pool_recycle=3600: Recycles connections every hour

SQLite (tests):
    A single shared connection (StaticPool) so an in-memory database
    survives across sessions.
"""

import logging
from typing import Any, AsyncGenerator, Dict

from fastapi import Request
from sqlalchemy import event, text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.pool import StaticPool

from app.config import Settings

logger = logging.getLogger(__name__)


# ── Base Model ────────────────────────────────────────────────────────────

class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy ORM models.

    All models inherit from this class so they register with one shared
    metadata object (used by Alembic and by Database.create_all()).
    """
    pass


# ── Store Client ──────────────────────────────────────────────────────────

def _engine_options(settings: Settings) -> Dict[str, Any]:
    """Engine keyword arguments for the configured backend."""
    if settings.is_sqlite:
        return {
            "poolclass": StaticPool,
            "connect_args": {"check_same_thread": False},
            "echo": settings.log_level == "DEBUG",
        }
    return {
        "pool_size": settings.db_pool_size,
        "max_overflow": settings.db_max_overflow,
        "pool_pre_ping": settings.db_pool_pre_ping,
        "pool_recycle": 3600,
        "echo": settings.log_level == "DEBUG",
    }


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:
    # SQLite ignores FOREIGN KEY clauses unless this pragma is on
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


class Database:
    """
    Explicitly constructed store client.

    Lifecycle:
        1. Built once by create_app() from Settings
        2. Shared read-only by every request (each request opens its own session)
        3. dispose() called once from the lifespan shutdown hook
    """

    def __init__(self, settings: Settings):
        self.url = settings.database_url
        self.engine: AsyncEngine = create_async_engine(
            settings.database_url, **_engine_options(settings)
        )
        if settings.is_sqlite:
            event.listen(self.engine.sync_engine, "connect", _enable_sqlite_foreign_keys)

        # expire_on_commit=False: attributes stay readable after commit
        # (responses are serialized after the dependency commits)
        self.session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    async def create_all(self) -> None:
        """
        Create every table registered on Base.metadata.

        Used by tests and local SQLite development. Production schemas are
        managed by Alembic.
        """
        # Models must be imported so their tables are registered
        import app.models  # noqa: F401

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def ping(self) -> bool:
        """Run SELECT 1; True when the store answers."""
        try:
            async with self.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
            return True
        except Exception as e:
            logger.warning("Database ping failed: %s", str(e))
            return False

    async def dispose(self) -> None:
        """Close all pooled connections."""
        await self.engine.dispose()


# ── Session Dependency ────────────────────────────────────────────────────

async def get_db_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency that provides a database session per request.

    How it works:
        1. Opens a session from the app's Database
        2. Yields it to the route handler
        3. On success: commits the transaction
        4. On error: rolls back, then re-raises for the global error handlers
        5. Always: closes the session (returns the connection to the pool)

    Example usage in a route:
        @router.get("/hotels")
        async def list_hotels(db: AsyncSession = Depends(get_db_session)):
            ...
    """
    database: Database = request.app.state.database
    async with database.session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()
