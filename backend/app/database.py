"""
Folio Backend — Database Engine & Session Management
======================================================

What:  Async SQLAlchemy engine, session factory, declarative base, and the
       per-request session dependency.
Why:   Centralizes all database connection logic in one place.
How:   `Database` wraps an async engine with connection pooling. One instance
       is created by the AppContext at startup and disposed on shutdown.
Who:   Used by route handlers via FastAPI's dependency injection system.
When:  Engine is created with the app; sessions are created per-request.

Connection Pooling Strategy:
    pool_size=20:     Persistent connections for normal load
    max_overflow=10:  Temporary connections for traffic spikes (total max = 30)
    pool_pre_ping:    Validates connections before use (catches stale connections)
    pool_recycle=3600: Recycles connections every hour

    SQLite (used by the test suite) manages its own pool, so the sizing
    arguments are only passed for server databases.
"""

import logging
from typing import AsyncGenerator

from fastapi import Request
from sqlalchemy import text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from app.config import Settings

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy ORM models.

    Every model registers with this metadata, which Alembic reads for
    migrations and `Database.create_tables()` uses for development setups.
    """
    pass


class Database:
    """
    Owns the async engine and session factory for one application instance.

    Lifecycle:
        1. Constructed by AppContext (no connection is opened yet)
        2. create_tables() optionally runs on startup
        3. session() hands out AsyncSession objects per request
        4. dispose() closes every pooled connection on shutdown
    """

    def __init__(self, settings: Settings):
        self.url = settings.database_url
        engine_kwargs = {
            # Echo SQL queries in DEBUG mode for development visibility
            "echo": settings.log_level == "DEBUG",
        }
        if not self.url.startswith("sqlite"):
            engine_kwargs.update(
                pool_size=settings.db_pool_size,
                max_overflow=settings.db_max_overflow,
                pool_pre_ping=settings.db_pool_pre_ping,
                pool_recycle=3600,
            )
        self.engine: AsyncEngine = create_async_engine(self.url, **engine_kwargs)

        # expire_on_commit=False: attributes stay readable after commit,
        # which response serialization relies on
        self.session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    def session(self) -> AsyncSession:
        return self.session_factory()

    async def create_tables(self) -> None:
        """Create every table registered on Base.metadata (idempotent)."""
        # Models must be imported so their tables are registered
        from app.models import contact, project, user  # noqa: F401

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Database tables ensured")

    async def ping(self) -> bool:
        """Lightweight connectivity probe used by the health check."""
        try:
            async with self.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
            return True
        except Exception as e:
            logger.warning("Database ping failed: %s", str(e))
            return False

    async def dispose(self) -> None:
        """
        What:  Gracefully closes all connections in the pool.
        When:  Called during application shutdown (lifespan handler).
        """
        await self.engine.dispose()


# ── Session Dependency ────────────────────────────────────────────────────
async def get_db_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency that provides a database session per request.

    How it works:
        1. Creates a new session from the application's Database
        2. Yields it to the route handler
        3. On success: commits the transaction
        4. On error: rolls back the transaction
        5. Always: closes the session (returns connection to pool)

    Services that must make a write durable before a later step (the contact
    form commits before sending notifications) commit explicitly; the final
    commit here is then a no-op.
    """
    database: Database = request.app.state.context.database
    async with database.session() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()
