"""
Contacts API — Database Engine & Session Management
=====================================================

What:  Async SQLAlchemy engine, session factory, and the declarative Base.
Why:   Centralizes all database connection logic in one place.
How:   `Database` owns one engine (connection pool) and one session factory.
       The app factory builds a single instance and hands it to the
       contact accessor; nothing here is a module-level global.
Who:   Built by create_app() and the seeder; used by ContactService.
When:  Engine is created once per process; sessions are opened per operation.

Connection Pooling Strategy:
    pool_size / max_overflow: From settings (PostgreSQL only)
    pool_pre_ping:            Validates connections before use
    pool_recycle=3600:        Recycles connections every hour
    SQLite URLs skip pool sizing; SQLAlchemy picks a suitable pool itself.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from app.config import Settings, settings as default_settings

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy ORM models.

    Shares a single metadata object, which Alembic and create_tables() read.
    """
    pass


def build_engine(config: Settings) -> AsyncEngine:
    """Create the async engine with pool options suited to the backend."""
    options = {
        "pool_pre_ping": config.db_pool_pre_ping,
        # Echo SQL queries in DEBUG mode for development visibility
        "echo": config.log_level == "DEBUG",
    }
    if not config.is_sqlite:
        options.update(
            pool_size=config.db_pool_size,
            max_overflow=config.db_max_overflow,
            pool_recycle=3600,
        )
    return create_async_engine(config.database_url, **options)


class Database:
    """
    Connection lifecycle for one database.

    Attributes:
        engine:           AsyncEngine holding the connection pool
        session_factory:  async_sessionmaker producing AsyncSession objects

    expire_on_commit=False keeps ORM attributes readable after commit,
    which the accessor relies on when building responses.
    """

    def __init__(self, config: Optional[Settings] = None):
        self.config = config or default_settings
        self.engine = build_engine(self.config)
        self.session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """
        Provide a session that commits on success and rolls back on error.

        How it works:
            1. Creates a new session from the factory
            2. Yields it to the caller
            3. On success: commits the transaction
            4. On error: rolls back and re-raises
            5. Always: closes the session (returns connection to pool)
        """
        async with self.session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise
            finally:
                await session.close()

    async def create_tables(self) -> None:
        """
        What:  Creates any missing tables from the ORM metadata.
        When:  Startup when DB_CREATE_TABLES is on, and the seeder.
        """
        # Registers the contacts table on Base.metadata
        from app.models import contact  # noqa: F401

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Database tables ensured")

    async def dispose(self) -> None:
        """
        What:  Gracefully closes all connections in the pool.
        When:  Called during application shutdown (lifespan handler).
        """
        await self.engine.dispose()
