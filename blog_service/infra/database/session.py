"""Database engine and session management.

The ``Database`` object is the store handle: it owns the async engine and
the session factory. One instance is created in the application lifespan
(or by a CLI command) and passed by reference to whatever needs a session.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING, Any

from sqlalchemy import event, text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

import blog_service.core.models  # noqa: F401  registers tables on Base.metadata
from blog_service.core.database import Base
from blog_service.core.settings import DatabaseSettings, get_db_settings

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator

logger = logging.getLogger(__name__)


class Database:
    """Async engine plus session factory.

    Example:
        database = create_database()
        async with database.session() as session:
            result = await session.execute(select(Post))
        await database.dispose()
    """

    def __init__(self, engine: AsyncEngine) -> None:
        self.engine = engine
        self.session_factory = async_sessionmaker(
            engine,
            class_=AsyncSession,
            expire_on_commit=False,
            autoflush=False,
        )

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession]:
        """Open a session that is rolled back on error and always closed."""
        async with self.session_factory() as session:
            try:
                yield session
            except Exception:
                await session.rollback()
                raise

    async def create_all(self) -> None:
        """Create every table registered on the declarative metadata."""
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Database tables created")

    async def drop_all(self) -> None:
        """Drop every table registered on the declarative metadata."""
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.drop_all)
        logger.warning("Database tables dropped")

    async def ping(self) -> bool:
        """Return True when the database answers a trivial query."""
        try:
            async with self.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
        except Exception as e:
            logger.warning("Database ping failed", extra={"error": str(e)})
            return False
        return True

    async def dispose(self) -> None:
        """Close all pooled connections."""
        await self.engine.dispose()
        logger.info("Database connections closed")


def _enable_sqlite_foreign_keys(dbapi_conn: Any, connection_record: Any) -> None:
    _ = connection_record
    cursor = dbapi_conn.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def create_database(settings: DatabaseSettings | None = None) -> Database:
    """Build a ``Database`` from settings.

    Args:
        settings: Database settings, defaults to the cached environment settings.

    Returns:
        A new store handle. Callers own it and must ``dispose()`` it.
    """
    settings = settings or get_db_settings()

    engine_kwargs: dict[str, Any] = {"echo": settings.echo}
    if not settings.is_sqlite:
        engine_kwargs.update(
            pool_size=settings.pool_size,
            max_overflow=settings.max_overflow,
            pool_timeout=settings.pool_timeout,
            pool_recycle=settings.pool_recycle,
            pool_pre_ping=settings.pool_pre_ping,
        )

    engine = create_async_engine(settings.database_url, **engine_kwargs)
    if settings.is_sqlite:
        event.listen(engine.sync_engine, "connect", _enable_sqlite_foreign_keys)

    logger.info("Database engine created", extra={"url": settings.masked_url})
    return Database(engine)


__all__ = ["Database", "create_database"]
