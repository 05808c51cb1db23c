"""Application lifespan management.

Startup Order:
1. Core (logging)
2. Database (store handle on ``app.state.database``)

Shutdown Order: Reverse of startup.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

from blog_service.core.settings import get_app_settings, get_db_settings, get_logging_settings
from blog_service.infra.database import Database, create_database
from blog_service.infra.logging.config import setup_logging, shutdown as shutdown_logging

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from fastapi import FastAPI

logger = logging.getLogger(__name__)


# =============================================================================
# Startup functions
# =============================================================================


async def _startup_core() -> None:
    """Configure logging."""
    app = get_app_settings()
    setup_logging(log_settings=get_logging_settings(), force=True)
    logger.info(
        "Application starting",
        extra={"service": app.service_name, "environment": app.environment},
    )


async def _startup_database() -> Database:
    """Create the store handle and, if configured, the tables."""
    db = get_db_settings()
    database = create_database(db)

    try:
        if db.create_tables:
            await database.create_all()
    except Exception:
        logger.exception("Database initialization failed", extra={"url": db.masked_url})
        await database.dispose()
        raise

    logger.info("Database initialized", extra={"url": db.masked_url})
    return database


# =============================================================================
# Shutdown functions
# =============================================================================


async def _shutdown_database(database: Database) -> None:
    """Dispose of pooled connections."""
    try:
        await database.dispose()
    except Exception:
        logger.exception("Error closing database connection")


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Manage application lifecycle.

    Args:
        app: FastAPI application instance.

    Yields:
        None during application runtime.
    """
    await _startup_core()

    database = await _startup_database()
    app.state.database = database

    try:
        yield
    finally:
        logger.info("Application shutting down")
        await _shutdown_database(database)
        app.state.database = None
        shutdown_logging()
