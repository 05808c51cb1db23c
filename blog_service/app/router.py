"""Router registry and setup."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from blog_service.core.settings import get_app_settings
from blog_service.features.categories.router import router as categories_router
from blog_service.features.health.router import router as health_router
from blog_service.features.posts.router import router as posts_router
from blog_service.features.users.router import router as users_router

if TYPE_CHECKING:
    from fastapi import FastAPI

    from blog_service.core.settings.app import AppSettings

logger = logging.getLogger(__name__)


def setup_routers(app: FastAPI, app_settings: AppSettings | None = None) -> None:
    """Register all feature routers with the application.

    Args:
        app: FastAPI application instance.
        app_settings: Optional application settings override for the API prefix.
    """
    app_settings = app_settings or get_app_settings()
    api_prefix = app_settings.api_prefix

    app.include_router(posts_router, prefix=api_prefix)
    app.include_router(categories_router, prefix=api_prefix)
    app.include_router(users_router, prefix=api_prefix)
    app.include_router(health_router, prefix=api_prefix)

    logger.info("Routers registered", extra={"api_prefix": api_prefix})
