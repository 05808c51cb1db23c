"""Modular Pydantic Settings v2 configuration.

Settings are split by domain (app/db/logging/pagination), read from
environment variables or a `.env` file, validated once and cached:

    from blog_service.core.settings import get_pagination_settings

    limit = min(requested, get_pagination_settings().max_limit)

Or use unified settings for convenient access to all domains:

    from blog_service.core.settings import get_settings

    settings = get_settings()
    print(settings.db.database_url)
"""

from __future__ import annotations

from .app import AppSettings
from .database import DatabaseSettings
from .loader import (
    clear_settings_cache,
    get_app_settings,
    get_db_settings,
    get_logging_settings,
    get_pagination_settings,
)
from .logs import LoggingSettings
from .pagination import PaginationSettings
from .unified import Settings, get_settings

__all__ = [
    "AppSettings",
    "DatabaseSettings",
    "LoggingSettings",
    "PaginationSettings",
    "Settings",
    "clear_settings_cache",
    "get_app_settings",
    "get_db_settings",
    "get_logging_settings",
    "get_pagination_settings",
    "get_settings",
]
