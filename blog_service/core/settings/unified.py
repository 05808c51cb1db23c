"""Unified settings composition for convenient access.

Usage:
    from blog_service.core.settings import get_settings

    settings = get_settings()
    print(settings.app.api_prefix)
    print(settings.pagination.max_limit)

Each nested settings class still loads from its own environment prefix
(APP_, DB_, LOG_, PAGINATION_).
"""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from .app import AppSettings
from .database import DatabaseSettings
from .logs import LoggingSettings
from .pagination import PaginationSettings


class Settings(BaseSettings):
    """Unified settings composing all domain settings.

    Example:
        settings = Settings()
        assert settings.app.debug is False
        assert settings.pagination.default_limit == 10
    """

    model_config = SettingsConfigDict(
        frozen=True,
        extra="ignore",
    )

    app: AppSettings = Field(default_factory=AppSettings)
    db: DatabaseSettings = Field(default_factory=DatabaseSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    pagination: PaginationSettings = Field(default_factory=PaginationSettings)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get unified settings instance (cached).

    Returns:
        Settings: Unified settings with all domain configurations.
    """
    return Settings()
