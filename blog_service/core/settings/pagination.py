"""Pagination settings for API responses.

Environment variables use PAGINATION_ prefix.
Example: PAGINATION_DEFAULT_LIMIT=10, PAGINATION_MAX_LIMIT=100
"""

from __future__ import annotations

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class PaginationSettings(BaseSettings):
    """Cursor pagination configuration settings.

    Attributes:
        default_limit: Page size when the client does not send one.
        max_limit: Maximum allowed page size (hard limit).
        include_total_default: Whether listings count the filtered total
            unless the client opts out.
        concurrent_count: Issue the total count and the page read
            concurrently on separate sessions.
    """

    default_limit: int = Field(
        default=10,
        ge=1,
        le=1000,
        description="Default page size when limit not specified",
    )
    max_limit: int = Field(
        default=100,
        ge=1,
        le=10000,
        description="Maximum allowed page size (hard limit)",
    )
    include_total_default: bool = Field(
        default=True,
        description="Compute the total count unless the request opts out",
    )
    concurrent_count: bool = Field(
        default=True,
        description="Run the count and page queries concurrently",
    )

    model_config = SettingsConfigDict(
        env_prefix="PAGINATION_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        frozen=True,
        extra="ignore",
    )

    @model_validator(mode="after")
    def _default_within_max(self) -> PaginationSettings:
        if self.default_limit > self.max_limit:
            raise ValueError("default_limit must not exceed max_limit")
        return self
