"""Reusable cursor pagination dependencies for FastAPI routes.

Usage:
    from blog_service.core.dependencies.pagination import CursorPagination

    @router.get("/posts")
    async def list_posts(pagination: CursorPagination) -> CursorPage[PostDetailResponse]:
        page = await fetcher.fetch(
            database,
            predicate,
            sort,
            cursor=pagination.cursor,
            limit=pagination.limit,
            include_total=pagination.include_total,
        )
"""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends, Query
from pydantic import BaseModel, Field

from blog_service.core.exceptions import InvalidFilterException
from blog_service.core.pagination import MAX_CURSOR_LENGTH
from blog_service.core.settings import get_pagination_settings


class CursorParams(BaseModel):
    """Cursor pagination parameters.

    Attributes:
        cursor: Token from a previous page, None for the first page.
        limit: Page size.
        include_total: Whether to count all matching items.
    """

    cursor: str | None = Field(default=None, description="Continuation token")
    limit: int = Field(ge=1, description="Maximum number of items to return")
    include_total: bool = Field(description="Whether to compute the total count")

    model_config = {"frozen": True}


def get_cursor_pagination(
    cursor: Annotated[
        str | None,
        Query(
            max_length=MAX_CURSOR_LENGTH,
            description="Opaque cursor returned as next_cursor by the previous page",
        ),
    ] = None,
    limit: Annotated[
        int | None,
        Query(ge=1, description="Maximum number of items to return"),
    ] = None,
    include_total: Annotated[
        bool | None,
        Query(description="Count all items matching the filters"),
    ] = None,
) -> CursorParams:
    """Get cursor pagination parameters.

    Applies the configured defaults and enforces the configured maximum.

    Raises:
        InvalidFilterException: If ``limit`` exceeds the configured maximum.
    """
    settings = get_pagination_settings()
    if limit is None:
        limit = settings.default_limit
    elif limit > settings.max_limit:
        raise InvalidFilterException(
            field="limit",
            detail=f"limit must be between 1 and {settings.max_limit}",
            value=limit,
        )
    if include_total is None:
        include_total = settings.include_total_default
    return CursorParams(cursor=cursor or None, limit=limit, include_total=include_total)


CursorPagination = Annotated[CursorParams, Depends(get_cursor_pagination)]
