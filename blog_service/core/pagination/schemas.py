"""Pagination response schema for cursor-based pagination."""

from __future__ import annotations

from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field, model_validator

T = TypeVar("T")


class CursorPage(BaseModel, Generic[T]):
    """One page of a cursor-paginated listing.

    Usage:
        @router.get("/posts", response_model=CursorPage[PostDetailResponse])
        async def list_posts(...) -> CursorPage[PostDetailResponse]:
            ...

    Client navigation:
        # First page
        GET /posts?limit=10

        # Next page (using next_cursor from the previous response)
        GET /posts?limit=10&cursor=eyJmIjoiY3JlYXRlZF9hdCIs...

    Attributes:
        items: Items in sort order
        total: Count of items matching the filters, ignoring the cursor
        has_more: Whether another page exists after this one
        next_cursor: Cursor for the next page (present iff has_more)
        limit: Page size that was applied
    """

    items: list[T] = Field(default_factory=list, description="Items in this page")
    total: int | None = Field(
        default=None,
        ge=0,
        description="Items matching the filters (null when not requested)",
    )
    has_more: bool = Field(default=False, description="Whether more items exist")
    next_cursor: str | None = Field(
        default=None,
        description="Cursor for fetching the next page",
    )
    limit: int = Field(ge=1, description="Applied page size")

    model_config = ConfigDict(arbitrary_types_allowed=True)

    @model_validator(mode="after")
    def _cursor_matches_has_more(self) -> CursorPage[T]:
        if self.has_more != (self.next_cursor is not None):
            raise ValueError("next_cursor must be present exactly when has_more is true")
        return self


__all__ = ["CursorPage"]
