"""Posts API router."""

from __future__ import annotations

import logging
from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from blog_service.core.dependencies import (
    CurrentUserId,
    CursorPagination,
    RequiredUserId,
    get_database,
    get_db_session,
)
from blog_service.core.pagination import CursorPage
from blog_service.features.posts.schemas import (
    PostCreate,
    PostDetailResponse,
    PostFilterSpec,
    PostUpdate,
)
from blog_service.features.posts.service import PostService
from blog_service.infra.database import Database

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/posts", tags=["posts"])


def get_post_service() -> PostService:
    """Get post service dependency."""
    return PostService()


@router.get(
    "",
    response_model=CursorPage[PostDetailResponse],
    summary="List posts",
)
async def list_posts(
    pagination: CursorPagination,
    user_id: CurrentUserId,
    q: Annotated[
        str | None,
        Query(max_length=200, description="Case-insensitive text matched against title or content"),
    ] = None,
    category_id: Annotated[str | None, Query(description="Only posts in this category")] = None,
    owner_id: Annotated[str | None, Query(description="Only posts by this user")] = None,
    mine_only: Annotated[bool, Query(description="Only the caller's posts")] = False,
    tags: Annotated[
        list[str] | None,
        Query(description="Only posts carrying at least one of these tags"),
    ] = None,
    sort_by: Annotated[str, Query(description="created_at, updated_at or title")] = "created_at",
    sort_order: Annotated[str, Query(description="asc or desc")] = "desc",
    database: Database = Depends(get_database),
    service: PostService = Depends(get_post_service),
) -> CursorPage[PostDetailResponse]:
    """List posts with cursor pagination, each with its category and owner.

    Example:
        ```bash
        # First page
        curl "http://localhost:8000/api/v1/posts?q=python&tags=api&limit=20"

        # Next page
        curl "http://localhost:8000/api/v1/posts?q=python&tags=api&limit=20&cursor=eyJmIjoi..."
        ```
    """
    spec = PostFilterSpec(
        text_term=q,
        category_id=category_id,
        owner_id=owner_id,
        mine_only=mine_only,
        tags=tags or [],
        sort_field=sort_by,
        sort_direction=sort_order,
    )
    page = await service.list_posts(
        database,
        spec,
        user_id=user_id,
        cursor=pagination.cursor,
        limit=pagination.limit,
        include_total=pagination.include_total,
    )
    return CursorPage[PostDetailResponse](
        items=[PostDetailResponse.model_validate(post) for post in page.items],
        total=page.total,
        has_more=page.has_more,
        next_cursor=page.next_cursor,
        limit=page.limit,
    )


@router.post(
    "",
    response_model=PostDetailResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create post",
)
async def create_post(
    data: PostCreate,
    user_id: RequiredUserId,
    session: AsyncSession = Depends(get_db_session),
    service: PostService = Depends(get_post_service),
) -> PostDetailResponse:
    """Create a post owned by the caller."""
    post = await service.create_post(session, data, user_id)
    await session.commit()

    post = await service.get_post(session, post.id)
    return PostDetailResponse.model_validate(post)


@router.get(
    "/{post_id}",
    response_model=PostDetailResponse,
    summary="Get post by ID",
)
async def get_post(
    post_id: UUID,
    session: AsyncSession = Depends(get_db_session),
    service: PostService = Depends(get_post_service),
) -> PostDetailResponse:
    """Get a post with its category and owner."""
    post = await service.get_post(session, post_id)
    return PostDetailResponse.model_validate(post)


@router.patch(
    "/{post_id}",
    response_model=PostDetailResponse,
    summary="Update post",
)
async def update_post(
    post_id: UUID,
    data: PostUpdate,
    user_id: RequiredUserId,
    session: AsyncSession = Depends(get_db_session),
    service: PostService = Depends(get_post_service),
) -> PostDetailResponse:
    """Update a post. Only the owner may update it."""
    await service.update_post(session, post_id, data, user_id)
    await session.commit()

    post = await service.get_post(session, post_id)
    return PostDetailResponse.model_validate(post)


@router.delete(
    "/{post_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete post",
)
async def delete_post(
    post_id: UUID,
    user_id: RequiredUserId,
    session: AsyncSession = Depends(get_db_session),
    service: PostService = Depends(get_post_service),
) -> Response:
    """Delete a post. Only the owner may delete it."""
    await service.delete_post(session, post_id, user_id)
    await session.commit()

    logger.info("Post deleted", extra={"post_id": str(post_id), "owner_id": str(user_id)})
    return Response(status_code=status.HTTP_204_NO_CONTENT)
