"""Repository for the posts feature."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import select
from sqlalchemy.orm import selectinload

from blog_service.core.database.repository import BaseRepository
from blog_service.core.models import Post

if TYPE_CHECKING:
    from uuid import UUID

    from sqlalchemy.ext.asyncio import AsyncSession


class PostRepository(BaseRepository[Post]):
    """Repository for Post model.

    Listing goes through ``PageFetcher``; this class covers single-post
    reads and writes.
    """

    def __init__(self) -> None:
        """Initialize with Post model."""
        super().__init__(Post)

    async def get_with_details(self, session: AsyncSession, post_id: UUID) -> Post | None:
        """Get a post with its category and owner loaded."""
        stmt = (
            select(Post)
            .where(Post.id == post_id)
            .options(selectinload(Post.category), selectinload(Post.owner))
            .execution_options(populate_existing=True)
        )
        post = (await session.execute(stmt)).scalar_one_or_none()

        self._lazy.debug(lambda: f"db.get_with_details({post_id}) -> {post is not None}")
        return post

    async def get_owned(
        self,
        session: AsyncSession,
        post_id: UUID,
        owner_id: UUID,
    ) -> Post | None:
        """Get a post only if ``owner_id`` owns it."""
        stmt = select(Post).where(Post.id == post_id, Post.owner_id == owner_id)
        post = (await session.execute(stmt)).scalar_one_or_none()

        self._lazy.debug(
            lambda: f"db.get_owned({post_id}, owner={owner_id}) -> {post is not None}"
        )
        return post


_post_repository: PostRepository | None = None


def get_post_repository() -> PostRepository:
    """Get PostRepository instance."""
    global _post_repository
    if _post_repository is None:
        _post_repository = PostRepository()
    return _post_repository
