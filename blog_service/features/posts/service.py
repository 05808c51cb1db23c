"""Posts service layer."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import TYPE_CHECKING

from sqlalchemy.orm import selectinload

from blog_service.core.exceptions import NotFoundException, UnauthorizedException
from blog_service.core.models import Category, Post, User
from blog_service.core.pagination import CursorPage, PageFetcher
from blog_service.core.services.base import BaseService
from blog_service.features.posts.filters import (
    POST_CURSOR_CODEC,
    POST_PREDICATE_COMPILER,
    compile_post_filter,
)
from blog_service.features.posts.repository import PostRepository, get_post_repository

if TYPE_CHECKING:
    from uuid import UUID

    from sqlalchemy.ext.asyncio import AsyncSession

    from blog_service.core.settings import PaginationSettings
    from blog_service.features.posts.schemas import PostCreate, PostFilterSpec, PostUpdate
    from blog_service.infra.database import Database


class PostService(BaseService):
    """Service for managing posts and listing them with cursor pagination."""

    def __init__(
        self,
        repository: PostRepository | None = None,
        *,
        pagination_settings: PaginationSettings | None = None,
    ) -> None:
        super().__init__()
        self.repository = repository or get_post_repository()
        self.fetcher = PageFetcher(
            Post,
            POST_PREDICATE_COMPILER,
            POST_CURSOR_CODEC,
            options=(selectinload(Post.category), selectinload(Post.owner)),
            settings=pagination_settings,
        )

    async def list_posts(
        self,
        database: Database,
        spec: PostFilterSpec,
        *,
        user_id: UUID | None = None,
        cursor: str | None = None,
        limit: int | None = None,
        include_total: bool | None = None,
    ) -> CursorPage[Post]:
        """List posts matching ``spec``, one page at a time.

        Args:
            database: Store handle; count and page reads use their own sessions.
            spec: Filters and ordering.
            user_id: Verified caller id (needed for ``mine_only``).
            cursor: ``next_cursor`` of the previous page.
            limit: Page size.
            include_total: Whether to count all matching posts.

        Returns:
            Page of posts with category and owner loaded. Items never repeat across pages of the same query
            while they stay unchanged.

        Raises:
            InvalidFilterException: If ``spec`` or ``limit`` is invalid.
            InvalidCursorException: If ``cursor`` is malformed or was issued
                for a different ordering.
            StoreUnavailableException: If the database read fails.
        """
        predicate, sort = compile_post_filter(spec, user_id)
        page = await self.fetcher.fetch(
            database,
            predicate,
            sort,
            cursor=cursor,
            limit=limit,
            include_total=include_total,
        )
        self._lazy.debug(
            lambda: f"list_posts({predicate}) -> {len(page.items)} items, has_more={page.has_more}"
        )
        return page

    async def _ensure_category(self, session: AsyncSession, category_id: UUID) -> None:
        if await session.get(Category, category_id) is None:
            raise NotFoundException(
                detail=f"Category {category_id} not found",
                type="category-not-found",
                extra={"category_id": str(category_id)},
            )

    async def create_post(self, session: AsyncSession, data: PostCreate, owner_id: UUID) -> Post:
        """Create a post owned by ``owner_id``.

        Raises:
            UnauthorizedException: If the caller has no user profile.
            NotFoundException: If the category does not exist.
        """
        if await session.get(User, owner_id) is None:
            raise UnauthorizedException(detail="Unknown user", type="unknown-user")
        await self._ensure_category(session, data.category_id)

        post = await self.repository.create(
            session,
            Post(
                title=data.title,
                content=data.content,
                category_id=data.category_id,
                owner_id=owner_id,
                tags=data.tags,
            ),
        )
        self._record("Post created", post_id=post.id, owner_id=owner_id)
        return post

    async def get_post(self, session: AsyncSession, post_id: UUID) -> Post:
        """Get a post with its category and owner.

        Raises:
            NotFoundException: If the post does not exist.
        """
        post = await self.repository.get_with_details(session, post_id)
        if post is None:
            raise NotFoundException(
                detail=f"Post {post_id} not found",
                type="post-not-found",
                extra={"post_id": str(post_id)},
            )
        return post

    async def _get_owned_or_raise(
        self, session: AsyncSession, post_id: UUID, owner_id: UUID
    ) -> Post:
        post = await self.repository.get_owned(session, post_id, owner_id)
        if post is None:
            # Posts owned by someone else are reported as missing.
            raise NotFoundException(
                detail=f"Post {post_id} not found",
                type="post-not-found",
                extra={"post_id": str(post_id)},
            )
        return post

    async def update_post(
        self,
        session: AsyncSession,
        post_id: UUID,
        data: PostUpdate,
        owner_id: UUID,
    ) -> Post:
        """Apply a partial update to a post owned by ``owner_id``.

        Raises:
            NotFoundException: If the post does not exist, is not owned by
                the caller, or the new category does not exist.
        """
        post = await self._get_owned_or_raise(session, post_id, owner_id)
        changes = {k: v for k, v in data.model_dump(exclude_unset=True).items() if v is not None}
        if not changes:
            return post

        if "category_id" in changes and changes["category_id"] != post.category_id:
            await self._ensure_category(session, changes["category_id"])

        changes["updated_at"] = datetime.now(UTC)
        post = await self.repository.update(session, post, changes)
        self._record("Post updated", post_id=post_id, fields=sorted(changes))
        return post

    async def delete_post(self, session: AsyncSession, post_id: UUID, owner_id: UUID) -> None:
        """Delete a post owned by ``owner_id``.

        Raises:
            NotFoundException: If the post does not exist or is not owned by the caller.
        """
        post = await self._get_owned_or_raise(session, post_id, owner_id)
        await self.repository.delete(session, post)
        self._record("Post deleted", post_id=post_id)
