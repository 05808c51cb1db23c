"""Categories service layer."""

from __future__ import annotations

from typing import TYPE_CHECKING

from blog_service.core.exceptions import ConflictException
from blog_service.core.models import Category
from blog_service.core.services.base import BaseService
from blog_service.features.categories.repository import (
    CategoryRepository,
    get_category_repository,
)

if TYPE_CHECKING:
    from collections.abc import Sequence
    from uuid import UUID

    from sqlalchemy.ext.asyncio import AsyncSession

    from blog_service.features.categories.schemas import CategoryCreate, CategoryUpdate


class CategoryService(BaseService):
    """Service for managing categories."""

    def __init__(self, repository: CategoryRepository | None = None) -> None:
        super().__init__()
        self.repository = repository or get_category_repository()

    async def _ensure_name_available(
        self,
        session: AsyncSession,
        name: str,
        exclude_id: UUID | None = None,
    ) -> None:
        existing = await self.repository.get_by_name(session, name)
        if existing is not None and existing.id != exclude_id:
            raise ConflictException(
                detail=f"Category {name!r} already exists",
                type="category-exists",
                extra={"field": "name", "value": name},
            )

    async def create_category(self, session: AsyncSession, data: CategoryCreate) -> Category:
        """Create a category.

        Raises:
            ConflictException: If the name is already taken.
        """
        await self._ensure_name_available(session, data.name)
        category = await self.repository.create(
            session, Category(name=data.name, description=data.description),
        )
        self._record("Category created", category_id=category.id)
        return category

    async def get_category(self, session: AsyncSession, category_id: UUID) -> Category:
        """Get a category or raise NotFoundException."""
        return await self.repository.get_or_raise(session, category_id)

    async def list_categories(
        self,
        session: AsyncSession,
        *,
        name: str | None = None,
        limit: int = 100,
        offset: int = 0,
    ) -> Sequence[Category]:
        """List categories, newest first."""
        return await self.repository.list_with_search(
            session, name=name, limit=limit, offset=offset,
        )

    async def update_category(
        self,
        session: AsyncSession,
        category_id: UUID,
        data: CategoryUpdate,
    ) -> Category:
        """Apply a partial update to a category.

        Raises:
            NotFoundException: If the category does not exist.
            ConflictException: If the new name is already taken.
        """
        category = await self.repository.get_or_raise(session, category_id)
        changes = data.model_dump(exclude_unset=True)
        if changes.get("name") is None:
            changes.pop("name", None)
        if "name" in changes and changes["name"] != category.name:
            await self._ensure_name_available(session, changes["name"], exclude_id=category.id)
        if not changes:
            return category
        category = await self.repository.update(session, category, changes)
        self._record("Category updated", category_id=category.id, fields=sorted(changes))
        return category

    async def delete_category(self, session: AsyncSession, category_id: UUID) -> None:
        """Delete a category that has no posts.

        Raises:
            NotFoundException: If the category does not exist.
            ConflictException: If posts are still filed under it.
        """
        category = await self.repository.get_or_raise(session, category_id)
        post_count = await self.repository.count_posts(session, category_id)
        if post_count:
            raise ConflictException(
                detail=f"Category {category.name!r} still has {post_count} post(s)",
                type="category-in-use",
                extra={"category_id": str(category_id), "post_count": post_count},
            )
        await self.repository.delete(session, category)
