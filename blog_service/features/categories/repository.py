"""Repository for the categories feature."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import func, select

from blog_service.core.database.predicates import SqlPredicateCompiler, icontains
from blog_service.core.database.repository import BaseRepository
from blog_service.core.models import Category, Post

if TYPE_CHECKING:
    from collections.abc import Sequence
    from uuid import UUID

    from sqlalchemy.ext.asyncio import AsyncSession

_CATEGORY_COMPILER = SqlPredicateCompiler(columns={"name": Category.name})


class CategoryRepository(BaseRepository[Category]):
    """Repository for Category model.

    Inherits from BaseRepository:
        - get / get_or_raise / get_by
        - list / create / update / delete
    """

    def __init__(self) -> None:
        """Initialize with Category model."""
        super().__init__(Category)

    async def get_by_name(self, session: AsyncSession, name: str) -> Category | None:
        """Get a category by its exact name."""
        return await self.get_by(session, Category.name, name)

    async def list_with_search(
        self,
        session: AsyncSession,
        *,
        name: str | None = None,
        limit: int = 100,
        offset: int = 0,
    ) -> Sequence[Category]:
        """List categories, newest first, optionally filtered by name substring.

        Args:
            session: Database session
            name: Case-insensitive substring of the category name
            limit: Maximum results to return
            offset: Number of results to skip
        """
        where = [_CATEGORY_COMPILER.compile(icontains("name", name))] if name else []
        return await self.list(
            session,
            limit=limit,
            offset=offset,
            where=where,
            order_by=(Category.created_at.desc(), Category.id.desc()),
        )

    async def count_posts(self, session: AsyncSession, category_id: UUID) -> int:
        """Count posts filed under a category."""
        stmt = select(func.count()).select_from(Post).where(Post.category_id == category_id)
        count = (await session.execute(stmt)).scalar_one()

        self._lazy.debug(lambda: f"db.count_posts({category_id}) -> {count}")
        return count


_category_repository: CategoryRepository | None = None


def get_category_repository() -> CategoryRepository:
    """Get CategoryRepository instance."""
    global _category_repository
    if _category_repository is None:
        _category_repository = CategoryRepository()
    return _category_repository
