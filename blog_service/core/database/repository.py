"""Minimal generic repository for SQLAlchemy models.

Provides basic CRUD operations with explicit session passing.
For complex queries, use the session directly.

Example:
    class CategoryRepository(BaseRepository[Category]):
        async def get_by_name(self, session: AsyncSession, name: str) -> Category | None:
            return await self.get_by(session, Category.name, name)

    repo = CategoryRepository(Category)
    category = await repo.get_or_raise(session, category_id)
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Generic, TypeVar

from sqlalchemy import select

from blog_service.core.exceptions import NotFoundException
from blog_service.infra.logging import get_lazy_logger

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping, Sequence

    from sqlalchemy.ext.asyncio import AsyncSession
    from sqlalchemy.orm import InstrumentedAttribute


T = TypeVar("T")


class BaseRepository(Generic[T]):
    """Minimal generic repository for CRUD operations.

    Provides:
        - get(session, id) -> T | None
        - get_or_raise(session, id) -> T (raises NotFoundException)
        - get_by(session, attr, value) -> T | None
        - list(session, limit, offset, order_by) -> Sequence[T]
        - create(session, instance) -> T
        - update(session, instance, values) -> T
        - delete(session, instance) -> None

    Session is always explicit. Transactions are committed by the caller.
    """

    __slots__ = ("model", "_logger", "_lazy")

    def __init__(self, model: type[T]) -> None:
        """Initialize repository with model class.

        Args:
            model: SQLAlchemy model class (e.g., Post, Category)
        """
        self.model = model
        self._logger = logging.getLogger(f"repository.{model.__name__}")
        self._lazy = get_lazy_logger(f"repository.{model.__name__}")

    async def get(
        self,
        session: AsyncSession,
        id: Any,  # noqa: A002
        *,
        options: Iterable[Any] | None = None,
    ) -> T | None:
        """Get entity by primary key.

        Args:
            session: Database session
            id: Primary key value
            options: SQLAlchemy loader options (e.g., selectinload)

        Returns:
            Entity if found, None otherwise
        """
        instance = await session.get(self.model, id, options=list(options or ()))

        self._lazy.debug(
            lambda: f"db.get: {self.model.__name__}({id}) -> {'found' if instance else 'not found'}"
        )
        return instance

    async def get_or_raise(
        self,
        session: AsyncSession,
        id: Any,  # noqa: A002
        *,
        options: Iterable[Any] | None = None,
    ) -> T:
        """Get entity by primary key or raise NotFoundException.

        Raises:
            NotFoundException: If entity doesn't exist
        """
        instance = await self.get(session, id, options=options)
        if instance is None:
            self._logger.info(
                "Entity not found",
                extra={
                    "entity": self.model.__name__,
                    "id": str(id),
                    "operation": "db.get_or_raise",
                },
            )
            name = self.model.__name__
            raise NotFoundException(
                detail=f"{name} {id} not found",
                type=f"{name.lower()}-not-found",
                extra={"id": str(id)},
            )
        return instance

    async def get_by(
        self,
        session: AsyncSession,
        attr: InstrumentedAttribute[Any],
        value: Any,
    ) -> T | None:
        """Get entity by arbitrary attribute.

        Example:
            user = await repo.get_by(session, User.email, "jane@example.com")
        """
        result = await session.execute(select(self.model).where(attr == value))
        instance = result.scalars().first()

        self._lazy.debug(
            lambda: f"db.get_by: {self.model.__name__}.{attr.key}={value!r} -> {'found' if instance else 'not found'}"
        )
        return instance

    async def list(
        self,
        session: AsyncSession,
        *,
        limit: int = 100,
        offset: int = 0,
        where: Iterable[Any] = (),
        order_by: Iterable[Any] = (),
    ) -> Sequence[T]:
        """List entities with optional filters, ordering and offset paging.

        Args:
            session: Database session
            limit: Maximum results to return
            offset: Number of results to skip
            where: SQLAlchemy boolean clauses, combined with AND
            order_by: SQLAlchemy ordering clauses
        """
        stmt = select(self.model).where(*where).order_by(*order_by).limit(limit).offset(offset)
        result = await session.execute(stmt)
        items = result.scalars().all()

        self._lazy.debug(
            lambda: f"db.list: {self.model.__name__}(limit={limit}, offset={offset}) -> {len(items)} items"
        )
        return items

    async def create(self, session: AsyncSession, instance: T) -> T:
        """Persist a new entity.

        Adds to session, flushes to get generated values, and refreshes.
        """
        session.add(instance)
        await session.flush()
        await session.refresh(instance)

        entity_id = getattr(instance, "id", None)
        self._lazy.debug(lambda: f"db.create: {self.model.__name__}(id={entity_id})")
        return instance

    async def update(self, session: AsyncSession, instance: T, values: Mapping[str, Any]) -> T:
        """Apply attribute changes to an entity and flush them."""
        for key, value in values.items():
            setattr(instance, key, value)
        await session.flush()
        await session.refresh(instance)

        self._lazy.debug(
            lambda: f"db.update: {self.model.__name__}(id={getattr(instance, 'id', None)}) fields={sorted(values)}"
        )
        return instance

    async def delete(self, session: AsyncSession, instance: T) -> None:
        """Delete an entity."""
        entity_id = getattr(instance, "id", None)
        await session.delete(instance)
        await session.flush()

        self._logger.info(
            "Entity deleted",
            extra={"entity": self.model.__name__, "id": str(entity_id), "operation": "db.delete"},
        )
