"""Keyset page fetcher.

Combines a filter predicate, a sort spec and an optional cursor into one
bounded query:

    SELECT ... WHERE <filter> AND <boundary>
    ORDER BY <field> <dir>, id <dir>
    LIMIT <limit + 1>

For a descending sort with cursor at ``(v, last_id)`` the boundary is:

    field < v OR (field = v AND id < last_id)

Ascending mirrors it with ``>``. Because ``id`` is unique, ``(field, id)``
is a total order, so rows that stay unchanged between requests are never
skipped or repeated even when many share the same ``field`` value.

The one extra row fetched past ``limit`` tells whether another page
exists. The optional total is a separate count over the filter alone.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any, Generic, TypeVar

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError

from blog_service.core.database.predicates import (
    Predicate,
    SqlPredicateCompiler,
    all_of,
    any_of,
    eq,
    gt,
    lt,
)
from blog_service.core.exceptions import InvalidFilterException, StoreUnavailableException
from blog_service.core.pagination.cursor import CursorCodec, SortDirection, SortKey
from blog_service.core.pagination.schemas import CursorPage
from blog_service.core.settings import PaginationSettings, get_pagination_settings
from blog_service.infra.logging import get_lazy_logger

if TYPE_CHECKING:
    from collections.abc import Sequence

    from sqlalchemy import Select
    from sqlalchemy.sql.base import ExecutableOption

    from blog_service.infra.database import Database


@dataclass(frozen=True, slots=True)
class SortSpec:
    """Primary sort field and direction; ``id`` is always appended."""

    field: str = "created_at"
    direction: SortDirection = "desc"


T = TypeVar("T")


class PageFetcher(Generic[T]):
    """Fetch cursor-paginated pages of one model.

    Args:
        model: Mapped class to select.
        compiler: Compiles predicate trees for ``model``. Must know every
            sortable field plus the tie-breaker field.
        codec: Cursor codec for the sortable fields.
        id_field: Name of the unique tie-breaker field.
        options: Loader options applied to the page query, e.g.
            ``selectinload`` for relationships the caller renders.
        settings: Pagination settings, defaults to the environment.

    Example:
        fetcher = PageFetcher(Post, compiler, codec)
        page = await fetcher.fetch(
            database,
            icontains("title", "foo"),
            SortSpec("created_at", "desc"),
            cursor=request_cursor,
            limit=20,
        )
    """

    def __init__(
        self,
        model: type[T],
        compiler: SqlPredicateCompiler,
        codec: CursorCodec,
        *,
        id_field: str = "id",
        options: Sequence[ExecutableOption] = (),
        settings: PaginationSettings | None = None,
    ) -> None:
        self.model = model
        self.compiler = compiler
        self.codec = codec
        self.id_field = id_field
        self.options = tuple(options)
        self.settings = settings or get_pagination_settings()
        self._logger = get_lazy_logger(__name__, model=getattr(model, "__name__", str(model)))

    def boundary(self, key: SortKey) -> Predicate:
        """Build the predicate selecting rows strictly after ``key``."""
        after = lt if key.direction == "desc" else gt
        return any_of(
            after(key.field, key.value),
            all_of(eq(key.field, key.value), after(self.id_field, key.id)),
        )

    def resolve_limit(self, limit: int | None) -> int:
        """Apply the default page size and enforce the configured bounds.

        Raises:
            InvalidFilterException: If ``limit`` is outside ``1..max_limit``.
        """
        if limit is None:
            return self.settings.default_limit
        if not 1 <= limit <= self.settings.max_limit:
            raise InvalidFilterException(
                field="limit",
                detail=f"limit must be between 1 and {self.settings.max_limit}",
                value=limit,
            )
        return limit

    async def fetch(
        self,
        database: Database,
        predicate: Predicate,
        sort: SortSpec,
        *,
        cursor: str | None = None,
        limit: int | None = None,
        include_total: bool | None = None,
    ) -> CursorPage[T]:
        """Fetch one page.

        Args:
            database: Store handle to read from.
            predicate: Filter predicate (without any cursor boundary).
            sort: Primary sort field and direction.
            cursor: ``next_cursor`` from the previous page, None for the first.
            limit: Page size, defaults to ``default_limit``.
            include_total: Whether to count matching rows, defaults to
                ``include_total_default``.

        Returns:
            The page; ``next_cursor`` is set exactly when ``has_more`` is.

        Raises:
            InvalidCursorException: If ``cursor`` cannot be decoded for ``sort``.
            InvalidFilterException: If ``limit`` is out of bounds.
            StoreUnavailableException: If the store read fails.
        """
        page_size = self.resolve_limit(limit)
        if include_total is None:
            include_total = self.settings.include_total_default

        where = predicate
        if cursor:
            key = self.codec.decode(cursor, field=sort.field, direction=sort.direction)
            where = all_of(predicate, self.boundary(key))

        self._logger.debug(lambda: f"Fetching {page_size} rows WHERE {where} ORDER BY {sort}")

        page_stmt = self._page_statement(where, sort, page_size + 1)
        count_stmt = self._count_statement(predicate) if include_total else None

        rows, total = await self._execute(database, page_stmt, count_stmt)

        has_more = len(rows) > page_size
        items = rows[:page_size]
        next_cursor = self.codec.encode(self._sort_key(items[-1], sort)) if has_more else None

        self._logger.debug(
            lambda: f"Fetched {len(items)} rows, has_more={has_more}, total={total}"
        )
        return CursorPage(
            items=items,
            total=total,
            has_more=has_more,
            next_cursor=next_cursor,
            limit=page_size,
        )

    def _page_statement(self, where: Predicate, sort: SortSpec, limit: int) -> Select[Any]:
        primary = self.compiler.columns[sort.field]
        tie_breaker = self.compiler.columns[self.id_field]
        if sort.direction == "desc":
            order_by = (primary.desc(), tie_breaker.desc())
        else:
            order_by = (primary.asc(), tie_breaker.asc())
        return (
            select(self.model)
            .where(self.compiler.compile(where))
            .order_by(*order_by)
            .limit(limit)
            .options(*self.options)
        )

    def _count_statement(self, predicate: Predicate) -> Select[Any]:
        return select(func.count()).select_from(self.model).where(self.compiler.compile(predicate))

    async def _execute(
        self,
        database: Database,
        page_stmt: Select[Any],
        count_stmt: Select[Any] | None,
    ) -> tuple[list[T], int | None]:
        if count_stmt is None:
            return await self._read_rows(database, page_stmt), None

        if not self.settings.concurrent_count:
            rows = await self._read_rows(database, page_stmt)
            return rows, await self._read_count(database, count_stmt)

        try:
            async with asyncio.TaskGroup() as tg:
                rows_task = tg.create_task(self._read_rows(database, page_stmt))
                count_task = tg.create_task(self._read_count(database, count_stmt))
        except ExceptionGroup as eg:
            raise eg.exceptions[0] from None
        return rows_task.result(), count_task.result()

    async def _read_rows(self, database: Database, stmt: Select[Any]) -> list[T]:
        try:
            async with database.session() as session:
                result = await session.scalars(stmt)
                return list(result.unique().all())
        except SQLAlchemyError as e:
            self._logger.exception("Page read failed")
            raise StoreUnavailableException(operation="fetch_page") from e

    async def _read_count(self, database: Database, stmt: Select[Any]) -> int:
        try:
            async with database.session() as session:
                return int(await session.scalar(stmt) or 0)
        except SQLAlchemyError as e:
            self._logger.exception("Count read failed")
            raise StoreUnavailableException(operation="count") from e

    def _sort_key(self, row: T, sort: SortSpec) -> SortKey:
        value = getattr(row, sort.field)
        if isinstance(value, datetime) and value.tzinfo is None:
            # SQLite drops the offset; stored values are UTC.
            value = value.replace(tzinfo=UTC)
        return SortKey(
            field=sort.field,
            direction=sort.direction,
            value=value,
            id=getattr(row, self.id_field),
        )


__all__ = ["PageFetcher", "SortSpec"]
