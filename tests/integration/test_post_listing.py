"""Database tests for cursor-paginated post listings.

Exercises ``PostService.list_posts`` end to end against SQLite: ordering,
tie handling, exhaustion, filters combined with cursors and failures.
"""
from __future__ import annotations

from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING
from uuid import UUID

import pytest

from blog_service.core.exceptions import (
    InvalidCursorException,
    InvalidFilterException,
    StoreUnavailableException,
)
from blog_service.core.settings import PaginationSettings
from blog_service.features.posts.filters import POST_CURSOR_CODEC
from blog_service.features.posts.schemas import PostFilterSpec
from blog_service.features.posts.service import PostService

if TYPE_CHECKING:
    from blog_service.core.models import Post, User
    from blog_service.core.pagination import CursorPage
    from blog_service.infra.database import Database

T = datetime(2025, 1, 15, 12, 0, tzinfo=UTC)

ID_A = UUID("01948f1e-0000-7000-8000-00000000000a")
ID_B = UUID("01948f1e-0000-7000-8000-00000000000b")
ID_C = UUID("01948f1e-0000-7000-8000-00000000000c")


@pytest.fixture
def service() -> PostService:
    return PostService()


async def _collect(
    service: PostService,
    database: Database,
    spec: PostFilterSpec,
    *,
    limit: int,
    user_id: UUID | None = None,
) -> tuple[list[Post], list[CursorPage[Post]]]:
    items: list[Post] = []
    pages: list[CursorPage[Post]] = []
    cursor = None
    while True:
        page = await service.list_posts(
            database, spec, user_id=user_id, cursor=cursor, limit=limit
        )
        pages.append(page)
        items.extend(page.items)
        if not page.has_more:
            return items, pages
        cursor = page.next_cursor


class TestTies:
    """Rows sharing a primary sort value are ordered by id."""

    async def test_identical_timestamps_page_by_id(self, database, service, make_post):
        for post_id in (ID_B, ID_A, ID_C):
            await make_post(id=post_id, created_at=T)

        first = await service.list_posts(database, PostFilterSpec(), limit=2)

        assert [p.id for p in first.items] == [ID_C, ID_B]
        assert first.has_more is True
        assert first.next_cursor is not None
        key = POST_CURSOR_CODEC.decode(first.next_cursor, field="created_at", direction="desc")
        assert key.value == T
        assert key.id == ID_B

        second = await service.list_posts(
            database, PostFilterSpec(), cursor=first.next_cursor, limit=2
        )

        assert [p.id for p in second.items] == [ID_A]
        assert second.has_more is False
        assert second.next_cursor is None

    async def test_ascending_ties(self, database, service, make_post):
        for post_id in (ID_C, ID_A, ID_B):
            await make_post(id=post_id, created_at=T)
        spec = PostFilterSpec(sort_direction="asc")

        items, pages = await _collect(service, database, spec, limit=1)

        assert [p.id for p in items] == [ID_A, ID_B, ID_C]
        assert len(pages) == 3


class TestTraversal:
    """Following next_cursor yields every row exactly once, in order."""

    @pytest.mark.parametrize("limit", [1, 3, 4, 7, 30])
    async def test_exhaustion_without_gaps_or_duplicates(self, database, service, make_post, limit):
        created = []
        for i in range(23):
            created.append(await make_post(title=f"post {i}", created_at=T - timedelta(hours=i % 3)))
        expected = sorted(created, key=lambda p: (p.created_at, p.id), reverse=True)

        items, pages = await _collect(service, database, PostFilterSpec(), limit=limit)

        assert [p.id for p in items] == [p.id for p in expected]
        assert len({p.id for p in items}) == len(created)
        assert all(page.total == 23 for page in pages)
        assert all(len(page.items) <= limit for page in pages)
        assert pages[-1].has_more is False

    async def test_title_ascending(self, database, service, make_post):
        created = []
        for i, title in enumerate(["beta", "alpha", "beta", "gamma", "alpha", "beta"]):
            created.append(await make_post(title=title, created_at=T + timedelta(minutes=i)))
        expected = sorted(created, key=lambda p: (p.title, p.id))
        spec = PostFilterSpec(sort_field="title", sort_direction="asc")

        items, _ = await _collect(service, database, spec, limit=2)

        assert [p.id for p in items] == [p.id for p in expected]

    async def test_long_multibyte_titles_page_past_the_first_page(self, database, service, make_post):
        first = await make_post(title="😀" * 200)
        second = await make_post(title="😁" * 200)
        spec = PostFilterSpec(sort_field="title", sort_direction="asc")

        items, pages = await _collect(service, database, spec, limit=1)

        assert [p.id for p in items] == [first.id, second.id]
        assert len(pages) == 2

    async def test_updated_at_descending(self, database, service, make_post):
        created = []
        for i in range(5):
            created.append(
                await make_post(created_at=T, updated_at=T + timedelta(days=i % 2, minutes=i))
            )
        expected = sorted(created, key=lambda p: (p.updated_at, p.id), reverse=True)
        spec = PostFilterSpec(sort_field="updated_at")

        items, _ = await _collect(service, database, spec, limit=2)

        assert [p.id for p in items] == [p.id for p in expected]

    async def test_first_page_is_idempotent(self, database, service, make_post):
        for i in range(5):
            await make_post(created_at=T - timedelta(minutes=i))

        one = await service.list_posts(database, PostFilterSpec(), limit=3)
        two = await service.list_posts(database, PostFilterSpec(), limit=3)

        assert [p.id for p in one.items] == [p.id for p in two.items]
        assert one.next_cursor == two.next_cursor
        assert one.total == two.total == 5

    async def test_rows_inserted_before_the_cursor_do_not_disturb_later_pages(
        self, database, service, make_post
    ):
        originals = [await make_post(created_at=T - timedelta(minutes=i)) for i in range(4)]
        first = await service.list_posts(database, PostFilterSpec(), limit=2)

        await make_post(created_at=T + timedelta(hours=1))
        second = await service.list_posts(
            database, PostFilterSpec(), cursor=first.next_cursor, limit=2
        )

        seen = [p.id for p in first.items + second.items]
        assert seen == [p.id for p in originals]

    async def test_items_carry_category_and_owner(self, database, service, make_post, user, category):
        await make_post()

        page = await service.list_posts(database, PostFilterSpec())

        post = page.items[0]
        assert post.category.name == category.name
        assert post.owner.email == user.email

    async def test_empty_collection(self, database, service):
        page = await service.list_posts(database, PostFilterSpec())

        assert page.items == []
        assert page.total == 0
        assert page.has_more is False
        assert page.next_cursor is None
        assert page.limit == 10


class TestFilters:
    """Filters combined with cursors."""

    async def test_text_term_with_cursor_excludes_earlier_rows(self, database, service, make_post):
        newest = await make_post(title="Foo fighters", created_at=T)
        await make_post(title="unrelated", content="nothing here", created_at=T - timedelta(minutes=1))
        middle = await make_post(title="plain", content="all about FOO", created_at=T - timedelta(minutes=2))
        oldest = await make_post(title="more foo", created_at=T - timedelta(minutes=3))
        spec = PostFilterSpec(text_term="foo")

        first = await service.list_posts(database, spec, limit=1)
        second = await service.list_posts(database, spec, cursor=first.next_cursor, limit=1)
        third = await service.list_posts(database, spec, cursor=second.next_cursor, limit=1)

        assert [p.id for p in first.items] == [newest.id]
        assert [p.id for p in second.items] == [middle.id]
        assert [p.id for p in third.items] == [oldest.id]
        assert third.has_more is False
        assert first.total == second.total == 3

    async def test_like_wildcards_match_literally(self, database, service, make_post):
        literal = await make_post(title="100% done")
        await make_post(title="100 percent done")

        page = await service.list_posts(database, PostFilterSpec(text_term="0%"))

        assert [p.id for p in page.items] == [literal.id]

    async def test_text_term_with_non_ascii_characters(self, database, service, make_post):
        elan = await make_post(title="Élan Vital", created_at=T)
        await make_post(title="Elan", created_at=T - timedelta(minutes=1))

        page = await service.list_posts(database, PostFilterSpec(text_term="Élan vital"))

        assert [p.id for p in page.items] == [elan.id]

    async def test_tags_match_any(self, database, service, make_post):
        python = await make_post(tags=["python", "api"], created_at=T)
        rust = await make_post(tags=["rust"], created_at=T - timedelta(minutes=1))
        await make_post(tags=["go"], created_at=T - timedelta(minutes=2))
        await make_post(created_at=T - timedelta(minutes=3))

        page = await service.list_posts(database, PostFilterSpec(tags=["rust", "api"]))

        assert [p.id for p in page.items] == [python.id, rust.id]
        assert page.total == 2
        assert sorted(page.items[0].tags) == ["api", "python"]

    async def test_owner_and_mine_only(
        self, database, service, make_post, user: User, other_user: User
    ):
        mine = await make_post(owner_id=user.id)
        theirs = await make_post(owner_id=other_user.id)

        by_owner = await service.list_posts(
            database, PostFilterSpec(owner_id=str(other_user.id))
        )
        own = await service.list_posts(
            database,
            PostFilterSpec(mine_only=True, owner_id=str(other_user.id)),
            user_id=user.id,
        )

        assert [p.id for p in by_owner.items] == [theirs.id]
        assert [p.id for p in own.items] == [mine.id]

    async def test_category_filter(self, database, service, make_post, category):
        from blog_service.core.models import Category

        async with database.session() as session:
            other = Category(name="Travel")
            session.add(other)
            await session.commit()
        await make_post(category_id=category.id)
        travel = await make_post(category_id=other.id)

        page = await service.list_posts(database, PostFilterSpec(category_id=str(other.id)))

        assert [p.id for p in page.items] == [travel.id]


class TestTotals:
    async def test_include_total_false(self, database, service, make_post):
        await make_post()

        page = await service.list_posts(database, PostFilterSpec(), include_total=False)

        assert page.total is None
        assert len(page.items) == 1

    async def test_sequential_count(self, database, make_post):
        service = PostService(pagination_settings=PaginationSettings(concurrent_count=False))
        for i in range(3):
            await make_post(created_at=T - timedelta(minutes=i))

        page = await service.list_posts(database, PostFilterSpec(), limit=2)

        assert page.total == 3
        assert page.has_more is True

    async def test_default_total_follows_settings(self, database, make_post):
        service = PostService(pagination_settings=PaginationSettings(include_total_default=False))
        await make_post()

        page = await service.list_posts(database, PostFilterSpec())

        assert page.total is None


class TestErrors:
    async def test_random_cursor_is_rejected(self, database, service, make_post):
        await make_post()

        with pytest.raises(InvalidCursorException):
            await service.list_posts(database, PostFilterSpec(), cursor="bm90LWEtY3Vyc29y")

    async def test_cursor_from_another_ordering_is_rejected(self, database, service, make_post):
        for i in range(3):
            await make_post(created_at=T - timedelta(minutes=i))
        page = await service.list_posts(database, PostFilterSpec(), limit=1)

        with pytest.raises(InvalidCursorException):
            await service.list_posts(
                database,
                PostFilterSpec(sort_field="title"),
                cursor=page.next_cursor,
                limit=1,
            )

    async def test_limit_above_maximum(self, database, service):
        with pytest.raises(InvalidFilterException):
            await service.list_posts(database, PostFilterSpec(), limit=101)

    @pytest.mark.parametrize("concurrent", [True, False])
    async def test_store_failure_surfaces_as_unavailable(self, database, concurrent):
        service = PostService(pagination_settings=PaginationSettings(concurrent_count=concurrent))
        await database.drop_all()

        with pytest.raises(StoreUnavailableException) as exc_info:
            await service.list_posts(database, PostFilterSpec())

        assert exc_info.value.status_code == 503
        assert exc_info.value.extra["retryable"] is True
