"""Post listing commands."""

from __future__ import annotations

import asyncio
from uuid import UUID

import click

from blog_service.cli.utils import error, header, info, post_line
from blog_service.core.exceptions import AppException
from blog_service.core.pagination import CursorPage
from blog_service.features.posts.schemas import PostFilterSpec
from blog_service.features.posts.service import PostService
from blog_service.infra.database import create_database


@click.group()
def posts() -> None:
    """Post commands."""


@posts.command(name="list")
@click.option("--q", "text_term", default=None, help="Text matched against title or content")
@click.option("--category-id", default=None, help="Only posts in this category")
@click.option("--owner-id", default=None, help="Only posts by this user")
@click.option("--tag", "tags", multiple=True, help="Tag filter (repeatable, match-any)")
@click.option(
    "--sort-by",
    default="created_at",
    show_default=True,
    type=click.Choice(["created_at", "updated_at", "title"]),
)
@click.option("--order", default="desc", show_default=True, type=click.Choice(["asc", "desc"]))
@click.option("--limit", default=10, show_default=True, type=click.IntRange(min=1))
@click.option("--cursor", default=None, help="Cursor from a previous page")
@click.option("--all", "all_pages", is_flag=True, help="Follow cursors until exhausted")
@click.option("--as-user", default=None, type=UUID, help="Caller identity")
def list_posts(
    text_term: str | None,
    category_id: str | None,
    owner_id: str | None,
    tags: tuple[str, ...],
    sort_by: str,
    order: str,
    limit: int,
    cursor: str | None,
    all_pages: bool,
    as_user: UUID | None,
) -> None:
    """List posts page by page.

    Example:
        blog-service posts list --tag coding --limit 5 --all
    """
    spec = PostFilterSpec(
        text_term=text_term,
        category_id=category_id,
        owner_id=owner_id,
        tags=list(tags),
        sort_field=sort_by,
        sort_direction=order,
    )

    async def _list() -> None:
        database = create_database()
        service = PostService()
        next_cursor = cursor
        page_number = 1
        try:
            while True:
                page: CursorPage = await service.list_posts(
                    database,
                    spec,
                    user_id=as_user,
                    cursor=next_cursor,
                    limit=limit,
                    include_total=page_number == 1,
                )
                if page_number == 1 and page.total is not None:
                    info(f"{page.total} matching posts")
                header(f"Page {page_number}")
                for post in page.items:
                    click.echo(post_line(post))
                if not page.has_more:
                    break
                if not all_pages:
                    info(f"Next cursor: {page.next_cursor}")
                    break
                next_cursor = page.next_cursor
                page_number += 1
        finally:
            await database.dispose()

    try:
        asyncio.run(_list())
    except AppException as e:
        error(e.detail)
        raise click.Abort() from e
