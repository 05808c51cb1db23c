"""Console output for the blog-service commands.

Status lines go through ``click.secho`` with a colored marker; failures are
written to stderr so that ``posts list`` output stays pipeable.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

if TYPE_CHECKING:
    from blog_service.core.models import Post


def success(message: str) -> None:
    """Report a completed database or seeding step."""
    click.secho(f"✓ {message}", fg="green")


def error(message: str) -> None:
    """Report a failed command on stderr."""
    click.secho(f"✗ {message}", fg="red", err=True)


def warning(message: str) -> None:
    click.secho(f"⚠ {message}", fg="yellow")


def info(message: str) -> None:
    click.secho(f"ℹ {message}", fg="blue")


def header(message: str) -> None:
    """Section heading, e.g. one per listing page."""
    click.secho(f"\n{message}", fg="cyan", bold=True)


def post_line(post: Post) -> str:
    """One listing row: id, creation time, title, category, author and tags."""
    stamp = post.created_at.strftime("%Y-%m-%d %H:%M")
    author = f"{post.owner.first_name} {post.owner.last_name}"
    tags = ", ".join(post.tags)
    return f"{post.id}  {stamp}  {post.title}  ({post.category.name}, {author})  [{tags}]"
