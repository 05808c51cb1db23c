"""Sample data seeding.

Creates categories, users and posts with random tags and creation times
spread over the past year.
"""

from __future__ import annotations

import asyncio
import random
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING

import click
from sqlalchemy import func, select

from blog_service.cli.utils import error, info, success
from blog_service.core.models import Category, Post, User
from blog_service.infra.database import create_database

if TYPE_CHECKING:
    from blog_service.infra.database import Database

CATEGORY_NAMES = ("Technology", "Lifestyle", "Business", "Travel", "Health")
TAG_POOL = (
    "tech",
    "life",
    "business",
    "travel",
    "health",
    "news",
    "coding",
    "startup",
    "remote",
    "productivity",
)
FIRST_NAMES = ("Ada", "Grace", "Alan", "Linus", "Barbara", "Ken", "Margaret", "Dennis")
LAST_NAMES = ("Lovelace", "Hopper", "Turing", "Torvalds", "Liskov", "Thompson", "Hamilton")
WORDS = (
    "cursor", "page", "query", "index", "stream", "cache", "request", "schema",
    "latency", "release", "team", "design", "review", "deploy", "metric", "budget",
)


@dataclass(slots=True, frozen=True)
class SeedSummary:
    """Rows created by ``seed_database``."""

    categories: int
    users: int
    posts: int


def _sentence(rng: random.Random, words: int) -> str:
    text = " ".join(rng.choice(WORDS) for _ in range(words))
    return text.capitalize() + "."


async def seed_database(
    database: Database,
    *,
    users: int = 5,
    posts: int = 20,
    seed: int | None = None,
) -> SeedSummary:
    """Insert sample data.

    Categories are only created when none exist. Users get unique
    ``@example.com`` addresses; posts are spread across random categories
    and owners with 1-3 tags each.
    """
    rng = random.Random(seed)
    now = datetime.now(UTC)

    async with database.session() as session:
        category_count = (await session.execute(select(func.count()).select_from(Category))).scalar_one()
        created_categories = 0
        if not category_count:
            session.add_all(Category(name=name) for name in CATEGORY_NAMES)
            created_categories = len(CATEGORY_NAMES)
            await session.flush()

        categories = list((await session.execute(select(Category))).scalars().all())

        user_rows = []
        for _ in range(users):
            first, last = rng.choice(FIRST_NAMES), rng.choice(LAST_NAMES)
            suffix = rng.getrandbits(32)
            user_rows.append(
                User(
                    email=f"{first}.{last}.{suffix:08x}@example.com".lower(),
                    first_name=first,
                    last_name=last,
                )
            )
        session.add_all(user_rows)
        await session.flush()

        owners = user_rows or list((await session.execute(select(User).limit(50))).scalars().all())
        if posts and not owners:
            raise click.UsageError("No users to own posts; seed at least one user")

        for _ in range(posts):
            created_at = now - timedelta(seconds=rng.randint(0, 365 * 24 * 3600))
            session.add(
                Post(
                    title=_sentence(rng, rng.randint(3, 7)),
                    content="\n\n".join(_sentence(rng, rng.randint(12, 24)) for _ in range(2)),
                    category_id=rng.choice(categories).id,
                    owner_id=rng.choice(owners).id,
                    tags=rng.sample(TAG_POOL, rng.randint(1, 3)),
                    created_at=created_at,
                    updated_at=now,
                )
            )
        await session.commit()

    return SeedSummary(categories=created_categories, users=len(user_rows), posts=posts)


@click.command()
@click.option("--users", default=5, show_default=True, type=click.IntRange(min=0), help="Users to create")
@click.option("--posts", default=20, show_default=True, type=click.IntRange(min=0), help="Posts to create")
@click.option("--seed", default=None, type=int, help="Random seed for reproducible data")
def seed(users: int, posts: int, seed: int | None) -> None:
    """Seed the database with sample categories, users and posts.

    Example:
        blog-service seed --users 5 --posts 200
    """
    info("Seeding database...")

    async def _seed() -> SeedSummary:
        database = create_database()
        try:
            await database.create_all()
            return await seed_database(database, users=users, posts=posts, seed=seed)
        finally:
            await database.dispose()

    try:
        summary = asyncio.run(_seed())
    except click.ClickException:
        raise
    except Exception as e:
        error(f"Seeding failed: {e}")
        raise click.Abort() from e

    success(
        f"Seeded {summary.categories} categories, {summary.users} users, {summary.posts} posts"
    )
