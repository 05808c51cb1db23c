"""Tests for the blog-service CLI.

Commands run through Click's CliRunner against a throwaway SQLite file
selected with ``DB_DATABASE_URL``.
"""
from __future__ import annotations

from datetime import UTC, datetime, timedelta

import pytest
from click.testing import CliRunner
from sqlalchemy import func, select

from blog_service.cli.commands.seed import CATEGORY_NAMES, TAG_POOL, seed_database
from blog_service.cli.main import cli
from blog_service.core.models import Category, Post, User
from blog_service.core.settings import clear_settings_cache


@pytest.fixture
def cli_runner() -> CliRunner:
    """Create Click CLI runner for testing commands."""
    return CliRunner()


@pytest.fixture
def db_url(tmp_path, monkeypatch: pytest.MonkeyPatch) -> str:
    """Point the CLI at a fresh SQLite file."""
    url = f"sqlite+aiosqlite:///{tmp_path / 'cli.db'}"
    monkeypatch.setenv("DB_DATABASE_URL", url)
    clear_settings_cache()
    return url


class TestSeedDatabase:
    async def test_seed_creates_rows(self, database):
        summary = await seed_database(database, users=3, posts=12, seed=7)

        assert summary.categories == len(CATEGORY_NAMES)
        assert summary.users == 3
        assert summary.posts == 12

        now = datetime.now(UTC)
        async with database.session() as session:
            posts = (await session.execute(select(Post))).scalars().all()
            users = (await session.execute(select(func.count()).select_from(User))).scalar_one()

        assert users == 3
        assert len(posts) == 12
        for post in posts:
            assert 1 <= len(post.tags) <= 3
            assert set(post.tags) <= set(TAG_POOL)
            created = post.created_at.replace(tzinfo=UTC)
            assert now - timedelta(days=366) <= created <= now

    async def test_categories_are_seeded_once(self, database):
        await seed_database(database, users=1, posts=1, seed=1)
        second = await seed_database(database, users=1, posts=1, seed=2)

        async with database.session() as session:
            count = (await session.execute(select(func.count()).select_from(Category))).scalar_one()

        assert second.categories == 0
        assert count == len(CATEGORY_NAMES)

    async def test_existing_users_own_posts_when_none_are_created(self, database, user):
        summary = await seed_database(database, users=0, posts=4, seed=3)

        async with database.session() as session:
            owners = set((await session.execute(select(Post.owner_id))).scalars().all())

        assert summary.users == 0
        assert owners == {user.id}


class TestCommands:
    def test_help(self, cli_runner: CliRunner):
        result = cli_runner.invoke(cli, ["--help"])

        assert result.exit_code == 0
        for command in ("db", "seed", "posts", "serve"):
            assert command in result.output

    def test_version(self, cli_runner: CliRunner):
        result = cli_runner.invoke(cli, ["--version"])

        assert result.exit_code == 0
        assert "blog-service" in result.output

    def test_init_seed_and_list(self, cli_runner: CliRunner, db_url: str):
        init = cli_runner.invoke(cli, ["db", "init"])
        assert init.exit_code == 0, init.output
        assert "Database tables created" in init.output

        seeded = cli_runner.invoke(cli, ["seed", "--users", "2", "--posts", "5", "--seed", "11"])
        assert seeded.exit_code == 0, seeded.output
        assert "Seeded 5 categories, 2 users, 5 posts" in seeded.output

        listed = cli_runner.invoke(cli, ["posts", "list", "--limit", "2", "--all"])
        assert listed.exit_code == 0, listed.output
        assert "5 matching posts" in listed.output
        assert "Page 3" in listed.output
        assert any(f"({name}, " in listed.output for name in CATEGORY_NAMES)

    def test_list_with_bad_owner_aborts(self, cli_runner: CliRunner, db_url: str):
        cli_runner.invoke(cli, ["db", "init"])

        result = cli_runner.invoke(cli, ["posts", "list", "--owner-id", "nope"])

        assert result.exit_code != 0
        assert "owner_id must be a valid UUID" in result.output

    def test_drop_requires_confirmation(self, cli_runner: CliRunner, db_url: str):
        result = cli_runner.invoke(cli, ["db", "drop"], input="n\n")

        assert result.exit_code == 0
        assert "Aborted" in result.output

    def test_check(self, cli_runner: CliRunner, db_url: str):
        result = cli_runner.invoke(cli, ["db", "check"])

        assert result.exit_code == 0
