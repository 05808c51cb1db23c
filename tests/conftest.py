"""Pytest configuration and shared fixtures.

Organization:
    - Application Fixtures: FastAPI app and HTTP client
    - Database Fixtures: file-backed SQLite store handle per test
    - Data Fixtures: factories for users, categories and posts

Every test gets its own SQLite file under ``tmp_path`` so the page
fetcher can open several sessions (count and page reads) against the
same data.
"""

from __future__ import annotations

import os
from collections.abc import AsyncGenerator, Awaitable, Callable, Iterable
from datetime import datetime
from typing import TYPE_CHECKING, Any
from uuid import UUID

import pytest
from httpx import ASGITransport, AsyncClient

if TYPE_CHECKING:
    from pathlib import Path

    from fastapi import FastAPI

    from blog_service.core.models import Category, Post, User
    from blog_service.infra.database import Database

# Ensure tests run without external infrastructure
os.environ.setdefault("APP_ENVIRONMENT", "test")
os.environ.setdefault("APP_ROOT_PATH", "")
os.environ.setdefault("DB_DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("LOG_JSON_LOGS", "false")
os.environ.setdefault("LOG_FILE_ENABLED", "false")


@pytest.fixture(autouse=True)
def _fresh_settings() -> Iterable[None]:
    """Drop cached settings so env overrides made by a test take effect."""
    from blog_service.core.settings import clear_settings_cache

    clear_settings_cache()
    yield
    clear_settings_cache()


# ============================================================================
# Database Fixtures
# ============================================================================


@pytest.fixture
async def database(tmp_path: Path) -> AsyncGenerator[Database]:
    """Create a store handle over a fresh SQLite file with all tables.

    Yields:
        Database with tables created; disposed after the test.
    """
    from blog_service.core.settings import DatabaseSettings
    from blog_service.infra.database import create_database

    settings = DatabaseSettings(database_url=f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    db = create_database(settings)
    await db.create_all()
    try:
        yield db
    finally:
        await db.dispose()


# ============================================================================
# Application Fixtures
# ============================================================================


@pytest.fixture
async def app(database: Database) -> FastAPI:
    """Create FastAPI application bound to the test database.

    ASGITransport does not run the lifespan, so the store handle is
    attached to ``app.state`` directly.
    """
    from blog_service.app.main import create_app

    application = create_app()
    application.state.database = database
    return application


@pytest.fixture
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient]:
    """Create async HTTP client for testing.

    Example:
        async def test_health_check(client):
            response = await client.get("/api/v1/health")
            assert response.status_code == 200
    """
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


# ============================================================================
# Data Fixtures
# ============================================================================


@pytest.fixture
async def user(database: Database) -> User:
    """A persisted user."""
    from blog_service.core.models import User

    async with database.session() as session:
        row = User(email="ada@example.com", first_name="Ada", last_name="Lovelace")
        session.add(row)
        await session.commit()
    return row


@pytest.fixture
async def other_user(database: Database) -> User:
    """A second persisted user."""
    from blog_service.core.models import User

    async with database.session() as session:
        row = User(email="grace@example.com", first_name="Grace", last_name="Hopper")
        session.add(row)
        await session.commit()
    return row


@pytest.fixture
async def category(database: Database) -> Category:
    """A persisted category."""
    from blog_service.core.models import Category

    async with database.session() as session:
        row = Category(name="Technology", description="Software and hardware")
        session.add(row)
        await session.commit()
    return row


PostFactory = Callable[..., Awaitable["Post"]]


@pytest.fixture
def make_post(database: Database, user: User, category: Category) -> PostFactory:
    """Factory persisting posts with sensible defaults.

    Example:
        post = await make_post(title="Hello", created_at=T, tags=["news"])
    """
    from blog_service.core.models import Post

    async def _make(
        *,
        title: str = "A post",
        content: str = "Body text",
        created_at: datetime | None = None,
        updated_at: datetime | None = None,
        id: UUID | None = None,  # noqa: A002
        owner_id: UUID | None = None,
        category_id: UUID | None = None,
        tags: Iterable[str] = (),
    ) -> Post:
        values: dict[str, Any] = {
            "title": title,
            "content": content,
            "owner_id": owner_id or user.id,
            "category_id": category_id or category.id,
            "tags": list(tags),
        }
        if created_at is not None:
            values["created_at"] = created_at
            values["updated_at"] = updated_at or created_at
        elif updated_at is not None:
            values["updated_at"] = updated_at
        if id is not None:
            values["id"] = id

        async with database.session() as session:
            post = Post(**values)
            session.add(post)
            await session.commit()
        return post

    return _make
