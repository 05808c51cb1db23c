"""Database management commands."""

from __future__ import annotations

import asyncio

import click

from blog_service.cli.utils import error, info, success, warning
from blog_service.core.settings import get_db_settings
from blog_service.infra.database import create_database


@click.group()
def db() -> None:
    """Database management commands."""


@db.command()
def init() -> None:
    """Initialize database (create all tables).

    Example:
        blog-service db init
    """
    info(f"Initializing database at {get_db_settings().masked_url}...")

    async def _init() -> None:
        database = create_database()
        try:
            await database.create_all()
        finally:
            await database.dispose()

    try:
        asyncio.run(_init())
    except Exception as e:
        error(f"Failed to initialize database: {e}")
        raise click.Abort() from e
    success("Database tables created successfully")


@db.command()
@click.option("--yes", "-y", is_flag=True, help="Skip confirmation prompt")
def drop(yes: bool) -> None:
    """Drop all database tables.

    WARNING: This will delete all data!

    Example:
        blog-service db drop --yes
    """
    if not yes and not click.confirm("This will DELETE ALL DATA. Continue?"):
        warning("Aborted.")
        return

    async def _drop() -> None:
        database = create_database()
        try:
            await database.drop_all()
        finally:
            await database.dispose()

    try:
        asyncio.run(_drop())
    except Exception as e:
        error(f"Failed to drop tables: {e}")
        raise click.Abort() from e
    success("All tables dropped")


@db.command()
def check() -> None:
    """Check database connection.

    Example:
        blog-service db check
    """

    async def _check() -> bool:
        database = create_database()
        try:
            return await database.ping()
        finally:
            await database.dispose()

    if not asyncio.run(_check()):
        error("Database is unreachable")
        raise click.Abort()
    success("Database connection OK")
