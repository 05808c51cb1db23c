"""CLI command modules."""

from blog_service.cli.commands import db, posts, seed, server

__all__ = ["db", "posts", "seed", "server"]
