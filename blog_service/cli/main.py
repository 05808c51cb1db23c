"""Main CLI entry point for blog-service management commands."""

import click

from blog_service.cli.commands import db, posts, seed, server
from blog_service.core.settings import get_app_settings
from blog_service.infra.logging.config import setup_logging


@click.group()
@click.version_option(version=get_app_settings().version, prog_name="blog-service")
@click.pass_context
def cli(ctx: click.Context) -> None:
    """Blog Service CLI - Management commands for the blog API.

    \b
    Command Groups:
      db         Database table management
      seed       Sample data
      posts      Cursor-paginated post listings
      serve      Development and production server

    \b
    Quick Start:
      blog-service db init
      blog-service seed --posts 100
      blog-service posts list --tag coding --all
      blog-service serve --reload
    """
    ctx.ensure_object(dict)


cli.add_command(db.db)
cli.add_command(seed.seed)
cli.add_command(posts.posts)
cli.add_command(server.serve)


def main() -> None:
    """Entry point for CLI."""
    setup_logging()
    cli(obj={})


if __name__ == "__main__":
    main()
