"""Server management commands."""

from __future__ import annotations

import click
import uvicorn

from blog_service.cli.utils import info
from blog_service.core.settings import get_app_settings, get_logging_settings


@click.command()
@click.option("--host", default=None, help="Host to bind (default: from settings)")
@click.option("--port", default=None, type=int, help="Port to bind (default: from settings)")
@click.option("--reload/--no-reload", default=False, help="Enable auto-reload on code changes")
@click.option("--workers", default=1, type=click.IntRange(min=1), help="Number of worker processes")
def serve(host: str | None, port: int | None, reload: bool, workers: int) -> None:
    """Run the API server with uvicorn.

    Example:
        blog-service serve --port 8080 --reload
    """
    settings = get_app_settings()
    host = host or settings.host
    port = port or settings.port
    info(f"Starting server on http://{host}:{port}{settings.api_prefix}")

    uvicorn.run(
        "blog_service.app.main:create_app",
        factory=True,
        host=host,
        port=port,
        reload=reload,
        workers=1 if reload else workers,
        log_level=get_logging_settings().level.lower(),
    )
