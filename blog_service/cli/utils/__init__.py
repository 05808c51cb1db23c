"""CLI output formatting utilities."""

from blog_service.cli.utils.formatters import error, header, info, post_line, success, warning

__all__ = [
    "error",
    "header",
    "info",
    "post_line",
    "success",
    "warning",
]
