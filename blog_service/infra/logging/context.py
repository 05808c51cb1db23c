"""Context management for structured logging.

Provides automatic context injection into log records using contextvars,
so request IDs and user IDs appear in every log line without being passed
around explicitly. Each asyncio task gets its own copy of the context.
"""

from __future__ import annotations

import logging
from contextvars import ContextVar
from typing import Any

_log_context: ContextVar[dict[str, Any]] = ContextVar("log_context", default={})


def set_log_context(**kwargs: Any) -> None:
    """Set logging context for the current async task.

    Example:
        ```python
        set_log_context(request_id="abc-123", path="/api/v1/posts")
        logger.info("Processing request")  # Includes request_id and path
        ```
    """
    current = _log_context.get().copy()
    current.update(kwargs)
    _log_context.set(current)


def get_log_context() -> dict[str, Any]:
    """Get a copy of the current logging context."""
    return _log_context.get().copy()


def clear_log_context() -> None:
    """Clear all logging context for the current async task."""
    _log_context.set({})


class ContextInjectingFilter(logging.Filter):
    """Logging filter that injects the contextvars context into each LogRecord.

    Attached to the root queue handler so every logger benefits. Existing record
    attributes (including `extra=` fields) are never overwritten.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        """Inject context into log record."""
        for key, value in _log_context.get().items():
            if not hasattr(record, key):
                setattr(record, key, value)
        return True
