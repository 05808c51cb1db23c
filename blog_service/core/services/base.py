"""Shared logging for the post, category and user services."""

from __future__ import annotations

import logging
from uuid import UUID

from blog_service.infra.logging import get_lazy_logger


class BaseService:
    """Base for the domain services.

    Loggers are named ``<module>.<ServiceClass>`` so their records sit under
    the ``blog_service`` logger tree:

        - self.logger: INFO and above, used through ``_record`` for writes
        - self._lazy: DEBUG with deferred message formatting

    Example:
        class CategoryService(BaseService):
            async def create_category(self, session, data) -> Category:
                category = await self.repository.create(session, Category(name=data.name))
                self._record("Category created", category_id=category.id)
                return category
    """

    def __init__(self) -> None:
        name = f"{type(self).__module__}.{type(self).__name__}"
        self.logger = logging.getLogger(name)
        self._lazy = get_lazy_logger(name)

    def _record(self, event: str, **fields: object) -> None:
        """Log a completed write at INFO; UUID fields are rendered as strings."""
        extra = {key: str(value) if isinstance(value, UUID) else value for key, value in fields.items()}
        self.logger.info(event, extra=extra)
