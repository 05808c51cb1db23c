"""Database infrastructure package.

Example:
    from blog_service.infra.database import create_database

    database = create_database()
    async with database.session() as session:
        result = await session.execute(...)
"""

from .session import Database, create_database

__all__ = ["Database", "create_database"]
