"""Database dependencies for FastAPI route handlers.

The store handle (``Database``) is created once in the application lifespan
and kept on ``app.state.database``. Route handlers receive either the handle
itself (for operations that open their own sessions, like paginated listing)
or a request-scoped session.

Usage Examples:
---------------
FastAPI route handler:
    from blog_service.core.dependencies.database import get_db_session

    @router.get("/categories")
    async def list_categories(session: AsyncSession = Depends(get_db_session)):
        result = await session.execute(select(Category))
        return result.scalars().all()

Outside FastAPI (CLI commands, scripts):
    database = create_database()
    async with database.session() as session:
        ...
"""

from collections.abc import AsyncGenerator

from fastapi import Request
from sqlalchemy.ext.asyncio import AsyncSession

from blog_service.core.exceptions import ServiceUnavailableException
from blog_service.infra.database import Database


def get_database(request: Request) -> Database:
    """FastAPI dependency returning the application's store handle.

    Raises:
        ServiceUnavailableException: If the lifespan has not attached a database.
    """
    database = getattr(request.app.state, "database", None)
    if database is None:
        raise ServiceUnavailableException(
            detail="Database is not initialized",
            type="database-unavailable",
            extra={"service": "database"},
        )
    return database


async def get_db_session(request: Request) -> AsyncGenerator[AsyncSession]:
    """FastAPI dependency for a request-scoped database session.

    Yields:
        Database session that is automatically closed after request.
    """
    async with get_database(request).session() as session:
        yield session
