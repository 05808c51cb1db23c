"""FastAPI dependencies for route handlers.

Usage:
    from blog_service.core.dependencies import (
        CurrentUserId,
        CursorPagination,
        get_database,
        get_db_session,
    )

    @router.get("/posts")
    async def list_posts(
        pagination: CursorPagination,
        user_id: CurrentUserId,
        database: Database = Depends(get_database),
    ):
        ...
"""

from blog_service.core.dependencies.auth import (
    USER_ID_HEADER,
    CurrentUserId,
    RequiredUserId,
    get_current_user_id,
    require_user_id,
)
from blog_service.core.dependencies.database import get_database, get_db_session
from blog_service.core.dependencies.pagination import (
    CursorPagination,
    CursorParams,
    get_cursor_pagination,
)

__all__ = [
    "USER_ID_HEADER",
    "CurrentUserId",
    "CursorPagination",
    "CursorParams",
    "RequiredUserId",
    "get_current_user_id",
    "get_cursor_pagination",
    "get_database",
    "get_db_session",
    "require_user_id",
]
