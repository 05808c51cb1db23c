"""Caller identity dependencies.

Authentication happens upstream (gateway or auth middleware), which
forwards the verified user id in the ``X-User-Id`` header. These
dependencies only parse that header.

Usage:
    @router.get("/posts")
    async def list_posts(user_id: UUID | None = Depends(get_current_user_id)):
        ...

    @router.post("/posts")
    async def create_post(user_id: UUID = Depends(require_user_id)):
        ...
"""

from __future__ import annotations

from typing import Annotated
from uuid import UUID

from fastapi import Depends, Header

from blog_service.core.exceptions import UnauthorizedException

USER_ID_HEADER = "X-User-Id"


async def get_current_user_id(
    x_user_id: Annotated[
        str | None,
        Header(alias=USER_ID_HEADER, description="Verified id of the calling user"),
    ] = None,
) -> UUID | None:
    """Return the caller's user id, or None for anonymous requests.

    Raises:
        UnauthorizedException: If the header is present but not a UUID.
    """
    if x_user_id is None or not x_user_id.strip():
        return None
    try:
        return UUID(x_user_id.strip())
    except ValueError:
        raise UnauthorizedException(
            detail=f"{USER_ID_HEADER} header is not a valid user id",
            type="invalid-identity",
        ) from None


async def require_user_id(
    user_id: Annotated[UUID | None, Depends(get_current_user_id)],
) -> UUID:
    """Return the caller's user id, rejecting anonymous requests.

    Raises:
        UnauthorizedException: If no caller identity is present.
    """
    if user_id is None:
        raise UnauthorizedException()
    return user_id


CurrentUserId = Annotated[UUID | None, Depends(get_current_user_id)]
RequiredUserId = Annotated[UUID, Depends(require_user_id)]
