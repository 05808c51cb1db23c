"""Users API router."""

from __future__ import annotations

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from blog_service.core.dependencies import get_db_session
from blog_service.features.users.schemas import UserCreate, UserResponse
from blog_service.features.users.service import UserService

router = APIRouter(prefix="/users", tags=["users"])


def get_user_service() -> UserService:
    """Get user service dependency."""
    return UserService()


@router.get("", response_model=list[UserResponse], summary="List users")
async def list_users(
    limit: Annotated[int, Query(ge=1, le=500)] = 100,
    offset: Annotated[int, Query(ge=0)] = 0,
    session: AsyncSession = Depends(get_db_session),
    service: UserService = Depends(get_user_service),
) -> list[UserResponse]:
    """List user profiles, newest first."""
    users = await service.list_users(session, limit=limit, offset=offset)
    return [UserResponse.model_validate(u) for u in users]


@router.post(
    "",
    response_model=UserResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create user",
)
async def create_user(
    data: UserCreate,
    session: AsyncSession = Depends(get_db_session),
    service: UserService = Depends(get_user_service),
) -> UserResponse:
    """Create a user profile with a unique email."""
    user = await service.create_user(session, data)
    await session.commit()
    return UserResponse.model_validate(user)


@router.get("/{user_id}", response_model=UserResponse, summary="Get user by ID")
async def get_user(
    user_id: UUID,
    session: AsyncSession = Depends(get_db_session),
    service: UserService = Depends(get_user_service),
) -> UserResponse:
    """Get a user profile."""
    return UserResponse.model_validate(await service.get_user(session, user_id))
