"""Users service layer."""

from __future__ import annotations

from typing import TYPE_CHECKING

from blog_service.core.exceptions import ConflictException
from blog_service.core.models import User
from blog_service.core.services.base import BaseService
from blog_service.features.users.repository import UserRepository, get_user_repository

if TYPE_CHECKING:
    from collections.abc import Sequence
    from uuid import UUID

    from sqlalchemy.ext.asyncio import AsyncSession

    from blog_service.features.users.schemas import UserCreate


class UserService(BaseService):
    """Service for managing user profiles."""

    def __init__(self, repository: UserRepository | None = None) -> None:
        super().__init__()
        self.repository = repository or get_user_repository()

    async def create_user(self, session: AsyncSession, data: UserCreate) -> User:
        """Create a user profile.

        Raises:
            ConflictException: If the email is already registered.
        """
        if await self.repository.get_by_email(session, data.email) is not None:
            raise ConflictException(
                detail="A user with this email already exists",
                type="user-exists",
                extra={"field": "email"},
            )
        user = await self.repository.create(
            session,
            User(email=data.email, first_name=data.first_name, last_name=data.last_name),
        )
        self._record("User created", user_id=user.id)
        return user

    async def get_user(self, session: AsyncSession, user_id: UUID) -> User:
        """Get a user or raise NotFoundException."""
        return await self.repository.get_or_raise(session, user_id)

    async def list_users(
        self,
        session: AsyncSession,
        *,
        limit: int = 100,
        offset: int = 0,
    ) -> Sequence[User]:
        """List users, newest first."""
        return await self.repository.list(
            session,
            limit=limit,
            offset=offset,
            order_by=(User.created_at.desc(), User.id.desc()),
        )
