"""User repository for database operations."""

from typing import Annotated
from uuid import UUID

from fastapi import Depends
from sqlalchemy import func, select

from rbac_admin.api.dependencies import DBSession
from rbac_admin.modules.users.models import User


class UserRepository:
    """Repository for User database operations."""

    def __init__(self, session: DBSession) -> None:
        self.session = session

    async def create(self, user: User) -> User:
        """Create a new user.

        Args:
            user: User instance to create

        Returns:
            The created user with ID populated
        """
        self.session.add(user)
        await self.session.flush()
        await self.session.refresh(user)
        return user

    async def get_by_id(self, user_id: UUID) -> User | None:
        """Get a user by ID.

        Args:
            user_id: The user's UUID

        Returns:
            User if found, None otherwise
        """
        result = await self.session.execute(select(User).where(User.id == user_id))
        return result.scalar_one_or_none()

    async def get_by_email(self, email: str) -> User | None:
        """Get a user by email address.

        Args:
            email: The user's email

        Returns:
            User if found, None otherwise
        """
        result = await self.session.execute(select(User).where(User.email == email))
        return result.scalar_one_or_none()

    async def list_paginated(
        self,
        offset: int = 0,
        limit: int = 20,
    ) -> tuple[list[User], int]:
        """List users ordered by email.

        Returns:
            Tuple of (users list, total count)
        """
        count_result = await self.session.execute(select(func.count()).select_from(User))
        total = count_result.scalar_one()

        result = await self.session.execute(
            select(User).order_by(User.email).offset(offset).limit(limit)
        )
        return list(result.scalars().all()), total

    async def update(self, user: User) -> User:
        await self.session.flush()
        await self.session.refresh(user)
        return user


# Type alias for dependency injection
UserRepo = Annotated[UserRepository, Depends(UserRepository)]
