"""User service for business logic."""

from collections.abc import Sequence
from typing import Annotated
from uuid import UUID

import structlog
from fastapi import Depends

from rbac_admin.core.auth.backend import hash_password
from rbac_admin.core.errors import ConflictError, NotFoundError, ValidationError
from rbac_admin.core.permissions.models import Group
from rbac_admin.modules.groups.repos import GroupRepo
from rbac_admin.modules.users.models import User
from rbac_admin.modules.users.repos import UserRepo
from rbac_admin.modules.users.schemas import UserCreate, UserUpdate


logger = structlog.get_logger()


class UserService:
    """Service for user management operations.

    Contains business logic for user CRUD and group membership.
    """

    def __init__(self, repo: UserRepo, group_repo: GroupRepo) -> None:
        self.repo = repo
        self.group_repo = group_repo

    async def _resolve_groups(self, group_ids: Sequence[UUID]) -> list[Group]:
        """Look up groups by id, rejecting any unknown id.

        Raises:
            ValidationError: Listing every unknown id
        """
        groups = await self.group_repo.get_by_ids(group_ids)
        found = {g.id for g in groups}
        unknown = sorted({str(gid) for gid in group_ids if gid not in found})
        if unknown:
            raise ValidationError(
                "Unknown group ids",
                errors=[
                    {"field": "group_ids", "message": f"Unknown group: {gid}"}
                    for gid in unknown
                ],
            )
        return groups

    async def create_user(self, data: UserCreate) -> User:
        """Create a new user with a bcrypt-hashed password.

        Raises:
            ConflictError: If the email is already registered
            ValidationError: If any group id is unknown
        """
        if await self.repo.get_by_email(data.email):
            raise ConflictError(
                "Email already registered",
                error_code="email_exists",
                details={"email": data.email},
            )

        groups = await self._resolve_groups(data.group_ids)
        user = await self.repo.create(
            User(
                email=data.email,
                display_name=data.display_name,
                password_hash=hash_password(data.password),
                is_active=data.is_active,
                groups=groups,
            )
        )
        logger.info("user_created", user_id=str(user.id), group_count=len(groups))
        return user

    async def get_user(self, user_id: UUID) -> User:
        """Get a user by ID.

        Raises:
            NotFoundError: If user not found
        """
        user = await self.repo.get_by_id(user_id)
        if not user:
            raise NotFoundError(
                "User not found",
                resource="user",
                resource_id=str(user_id),
            )
        return user

    async def list_users(self, offset: int, limit: int) -> tuple[list[User], int]:
        return await self.repo.list_paginated(offset, limit)

    async def update_user(self, user_id: UUID, data: UserUpdate) -> User:
        """Update a user's display name or active flag.

        Deactivating a user makes every later session request fail
        with ``user_inactive``.
        """
        user = await self.get_user(user_id)
        changes = data.model_dump(exclude_unset=True, exclude_none=True)
        for key, value in changes.items():
            setattr(user, key, value)

        user = await self.repo.update(user)
        logger.info("user_updated", user_id=str(user.id), fields=sorted(changes))
        return user

    async def assign_groups(self, user_id: UUID, group_ids: Sequence[UUID]) -> User:
        """Replace the groups a user belongs to.

        Raises:
            NotFoundError: If the user does not exist
            ValidationError: If any group id is unknown; nothing is changed
        """
        user = await self.get_user(user_id)
        groups = await self._resolve_groups(group_ids)

        user.groups = groups
        user = await self.repo.update(user)
        logger.info("user_groups_assigned", user_id=str(user.id), group_count=len(groups))
        return user


# Type alias for dependency injection
UserSvc = Annotated[UserService, Depends(UserService)]
