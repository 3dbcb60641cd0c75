"""Permission checking logic.

This module provides functions for checking whether a user holds
specific permission codes, evaluated against the user's effective
permission set.
"""

from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from rbac_admin.core.permissions.catalog import AccessSnapshot
from rbac_admin.core.permissions.repos import AccessRepository
from rbac_admin.core.permissions.resolver import PermissionResolver


class PermissionChecker:
    """Service for checking user permissions.

    Every call loads the user's current groups and permissions, so a
    change made by an administrator applies to the next check.
    """

    def __init__(self, session: AsyncSession) -> None:
        self.session = session
        self.repository = AccessRepository(session)

    async def get_user_permissions(self, user_id: UUID) -> frozenset[str]:
        """Get the effective permission codes of a user.

        Args:
            user_id: The user's UUID

        Returns:
            Set of permission codes

        Raises:
            UserNotFoundError: If the user does not exist
            UserInactiveError: If the user is deactivated
        """
        user = await self.repository.get_user_record(user_id)
        users = [user] if user else []
        groups = await self.repository.get_group_records(user.group_ids) if user else []
        permissions = await self.repository.get_permission_records()

        snapshot = AccessSnapshot.build(users=users, groups=groups, permissions=permissions)
        return PermissionResolver(snapshot).resolve(user_id)

    async def has_permission(self, user_id: UUID, code: str) -> bool:
        """Check if a user holds a permission code.

        Args:
            user_id: The user's UUID
            code: The permission code (e.g., "users.view")

        Returns:
            True if the user holds the code, False otherwise
        """
        return code in await self.get_user_permissions(user_id)

    async def has_any_permission(self, user_id: UUID, codes: list[str]) -> bool:
        """Check if a user holds at least one of the codes."""
        effective = await self.get_user_permissions(user_id)
        return any(code in effective for code in codes)

    async def has_all_permissions(self, user_id: UUID, codes: list[str]) -> bool:
        """Check if a user holds every one of the codes."""
        effective = await self.get_user_permissions(user_id)
        return all(code in effective for code in codes)

