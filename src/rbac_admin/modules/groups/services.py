"""Group service for business logic."""

from collections.abc import Sequence
from typing import Annotated
from uuid import UUID

import structlog
from fastapi import Depends

from rbac_admin.core.errors import ConflictError, NotFoundError, ValidationError
from rbac_admin.core.permissions.models import Group, Permission
from rbac_admin.modules.groups.repos import GroupRepo
from rbac_admin.modules.groups.schemas import GroupCreate, GroupUpdate
from rbac_admin.modules.permissions.repos import PermissionRepo


logger = structlog.get_logger()


class GroupService:
    """Service for group CRUD and permission assignment."""

    def __init__(self, repo: GroupRepo, permission_repo: PermissionRepo) -> None:
        self.repo = repo
        self.permission_repo = permission_repo

    async def list_groups(self) -> list[Group]:
        return await self.repo.list_all()

    async def get_group(self, group_id: UUID) -> Group:
        """Get a group by ID.

        Raises:
            NotFoundError: If the group does not exist
        """
        group = await self.repo.get_by_id(group_id)
        if not group:
            raise NotFoundError(
                "Group not found",
                resource="group",
                resource_id=str(group_id),
            )
        return group

    async def _resolve_codes(self, codes: Sequence[str]) -> list[Permission]:
        """Look up permissions by code, rejecting any unknown code.

        Raises:
            ValidationError: Listing every unknown code
        """
        permissions = await self.permission_repo.get_by_codes(codes)
        found = {p.code for p in permissions}
        unknown = sorted(set(codes) - found)
        if unknown:
            raise ValidationError(
                "Unknown permission codes",
                errors=[
                    {"field": "permission_codes", "message": f"Unknown code: {code}"}
                    for code in unknown
                ],
            )
        return permissions

    async def create_group(self, data: GroupCreate) -> Group:
        """Create a group.

        Raises:
            ConflictError: If the code is taken
            ValidationError: If any permission code is unknown
        """
        if await self.repo.get_by_code(data.code):
            raise ConflictError(
                "Group code already exists",
                error_code="group_code_exists",
                details={"code": data.code},
            )

        permissions = await self._resolve_codes(data.permission_codes)
        group = await self.repo.create(
            Group(
                code=data.code,
                name=data.name,
                description=data.description,
                is_active=data.is_active,
                permissions=permissions,
            )
        )
        logger.info("group_created", code=group.code, permission_count=len(permissions))
        return group

    async def update_group(self, group_id: UUID, data: GroupUpdate) -> Group:
        """Update a group's name, description or active flag."""
        group = await self.get_group(group_id)
        changes = data.model_dump(exclude_unset=True, exclude_none=True)
        for key, value in changes.items():
            setattr(group, key, value)

        group = await self.repo.update(group)
        logger.info("group_updated", code=group.code, fields=sorted(changes))
        return group

    async def assign_permissions(self, group_id: UUID, codes: Sequence[str]) -> Group:
        """Replace the permissions granted to a group.

        Raises:
            NotFoundError: If the group does not exist
            ValidationError: If any code is unknown; nothing is changed
        """
        group = await self.get_group(group_id)
        permissions = await self._resolve_codes(codes)

        group.permissions = permissions
        group = await self.repo.update(group)
        logger.info(
            "group_permissions_assigned",
            code=group.code,
            permission_count=len(permissions),
        )
        return group

    async def delete_group(self, group_id: UUID) -> None:
        group = await self.get_group(group_id)
        await self.repo.delete(group)
        logger.info("group_deleted", code=group.code)


# Type alias for dependency injection
GroupSvc = Annotated[GroupService, Depends(GroupService)]
