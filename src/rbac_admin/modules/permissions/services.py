"""Permission service for catalog maintenance.

Parent codes are display grouping only, but they must still reference
an existing permission and never loop, so the read path can rely on a
well-formed catalog.
"""

from typing import Annotated, Any
from uuid import UUID

import structlog
from fastapi import Depends

from rbac_admin.core.errors import ConflictError, NotFoundError, ValidationError
from rbac_admin.core.permissions.catalog import (
    PermissionCatalog,
    PermissionRecord,
    find_parent_cycle,
)
from rbac_admin.core.permissions.models import Permission
from rbac_admin.modules.permissions.repos import PermissionRepo
from rbac_admin.modules.permissions.schemas import PermissionCreate, PermissionUpdate


logger = structlog.get_logger()


class PermissionService:
    """Service for permission CRUD and the permission tree."""

    def __init__(self, repo: PermissionRepo) -> None:
        self.repo = repo

    async def list_permissions(self) -> list[Permission]:
        return await self.repo.list_all()

    async def get_permission(self, permission_id: UUID) -> Permission:
        """Get a permission by ID.

        Raises:
            NotFoundError: If the permission does not exist
        """
        permission = await self.repo.get_by_id(permission_id)
        if not permission:
            raise NotFoundError(
                "Permission not found",
                resource="permission",
                resource_id=str(permission_id),
            )
        return permission

    async def get_tree(self) -> list[dict[str, Any]]:
        """Return the permission catalog grouped by parent code."""
        permissions = await self.repo.list_all()
        catalog = PermissionCatalog(
            PermissionRecord(
                code=p.code,
                name=p.name,
                parent_code=p.parent_code,
                is_active=p.is_active,
                description=p.description,
            )
            for p in permissions
        )
        return catalog.tree()

    async def _check_parent(self, code: str, parent_code: str | None) -> None:
        if parent_code is None:
            return

        if parent_code == code:
            raise ValidationError(
                "A permission cannot be its own parent",
                errors=[{"field": "parent_code", "message": "Must differ from code"}],
            )

        links = await self.repo.get_parent_links()
        if parent_code not in links:
            raise ValidationError(
                "Parent permission does not exist",
                errors=[
                    {"field": "parent_code", "message": f"Unknown code: {parent_code}"}
                ],
            )

        links[code] = parent_code
        cycle = find_parent_cycle(code, links)
        if cycle:
            raise ValidationError(
                "Parent code would create a cycle",
                errors=[
                    {
                        "field": "parent_code",
                        "message": "Cycle: " + " -> ".join(cycle),
                    }
                ],
            )

    async def create_permission(self, data: PermissionCreate) -> Permission:
        """Create a permission.

        Raises:
            ConflictError: If the code is taken
            ValidationError: If the parent code is unknown, the permission
                itself, or would close a cycle
        """
        if await self.repo.get_by_code(data.code):
            raise ConflictError(
                "Permission code already exists",
                error_code="permission_code_exists",
                details={"code": data.code},
            )

        await self._check_parent(data.code, data.parent_code)

        permission = await self.repo.create(
            Permission(
                code=data.code,
                name=data.name,
                description=data.description,
                parent_code=data.parent_code,
                is_active=data.is_active,
            )
        )
        logger.info("permission_created", code=permission.code)
        return permission

    async def update_permission(
        self, permission_id: UUID, data: PermissionUpdate
    ) -> Permission:
        """Update a permission.

        Raises:
            NotFoundError: If the permission does not exist
            ValidationError: If the new parent code is invalid
        """
        permission = await self.get_permission(permission_id)
        changes = data.model_dump(exclude_unset=True)

        if "parent_code" in changes:
            await self._check_parent(permission.code, changes["parent_code"])

        for key, value in changes.items():
            if value is None and key != "parent_code":
                continue
            setattr(permission, key, value)

        permission = await self.repo.update(permission)
        logger.info("permission_updated", code=permission.code, fields=sorted(changes))
        return permission

    async def delete_permission(self, permission_id: UUID) -> None:
        """Delete a permission.

        Raises:
            NotFoundError: If the permission does not exist
            ConflictError: If menus or child permissions still reference it
        """
        permission = await self.get_permission(permission_id)

        if await self.repo.count_children(permission.code):
            raise ConflictError(
                "Permission still has child permissions",
                error_code="permission_has_children",
                details={"code": permission.code},
            )
        if await self.repo.count_menus(permission.id):
            raise ConflictError(
                "Permission is still used by menus",
                error_code="permission_in_use",
                details={"code": permission.code},
            )

        await self.repo.delete(permission)
        logger.info("permission_deleted", code=permission.code)


# Type alias for dependency injection
PermissionSvc = Annotated[PermissionService, Depends(PermissionService)]
