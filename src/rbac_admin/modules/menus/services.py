"""Menu service for catalog maintenance.

Every menu entry is gated by exactly one existing, active permission
code. Parent links must point at existing entries and never loop; an
entry with children cannot be deleted.
"""

from typing import Annotated
from uuid import UUID

import structlog
from fastapi import Depends

from rbac_admin.core.errors import ConflictError, NotFoundError, ValidationError
from rbac_admin.core.permissions.catalog import find_parent_cycle
from rbac_admin.core.permissions.menu import MenuNode, MenuTreeBuilder
from rbac_admin.core.permissions.models import Permission
from rbac_admin.core.permissions.repos import AccessRepo
from rbac_admin.modules.menus.models import Menu
from rbac_admin.modules.menus.repos import MenuRepo
from rbac_admin.modules.menus.schemas import MenuCreate, MenuUpdate
from rbac_admin.modules.permissions.repos import PermissionRepo


logger = structlog.get_logger()


class MenuService:
    """Service for menu CRUD and the administrative menu tree."""

    def __init__(
        self,
        repo: MenuRepo,
        permission_repo: PermissionRepo,
        access_repo: AccessRepo,
    ) -> None:
        self.repo = repo
        self.permission_repo = permission_repo
        self.access_repo = access_repo

    async def list_menus(self) -> list[Menu]:
        return await self.repo.list_all()

    async def get_menu(self, menu_id: UUID) -> Menu:
        """Get a menu entry by ID.

        Raises:
            NotFoundError: If the entry does not exist
        """
        menu = await self.repo.get_by_id(menu_id)
        if not menu:
            raise NotFoundError(
                "Menu not found",
                resource="menu",
                resource_id=str(menu_id),
            )
        return menu

    async def get_tree(self) -> list[MenuNode]:
        """Return the whole catalog as an ordered tree, inactive entries included."""
        records = await self.access_repo.get_menu_records()
        return MenuTreeBuilder(records).full_tree()

    async def _get_bindable_permission(self, code: str) -> Permission:
        permission = await self.permission_repo.get_by_code(code)
        if not permission:
            raise ValidationError(
                "Permission does not exist",
                errors=[{"field": "permission_code", "message": f"Unknown code: {code}"}],
            )
        if not permission.is_active:
            raise ValidationError(
                "Permission is inactive",
                errors=[{"field": "permission_code", "message": f"Inactive code: {code}"}],
            )
        return permission

    async def _check_path(self, path: str, menu_id: UUID | None = None) -> None:
        existing = await self.repo.get_by_path(path)
        if existing and existing.id != menu_id:
            raise ConflictError(
                "Menu path already exists",
                error_code="menu_path_exists",
                details={"path": path},
            )

    async def _check_parent(self, menu_id: UUID | None, parent_id: UUID | None) -> None:
        if parent_id is None:
            return

        links = await self.repo.get_parent_links()
        if parent_id not in links:
            raise ValidationError(
                "Parent menu does not exist",
                errors=[{"field": "parent_id", "message": f"Unknown menu: {parent_id}"}],
            )
        if menu_id is None:
            return

        links[menu_id] = parent_id
        if find_parent_cycle(menu_id, links):
            raise ValidationError(
                "Parent would create a cycle",
                errors=[
                    {"field": "parent_id", "message": "Menu cannot be its own ancestor"}
                ],
            )

    async def create_menu(self, data: MenuCreate) -> Menu:
        """Create a menu entry.

        Raises:
            ConflictError: If the path is taken
            ValidationError: If the permission is unknown or inactive, or
                the parent does not exist
        """
        await self._check_path(data.path)
        permission = await self._get_bindable_permission(data.permission_code)
        await self._check_parent(None, data.parent_id)

        menu = await self.repo.create(
            Menu(
                name=data.name,
                path=data.path,
                icon=data.icon,
                order=data.order,
                parent_id=data.parent_id,
                is_active=data.is_active,
                permission=permission,
            )
        )
        logger.info("menu_created", menu_id=str(menu.id), path=menu.path)
        return menu

    async def update_menu(self, menu_id: UUID, data: MenuUpdate) -> Menu:
        """Update a menu entry.

        Raises:
            NotFoundError: If the entry does not exist
            ConflictError: If the new path is taken
            ValidationError: If the new permission or parent is invalid
        """
        menu = await self.get_menu(menu_id)
        changes = data.model_dump(exclude_unset=True)

        if changes.get("path"):
            await self._check_path(changes["path"], menu.id)
        if "parent_id" in changes:
            await self._check_parent(menu.id, changes["parent_id"])
        if code := changes.pop("permission_code", None):
            menu.permission = await self._get_bindable_permission(code)

        for key, value in changes.items():
            if value is None and key != "parent_id":
                continue
            setattr(menu, key, value)

        menu = await self.repo.update(menu)
        logger.info("menu_updated", menu_id=str(menu.id), fields=sorted(data.model_fields_set))
        return menu

    async def rename_menu(self, menu_id: UUID, name: str) -> Menu:
        return await self.update_menu(menu_id, MenuUpdate(name=name))

    async def rebind_permission(self, menu_id: UUID, permission_code: str) -> Menu:
        """Gate a menu entry with a different permission."""
        return await self.update_menu(menu_id, MenuUpdate(permission_code=permission_code))

    async def delete_menu(self, menu_id: UUID) -> None:
        """Delete a menu entry.

        Raises:
            NotFoundError: If the entry does not exist
            ConflictError: If the entry still has children
        """
        menu = await self.get_menu(menu_id)
        if await self.repo.count_children(menu.id):
            raise ConflictError(
                "Menu still has child entries",
                error_code="menu_has_children",
                details={"menu_id": str(menu.id)},
            )

        await self.repo.delete(menu)
        logger.info("menu_deleted", menu_id=str(menu_id), path=menu.path)


# Type alias for dependency injection
MenuSvc = Annotated[MenuService, Depends(MenuService)]
