"""Permission repository for database operations."""

from collections.abc import Iterable
from typing import Annotated
from uuid import UUID

from fastapi import Depends
from sqlalchemy import func, select

from rbac_admin.api.dependencies import DBSession
from rbac_admin.core.permissions.models import Permission
from rbac_admin.modules.menus.models import Menu


class PermissionRepository:
    """Repository for Permission database operations."""

    def __init__(self, session: DBSession) -> None:
        self.session = session

    async def create(self, permission: Permission) -> Permission:
        self.session.add(permission)
        await self.session.flush()
        await self.session.refresh(permission)
        return permission

    async def get_by_id(self, permission_id: UUID) -> Permission | None:
        result = await self.session.execute(
            select(Permission).where(Permission.id == permission_id)
        )
        return result.scalar_one_or_none()

    async def get_by_code(self, code: str) -> Permission | None:
        result = await self.session.execute(
            select(Permission).where(Permission.code == code)
        )
        return result.scalar_one_or_none()

    async def get_by_codes(self, codes: Iterable[str]) -> list[Permission]:
        """Get the permissions matching ``codes``; unknown codes are skipped."""
        wanted = set(codes)
        if not wanted:
            return []
        result = await self.session.execute(
            select(Permission).where(Permission.code.in_(wanted)).order_by(Permission.code)
        )
        return list(result.scalars().all())

    async def list_all(self) -> list[Permission]:
        """List every permission ordered by code."""
        result = await self.session.execute(select(Permission).order_by(Permission.code))
        return list(result.scalars().all())

    async def get_parent_links(self) -> dict[str, str | None]:
        """Map every code to its parent code."""
        result = await self.session.execute(
            select(Permission.code, Permission.parent_code)
        )
        return {code: parent for code, parent in result}

    async def count_children(self, code: str) -> int:
        result = await self.session.execute(
            select(func.count()).select_from(Permission).where(Permission.parent_code == code)
        )
        return result.scalar_one()

    async def count_menus(self, permission_id: UUID) -> int:
        result = await self.session.execute(
            select(func.count()).select_from(Menu).where(Menu.permission_id == permission_id)
        )
        return result.scalar_one()

    async def update(self, permission: Permission) -> Permission:
        await self.session.flush()
        await self.session.refresh(permission)
        return permission

    async def delete(self, permission: Permission) -> None:
        await self.session.delete(permission)
        await self.session.flush()


# Type alias for dependency injection
PermissionRepo = Annotated[PermissionRepository, Depends(PermissionRepository)]
