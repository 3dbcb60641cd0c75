"""Menu repository for database operations."""

from typing import Annotated
from uuid import UUID

from fastapi import Depends
from sqlalchemy import func, select

from rbac_admin.api.dependencies import DBSession
from rbac_admin.modules.menus.models import Menu


class MenuRepository:
    """Repository for Menu database operations."""

    def __init__(self, session: DBSession) -> None:
        self.session = session

    async def create(self, menu: Menu) -> Menu:
        self.session.add(menu)
        await self.session.flush()
        await self.session.refresh(menu)
        return menu

    async def get_by_id(self, menu_id: UUID) -> Menu | None:
        result = await self.session.execute(select(Menu).where(Menu.id == menu_id))
        return result.scalar_one_or_none()

    async def get_by_path(self, path: str) -> Menu | None:
        result = await self.session.execute(select(Menu).where(Menu.path == path))
        return result.scalar_one_or_none()

    async def list_all(self) -> list[Menu]:
        """List every menu ordered by sort order, then insertion order."""
        result = await self.session.execute(
            select(Menu).order_by(Menu.order, Menu.seq)
        )
        return list(result.scalars().all())

    async def get_parent_links(self) -> dict[UUID, UUID | None]:
        """Map every menu id to its parent id."""
        result = await self.session.execute(select(Menu.id, Menu.parent_id))
        return {menu_id: parent_id for menu_id, parent_id in result}

    async def count_children(self, menu_id: UUID) -> int:
        result = await self.session.execute(
            select(func.count()).select_from(Menu).where(Menu.parent_id == menu_id)
        )
        return result.scalar_one()

    async def update(self, menu: Menu) -> Menu:
        await self.session.flush()
        await self.session.refresh(menu)
        return menu

    async def delete(self, menu: Menu) -> None:
        await self.session.delete(menu)
        await self.session.flush()


# Type alias for dependency injection
MenuRepo = Annotated[MenuRepository, Depends(MenuRepository)]
