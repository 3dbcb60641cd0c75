"""Group repository for database operations."""

from collections.abc import Iterable
from typing import Annotated
from uuid import UUID

from fastapi import Depends
from sqlalchemy import select

from rbac_admin.api.dependencies import DBSession
from rbac_admin.core.permissions.models import Group


class GroupRepository:
    """Repository for Group database operations."""

    def __init__(self, session: DBSession) -> None:
        self.session = session

    async def create(self, group: Group) -> Group:
        self.session.add(group)
        await self.session.flush()
        await self.session.refresh(group)
        return group

    async def get_by_id(self, group_id: UUID) -> Group | None:
        result = await self.session.execute(select(Group).where(Group.id == group_id))
        return result.scalar_one_or_none()

    async def get_by_code(self, code: str) -> Group | None:
        result = await self.session.execute(select(Group).where(Group.code == code))
        return result.scalar_one_or_none()

    async def get_by_ids(self, group_ids: Iterable[UUID]) -> list[Group]:
        """Get the groups matching ``group_ids``; unknown ids are skipped."""
        wanted = set(group_ids)
        if not wanted:
            return []
        result = await self.session.execute(
            select(Group).where(Group.id.in_(wanted)).order_by(Group.code)
        )
        return list(result.scalars().all())

    async def list_all(self) -> list[Group]:
        """List every group ordered by code."""
        result = await self.session.execute(select(Group).order_by(Group.code))
        return list(result.scalars().all())

    async def update(self, group: Group) -> Group:
        await self.session.flush()
        await self.session.refresh(group)
        return group

    async def delete(self, group: Group) -> None:
        await self.session.delete(group)
        await self.session.flush()


# Type alias for dependency injection
GroupRepo = Annotated[GroupRepository, Depends(GroupRepository)]
