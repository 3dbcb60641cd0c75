"""Loading access data from the database.

``AccessRepository`` reads exactly what resolution needs for one user:
the user row, that user's groups with their granted codes, the active
flag of every permission, and the full menu catalog.
"""

from collections.abc import Iterable
from typing import Annotated
from uuid import UUID

from fastapi import Depends
from sqlalchemy import select

from rbac_admin.api.dependencies import DBSession
from rbac_admin.core.permissions.catalog import (
    AccessSnapshot,
    GroupRecord,
    MenuRecord,
    PermissionRecord,
    UserRecord,
)
from rbac_admin.core.permissions.models import (
    Group,
    Permission,
    group_permissions,
    user_groups,
)
from rbac_admin.modules.menus.models import Menu
from rbac_admin.modules.users.models import User


class AccessRepository:
    """Read-only queries feeding the permission resolver and menu builder."""

    def __init__(self, session: DBSession) -> None:
        self.session = session

    async def get_user_record(self, user_id: UUID) -> UserRecord | None:
        """Get a user with the ids of their groups.

        Args:
            user_id: The user's UUID

        Returns:
            UserRecord if found, None otherwise
        """
        result = await self.session.execute(
            select(User.id, User.email, User.display_name, User.is_active).where(
                User.id == user_id
            )
        )
        row = result.one_or_none()
        if row is None:
            return None

        group_ids = await self.session.scalars(
            select(user_groups.c.group_id).where(user_groups.c.user_id == user_id)
        )
        return UserRecord(
            id=row.id,
            email=row.email,
            display_name=row.display_name,
            is_active=row.is_active,
            group_ids=frozenset(group_ids.all()),
        )

    async def get_group_records(self, group_ids: Iterable[UUID]) -> list[GroupRecord]:
        """Get groups by id together with their directly granted codes.

        Args:
            group_ids: Ids to look up; unknown ids are skipped

        Returns:
            List of group records
        """
        ids = list(group_ids)
        if not ids:
            return []

        groups = await self.session.execute(
            select(Group.id, Group.code, Group.name, Group.is_active).where(
                Group.id.in_(ids)
            )
        )
        grants = await self.session.execute(
            select(group_permissions.c.group_id, Permission.code)
            .join(Permission, Permission.id == group_permissions.c.permission_id)
            .where(group_permissions.c.group_id.in_(ids))
        )

        codes_by_group: dict[UUID, set[str]] = {}
        for group_id, code in grants:
            codes_by_group.setdefault(group_id, set()).add(code)

        return [
            GroupRecord(
                id=row.id,
                code=row.code,
                name=row.name,
                is_active=row.is_active,
                permission_codes=frozenset(codes_by_group.get(row.id, ())),
            )
            for row in groups
        ]

    async def get_permission_records(self) -> list[PermissionRecord]:
        """Get every permission ordered by code."""
        result = await self.session.execute(
            select(
                Permission.code,
                Permission.name,
                Permission.parent_code,
                Permission.is_active,
                Permission.description,
            ).order_by(Permission.code)
        )
        return [
            PermissionRecord(
                code=row.code,
                name=row.name,
                parent_code=row.parent_code,
                is_active=row.is_active,
                description=row.description,
            )
            for row in result
        ]

    async def get_menu_records(self) -> list[MenuRecord]:
        """Get the full menu catalog, active and inactive.

        Rows come ordered by sort order then insertion sequence so equal
        sort orders keep insertion order.
        """
        result = await self.session.execute(
            select(
                Menu.id,
                Menu.name,
                Menu.path,
                Menu.icon,
                Menu.order,
                Menu.parent_id,
                Menu.is_active,
                Permission.code.label("permission_code"),
            )
            .join(Permission, Permission.id == Menu.permission_id)
            .order_by(Menu.order, Menu.seq)
        )
        return [
            MenuRecord(
                id=row.id,
                name=row.name,
                path=row.path,
                permission_code=row.permission_code,
                order=row.order,
                parent_id=row.parent_id,
                is_active=row.is_active,
                icon=row.icon,
            )
            for row in result
        ]

    async def load_snapshot(self, user_id: UUID) -> AccessSnapshot:
        """Load everything needed to resolve ``user_id``.

        An unknown user yields a snapshot without users; the resolver
        then raises UserNotFoundError.
        """
        user = await self.get_user_record(user_id)
        if user is None:
            return AccessSnapshot.build(
                permissions=await self.get_permission_records(),
                menus=await self.get_menu_records(),
            )

        return AccessSnapshot.build(
            users=[user],
            groups=await self.get_group_records(user.group_ids),
            permissions=await self.get_permission_records(),
            menus=await self.get_menu_records(),
        )


AccessRepo = Annotated[AccessRepository, Depends(AccessRepository)]
