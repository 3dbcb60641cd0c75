"""Integration tests for loading access data and resolving sessions.

These tests run the full read path against the database:
- AccessRepository snapshots
- SessionState refresh
- PermissionChecker
"""

from uuid import UUID, uuid4

import pytest
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from rbac_admin.core.errors import UserInactiveError, UserNotFoundError
from rbac_admin.core.permissions.checker import PermissionChecker
from rbac_admin.core.permissions.menu import MenuTreeBuilder
from rbac_admin.core.permissions.models import Permission
from rbac_admin.core.permissions.repos import AccessRepository
from rbac_admin.core.permissions.session import SessionState
from rbac_admin.modules.groups.repos import GroupRepository
from rbac_admin.modules.menus.models import Menu, next_menu_seq
from rbac_admin.modules.menus.repos import MenuRepository
from rbac_admin.modules.permissions.repos import PermissionRepository
from rbac_admin.modules.users.models import User


pytestmark = pytest.mark.integration


class TestAccessRepository:
    """Tests for AccessRepository.load_snapshot."""

    async def test_snapshot_contains_user_groups_and_catalog(
        self, db: AsyncSession, admin_user: User
    ) -> None:
        snapshot = await AccessRepository(db).load_snapshot(admin_user.id)

        user = snapshot.get_user(admin_user.id)
        assert user is not None
        assert user.email == "admin@example.com"
        assert [g.code for g in snapshot.get_groups(user.group_ids)] == ["admin"]
        assert snapshot.permissions["reports.archive"].is_active is False
        assert {m.path for m in snapshot.menus} == {
            "/dashboard",
            "/reports",
            "/reports/archive",
            "/admin/users",
        }

    async def test_menus_come_in_sort_order(
        self, db: AsyncSession, seeded
    ) -> None:
        menus = await AccessRepository(db).get_menu_records()

        orders = [m.order for m in menus]
        assert orders == sorted(orders)

    async def test_unknown_user_snapshot_has_no_users(self, db: AsyncSession, seeded) -> None:
        snapshot = await AccessRepository(db).load_snapshot(uuid4())

        assert snapshot.users == {}
        assert snapshot.menus


class TestSessionRefresh:
    """Tests for SessionState against stored data."""

    async def test_admin_session(self, db: AsyncSession, admin_user: User) -> None:
        view = await SessionState(admin_user.id).refresh(AccessRepository(db))

        assert "users.manage" in view.effective_permissions
        assert list(view.effective_permissions) == sorted(view.effective_permissions)
        assert [n.path for n in view.menu_tree] == ["/dashboard", "/reports", "/admin/users"]
        assert [c.path for c in view.menu_tree[1].children] == ["/reports/archive"]

    async def test_member_session_hides_child_of_hidden_parent(
        self, db: AsyncSession, member_user: User
    ) -> None:
        view = await SessionState(member_user.id).refresh(AccessRepository(db))

        # reports.archive is granted but inactive
        assert view.effective_permissions == ("dashboard.view",)
        assert [n.path for n in view.menu_tree] == ["/dashboard"]

    async def test_refresh_sees_group_changes(
        self, db: AsyncSession, admin_user: User
    ) -> None:
        state = SessionState(admin_user.id)
        repository = AccessRepository(db)
        await state.refresh(repository)

        group = await GroupRepository(db).get_by_code("admin")
        group.is_active = False
        await db.flush()

        view = await state.refresh(repository)

        assert view.effective_permissions == ()
        assert view.menu_tree == ()

    async def test_inactive_user_cannot_refresh(
        self, db: AsyncSession, inactive_user: User
    ) -> None:
        with pytest.raises(UserInactiveError):
            await SessionState(inactive_user.id).refresh(AccessRepository(db))

    async def test_unknown_user_cannot_refresh(self, db: AsyncSession, seeded) -> None:
        with pytest.raises(UserNotFoundError):
            await SessionState(uuid4()).refresh(AccessRepository(db))


class TestPermissionChecker:
    """Tests for PermissionChecker."""

    async def test_checks(self, db: AsyncSession, member_user: User) -> None:
        checker = PermissionChecker(db)

        assert await checker.has_permission(member_user.id, "dashboard.view")
        assert not await checker.has_permission(member_user.id, "reports.archive")
        assert await checker.has_any_permission(
            member_user.id, ["users.view", "dashboard.view"]
        )
        assert not await checker.has_all_permissions(
            member_user.id, ["users.view", "dashboard.view"]
        )


class TestSiblingTies:
    """Equal sort orders come back in insertion order."""

    async def test_equal_orders_keep_insertion_order(
        self, db: AsyncSession, seeded
    ) -> None:
        permissions = PermissionRepository(db)
        for code in ("tie.a", "tie.b", "tie.c"):
            await permissions.create(Permission(code=code, name=code))

        menus = MenuRepository(db)
        reports = await menus.get_by_path("/reports")
        # Ids and permission codes both run against insertion order
        for n, code in enumerate(["tie.c", "tie.b", "tie.a"]):
            await menus.create(
                Menu(
                    id=UUID(int=100 - n),
                    name=f"N{n}",
                    path=f"/reports/n{n}",
                    order=5,
                    parent_id=reports.id,
                    permission=await permissions.get_by_code(code),
                )
            )

        records = await AccessRepository(db).get_menu_records()
        tied = [m.name for m in records if m.order == 5]
        assert tied == ["N0", "N1", "N2"]

        tree = MenuTreeBuilder(records).full_tree()
        reports_node = next(node for node in tree if node.path == "/reports")
        assert [c.name for c in reports_node.children] == [
            "Report Archive",
            "N0",
            "N1",
            "N2",
        ]

    async def test_rows_in_one_transaction_get_distinct_stamps(
        self, db: AsyncSession, seeded
    ) -> None:
        result = await db.execute(select(Menu.path, Menu.seq).order_by(Menu.seq))
        rows = result.all()

        # apply_seed writes the menus in file order within one transaction
        assert [path for path, _ in rows] == [
            "/dashboard",
            "/reports",
            "/reports/archive",
            "/admin/users",
        ]
        assert len({seq for _, seq in rows}) == len(rows)


def test_next_menu_seq_is_strictly_increasing() -> None:
    stamps = [next_menu_seq() for _ in range(1000)]

    assert stamps == sorted(set(stamps))
