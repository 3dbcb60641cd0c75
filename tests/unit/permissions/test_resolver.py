"""Unit tests for effective permission resolution.

These tests verify the PermissionResolver logic including:
- Union over active groups
- Inactive group and inactive permission exclusion
- Unknown and deactivated users
"""

from uuid import uuid4

import pytest

from rbac_admin.core.errors import UserInactiveError, UserNotFoundError
from rbac_admin.core.permissions import (
    AccessSnapshot,
    PermissionResolver,
    resolve_effective_permissions,
)
from tests.factories.records import (
    GroupRecordFactory,
    PermissionRecordFactory,
    UserRecordFactory,
)


pytestmark = pytest.mark.unit


CODES = ["user.view", "user.edit", "group.view", "menu.view"]


def make_snapshot(
    *,
    group_b_active: bool = True,
    inactive_codes: frozenset[str] = frozenset(),
    user_active: bool = True,
):
    """User U1 in group A {user.view, user.edit} and group B {group.view}."""
    group_a = GroupRecordFactory.build(
        code="a", permission_codes=frozenset({"user.view", "user.edit"})
    )
    group_b = GroupRecordFactory.build(
        code="b", is_active=group_b_active, permission_codes=frozenset({"group.view"})
    )
    user = UserRecordFactory.build(
        is_active=user_active, group_ids=frozenset({group_a.id, group_b.id})
    )
    permissions = [
        PermissionRecordFactory.build(code=code, is_active=code not in inactive_codes)
        for code in CODES
    ]
    snapshot = AccessSnapshot.build(
        users=[user], groups=[group_a, group_b], permissions=permissions
    )
    return snapshot, user


class TestPermissionResolver:
    """Tests for PermissionResolver.resolve."""

    def test_union_of_group_codes(self) -> None:
        """Verify codes from every active group are combined."""
        snapshot, user = make_snapshot()

        result = PermissionResolver(snapshot).resolve(user.id)

        assert result == {"user.view", "user.edit", "group.view"}

    def test_inactive_group_contributes_nothing(self) -> None:
        """Verify an inactive group's codes are left out."""
        snapshot, user = make_snapshot(group_b_active=False)

        result = PermissionResolver(snapshot).resolve(user.id)

        assert result == {"user.view", "user.edit"}

    def test_inactive_permission_excluded(self) -> None:
        """Verify an inactive permission is excluded even when granted."""
        snapshot, user = make_snapshot(inactive_codes=frozenset({"user.edit"}))

        result = PermissionResolver(snapshot).resolve(user.id)

        assert result == {"user.view", "group.view"}

    def test_overlapping_grants_collapse(self) -> None:
        """Verify a code granted by two groups appears once."""
        group_a = GroupRecordFactory.build(permission_codes=frozenset({"user.view"}))
        group_b = GroupRecordFactory.build(
            permission_codes=frozenset({"user.view", "group.view"})
        )
        user = UserRecordFactory.build(group_ids=frozenset({group_a.id, group_b.id}))
        snapshot = AccessSnapshot.build(
            users=[user],
            groups=[group_a, group_b],
            permissions=[PermissionRecordFactory.build(code=c) for c in CODES],
        )

        assert resolve_effective_permissions(snapshot, user.id) == {
            "user.view",
            "group.view",
        }

    def test_resolution_is_idempotent(self) -> None:
        """Verify resolving twice over unchanged data gives the same set."""
        snapshot, user = make_snapshot()
        resolver = PermissionResolver(snapshot)

        assert resolver.resolve(user.id) == resolver.resolve(user.id)

    def test_parent_code_grants_nothing(self) -> None:
        """Verify holding a parent code does not grant its children."""
        parent = PermissionRecordFactory.build(code="reports")
        child = PermissionRecordFactory.build(code="reports.view", parent_code="reports")
        group = GroupRecordFactory.build(permission_codes=frozenset({"reports"}))
        user = UserRecordFactory.build(group_ids=frozenset({group.id}))
        snapshot = AccessSnapshot.build(
            users=[user], groups=[group], permissions=[parent, child]
        )

        assert resolve_effective_permissions(snapshot, user.id) == {"reports"}

    def test_child_code_does_not_require_parent(self) -> None:
        """Verify a child code is effective without its parent."""
        parent = PermissionRecordFactory.build(code="reports")
        child = PermissionRecordFactory.build(code="reports.view", parent_code="reports")
        group = GroupRecordFactory.build(permission_codes=frozenset({"reports.view"}))
        user = UserRecordFactory.build(group_ids=frozenset({group.id}))
        snapshot = AccessSnapshot.build(
            users=[user], groups=[group], permissions=[parent, child]
        )

        assert resolve_effective_permissions(snapshot, user.id) == {"reports.view"}

    def test_unknown_codes_and_groups_are_ignored(self) -> None:
        """Verify dangling codes and group ids contribute nothing."""
        group = GroupRecordFactory.build(
            permission_codes=frozenset({"user.view", "no.such.code"})
        )
        user = UserRecordFactory.build(group_ids=frozenset({group.id, uuid4()}))
        snapshot = AccessSnapshot.build(
            users=[user],
            groups=[group],
            permissions=[PermissionRecordFactory.build(code="user.view")],
        )

        assert resolve_effective_permissions(snapshot, user.id) == {"user.view"}


class TestEmptyPermissionSets:
    """Users that resolve to no permissions are valid."""

    def test_user_without_groups(self) -> None:
        user = UserRecordFactory.build()
        snapshot = AccessSnapshot.build(users=[user])

        assert PermissionResolver(snapshot).resolve(user.id) == frozenset()

    def test_groups_granting_only_inactive_codes(self) -> None:
        group = GroupRecordFactory.build(permission_codes=frozenset({"user.view"}))
        user = UserRecordFactory.build(group_ids=frozenset({group.id}))
        snapshot = AccessSnapshot.build(
            users=[user],
            groups=[group],
            permissions=[PermissionRecordFactory.build(code="user.view", is_active=False)],
        )

        assert PermissionResolver(snapshot).resolve(user.id) == frozenset()


class TestUserLookup:
    """Unknown and deactivated users fail resolution."""

    def test_unknown_user_raises(self) -> None:
        snapshot, _ = make_snapshot()
        missing = uuid4()

        with pytest.raises(UserNotFoundError) as exc_info:
            PermissionResolver(snapshot).resolve(missing)

        assert exc_info.value.user_id == missing
        assert exc_info.value.status_code == 404

    def test_inactive_user_raises(self) -> None:
        snapshot, user = make_snapshot(user_active=False)

        with pytest.raises(UserInactiveError) as exc_info:
            PermissionResolver(snapshot).resolve(user.id)

        assert exc_info.value.error_code == "user_inactive"
        assert exc_info.value.status_code == 403
