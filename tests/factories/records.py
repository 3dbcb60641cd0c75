"""Factories for the in-memory access records."""

from collections.abc import Hashable
from uuid import uuid4

from polyfactory.factories import DataclassFactory

from rbac_admin.core.permissions.catalog import (
    GroupRecord,
    MenuRecord,
    PermissionRecord,
    UserRecord,
)


class PermissionRecordFactory(DataclassFactory[PermissionRecord]):
    """Factory for active, parentless permission records."""

    __model__ = PermissionRecord

    @classmethod
    def code(cls) -> str:
        return f"perm.{uuid4().hex[:8]}"

    @classmethod
    def parent_code(cls) -> str | None:
        return None

    @classmethod
    def is_active(cls) -> bool:
        return True

    @classmethod
    def description(cls) -> str | None:
        return None


class GroupRecordFactory(DataclassFactory[GroupRecord]):
    """Factory for active groups without grants."""

    __model__ = GroupRecord

    @classmethod
    def id(cls) -> Hashable:
        return uuid4()

    @classmethod
    def code(cls) -> str:
        return f"group-{uuid4().hex[:8]}"

    @classmethod
    def is_active(cls) -> bool:
        return True

    @classmethod
    def permission_codes(cls) -> frozenset[str]:
        return frozenset()


class UserRecordFactory(DataclassFactory[UserRecord]):
    """Factory for active users without groups."""

    __model__ = UserRecord

    @classmethod
    def id(cls) -> Hashable:
        return uuid4()

    @classmethod
    def email(cls) -> str:
        return f"user-{uuid4().hex[:8]}@example.com"

    @classmethod
    def is_active(cls) -> bool:
        return True

    @classmethod
    def group_ids(cls) -> frozenset[Hashable]:
        return frozenset()


class MenuRecordFactory(DataclassFactory[MenuRecord]):
    """Factory for active top-level menu entries."""

    __model__ = MenuRecord

    @classmethod
    def id(cls) -> Hashable:
        return uuid4()

    @classmethod
    def path(cls) -> str:
        return f"/{uuid4().hex[:8]}"

    @classmethod
    def order(cls) -> int:
        return 0

    @classmethod
    def parent_id(cls) -> Hashable | None:
        return None

    @classmethod
    def is_active(cls) -> bool:
        return True

    @classmethod
    def icon(cls) -> str | None:
        return None
