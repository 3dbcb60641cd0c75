"""Permission system database models.

This module defines the RBAC models:
- Permission: a grantable capability identified by a dotted code
- Group: a named set of permissions that users are assigned to
- group_permissions / user_groups: the many-to-many junction tables
"""

from typing import TYPE_CHECKING

from sqlalchemy import Column, ForeignKey, String, Table, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from rbac_admin.core.constants import (
    MAX_CODE_LENGTH,
    MAX_DESCRIPTION_LENGTH,
    MAX_NAME_LENGTH,
)
from rbac_admin.core.database.base import (
    ActiveFlagMixin,
    Base,
    TimestampMixin,
    UUIDMixin,
)


if TYPE_CHECKING:
    from rbac_admin.modules.menus.models import Menu
    from rbac_admin.modules.users.models import User


group_permissions = Table(
    "group_permissions",
    Base.metadata,
    Column(
        "group_id", Uuid, ForeignKey("groups.id", ondelete="CASCADE"), primary_key=True
    ),
    Column(
        "permission_id",
        Uuid,
        ForeignKey("permissions.id", ondelete="CASCADE"),
        primary_key=True,
    ),
)

user_groups = Table(
    "user_groups",
    Base.metadata,
    Column(
        "user_id", Uuid, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True
    ),
    Column(
        "group_id", Uuid, ForeignKey("groups.id", ondelete="CASCADE"), primary_key=True
    ),
)


class Permission(Base, UUIDMixin, TimestampMixin, ActiveFlagMixin):
    """Permission identified by a unique dotted code.

    Attributes:
        code: Unique identifier (e.g., "users.view", "system.manage")
        name: Display name
        description: Human-readable description
        parent_code: Optional code of the permission this one is grouped
            under. Display only; it never grants or requires anything.
        is_active: Inactive permissions are ignored during resolution
    """

    __tablename__ = "permissions"

    code: Mapped[str] = mapped_column(
        String(MAX_CODE_LENGTH),
        unique=True,
        nullable=False,
        index=True,
    )
    name: Mapped[str] = mapped_column(
        String(MAX_NAME_LENGTH),
        nullable=False,
    )
    description: Mapped[str | None] = mapped_column(
        String(MAX_DESCRIPTION_LENGTH),
        nullable=True,
    )
    parent_code: Mapped[str | None] = mapped_column(
        String(MAX_CODE_LENGTH),
        nullable=True,
        index=True,
    )

    groups: Mapped[list["Group"]] = relationship(
        "Group",
        secondary=group_permissions,
        back_populates="permissions",
    )
    menus: Mapped[list["Menu"]] = relationship(
        "Menu",
        back_populates="permission",
    )

    def __repr__(self) -> str:
        return f"<Permission({self.code})>"


class Group(Base, UUIDMixin, TimestampMixin, ActiveFlagMixin):
    """Named collection of permissions assignable to users.

    A user's effective permissions are the union of the active
    permissions of all their active groups.
    """

    __tablename__ = "groups"

    code: Mapped[str] = mapped_column(
        String(MAX_CODE_LENGTH),
        unique=True,
        nullable=False,
        index=True,
    )
    name: Mapped[str] = mapped_column(
        String(MAX_NAME_LENGTH),
        nullable=False,
    )
    description: Mapped[str | None] = mapped_column(
        String(MAX_DESCRIPTION_LENGTH),
        nullable=True,
    )

    permissions: Mapped[list["Permission"]] = relationship(
        "Permission",
        secondary=group_permissions,
        back_populates="groups",
        lazy="selectin",
    )
    users: Mapped[list["User"]] = relationship(
        "User",
        secondary=user_groups,
        back_populates="groups",
    )

    @property
    def permission_codes(self) -> set[str]:
        """Codes directly granted to this group."""
        return {permission.code for permission in self.permissions}

    def __repr__(self) -> str:
        return f"<Group(id={self.id}, code={self.code}, active={self.is_active})>"
