"""User database models."""

from typing import TYPE_CHECKING
from uuid import UUID

from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from rbac_admin.core.constants import MAX_EMAIL_LENGTH, MAX_NAME_LENGTH
from rbac_admin.core.database.base import (
    ActiveFlagMixin,
    Base,
    TimestampMixin,
    UUIDMixin,
)
from rbac_admin.core.permissions.models import user_groups


if TYPE_CHECKING:
    from rbac_admin.core.permissions.models import Group


class User(Base, UUIDMixin, TimestampMixin, ActiveFlagMixin):
    """User account.

    Attributes:
        email: Unique email address used to sign in
        display_name: Name shown in the dashboard
        password_hash: Bcrypt-hashed password
        is_active: Deactivated users cannot establish a session
    """

    __tablename__ = "users"

    email: Mapped[str] = mapped_column(
        String(MAX_EMAIL_LENGTH),
        unique=True,
        nullable=False,
        index=True,
    )
    display_name: Mapped[str] = mapped_column(
        String(MAX_NAME_LENGTH),
        nullable=False,
    )
    password_hash: Mapped[str | None] = mapped_column(
        Text,
        nullable=True,
    )

    groups: Mapped[list["Group"]] = relationship(
        "Group",
        secondary=user_groups,
        back_populates="users",
        lazy="selectin",
    )

    @property
    def group_ids(self) -> set[UUID]:
        """Ids of the groups this user belongs to."""
        return {group.id for group in self.groups}

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email={self.email})>"
