"""Menu database models."""

import threading
import time
from uuid import UUID

from sqlalchemy import BigInteger, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from rbac_admin.core.constants import MAX_ICON_LENGTH, MAX_NAME_LENGTH, MAX_PATH_LENGTH
from rbac_admin.core.database.base import (
    ActiveFlagMixin,
    Base,
    TimestampMixin,
    UUIDMixin,
)
from rbac_admin.core.permissions.models import Permission


_seq_lock = threading.Lock()
_last_seq = 0


def next_menu_seq() -> int:
    """Return a strictly increasing nanosecond stamp.

    Evaluated per INSERT, so the stamp records when the row was written
    even when many rows share one transaction and one ``created_at``.
    """
    global _last_seq
    with _seq_lock:
        _last_seq = max(time.time_ns(), _last_seq + 1)
        return _last_seq


class Menu(Base, UUIDMixin, TimestampMixin, ActiveFlagMixin):
    """Navigation entry gated by exactly one permission.

    Attributes:
        name: Display label
        path: Unique route path in the dashboard
        icon: Icon identifier for the UI
        order: Sort key among siblings (stored as ``sort_order``)
        seq: Insertion stamp; breaks ties between equal sort orders
        permission_id: The permission a user needs to see this entry
        parent_id: Optional parent entry
    """

    __tablename__ = "menus"

    name: Mapped[str] = mapped_column(
        String(MAX_NAME_LENGTH),
        nullable=False,
    )
    path: Mapped[str] = mapped_column(
        String(MAX_PATH_LENGTH),
        unique=True,
        nullable=False,
    )
    icon: Mapped[str | None] = mapped_column(
        String(MAX_ICON_LENGTH),
        nullable=True,
    )
    order: Mapped[int] = mapped_column(
        "sort_order",
        Integer,
        default=0,
        nullable=False,
    )
    seq: Mapped[int] = mapped_column(
        "insert_seq",
        BigInteger,
        default=next_menu_seq,
        nullable=False,
    )
    permission_id: Mapped[UUID] = mapped_column(
        ForeignKey("permissions.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )
    parent_id: Mapped[UUID | None] = mapped_column(
        ForeignKey("menus.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )

    permission: Mapped["Permission"] = relationship(
        "Permission",
        back_populates="menus",
        lazy="selectin",
    )

    @property
    def permission_code(self) -> str:
        """Code of the gating permission."""
        return self.permission.code

    def __repr__(self) -> str:
        return f"<Menu(id={self.id}, path={self.path}, order={self.order})>"
