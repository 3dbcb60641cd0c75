"""Database layer - session management, base models, and mixins."""

from rbac_admin.core.database.base import (
    ActiveFlagMixin,
    Base,
    TimestampMixin,
    UUIDMixin,
)
from rbac_admin.core.database.session import (
    async_engine,
    async_session_factory,
    get_db,
)


__all__ = [
    "ActiveFlagMixin",
    "Base",
    "TimestampMixin",
    "UUIDMixin",
    "async_engine",
    "async_session_factory",
    "get_db",
]
