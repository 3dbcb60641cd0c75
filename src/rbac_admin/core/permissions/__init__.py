"""Permission system: effective permission resolution and menu filtering."""

from rbac_admin.core.permissions.catalog import (
    AccessSnapshot,
    GroupRecord,
    MenuRecord,
    PermissionCatalog,
    PermissionRecord,
    UserRecord,
)
from rbac_admin.core.permissions.menu import MenuNode, MenuTreeBuilder, build_menu_tree
from rbac_admin.core.permissions.resolver import (
    PermissionResolver,
    resolve_effective_permissions,
)
from rbac_admin.core.permissions.roles import (
    PROJECT_ROLE_ACTIONS,
    ProjectRole,
    can_perform,
)
from rbac_admin.core.permissions.session import SessionState, SessionView, compose_session


__all__ = [
    "PROJECT_ROLE_ACTIONS",
    "AccessSnapshot",
    "GroupRecord",
    "MenuNode",
    "MenuRecord",
    "MenuTreeBuilder",
    "PermissionCatalog",
    "PermissionRecord",
    "PermissionResolver",
    "ProjectRole",
    "SessionState",
    "SessionView",
    "UserRecord",
    "build_menu_tree",
    "can_perform",
    "compose_session",
    "resolve_effective_permissions",
]
