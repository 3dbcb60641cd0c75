"""Import every ORM model so relationship targets are registered."""

from rbac_admin.core.permissions.models import (
    Group,
    Permission,
    group_permissions,
    user_groups,
)
from rbac_admin.modules.menus.models import Menu
from rbac_admin.modules.users.models import User


__all__ = [
    "Group",
    "Menu",
    "Permission",
    "User",
    "group_permissions",
    "user_groups",
]
