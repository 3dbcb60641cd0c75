"""Session composition.

On session start or refresh the user's groups are resolved into an
effective permission set, the menu catalog is filtered with it, and the
three results are returned together as one ``SessionView``.
"""

from collections.abc import Hashable
from dataclasses import dataclass
from typing import TYPE_CHECKING

import structlog

from rbac_admin.core.permissions.catalog import AccessSnapshot, UserRecord
from rbac_admin.core.permissions.menu import MenuNode, MenuTreeBuilder
from rbac_admin.core.permissions.resolver import PermissionResolver


if TYPE_CHECKING:
    from rbac_admin.core.permissions.repos import AccessRepository


logger = structlog.get_logger()


@dataclass(frozen=True, slots=True)
class SessionView:
    """Everything the dashboard needs about the signed-in user.

    Attributes:
        user: The resolved user record
        effective_permissions: Sorted permission codes
        menu_tree: Visible menu roots, ordered
    """

    user: UserRecord
    effective_permissions: tuple[str, ...]
    menu_tree: tuple[MenuNode, ...]

    def has_permission(self, code: str) -> bool:
        return code in self.effective_permissions


def compose_session(snapshot: AccessSnapshot, user_id: Hashable) -> SessionView:
    """Resolve permissions and the menu tree for ``user_id``.

    Raises:
        UserNotFoundError: If the id is unknown
        UserInactiveError: If the user is deactivated
        CatalogIntegrityError: If the menu catalog contains a cycle
    """
    resolver = PermissionResolver(snapshot)
    user = resolver.get_active_user(user_id)
    permissions = resolver.resolve(user_id)
    menu_tree = MenuTreeBuilder(snapshot.menus).build(permissions)

    return SessionView(
        user=user,
        effective_permissions=tuple(sorted(permissions)),
        menu_tree=tuple(menu_tree),
    )


class SessionState:
    """Explicit per-user session object.

    Request handlers receive the state by reference. ``refresh`` computes a
    complete new view before swapping it in, so readers only ever see the
    previous view or the new one, never a mix. A failed refresh keeps the
    previous view.
    """

    def __init__(self, user_id: Hashable, view: SessionView | None = None) -> None:
        self.user_id = user_id
        self._view = view

    @property
    def current(self) -> SessionView | None:
        return self._view

    @property
    def is_established(self) -> bool:
        return self._view is not None

    def refresh_from(self, snapshot: AccessSnapshot) -> SessionView:
        """Recompute the view from an already loaded snapshot."""
        view = compose_session(snapshot, self.user_id)
        self._view = view
        logger.info(
            "session_refreshed",
            user_id=str(self.user_id),
            permission_count=len(view.effective_permissions),
            menu_root_count=len(view.menu_tree),
        )
        return view

    async def refresh(self, repository: "AccessRepository") -> SessionView:
        """Reload the user's access data and recompute the view."""
        snapshot = await repository.load_snapshot(self.user_id)
        return self.refresh_from(snapshot)
