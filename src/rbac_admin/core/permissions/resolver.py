"""Effective permission resolution.

A user's effective permission set is the union of the permission codes
granted to each of their active groups, restricted to codes whose
permission record is active. ``parent_code`` plays no part: holding a
permission neither implies its children nor requires its parent.
"""

from collections.abc import Hashable

import structlog

from rbac_admin.core.errors import UserInactiveError, UserNotFoundError
from rbac_admin.core.permissions.catalog import AccessSnapshot, UserRecord


logger = structlog.get_logger()


class PermissionResolver:
    """Computes effective permission sets from an ``AccessSnapshot``.

    The resolver is stateless apart from the snapshot it reads, so the
    same instance may serve concurrent resolutions.
    """

    def __init__(self, snapshot: AccessSnapshot) -> None:
        self.snapshot = snapshot

    def get_active_user(self, user_id: Hashable) -> UserRecord:
        """Look up a user that is allowed to hold a session.

        Raises:
            UserNotFoundError: If the id is unknown
            UserInactiveError: If the user is deactivated
        """
        user = self.snapshot.get_user(user_id)
        if user is None:
            raise UserNotFoundError(user_id)
        if not user.is_active:
            raise UserInactiveError(user_id)
        return user

    def resolve(self, user_id: Hashable) -> frozenset[str]:
        """Return the effective permission codes of a user.

        Group ids that are not in the snapshot and codes that are unknown
        or inactive contribute nothing.

        Raises:
            UserNotFoundError: If the id is unknown
            UserInactiveError: If the user is deactivated
        """
        user = self.get_active_user(user_id)
        active_codes = self.snapshot.active_permission_codes()

        granted: set[str] = set()
        active_groups = 0
        for group in self.snapshot.get_groups(user.group_ids):
            if not group.is_active:
                continue
            active_groups += 1
            granted.update(group.permission_codes & active_codes)

        logger.debug(
            "permissions_resolved",
            user_id=str(user_id),
            group_count=len(user.group_ids),
            active_group_count=active_groups,
            permission_count=len(granted),
        )
        return frozenset(granted)


def resolve_effective_permissions(
    snapshot: AccessSnapshot, user_id: Hashable
) -> frozenset[str]:
    """Shortcut for ``PermissionResolver(snapshot).resolve(user_id)``."""
    return PermissionResolver(snapshot).resolve(user_id)
