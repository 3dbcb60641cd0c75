"""In-memory catalog records used by permission resolution.

The resolver and the menu builder never touch the database. The data
layer reads users, groups, permissions and menus once per request and
hands them over as the frozen records below, bundled in an
``AccessSnapshot``.
"""

from collections.abc import Hashable, Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

from rbac_admin.core.errors import CatalogIntegrityError


@dataclass(frozen=True, slots=True)
class PermissionRecord:
    """A permission code and its state."""

    code: str
    name: str = ""
    parent_code: str | None = None
    is_active: bool = True
    description: str | None = None


@dataclass(frozen=True, slots=True)
class GroupRecord:
    """A group and the codes granted to it directly."""

    id: Hashable
    code: str = ""
    name: str = ""
    is_active: bool = True
    permission_codes: frozenset[str] = frozenset()


@dataclass(frozen=True, slots=True)
class UserRecord:
    """A user and the ids of the groups they belong to."""

    id: Hashable
    email: str = ""
    display_name: str = ""
    is_active: bool = True
    group_ids: frozenset[Hashable] = frozenset()


@dataclass(frozen=True, slots=True)
class MenuRecord:
    """A menu catalog entry."""

    id: Hashable
    name: str
    path: str
    permission_code: str
    order: int = 0
    parent_id: Hashable | None = None
    is_active: bool = True
    icon: str | None = None


@dataclass(frozen=True)
class AccessSnapshot:
    """Everything needed to resolve one user's access.

    Attributes:
        users: Users by id
        groups: Groups by id
        permissions: Permissions by code
        menus: The full menu catalog, active and inactive, in load order
    """

    users: Mapping[Hashable, UserRecord] = field(default_factory=dict)
    groups: Mapping[Hashable, GroupRecord] = field(default_factory=dict)
    permissions: Mapping[str, PermissionRecord] = field(default_factory=dict)
    menus: tuple[MenuRecord, ...] = ()

    @classmethod
    def build(
        cls,
        users: Iterable[UserRecord] = (),
        groups: Iterable[GroupRecord] = (),
        permissions: Iterable[PermissionRecord] = (),
        menus: Iterable[MenuRecord] = (),
    ) -> "AccessSnapshot":
        """Index record iterables into a snapshot."""
        return cls(
            users={user.id: user for user in users},
            groups={group.id: group for group in groups},
            permissions={permission.code: permission for permission in permissions},
            menus=tuple(menus),
        )

    def get_user(self, user_id: Hashable) -> UserRecord | None:
        return self.users.get(user_id)

    def get_groups(self, group_ids: Iterable[Hashable]) -> list[GroupRecord]:
        """Return the known groups among ``group_ids``; unknown ids are skipped."""
        return [self.groups[gid] for gid in group_ids if gid in self.groups]

    def active_permission_codes(self) -> frozenset[str]:
        return frozenset(
            code for code, permission in self.permissions.items() if permission.is_active
        )


# ============================================================
# Parent chains and the permission catalog
# ============================================================


def find_parent_cycle(
    start: Hashable,
    parent_of: Mapping[Any, Any],
) -> list[Any] | None:
    """Follow ``parent_of`` from ``start`` and return the cycle if there is one.

    Chains that leave the mapping (dangling parent) terminate normally.

    Returns:
        The ids forming the loop, first element repeated at the end,
        or None when the chain terminates.
    """
    seen: list[Any] = []
    positions: dict[Any, int] = {}
    current = start

    while current is not None and current in parent_of:
        if current in positions:
            loop = seen[positions[current] :]
            return [*loop, current]
        positions[current] = len(seen)
        seen.append(current)
        current = parent_of[current]

    return None


def find_cycle(parent_of: Mapping[Any, Any]) -> list[Any] | None:
    """Return the first parent cycle found anywhere in ``parent_of``.

    Every id is walked at most once, so the check is linear in the
    number of entries.
    """
    settled: set[Any] = set()

    for start in parent_of:
        path: list[Any] = []
        positions: dict[Any, int] = {}
        current = start
        while current is not None and current in parent_of and current not in settled:
            if current in positions:
                return [*path[positions[current] :], current]
            positions[current] = len(path)
            path.append(current)
            current = parent_of[current]
        settled.update(path)

    return None


class PermissionCatalog:
    """The full set of defined permission codes with their parent links."""

    def __init__(self, permissions: Iterable[PermissionRecord]) -> None:
        self._by_code: dict[str, PermissionRecord] = {}
        for permission in permissions:
            self._by_code[permission.code] = permission

    def __contains__(self, code: object) -> bool:
        return code in self._by_code

    def __len__(self) -> int:
        return len(self._by_code)

    def get(self, code: str) -> PermissionRecord | None:
        return self._by_code.get(code)

    def codes(self) -> list[str]:
        return sorted(self._by_code)

    def parent_links(self) -> dict[str, str | None]:
        return {code: p.parent_code for code, p in self._by_code.items()}

    def problems(self) -> list[dict[str, Any]]:
        """List every integrity problem in the catalog.

        Checks that each parent code references an existing, distinct
        permission and that no parent chain loops.
        """
        problems: list[dict[str, Any]] = []
        links = self.parent_links()
        reported: set[frozenset[str]] = set()

        for code in sorted(links):
            parent = links[code]
            if parent is None:
                continue
            if parent == code:
                problems.append({"code": code, "message": "Permission is its own parent"})
                reported.add(frozenset([code]))
                continue
            if parent not in links:
                problems.append(
                    {"code": code, "message": f"Unknown parent code: {parent}"}
                )
                continue
            cycle = find_parent_cycle(code, links)
            if cycle and frozenset(cycle) not in reported:
                reported.add(frozenset(cycle))
                problems.append(
                    {
                        "code": code,
                        "message": "Parent chain forms a cycle: " + " -> ".join(cycle),
                    }
                )

        return problems

    def validate(self) -> None:
        """Raise CatalogIntegrityError if ``problems()`` finds anything."""
        problems = self.problems()
        if problems:
            raise CatalogIntegrityError(
                "Permission catalog is inconsistent",
                details={"problems": problems},
            )

    def tree(self) -> list[dict[str, Any]]:
        """Group permissions under their parent code for display.

        Roots are permissions without a parent or whose parent is unknown;
        siblings are ordered by code. Codes caught in a parent cycle are
        not reachable from a root and are left out.
        """
        children: dict[str | None, list[PermissionRecord]] = {}
        for code in sorted(self._by_code):
            permission = self._by_code[code]
            parent = permission.parent_code
            if parent is None or parent == code or parent not in self._by_code:
                parent = None
            children.setdefault(parent, []).append(permission)

        def build(permission: PermissionRecord) -> dict[str, Any]:
            return {
                "code": permission.code,
                "name": permission.name,
                "description": permission.description,
                "is_active": permission.is_active,
                "children": [build(child) for child in children.get(permission.code, [])],
            }

        return [build(root) for root in children.get(None, [])]
