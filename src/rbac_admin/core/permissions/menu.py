"""Permission-filtered menu tree construction.

Visibility rules:
- an entry is visible only when it is active and its permission code is
  in the effective set
- an entry whose parent exists but is not visible is hidden together
  with its whole subtree
- an entry whose parent id matches nothing in the catalog is a root
- siblings are ordered by ``order``; ties keep catalog order
"""

from collections.abc import Callable, Hashable, Iterable, Set
from dataclasses import dataclass, field
import structlog

from rbac_admin.core.errors import CatalogIntegrityError
from rbac_admin.core.permissions.catalog import MenuRecord, find_cycle


logger = structlog.get_logger()


@dataclass(frozen=True, slots=True)
class MenuNode:
    """A visible menu entry with its visible children."""

    id: Hashable
    name: str
    path: str
    order: int
    permission_code: str
    icon: str | None = None
    is_active: bool = True
    children: tuple["MenuNode", ...] = field(default_factory=tuple)

    @classmethod
    def from_record(
        cls, record: MenuRecord, children: tuple["MenuNode", ...] = ()
    ) -> "MenuNode":
        return cls(
            id=record.id,
            name=record.name,
            path=record.path,
            order=record.order,
            permission_code=record.permission_code,
            icon=record.icon,
            is_active=record.is_active,
            children=children,
        )


def _sort_siblings(items: list[MenuRecord]) -> list[MenuRecord]:
    # sorted() is stable, so equal orders keep catalog order
    return sorted(items, key=lambda item: item.order)


class MenuTreeBuilder:
    """Builds ordered menu trees from a menu catalog.

    The catalog is indexed once (parent id to direct children); each
    ``build`` call then walks down from the roots.

    Raises:
        CatalogIntegrityError: If parent links in the catalog form a cycle
    """

    def __init__(self, catalog: Iterable[MenuRecord]) -> None:
        self.catalog: tuple[MenuRecord, ...] = tuple(catalog)
        self._check_cycles()

        known_ids = {item.id for item in self.catalog}
        self._roots: list[MenuRecord] = []
        self._children: dict[Hashable, list[MenuRecord]] = {}
        for item in self.catalog:
            if item.parent_id is None or item.parent_id not in known_ids:
                self._roots.append(item)
            else:
                self._children.setdefault(item.parent_id, []).append(item)

    def _check_cycles(self) -> None:
        cycle = find_cycle({item.id: item.parent_id for item in self.catalog})
        if cycle:
            ids = [str(menu_id) for menu_id in cycle]
            logger.error("menu_cycle_detected", cycle=ids)
            raise CatalogIntegrityError(
                "Menu catalog contains a parent cycle",
                details={"cycle": ids},
            )

    @staticmethod
    def is_visible(item: MenuRecord, permissions: Set[str]) -> bool:
        return item.is_active and item.permission_code in permissions

    def build(self, permissions: Set[str]) -> list[MenuNode]:
        """Return the ordered root nodes visible with ``permissions``."""
        if not permissions or not self.catalog:
            return []
        return self._assemble(lambda item: self.is_visible(item, permissions))

    def full_tree(self) -> list[MenuNode]:
        """Return the whole catalog as a tree, inactive entries included.

        Used by the menu administration screens.
        """
        return self._assemble(lambda item: True)

    def _assemble(self, include: Callable[[MenuRecord], bool]) -> list[MenuNode]:
        def included_sorted(items: list[MenuRecord]) -> list[MenuRecord]:
            return _sort_siblings([item for item in items if include(item)])

        roots = included_sorted(self._roots)

        # Pre-order walk over included entries; an excluded entry's
        # children are never reached.
        ordered: list[MenuRecord] = []
        kids_of: dict[Hashable, list[MenuRecord]] = {}
        visited: set[Hashable] = set()
        stack = list(reversed(roots))
        while stack:
            item = stack.pop()
            if item.id in visited:
                raise CatalogIntegrityError(
                    "Menu entry reached twice while building the tree",
                    details={"menu_id": str(item.id)},
                )
            visited.add(item.id)
            ordered.append(item)
            kids = included_sorted(self._children.get(item.id, []))
            kids_of[item.id] = kids
            stack.extend(reversed(kids))

        # Children come after their parent in pre-order, so building in
        # reverse order always finds them ready.
        built: dict[Hashable, MenuNode] = {}
        for item in reversed(ordered):
            children = tuple(built[kid.id] for kid in kids_of[item.id])
            built[item.id] = MenuNode.from_record(item, children)

        logger.debug(
            "menu_tree_built",
            catalog_size=len(self.catalog),
            included_count=len(ordered),
            root_count=len(roots),
        )
        return [built[root.id] for root in roots]


def build_menu_tree(
    catalog: Iterable[MenuRecord], permissions: Set[str]
) -> list[MenuNode]:
    """Shortcut for ``MenuTreeBuilder(catalog).build(permissions)``."""
    return MenuTreeBuilder(catalog).build(permissions)
