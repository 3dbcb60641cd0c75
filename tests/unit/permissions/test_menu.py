"""Unit tests for permission-filtered menu trees."""

from uuid import uuid4

import pytest

from rbac_admin.core.errors import CatalogIntegrityError
from rbac_admin.core.permissions import MenuTreeBuilder, build_menu_tree
from tests.factories.records import MenuRecordFactory


pytestmark = pytest.mark.unit


def names(nodes) -> list[str]:
    return [node.name for node in nodes]


class TestMenuFiltering:
    """Tests for visibility rules."""

    def test_child_of_hidden_parent_is_excluded(self) -> None:
        """Verify a granted child under a hidden parent is not promoted to root."""
        m1 = MenuRecordFactory.build(name="M1", permission_code="dashboard.view")
        m2 = MenuRecordFactory.build(
            name="M2", permission_code="user.view", parent_id=m1.id
        )

        assert build_menu_tree([m1, m2], {"user.view"}) == []

    def test_child_of_visible_parent_is_attached(self) -> None:
        m1 = MenuRecordFactory.build(name="M1", permission_code="dashboard.view")
        m2 = MenuRecordFactory.build(
            name="M2", permission_code="user.view", parent_id=m1.id
        )

        tree = build_menu_tree([m1, m2], {"dashboard.view", "user.view"})

        assert names(tree) == ["M1"]
        assert names(tree[0].children) == ["M2"]

    def test_inactive_entry_hidden_with_subtree(self) -> None:
        parent = MenuRecordFactory.build(
            name="Parent", permission_code="a", is_active=False
        )
        child = MenuRecordFactory.build(name="Child", permission_code="a", parent_id=parent.id)

        assert build_menu_tree([parent, child], {"a"}) == []

    def test_dangling_parent_makes_root(self) -> None:
        """Verify an entry whose parent id matches nothing becomes a root."""
        item = MenuRecordFactory.build(name="Lost", permission_code="a", parent_id=uuid4())

        assert names(build_menu_tree([item], {"a"})) == ["Lost"]

    def test_empty_inputs(self) -> None:
        item = MenuRecordFactory.build(permission_code="a")

        assert build_menu_tree([], {"a"}) == []
        assert build_menu_tree([item], set()) == []

    def test_ungranted_code_hidden(self) -> None:
        item = MenuRecordFactory.build(permission_code="a")

        assert build_menu_tree([item], {"b"}) == []


class TestMenuOrdering:
    """Tests for sibling order and depth."""

    def test_siblings_sorted_by_order(self) -> None:
        items = [
            MenuRecordFactory.build(name=f"order-{order}", order=order, permission_code="a")
            for order in (3, 1, 2)
        ]

        tree = build_menu_tree(items, {"a"})

        assert [node.order for node in tree] == [1, 2, 3]

    def test_ties_keep_catalog_order(self) -> None:
        items = [
            MenuRecordFactory.build(name=name, order=1, permission_code="a")
            for name in ("zeta", "alpha", "mid")
        ]

        assert names(build_menu_tree(items, {"a"})) == ["zeta", "alpha", "mid"]

    def test_children_sorted_independently(self) -> None:
        root = MenuRecordFactory.build(name="root", permission_code="a")
        kids = [
            MenuRecordFactory.build(
                name=f"kid-{order}", order=order, permission_code="a", parent_id=root.id
            )
            for order in (2, 1)
        ]

        tree = build_menu_tree([*kids, root], {"a"})

        assert names(tree[0].children) == ["kid-1", "kid-2"]

    def test_arbitrary_depth(self) -> None:
        chain = [MenuRecordFactory.build(name="level-0", permission_code="a")]
        for level in range(1, 50):
            chain.append(
                MenuRecordFactory.build(
                    name=f"level-{level}", permission_code="a", parent_id=chain[-1].id
                )
            )

        node = build_menu_tree(list(reversed(chain)), {"a"})[0]
        depth = 1
        while node.children:
            node = node.children[0]
            depth += 1

        assert depth == 50
        assert node.name == "level-49"


class TestMenuTreeBuilder:
    """Tests for catalog indexing and integrity."""

    def test_cycle_raises_integrity_error(self) -> None:
        a_id, b_id = uuid4(), uuid4()
        a = MenuRecordFactory.build(id=a_id, parent_id=b_id, permission_code="x")
        b = MenuRecordFactory.build(id=b_id, parent_id=a_id, permission_code="x")

        with pytest.raises(CatalogIntegrityError) as exc_info:
            MenuTreeBuilder([a, b])

        assert exc_info.value.error_code == "catalog_integrity"
        assert str(a_id) in exc_info.value.details["cycle"]

    def test_self_parent_raises_integrity_error(self) -> None:
        item_id = uuid4()
        item = MenuRecordFactory.build(id=item_id, parent_id=item_id, permission_code="x")

        with pytest.raises(CatalogIntegrityError):
            MenuTreeBuilder([item])

    def test_builder_reused_across_permission_sets(self) -> None:
        a = MenuRecordFactory.build(name="A", permission_code="a")
        b = MenuRecordFactory.build(name="B", permission_code="b")
        builder = MenuTreeBuilder([a, b])

        assert names(builder.build({"a"})) == ["A"]
        assert names(builder.build({"b"})) == ["B"]

    def test_full_tree_includes_inactive(self) -> None:
        a = MenuRecordFactory.build(name="A", permission_code="a", is_active=False)
        b = MenuRecordFactory.build(name="B", permission_code="b", parent_id=a.id)

        tree = MenuTreeBuilder([a, b]).full_tree()

        assert names(tree) == ["A"]
        assert tree[0].is_active is False
        assert names(tree[0].children) == ["B"]
