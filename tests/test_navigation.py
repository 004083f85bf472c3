"""Tests for descendant and ancestor lookup."""

from __future__ import annotations

from dataclasses import dataclass, field

import pytest
from symbolwalk.syntax import (
    TreeSitterLanguage,
    find_descendants,
    find_first_descendant,
    find_nearest_ancestor,
    iter_descendants,
    parse_source,
)

# =============================================================================
# FIXTURES
# =============================================================================


@dataclass(eq=False)
class FakeNode:
    """Minimal syntax node: a type tag, ordered children and a parent link."""

    type: str
    children: list[FakeNode] = field(default_factory=list)
    parent: FakeNode | None = None

    def __repr__(self) -> str:
        return f"FakeNode({self.type!r})"


class ClassNode(FakeNode):
    """Object-model node matched by Python class."""


def build(node: FakeNode, *children: FakeNode) -> FakeNode:
    node.children = list(children)
    for child in children:
        child.parent = node
    return node


@pytest.fixture
def sample_tree() -> dict[str, FakeNode]:
    """unit > [class_a > [method_a > [class_nested]], block > [class_b, stmt]]"""
    nodes = {
        "unit": FakeNode("unit"),
        "class_a": FakeNode("class"),
        "method_a": FakeNode("method"),
        "class_nested": FakeNode("class"),
        "block": FakeNode("block"),
        "class_b": FakeNode("class"),
        "stmt": FakeNode("statement"),
    }
    build(nodes["method_a"], nodes["class_nested"])
    build(nodes["class_a"], nodes["method_a"])
    build(nodes["block"], nodes["class_b"], nodes["stmt"])
    build(nodes["unit"], nodes["class_a"], nodes["block"])
    return nodes


PYTHON_SOURCE = """\
class Outer:
    class Nested:
        def deep(self):
            pass

    def method(self):
        return 1


def top():
    pass
"""


# =============================================================================
# DESCENDANTS
# =============================================================================


class TestFindDescendants:
    """Tests for find_descendants."""

    def test_first_match_per_branch(self, sample_tree: dict[str, FakeNode]) -> None:
        """Test that nodes nested inside a match are not reported."""
        found = find_descendants(sample_tree["unit"], "class")
        assert found == [sample_tree["class_a"], sample_tree["class_b"]]
        assert sample_tree["class_nested"] not in found

    def test_start_node_can_match(self, sample_tree: dict[str, FakeNode]) -> None:
        """Test that the start node itself is included."""
        assert find_descendants(sample_tree["class_a"], "class") == [sample_tree["class_a"]]

    def test_preorder_left_to_right(self, sample_tree: dict[str, FakeNode]) -> None:
        """Test result ordering across several kinds."""
        found = find_descendants(sample_tree["unit"], {"method", "statement", "block"})
        assert found == [sample_tree["method_a"], sample_tree["block"]]

    def test_exclusion_prunes_subtree(self, sample_tree: dict[str, FakeNode]) -> None:
        """Test that an excluded node and its descendants are skipped."""
        found = find_descendants(sample_tree["unit"], "class", exclude=[sample_tree["block"]])
        assert found == [sample_tree["class_a"]]

    def test_excluded_match_reveals_nothing_below(self, sample_tree: dict[str, FakeNode]) -> None:
        """Test that excluding a match does not expose nested matches."""
        found = find_descendants(sample_tree["unit"], "class", exclude=[sample_tree["class_a"]])
        assert found == [sample_tree["class_b"]]
        assert sample_tree["class_nested"] not in found

    def test_excluded_start_node(self, sample_tree: dict[str, FakeNode]) -> None:
        """Test that excluding the start node yields nothing."""
        assert find_descendants(sample_tree["class_a"], "class", exclude=[sample_tree["class_a"]]) == []

    def test_no_match(self, sample_tree: dict[str, FakeNode]) -> None:
        """Test a kind that does not occur."""
        assert find_descendants(sample_tree["unit"], "interface") == []

    def test_match_by_python_class(self) -> None:
        """Test matching object-model nodes with isinstance."""
        inner = ClassNode("class")
        root = build(FakeNode("unit"), build(FakeNode("block"), inner), ClassNode("class"))
        found = find_descendants(root, ClassNode)
        assert found == [inner, root.children[1]]

    def test_iterator_is_lazy(self, sample_tree: dict[str, FakeNode]) -> None:
        """Test that iter_descendants yields one match at a time."""
        matches = iter_descendants(sample_tree["unit"], "class")
        assert next(matches) is sample_tree["class_a"]
        assert next(matches) is sample_tree["class_b"]
        with pytest.raises(StopIteration):
            next(matches)

    def test_find_first_descendant(self, sample_tree: dict[str, FakeNode]) -> None:
        """Test finding only the first match."""
        assert find_first_descendant(sample_tree["unit"], "statement") is sample_tree["stmt"]
        assert find_first_descendant(sample_tree["unit"], "missing") is None

    def test_deep_tree(self) -> None:
        """Test that very deep trees do not hit the recursion limit."""
        root = FakeNode("unit")
        current = root
        for _ in range(5000):
            current = build(current, FakeNode("wrapper")).children[0]
        leaf = build(current, FakeNode("leaf")).children[0]
        assert find_descendants(root, "leaf") == [leaf]


# =============================================================================
# ANCESTORS
# =============================================================================


class TestFindNearestAncestor:
    """Tests for find_nearest_ancestor."""

    def test_nearest_match(self, sample_tree: dict[str, FakeNode]) -> None:
        """Test walking up to the closest ancestor of a kind."""
        assert find_nearest_ancestor(sample_tree["class_nested"], "method") is sample_tree["method_a"]
        assert find_nearest_ancestor(sample_tree["stmt"], "unit") is sample_tree["unit"]

    def test_inclusive(self, sample_tree: dict[str, FakeNode]) -> None:
        """Test that the start node is returned when it matches."""
        assert find_nearest_ancestor(sample_tree["class_nested"], "class") is sample_tree["class_nested"]

    def test_not_found(self, sample_tree: dict[str, FakeNode]) -> None:
        """Test that None is returned when the root is passed."""
        assert find_nearest_ancestor(sample_tree["stmt"], "class") is None
        assert find_nearest_ancestor(sample_tree["unit"], "class") is None

    def test_none_start(self) -> None:
        """Test that a missing start node is not an error."""
        assert find_nearest_ancestor(None, "class") is None


# =============================================================================
# TREE-SITTER TREES
# =============================================================================


class TestTreeSitterNodes:
    """Tests running the helpers on real tree-sitter trees."""

    def test_find_classes_prunes_nested(self) -> None:
        """Test first-match pruning on a Python module."""
        root = parse_source(PYTHON_SOURCE, TreeSitterLanguage.PYTHON).root_node
        classes = find_descendants(root, "class_definition")
        assert [c.child_by_field_name("name").text for c in classes] == [b"Outer"]

    def test_find_functions_excluding_class(self) -> None:
        """Test excluding a subtree of a real tree."""
        root = parse_source(PYTHON_SOURCE, TreeSitterLanguage.PYTHON).root_node
        outer = find_first_descendant(root, "class_definition")
        functions = find_descendants(root, "function_definition", exclude=[outer])
        assert [f.child_by_field_name("name").text for f in functions] == [b"top"]

    def test_tokens_are_not_child_nodes(self) -> None:
        """Test that anonymous tokens are never matched."""
        root = parse_source(PYTHON_SOURCE, TreeSitterLanguage.PYTHON).root_node
        assert find_descendants(root, ":") == []

    def test_nearest_class_of_statement(self) -> None:
        """Test walking up from a statement to its class."""
        root = parse_source(PYTHON_SOURCE, TreeSitterLanguage.PYTHON).root_node
        outer = find_first_descendant(root, "class_definition")
        nested = find_first_descendant(outer.child_by_field_name("body"), "class_definition")
        pass_statement = find_first_descendant(nested, "pass_statement")

        found = find_nearest_ancestor(pass_statement, "class_definition")
        assert found == nested
        assert find_nearest_ancestor(pass_statement, "module") == root
        assert find_nearest_ancestor(root, "class_definition") is None
