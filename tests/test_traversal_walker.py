"""Tests for document-order navigation."""

import sys
from pathlib import Path

import pytest

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from partialtreelib import InMemoryHierarchyAdapter, TraversalWalker
from partialtreelib.testing import build_adapter, build_chain, build_wide_tree, preorder

SMALL_TREE = ("A", [("B", ["D", "E"]), "C"])


@pytest.fixture
def small_tree():
    return build_adapter(SMALL_TREE)


def titles(nodes):
    return [node.title() for node in nodes]


def typed_adapter():
    """Folder(1) -> [Page(2), Folder(3) -> [Page(4), Page(5)], Page(6)]"""
    adapter = InMemoryHierarchyAdapter()
    adapter.add(1, title="site", type="Folder")
    adapter.add(2, parent_id=1, title="home", type="Page")
    adapter.add(3, parent_id=1, title="docs", type="Folder")
    adapter.add(4, parent_id=3, title="intro", type="Page")
    adapter.add(5, parent_id=3, title="usage", type="Page")
    adapter.add(6, parent_id=1, title="contact", type="Page")
    return adapter


class TestNaturalNext:
    """Stepping forward one node at a time."""

    def test_start_returns_from_node_itself(self, small_tree):
        adapter, nodes = small_tree
        walker = TraversalWalker(adapter)
        assert walker.natural_next(nodes["A"], None, nodes["A"], None) is not None
        assert walker.natural_next(nodes["A"], None, nodes["A"], None).title() == "A"

    def test_stepping_with_previous_result(self, small_tree):
        adapter, nodes = small_tree
        walker = TraversalWalker(adapter)

        visited = []
        node = walker.natural_next(nodes["A"], None, nodes["A"], None)
        while node is not None:
            visited.append(node.title())
            node = walker.natural_next(node, None, nodes["A"], node)

        assert visited == ["A", "B", "D", "E", "C"]

    def test_ascends_to_later_siblings(self, small_tree):
        adapter, nodes = small_tree
        walker = TraversalWalker(adapter)

        assert walker.natural_next(nodes["E"], after_node=nodes["E"]).title() == "C"
        assert walker.natural_next(nodes["B"], after_node=nodes["E"]).title() == "C"

    def test_ascent_never_returns_the_parent(self, small_tree):
        adapter, nodes = small_tree
        walker = TraversalWalker(adapter)

        assert walker.natural_next(nodes["C"], after_node=nodes["C"]) is None

    def test_after_unrelated_node_considers_from_node(self, small_tree):
        adapter, nodes = small_tree
        walker = TraversalWalker(adapter)

        assert walker.natural_next(nodes["C"], after_node=nodes["D"]).title() == "C"

    def test_later_siblings_follow_sort_key(self):
        adapter = InMemoryHierarchyAdapter()
        root = adapter.add(1, title="root")
        adapter.add(2, parent_id=1, title="last", sort=30)
        adapter.add(3, parent_id=1, title="first", sort=10)
        adapter.add(4, parent_id=1, title="middle", sort=20)
        walker = TraversalWalker(adapter)

        assert titles(walker.walk(root)) == ["root", "first", "middle", "last"]
        first = adapter.get(3)
        assert walker.natural_next(first, after_node=first).title() == "middle"

    def test_missing_parent_ends_search(self):
        adapter = InMemoryHierarchyAdapter()
        orphan = adapter.add(10, parent_id=99, title="orphan")
        walker = TraversalWalker(adapter)

        assert walker.natural_next(orphan, after_node=orphan) is None


class TestTypeFilter:
    """Only nodes of the requested type are returned."""

    def test_next_page(self):
        adapter = typed_adapter()
        walker = TraversalWalker(adapter)

        assert walker.natural_next(adapter.get(1), "Page").title() == "home"
        home = adapter.get(2)
        assert walker.natural_next(home, "Page", after_node=home).title() == "intro"

    def test_walk_pages(self):
        adapter = typed_adapter()
        pages = TraversalWalker(adapter).walk(adapter.get(1), "Page")
        assert titles(pages) == ["home", "intro", "usage", "contact"]

    def test_walk_folders(self):
        adapter = typed_adapter()
        folders = TraversalWalker(adapter).walk(adapter.get(1), "Folder")
        assert titles(folders) == ["site", "docs"]

    def test_no_match(self):
        adapter = typed_adapter()
        assert list(TraversalWalker(adapter).walk(adapter.get(1), "Redirector")) == []


class TestRootScope:
    """The search does not ascend past the root scope."""

    def test_scope_by_id(self, small_tree):
        adapter, nodes = small_tree
        walker = TraversalWalker(adapter)
        e = nodes["E"]

        assert walker.natural_next(e, None, None, e).title() == "C"
        assert walker.natural_next(e, None, nodes["B"].node_id(), e) is None

    def test_scope_by_type(self):
        adapter = typed_adapter()
        walker = TraversalWalker(adapter)
        usage = adapter.get(5)

        assert walker.natural_next(usage, "Page", "Folder", usage) is None
        assert walker.natural_next(usage, "Page", None, usage).title() == "contact"

    def test_scope_by_node(self, small_tree):
        adapter, nodes = small_tree
        walker = TraversalWalker(adapter)
        assert walker.natural_next(nodes["E"], None, nodes["B"], nodes["E"]) is None

    def test_walk_subtree(self, small_tree):
        adapter, nodes = small_tree
        assert titles(TraversalWalker(adapter).walk(nodes["B"])) == ["B", "D", "E"]


class TestWalk:
    """walk() enumerates a subtree in pre-order."""

    def test_visits_each_node_once_in_preorder(self):
        adapter, root = build_wide_tree(depth=3, breadth=3)
        walked = [node.node_id() for node in TraversalWalker(adapter).walk(root)]

        assert walked == preorder(adapter, root)
        assert len(walked) == len(set(walked)) == 40

    def test_deep_chain_without_recursion(self):
        adapter, chain = build_chain(3000)
        walked = list(TraversalWalker(adapter).walk(chain[0]))

        assert len(walked) == 3000
        assert walked[-1].node_id() == 3000

    def test_walk_reuses_cache(self, small_tree):
        adapter, nodes = small_tree
        walker = TraversalWalker(adapter)
        list(walker.walk(nodes["A"]))
        calls = adapter.fetch_calls

        list(walker.walk(nodes["A"]))

        assert adapter.fetch_calls == calls


class TestNaturalPrev:
    """Reverse search is not available."""

    def test_always_none(self, small_tree):
        adapter, nodes = small_tree
        walker = TraversalWalker(adapter)
        assert walker.natural_prev(nodes["C"]) is None
        assert walker.natural_prev(nodes["E"], None, nodes["A"], nodes["E"]) is None
