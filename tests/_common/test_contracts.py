"""Contract tests ensuring every adapter drives the engine identically.

These tests verify that an adapter built on the bundled in-memory store and
a minimal adapter implementing only the three required operations:
1. Mark the same working set
2. Render the same markup
3. Walk in the same document order
4. Expose the same paths
"""

import sys
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, Tuple

# Add package root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from partialtreelib import (
    FrontierMarker,
    HierarchyAdapter,
    HierarchyNode,
    StageStatus,
    TraversalWalker,
    TreeRenderer,
)
from partialtreelib.testing import build_adapter


class DictNode(HierarchyNode):
    """Node over a plain dict, rebuilt on every lookup."""

    def __init__(self, node_id: int, parent_id: int, title: str, sort: int):
        self._fields = {'id': node_id, 'parent_id': parent_id, 'title': title, 'sort': sort}

    def node_id(self) -> int:
        return self._fields['id']

    def node_type(self) -> str:
        return "Node"

    def parent_id(self) -> int:
        return self._fields['parent_id']

    def metadata(self) -> Dict[str, Any]:
        return dict(self._fields)


class MinimalAdapter(HierarchyAdapter):
    """Adapter implementing only the required operations."""

    def __init__(self, parents: Dict[int, int], titles: Dict[int, str]):
        self.parents = parents
        self.titles = titles

    def _node(self, node_id: int) -> DictNode:
        siblings = sorted(i for i, p in self.parents.items() if p == self.parents[node_id])
        return DictNode(node_id, self.parents[node_id], self.titles[node_id],
                        siblings.index(node_id) + 1)

    def fetch_children(self, node, include_all):
        return [self._node(i) for i in sorted(self.parents) if self.parents[i] == node.node_id()]

    def get_parent(self, node):
        parent_id = self.parents.get(node.node_id())
        return self._node(parent_id) if parent_id else None

    def child_count(self, node):
        return sum(1 for p in self.parents.values() if p == node.node_id())


class AdapterContract(ABC):
    """Base contract every adapter must satisfy.

    Tree structure (ids in pre-order):
    A(1)
    ├── B(2)
    │   ├── D(3)
    │   └── E(4)
    └── C(5)
    """

    @abstractmethod
    def build_tree(self) -> Tuple[HierarchyAdapter, Dict[str, HierarchyNode]]:
        """Return (adapter, {title: node}) for the standard tree."""
        pass

    def test_marks_first_level_with_budget_three(self):
        adapter, nodes = self.build_tree()
        marker = FrontierMarker(adapter)

        assert marker.mark_partial_tree(nodes["A"], 3) == 3
        assert sorted(marker.marked_nodes) == [1, 2, 5]

    def test_render_limited_to_marked(self):
        adapter, nodes = self.build_tree()
        marker = FrontierMarker(adapter)
        marker.mark_partial_tree(nodes["A"], 3)

        html = TreeRenderer(adapter, marker=marker).render_as_nested_list(
            nodes["A"], title_template="<li>{title}", limit_to_marked=True)

        assert html == "<ul>\n<li>B\n</li>\n<li>C\n</li>\n</ul>\n"

    def test_walk_order(self):
        adapter, nodes = self.build_tree()
        walked = [n.title() for n in TraversalWalker(adapter).walk(nodes["A"])]
        assert walked == ["A", "B", "D", "E", "C"]

    def test_expose_path(self):
        adapter, nodes = self.build_tree()
        marker = FrontierMarker(adapter)
        assert marker.expose_path(nodes["E"]) == 3
        assert marker.is_opened(nodes["B"])

    def test_unversioned_children_are_unchanged(self):
        adapter, nodes = self.build_tree()
        marker = FrontierMarker(adapter)
        marker.mark_partial_tree(nodes["A"])
        assert marker.cache.stage_status(nodes["B"]) is StageStatus.UNCHANGED


class TestInMemoryAdapterContract(AdapterContract):
    """Bundled in-memory adapter against the contract."""

    def build_tree(self):
        return build_adapter(("A", [("B", ["D", "E"]), "C"]))


class TestMinimalAdapterContract(AdapterContract):
    """Adapter relying on every default hook against the contract."""

    def build_tree(self):
        parents = {1: 0, 2: 1, 3: 2, 4: 2, 5: 1}
        titles = {1: "A", 2: "B", 3: "D", 4: "E", 5: "C"}
        adapter = MinimalAdapter(parents, titles)
        return adapter, {title: adapter._node(i) for i, title in titles.items()}
