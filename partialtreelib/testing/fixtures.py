"""Test fixtures for PartialTreeLib consumers.

These helpers build small in-memory hierarchies from nested literals and give
controlled access to cache and marking internals, so test suites can verify
behavior without depending on implementation details.
"""

from collections import deque
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

from ..adapters.memory import InMemoryHierarchyAdapter
from ..caching.child_cache import ChildCache
from ..config import ChildrenVariant
from ..core.node import HierarchyNode
from ..marking.state import MarkState

# ("A", [("B", [...]), ("C", [])]) or just "C" for a leaf
TreeSpec = Union[str, Tuple[str, Sequence[Any]]]


def build_adapter(tree_spec: TreeSpec,
                  versioned: bool = False,
                  base_type: str = "Node",
                  **adapter_kwargs: Any) -> Tuple[InMemoryHierarchyAdapter, Dict[str, HierarchyNode]]:
    """Build an in-memory hierarchy from a nested ``(title, children)`` literal.

    Ids are assigned in pre-order starting at 1; siblings keep their listed
    order. With ``versioned=True`` every record is also published live.

    Args:
        tree_spec: ``(title, [child_spec, ...])`` or a bare title for a leaf
        versioned: Maintain (and fill) a live stage
        base_type: Base type for every node
        **adapter_kwargs: Passed to InMemoryHierarchyAdapter

    Returns:
        Tuple of (adapter, ``{title: node}``)

    Example:
        adapter, nodes = build_adapter(("A", [("B", ["D", "E"]), "C"]))
        root = nodes["A"]
    """
    adapter = InMemoryHierarchyAdapter(base_type=base_type, versioned=versioned,
                                       **adapter_kwargs)
    ids: Dict[str, int] = {}
    stack: List[Tuple[TreeSpec, int]] = [(tree_spec, 0)]
    while stack:
        spec, parent_id = stack.pop()
        title, children = (spec, ()) if isinstance(spec, str) else spec
        node_id = len(ids) + 1
        ids[title] = node_id
        adapter.add(node_id, parent_id=parent_id, title=title)
        stack.extend((child, node_id) for child in reversed(list(children)))

    if versioned:
        adapter.publish()
    nodes = {title: adapter.get(node_id) for title, node_id in ids.items()}
    return adapter, nodes


def build_chain(depth: int, **adapter_kwargs: Any) -> Tuple[InMemoryHierarchyAdapter, List[HierarchyNode]]:
    """Build a single path ``1 -> 2 -> ... -> depth``.

    Returns:
        Tuple of (adapter, nodes ordered root first)
    """
    adapter = InMemoryHierarchyAdapter(**adapter_kwargs)
    nodes = [adapter.add(i, parent_id=i - 1, title=f"N{i}") for i in range(1, depth + 1)]
    return adapter, nodes


def build_wide_tree(depth: int, breadth: int,
                    **adapter_kwargs: Any) -> Tuple[InMemoryHierarchyAdapter, HierarchyNode]:
    """Build a complete tree with ``breadth`` children per node.

    Returns:
        Tuple of (adapter, root)
    """
    adapter = InMemoryHierarchyAdapter(**adapter_kwargs)
    root = adapter.add(1, title="root")
    next_id = 2
    level = [1]
    for _ in range(depth):
        next_level = []
        for parent_id in level:
            for _ in range(breadth):
                adapter.add(next_id, parent_id=parent_id, title=f"n{next_id}")
                next_level.append(next_id)
                next_id += 1
        level = next_level
    return adapter, root


def bfs_order(adapter: InMemoryHierarchyAdapter, root: HierarchyNode,
              include_all: bool = True) -> List[int]:
    """Return node ids under ``root`` (inclusive) in breadth-first level order."""
    order = []
    queue = deque([root])
    while queue:
        node = queue.popleft()
        order.append(node.node_id())
        queue.extend(adapter.fetch_children(node, include_all) or ())
    return order


def preorder(adapter: InMemoryHierarchyAdapter, root: HierarchyNode) -> List[int]:
    """Return node ids under ``root`` (inclusive) in pre-order."""
    order = []
    stack = [root]
    while stack:
        node = stack.pop()
        order.append(node.node_id())
        stack.extend(reversed(adapter.fetch_children(node, True) or ()))
    return order


def marked_ids(state: MarkState) -> List[int]:
    """Return the ids of every marked node, in first-touched order."""
    return [key.node_id for key in state.marked_keys()]


class CacheTestHelper:
    """Public test fixture for ChildCache verification.

    Example:
        helper = CacheTestHelper(marker.cache)
        assert helper.was_cached(root)
        assert helper.get_summary()['slots'] > 0
    """

    def __init__(self, cache: ChildCache):
        """Initialize with the cache under test.

        Args:
            cache: A ChildCache
        """
        self._cache = cache

    def get_summary(self) -> Dict[str, Any]:
        """Returns high-level cache state for testing.

        Returns:
            Dictionary containing:
            - slots: Number of filled child-list slots
            - nodes: Number of canonical nodes in the arena
            - hits / misses: Slot read counters
            - variants: Slot count per ChildrenVariant value
        """
        summary = dict(self._cache.stats())
        summary['variants'] = {
            variant.value: sum(1 for (_, v) in self._cache._slots if v is variant)
            for variant in ChildrenVariant
        }
        return summary

    def was_cached(self, node: HierarchyNode,
                   variant: Optional[ChildrenVariant] = None) -> bool:
        """Check whether ``node`` has a filled slot (for ``variant`` or any)."""
        if variant is not None:
            return self._cache.is_cached(node, variant)
        return any(self._cache.is_cached(node, v) for v in ChildrenVariant)

    def cached_child_ids(self, node: HierarchyNode,
                         variant: ChildrenVariant = ChildrenVariant.ALL) -> Optional[List[int]]:
        """Ids held in a slot without triggering a fetch (None if cold)."""
        keys = self._cache._slots.get((node.key(), variant))
        if keys is None:
            return None
        return [key.node_id for key in keys]
