"""Node arena: one canonical object per node identity.

Adapters are free to build a fresh node object on every query. The arena
interns them by NodeKey so that the marking, caching and rendering passes all
see the same object for the same node. Child lists elsewhere in the library
are stored as lists of keys into this arena.
"""

from typing import Dict, Iterable, Iterator, List, Optional

from .node import HierarchyNode, NodeKey


class NodeArena:
    """Id-indexed store of canonical node objects.

    intern() keeps the object already held for a key, so a caller holding
    another copy gets the canonical one back. put() replaces it; the cache
    does that with freshly fetched children so a flushed slot reloads current
    data. There is no eviction - the arena lives as long as the cache that
    owns it.
    """

    def __init__(self):
        self._nodes: Dict[NodeKey, HierarchyNode] = {}

    def intern(self, node: HierarchyNode) -> NodeKey:
        """Register ``node`` if its key is new and return the key."""
        key = node.key()
        if key not in self._nodes:
            self._nodes[key] = node
        return key

    def intern_all(self, nodes: Iterable[HierarchyNode]) -> List[NodeKey]:
        return [self.intern(node) for node in nodes]

    def put(self, node: HierarchyNode) -> NodeKey:
        """Make ``node`` the canonical object for its key and return the key."""
        key = node.key()
        self._nodes[key] = node
        return key

    def put_all(self, nodes: Iterable[HierarchyNode]) -> List[NodeKey]:
        return [self.put(node) for node in nodes]

    def canonical(self, node: HierarchyNode) -> HierarchyNode:
        """Return the canonical object for ``node``, interning it if needed."""
        return self._nodes[self.intern(node)]

    def get(self, key: NodeKey) -> Optional[HierarchyNode]:
        return self._nodes.get(key)

    def resolve(self, keys: Iterable[NodeKey]) -> List[HierarchyNode]:
        """Map keys back to their canonical node objects."""
        return [self._nodes[key] for key in keys]

    def discard(self, key: NodeKey) -> None:
        self._nodes.pop(key, None)

    def clear(self) -> None:
        self._nodes.clear()

    def __contains__(self, key: object) -> bool:
        return key in self._nodes

    def __len__(self) -> int:
        return len(self._nodes)

    def __iter__(self) -> Iterator[NodeKey]:
        return iter(self._nodes)
