"""Memoized child lists for hierarchy nodes.

ChildCache sits between the engine and the adapter. Each node gets three
independent slots, one per ChildrenVariant, filled on first use and kept
until flushed. Slots hold NodeKeys into a NodeArena, so every read of a slot
hands back the very same node objects - which is what keeps MarkState,
rendering and traversal in agreement about node identity.
"""

import logging
from typing import Any, Dict, List, Optional, Tuple

from ..config import ChildrenVariant, StageStatus
from ..core.adapter import HierarchyAdapter
from ..core.arena import NodeArena
from ..core.node import HierarchyNode, NodeKey
from ..errors import ChildFetchUnavailableError

logger = logging.getLogger(__name__)


class ChildCache:
    """Per-node memoization of the three child-fetch variants.

    Attributes:
        adapter: The adapter children are fetched from
        arena: Canonical node store backing every slot
        hits: Number of slot reads served from the cache
        misses: Number of slot reads that had to call the adapter
    """

    def __init__(self, adapter: HierarchyAdapter, arena: Optional[NodeArena] = None):
        """Initialize an empty cache.

        Args:
            adapter: Adapter used to fill slots
            arena: Node arena fetched children are stored in (a private one by default)
        """
        self.adapter = adapter
        self.arena = arena if arena is not None else NodeArena()
        self._slots: Dict[Tuple[NodeKey, ChildrenVariant], List[NodeKey]] = {}
        self._status: Dict[NodeKey, StageStatus] = {}
        self.hits = 0
        self.misses = 0

    # === Variant accessors ===

    def menu_children(self, node: HierarchyNode) -> List[HierarchyNode]:
        """Children visible in navigation that the adapter lets us view."""
        return self.children(node, ChildrenVariant.MENU)

    def all_children(self, node: HierarchyNode) -> List[HierarchyNode]:
        """All draft children, including those hidden from navigation."""
        return self.children(node, ChildrenVariant.ALL)

    def all_children_with_deleted(self, node: HierarchyNode,
                                  context: Any = None) -> List[HierarchyNode]:
        """Draft children plus live children that were deleted from the draft.

        Every child is annotated with a StageStatus, readable through
        stage_status().
        """
        return self.children(node, ChildrenVariant.ALL_INCLUDING_DELETED, context)

    def children(self, node: HierarchyNode,
                 variant: ChildrenVariant = ChildrenVariant.ALL,
                 context: Any = None) -> List[HierarchyNode]:
        """Return the memoized child list of ``node`` for ``variant``.

        Raises:
            ChildFetchUnavailableError: If ``variant`` is not a ChildrenVariant
                or the adapter cannot list children for this node
        """
        if not isinstance(variant, ChildrenVariant):
            raise ChildFetchUnavailableError(
                f"Unknown children variant {variant!r} requested for {node.identifier()}",
                node=node, variant=variant)

        slot = (node.key(), variant)
        keys = self._slots.get(slot)
        if keys is None:
            self.misses += 1
            keys = self._load(node, variant, context)
            self._slots[slot] = keys
            logger.debug("Cached %d %s children for %s", len(keys), variant.value, node.identifier())
        else:
            self.hits += 1
        return self.arena.resolve(keys)

    def canonical(self, node: HierarchyNode) -> HierarchyNode:
        """Return the arena's object for ``node``."""
        return self.arena.canonical(node)

    def stage_status(self, node: HierarchyNode) -> Optional[StageStatus]:
        """Provenance recorded for ``node`` by all_children_with_deleted()."""
        return self._status.get(node.key())

    def is_cached(self, node: HierarchyNode, variant: ChildrenVariant = ChildrenVariant.ALL) -> bool:
        return (node.key(), variant) in self._slots

    # === Invalidation ===

    def flush(self, node: HierarchyNode) -> int:
        """Drop all three slots of ``node``; other nodes keep theirs.

        The provenance recorded for the children of ``node`` goes with them.
        The next read of any slot refetches, and the fetched objects replace
        the ones held in the arena.

        Returns:
            Number of slots dropped
        """
        key = node.key()
        dropped = 0
        for variant in ChildrenVariant:
            keys = self._slots.pop((key, variant), None)
            if keys is None:
                continue
            dropped += 1
            if variant is ChildrenVariant.ALL_INCLUDING_DELETED:
                for child_key in keys:
                    self._status.pop(child_key, None)
        return dropped

    def flush_all(self) -> int:
        """Drop every slot and provenance record."""
        count = len(self._slots)
        self._slots.clear()
        self._status.clear()
        return count

    # === Queries over cached data ===

    def descendant_ids(self, node: HierarchyNode,
                       variant: ChildrenVariant = ChildrenVariant.ALL) -> List[int]:
        """Collect descendant ids depth-first from already-cached slots.

        Nothing is fetched: subtrees whose slot is cold contribute nothing.
        Ids already collected are skipped, which guards against duplicate
        entries but not against cycles in a malformed hierarchy.
        """
        ids: List[int] = []
        seen = set()
        root_keys = self._slots.get((node.key(), variant))
        if not root_keys:
            return ids

        stack = [iter(root_keys)]
        while stack:
            child_key = next(stack[-1], None)
            if child_key is None:
                stack.pop()
                continue
            if child_key.node_id in seen:
                continue
            seen.add(child_key.node_id)
            ids.append(child_key.node_id)
            cached = self._slots.get((child_key, variant))
            if cached:
                stack.append(iter(cached))
        return ids

    def stats(self) -> Dict[str, int]:
        return {
            'slots': len(self._slots),
            'nodes': len(self.arena),
            'hits': self.hits,
            'misses': self.misses,
        }

    # === Loading ===

    def _fetch(self, node: HierarchyNode, include_all: bool) -> List[HierarchyNode]:
        if not self.adapter.supports_children(node):
            raise ChildFetchUnavailableError(
                f"{type(self.adapter).__name__} cannot list children for "
                f"type '{self.adapter.node_type(node)}' ({node.identifier()})",
                node=node)
        result = self.adapter.fetch_children(node, include_all)
        if result is None:
            raise ChildFetchUnavailableError(
                f"{type(self.adapter).__name__} returned no child list for "
                f"type '{self.adapter.node_type(node)}' ({node.identifier()})",
                node=node)
        return list(result)

    def _load(self, node: HierarchyNode, variant: ChildrenVariant, context: Any) -> List[NodeKey]:
        if variant is ChildrenVariant.MENU:
            visible = [child for child in self._fetch(node, include_all=False)
                       if self.adapter.can_view(child)]
            return self.arena.put_all(visible)

        if variant is ChildrenVariant.ALL:
            return self.arena.put_all(self._fetch(node, include_all=True))

        keys: List[NodeKey] = []
        present = set()

        def add(child: HierarchyNode, status: StageStatus) -> None:
            key = child.key()
            if key in present:
                return
            self.arena.put(child)
            present.add(key)
            keys.append(key)
            self._status[key] = status

        for child in self._fetch(node, include_all=True):
            add(child, self.adapter.compare_to_live(child))

        if self.adapter.has_versioning(node):
            for child in self.adapter.fetch_live_only_children(node, True, True) or ():
                add(child, StageStatus.DELETED)

        children = self.arena.resolve(keys)
        self.adapter.augment_children_including_deleted(node, children, context)
        for child in children[len(keys):]:
            add(child, self.adapter.compare_to_live(child))
        return keys
