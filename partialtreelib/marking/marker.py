"""Breadth-first partial marking of a hierarchy.

FrontierMarker marks a bounded segment of a tree, starting at a root and
working outwards level by level until a node budget is met. The result is a
balanced initial view: every marked node's ancestors are marked too, and
nodes whose children are known are flagged expanded.

After a pass, the marked set can be grown on demand with mark_by_id() and
expose_path().
"""

import logging
from collections import OrderedDict, deque
from typing import Any, Callable, Deque, Dict, List, Optional

from ..caching.child_cache import ChildCache
from ..config import (
    DEFAULT_MIN_NODE_COUNT,
    ChildrenVariant,
    MarkingConfig,
    normalize_min_node_count,
)
from ..core.adapter import HierarchyAdapter
from ..core.node import HierarchyNode
from ..errors import ConfigurationError
from .filters import MarkingFilter
from .state import MarkState

logger = logging.getLogger(__name__)


class FrontierMarker:
    """Marks a bounded working set of nodes and tracks it.

    Attributes:
        adapter: Adapter supplying child counts, parents and fields
        state: MarkState written by this marker (caller-owned)
        cache: ChildCache children are fetched through
        marking_filter: Filter children must pass to be marked
        variant: Default ChildrenVariant for fetching children
        marked_nodes: ``node_id -> node`` in breadth-first discovery order
    """

    def __init__(self,
                 adapter: HierarchyAdapter,
                 state: Optional[MarkState] = None,
                 cache: Optional[ChildCache] = None,
                 marking_filter: Optional[MarkingFilter] = None,
                 variant: ChildrenVariant = ChildrenVariant.ALL_INCLUDING_DELETED,
                 min_node_count: int = DEFAULT_MIN_NODE_COUNT):
        """Initialize a marker.

        Args:
            adapter: Adapter for the hierarchy
            state: MarkState to write into (a fresh one by default)
            cache: ChildCache to fetch through (a fresh one by default)
            marking_filter: Filter for children (accept-all by default)
            variant: Default children variant
            min_node_count: Default node budget for mark_partial_tree()
        """
        self.adapter = adapter
        self.state = state if state is not None else MarkState()
        self.cache = cache if cache is not None else ChildCache(adapter)
        self.marking_filter = marking_filter if marking_filter is not None else MarkingFilter()
        self.variant = variant
        self.min_node_count = normalize_min_node_count(min_node_count)
        self.marked_nodes: Dict[int, HierarchyNode] = OrderedDict()

    @classmethod
    def from_config(cls, adapter: HierarchyAdapter, config: MarkingConfig,
                    state: Optional[MarkState] = None,
                    cache: Optional[ChildCache] = None) -> 'FrontierMarker':
        """Create a marker from a validated MarkingConfig.

        Raises:
            ConfigurationError: If the config does not validate
        """
        errors = config.validate()
        if errors:
            raise ConfigurationError(f"Invalid marking configuration: {'; '.join(errors)}")
        return cls(adapter, state=state, cache=cache,
                   marking_filter=config.marking_filter, variant=config.variant,
                   min_node_count=config.min_node_count)

    # === Filter configuration ===

    def set_marking_filter(self, field_name: str, value: Any) -> None:
        """Only mark children whose ``field_name`` equals ``value`` (or one of its members)."""
        self.marking_filter.set_by_field(field_name, value)

    def set_marking_filter_function(self, predicate: Callable[[Any], bool]) -> None:
        """Only mark children for which ``predicate(child)`` is true."""
        self.marking_filter.set_by_predicate(predicate)

    # === Marking ===

    def mark_partial_tree(self,
                          root: HierarchyNode,
                          min_node_count: Any = None,
                          context: Any = None,
                          variant: Optional[ChildrenVariant] = None) -> int:
        """Mark a segment of the tree breadth-first from ``root``.

        Nodes are expanded in discovery order until at least
        ``min_node_count`` nodes are marked or the tree runs out. The budget
        is checked after each node's complete child list, so the count may
        overshoot by up to one sibling group.

        Each call rebuilds marked_nodes but only adds to ``state``. Flags
        from an earlier pass stay set, and a ``limit_to_marked`` render
        still shows those nodes. Call ``state.reset()``, or build the marker
        with a fresh MarkState, between independent passes.

        Args:
            root: Node the pass starts from (always marked)
            min_node_count: Node budget; None means the marker's own budget,
                other invalid values mean the default (30)
            context: Passed through to the adapter's children hook
            variant: Children variant for this pass; it also becomes the
                default for later mark_by_id() calls

        Returns:
            Number of nodes marked
        """
        if min_node_count is None:
            budget = self.min_node_count
        else:
            budget = normalize_min_node_count(min_node_count)
        if variant is not None:
            self.variant = variant
        root = self.cache.canonical(root)

        self.marked_nodes = OrderedDict()
        self.marked_nodes[self.adapter.node_id(root)] = root
        self.state.mark_unexpanded(root)

        frontier: Deque[HierarchyNode] = deque([root])
        while frontier:
            node = frontier.popleft()
            frontier.extend(self.mark_children(node, context, variant))
            if len(self.marked_nodes) >= budget:
                break

        logger.debug("Marked %d nodes from %s (budget %d, %d left on frontier)",
                     len(self.marked_nodes), root.identifier(), budget, len(frontier))
        return len(self.marked_nodes)

    def mark_children(self, node: HierarchyNode, context: Any = None,
                      variant: Optional[ChildrenVariant] = None) -> List[HierarchyNode]:
        """Expand ``node`` and mark every child that passes the filter.

        Children with descendants are marked unexpanded, childless ones
        expanded.

        Returns:
            Children that were not in the marked set before this call
        """
        children = self.cache.children(node, variant or self.variant, context)
        self.state.mark_expanded(node)

        added = []
        for child in children:
            if not self.marking_filter.matches(child, self.adapter.node_field):
                continue
            if self.adapter.child_count(child):
                self.state.mark_unexpanded(child)
            else:
                self.state.mark_expanded(child)
            child_id = self.adapter.node_id(child)
            if child_id not in self.marked_nodes:
                added.append(child)
            self.marked_nodes[child_id] = child
        return added

    def marking_finished(self) -> None:
        """Flag childless marked nodes as expanded.

        Call after marking and before iterating over the tree; it fixes up
        nodes whose child count was unknown when they were marked.
        """
        for node in self.marked_nodes.values():
            if not self.state.is_expanded(node) and not self.adapter.child_count(node):
                self.state.mark_expanded(node)

    def mark_by_id(self, node_id: int, open: bool = False, context: Any = None) -> bool:
        """Expand the already-marked node with ``node_id``.

        Args:
            node_id: Id of a node in the current marked set
            open: Also flag the node as opened
            context: Passed through to the adapter's children hook

        Returns:
            False if ``node_id`` is not in the marked set
        """
        node = self.marked_nodes.get(node_id)
        if node is None:
            return False
        self.mark_children(node, context)
        if open:
            self.state.mark_opened(node)
        return True

    def parent_stack(self, node: HierarchyNode) -> List[HierarchyNode]:
        """Return ``node`` and its ancestors, ordered node -> root."""
        return [self.cache.canonical(n) for n in self.adapter.get_ancestors(node)]

    def expose_path(self, target: Any, context: Any = None) -> int:
        """Mark and open every node from the root down to ``target``.

        Args:
            target: Node to expose; anything else is ignored

        Returns:
            Number of nodes opened along the path
        """
        if not isinstance(target, HierarchyNode):
            return 0

        path = list(reversed(self.parent_stack(target)))
        root = path[0]
        root_id = self.adapter.node_id(root)
        if root_id not in self.marked_nodes:
            self.marked_nodes[root_id] = root
            self.state.mark_unexpanded(root)

        opened = 0
        for node in path:
            if self.mark_by_id(self.adapter.node_id(node), open=True, context=context):
                opened += 1
            else:
                logger.debug("Path to %s broken at %s (filtered out)",
                             target.identifier(), node.identifier())
                break
        return opened

    # === State queries ===

    def is_marked(self, node: HierarchyNode) -> bool:
        return self.state.is_marked(node)

    def is_expanded(self, node: HierarchyNode) -> bool:
        return self.state.is_expanded(node)

    def is_opened(self, node: HierarchyNode) -> bool:
        return self.state.is_opened(node)

    def mark_opened(self, node: HierarchyNode) -> None:
        self.state.mark_opened(node)

    def marking_classes(self, node: HierarchyNode) -> str:
        return self.state.marking_classes(node)

    def __len__(self) -> int:
        return len(self.marked_nodes)

    def __contains__(self, node_id: object) -> bool:
        return node_id in self.marked_nodes
