"""Document-order ("natural") navigation for partialtreelib.

TraversalWalker answers "which node comes after this one?" in pre-order:
a node's subtree first, then its later siblings, then its ancestors' later
siblings, never leaving a given root scope. Searches run on explicit stacks,
so deep trees do not grow the interpreter stack.
"""

import logging
from typing import Any, Iterator, List, Optional, Union

from ..caching.child_cache import ChildCache
from ..config import ChildrenVariant
from ..core.adapter import HierarchyAdapter
from ..core.node import HierarchyNode

logger = logging.getLogger(__name__)

RootScope = Union[int, str, HierarchyNode, None]


class TraversalWalker:
    """Finds the next node in document order, optionally of a given type.

    Attributes:
        adapter: Adapter supplying parents, types and sort keys
        cache: ChildCache children are read through
        variant: Children variant used for descent
    """

    def __init__(self, adapter: HierarchyAdapter, cache: Optional[ChildCache] = None,
                 variant: ChildrenVariant = ChildrenVariant.ALL):
        self.adapter = adapter
        self.cache = cache if cache is not None else ChildCache(adapter)
        self.variant = variant

    def natural_next(self,
                     from_node: HierarchyNode,
                     type_filter: Optional[str] = None,
                     root_scope: RootScope = None,
                     after_node: Optional[HierarchyNode] = None) -> Optional[HierarchyNode]:
        """Find the next node after ``after_node``, starting at ``from_node``.

        ``from_node`` itself is the answer when it matches ``type_filter`` and
        the search is not already past it: ``after_node`` is unset, or is some
        node other than ``from_node`` and its children. To step forward from
        a result ``n``, call ``natural_next(n, type_filter, root_scope, n)``.

        Args:
            from_node: Node the search starts at
            type_filter: Node type to look for (None matches any type)
            root_scope: Node, id (int) or type tag (str) of the node the
                search may not ascend past; None means no bound
            after_node: Node the search has already passed

        Returns:
            The next matching node, or None when the scope is exhausted
        """
        current = from_node
        after = after_node
        if self._is_candidate(current, after) and self._type_matches(current, type_filter):
            return current

        while True:
            if after is not None and self._is_child_of(after, current):
                scope = self._later_siblings(current, after)
            else:
                scope = self.cache.children(current, self.variant)

            found = self._search_forest(scope, type_filter)
            if found is not None:
                return found

            if self._is_root_scope(current, root_scope):
                logger.debug("natural_next stopped at root scope %s", current.identifier())
                return None
            if not self.adapter.parent_id(current):
                return None
            parent = self.adapter.get_parent(current)
            if parent is None:
                logger.debug("natural_next found no parent for %s", current.identifier())
                return None
            after, current = current, parent

    def natural_prev(self,
                     from_node: HierarchyNode,
                     type_filter: Optional[str] = None,
                     root_scope: RootScope = None,
                     before_node: Optional[HierarchyNode] = None) -> Optional[HierarchyNode]:
        """Reverse document-order search. Not implemented; always None."""
        logger.debug("natural_prev is not implemented; returning None for %s",
                     from_node.identifier())
        return None

    def walk(self, root: HierarchyNode,
             type_filter: Optional[str] = None) -> Iterator[HierarchyNode]:
        """Yield every node under ``root`` (``root`` included) in pre-order.

        Only nodes matching ``type_filter`` are yielded; the walk never
        leaves ``root``'s subtree.
        """
        scope = self.adapter.node_id(root)
        node = self.natural_next(root, type_filter, scope)
        while node is not None:
            yield node
            node = self.natural_next(node, type_filter, scope, after_node=node)

    # === Helpers ===

    def _same_node(self, a: HierarchyNode, b: HierarchyNode) -> bool:
        return a.key() == b.key()

    def _is_child_of(self, child: HierarchyNode, parent: HierarchyNode) -> bool:
        return self.adapter.parent_id(child) == self.adapter.node_id(parent)

    def _is_candidate(self, current: HierarchyNode, after: Optional[HierarchyNode]) -> bool:
        if after is None:
            return True
        return not self._same_node(after, current) and not self._is_child_of(after, current)

    def _type_matches(self, node: HierarchyNode, type_filter: Optional[str]) -> bool:
        return not type_filter or self.adapter.node_type(node) == type_filter

    def _is_root_scope(self, node: HierarchyNode, root_scope: RootScope) -> bool:
        if root_scope is None:
            return False
        if isinstance(root_scope, HierarchyNode):
            return self._same_node(node, root_scope)
        if isinstance(root_scope, int) and not isinstance(root_scope, bool):
            return self.adapter.node_id(node) == root_scope
        return self.adapter.node_type(node) == root_scope

    def _later_siblings(self, parent: HierarchyNode, after: HierarchyNode) -> List[HierarchyNode]:
        """Children of ``parent`` sorting strictly after ``after``, ascending."""
        threshold = self.adapter.sort_key(after)
        later = [child for child in self.cache.children(parent, self.variant)
                 if self.adapter.sort_key(child) > threshold]
        later.sort(key=self.adapter.sort_key)
        return later

    def _search_forest(self, roots: List[HierarchyNode],
                       type_filter: Optional[str]) -> Optional[HierarchyNode]:
        """First node matching ``type_filter`` in a pre-order walk of ``roots``."""
        stack: List[Any] = list(reversed(roots))
        while stack:
            node = stack.pop()
            if self._type_matches(node, type_filter):
                return node
            stack.extend(reversed(self.cache.children(node, self.variant)))
        return None
