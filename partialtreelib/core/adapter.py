"""HierarchyAdapter abstraction for partialtreelib.

The adapter is the seam between the marking/traversal engine and whatever
stores the nodes. The engine never queries storage directly; it only calls
the operations declared here.
"""

from abc import ABC, abstractmethod
from typing import Any, List, Optional, Sequence

from ..config import StageStatus
from .node import HierarchyNode


class HierarchyAdapter(ABC):
    """Abstract adapter for fetching the structure of a hierarchy.

    Three operations are required: listing the draft children of a node,
    finding a node's parent, and counting a node's children. Versioning,
    permission and extension hooks are optional capabilities with
    conservative defaults.

    The adapter does not enforce acyclicity. Callers must hand it a tree: no
    node may be its own ancestor.
    """

    @abstractmethod
    def fetch_children(self, node: HierarchyNode,
                       include_all: bool) -> Optional[Sequence[HierarchyNode]]:
        """Return the draft-stage children of ``node``, ordered by sort key.

        Args:
            node: The parent node
            include_all: Include children hidden from navigation

        Returns:
            Ordered children, or None if this adapter cannot list children
            for the node's type
        """
        pass

    @abstractmethod
    def get_parent(self, node: HierarchyNode) -> Optional[HierarchyNode]:
        """Get the parent node of the given node.

        Args:
            node: The child node

        Returns:
            Parent node or None if node is a root or the parent is missing
        """
        pass

    @abstractmethod
    def child_count(self, node: HierarchyNode) -> int:
        """Return how many draft children ``node`` has."""
        pass

    # Versioning capability - only meaningful if has_versioning() returns True

    def has_versioning(self, node: HierarchyNode) -> bool:
        """Check if the node's type has a live stage next to the draft."""
        return False

    def fetch_live_only_children(self, node: HierarchyNode, include_all: bool,
                                 only_missing_from_draft: bool) -> Optional[Sequence[HierarchyNode]]:
        """Return children of ``node`` on the live stage.

        Args:
            node: The parent node
            include_all: Include children hidden from navigation
            only_missing_from_draft: Only children deleted from the draft

        Returns:
            Ordered live children, or None if versioning is unsupported
        """
        return None

    def compare_to_live(self, node: HierarchyNode) -> StageStatus:
        """Classify a draft node against its live copy."""
        return StageStatus.UNCHANGED

    def fetch_historical_children(self, node: HierarchyNode) -> Optional[Sequence[HierarchyNode]]:
        """Return every child ``node`` ever had, including ones deleted from both stages.

        Returns:
            Children, or None if the adapter keeps no history
        """
        return None

    # Capability flags and hooks

    def supports_children(self, node: HierarchyNode) -> bool:
        """Check if this adapter can list children for the node's type."""
        return True

    def can_view(self, node: HierarchyNode) -> bool:
        """Permission check applied to menu children."""
        return True

    def augment_children_including_deleted(self, node: HierarchyNode,
                                           children: List[HierarchyNode],
                                           context: Any = None) -> None:
        """Extension hook: may append to ``children`` in place."""
        return None

    # Node accessors - override when nodes don't carry these themselves

    def node_id(self, node: HierarchyNode) -> int:
        return node.node_id()

    def node_type(self, node: HierarchyNode) -> str:
        return node.node_type()

    def parent_id(self, node: HierarchyNode) -> int:
        return node.parent_id()

    def sort_key(self, node: HierarchyNode) -> Any:
        return node.sort_key()

    def node_field(self, node: HierarchyNode, field_name: str) -> Any:
        """Read a named field, falling back to an attribute of that name."""
        return node_field(node, field_name)

    def get_ancestors(self, node: HierarchyNode) -> List[HierarchyNode]:
        """Return ``node`` and its ancestors, ordered node -> root.

        Default implementation walks up via get_parent().
        """
        stack = []
        current = node
        while current is not None:
            stack.append(current)
            if not self.parent_id(current):
                break
            current = self.get_parent(current)
        return stack


_MISSING = object()


def node_field(node: Any, field_name: str) -> Any:
    """Look up ``field_name`` in the node's metadata, then as an attribute.

    Zero-argument methods are called, so ``node_field(node, 'title')`` works
    for nodes exposing ``title()``. Returns None when nothing matches.
    """
    metadata = getattr(node, 'metadata', None)
    if callable(metadata):
        fields = metadata()
        if field_name in fields:
            return fields[field_name]
    value = getattr(node, field_name, _MISSING)
    if value is _MISSING:
        return None
    return value() if callable(value) else value
