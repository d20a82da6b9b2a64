"""HierarchyNode abstraction for partialtreelib.

The HierarchyNode is intentionally kept simple - it's primarily a data
container with a stable identity. Fetching children, parents and live copies
is delegated to the HierarchyAdapter, which is what lets the marking engine
work with any node store.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, NamedTuple


class NodeKey(NamedTuple):
    """Identity of a node: ``(base_type, node_id)``.

    Different node kinds that share one pool of ids must share a base type,
    so that their marking state and cache slots do not collide.
    """
    base_type: str
    node_id: int

    def __str__(self) -> str:
        return f"{self.base_type}:{self.node_id}"


class HierarchyNode(ABC):
    """Abstract base class for nodes in a navigable hierarchy.

    Subclasses provide the id, the concrete type tag, the parent id and a
    metadata mapping. Everything else has a sensible default derived from
    those four.
    """

    @abstractmethod
    def node_id(self) -> int:
        """Return the integer id, unique within the node's base type."""
        pass

    @abstractmethod
    def node_type(self) -> str:
        """Return the concrete type tag (e.g. ``"Page"``, ``"RedirectorPage"``)."""
        pass

    @abstractmethod
    def parent_id(self) -> int:
        """Return the parent's id, or 0 for a root node."""
        pass

    @abstractmethod
    def metadata(self) -> Dict[str, Any]:
        """Return the node's named fields.

        Common fields:
        - title: Display title
        - sort: Sort key among siblings
        - show_in_menus: Whether the node is visible in navigation

        Returns:
            Dict[str, Any]: Field dictionary
        """
        pass

    def base_type(self) -> str:
        """Return the type tag that scopes the id pool.

        Defaults to the concrete type. Override when several concrete types
        share one id space.
        """
        return self.node_type()

    def key(self) -> NodeKey:
        """Return the ``(base_type, node_id)`` identity."""
        return NodeKey(self.base_type(), self.node_id())

    def identifier(self) -> str:
        """Return a unique, stable string identifier (``"Base:id"``)."""
        return str(self.key())

    def title(self) -> str:
        return str(self.metadata().get('title', ''))

    def sort_key(self) -> Any:
        return self.metadata().get('sort', 0)

    def show_in_menus(self) -> bool:
        return bool(self.metadata().get('show_in_menus', True))

    def __str__(self) -> str:
        """String representation defaults to identifier."""
        return self.identifier()

    def __repr__(self) -> str:
        """Detailed representation for debugging."""
        return f"{self.__class__.__name__}(id={self.identifier()!r})"

    def __eq__(self, other: object) -> bool:
        """Nodes are equal if they have the same identifier."""
        if not isinstance(other, HierarchyNode):
            return NotImplemented
        return self.identifier() == other.identifier()

    def __hash__(self) -> int:
        """Hash based on identifier for use in sets and dicts."""
        return hash(self.identifier())
