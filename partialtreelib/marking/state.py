"""Per-node marking state.

MarkState records, for every node a marking pass has touched, whether it is
marked, expanded and opened. It is keyed by NodeKey so node kinds sharing an
id pool do not collide. One instance belongs to one UI request; share it
between requests only under a lock, and reset() it between independent ones.
"""

from dataclasses import dataclass
from typing import Dict, Iterator, List

from ..core.node import HierarchyNode, NodeKey


@dataclass
class MarkFlags:
    """Marking flags of a single node."""
    marked: bool = False
    expanded: bool = False
    opened: bool = False


class MarkState:
    """Caller-owned table of ``NodeKey -> MarkFlags``.

    Nodes without an entry read as all-false. Entries are only written by
    explicit mark operations and only removed by reset().
    """

    def __init__(self):
        self._flags: Dict[NodeKey, MarkFlags] = {}

    def _entry(self, node: HierarchyNode) -> MarkFlags:
        key = node.key()
        flags = self._flags.get(key)
        if flags is None:
            flags = self._flags[key] = MarkFlags()
        return flags

    def flags(self, node: HierarchyNode) -> MarkFlags:
        """Return a copy of the node's flags (all-false if absent)."""
        flags = self._flags.get(node.key())
        if flags is None:
            return MarkFlags()
        return MarkFlags(flags.marked, flags.expanded, flags.opened)

    # === Writers ===

    def mark_expanded(self, node: HierarchyNode) -> None:
        flags = self._entry(node)
        flags.marked = True
        flags.expanded = True

    def mark_unexpanded(self, node: HierarchyNode) -> None:
        flags = self._entry(node)
        flags.marked = True
        flags.expanded = False

    def mark_opened(self, node: HierarchyNode) -> None:
        """Force the node's subtree open, e.g. along an exposed path."""
        flags = self._entry(node)
        flags.marked = True
        flags.opened = True

    def reset(self) -> None:
        self._flags.clear()

    # === Readers ===

    def is_marked(self, node: HierarchyNode) -> bool:
        flags = self._flags.get(node.key())
        return flags.marked if flags is not None else False

    def is_expanded(self, node: HierarchyNode) -> bool:
        flags = self._flags.get(node.key())
        return flags.expanded if flags is not None else False

    def is_opened(self, node: HierarchyNode) -> bool:
        flags = self._flags.get(node.key())
        return flags.opened if flags is not None else False

    def marking_classes(self, node: HierarchyNode) -> str:
        """Return CSS hints: ``unexpanded``, ``closed``, both, or neither."""
        classes = []
        if not self.is_expanded(node):
            classes.append("unexpanded")
        if not self.is_opened(node):
            classes.append("closed")
        return " ".join(classes)

    def marked_keys(self) -> List[NodeKey]:
        return [key for key, flags in self._flags.items() if flags.marked]

    def __contains__(self, node: object) -> bool:
        if isinstance(node, HierarchyNode):
            return node.key() in self._flags
        return node in self._flags

    def __len__(self) -> int:
        return len(self._flags)

    def __iter__(self) -> Iterator[NodeKey]:
        return iter(self._flags)
