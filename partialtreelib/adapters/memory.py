"""In-memory hierarchy adapter for partialtreelib.

Keeps node records in plain dictionaries: a draft stage, an optional live
stage, and a history of records deleted from both. Useful as a reference
provider, for tests, and for hierarchies small enough to hold in memory but
rendered through the same partial-marking UI as large ones.

Node objects are built fresh on every query, exactly like a database-backed
adapter would; ChildCache's arena is what gives them a stable identity.
"""

from collections import defaultdict
from typing import Any, Callable, Dict, Iterable, List, Optional, Set

from ..config import StageStatus
from ..core.adapter import HierarchyAdapter
from ..core.node import HierarchyNode


class RecordNode(HierarchyNode):
    """Concrete node backed by a field dictionary.

    Lightweight - it only copies the record it was built from.
    """

    def __init__(self, record: Dict[str, Any], base_type: Optional[str] = None):
        """Initialize a record node.

        Args:
            record: Fields; must contain ``id``, may contain ``type``,
                ``parent_id``, ``title``, ``sort``, ``show_in_menus``
            base_type: Type tag scoping the id pool (defaults to ``type``)
        """
        self._record = dict(record)
        self._record.setdefault('type', 'Node')
        self._record.setdefault('parent_id', 0)
        self._base_type = base_type

    def node_id(self) -> int:
        return self._record['id']

    def node_type(self) -> str:
        return self._record['type']

    def parent_id(self) -> int:
        return self._record['parent_id'] or 0

    def base_type(self) -> str:
        return self._base_type or self.node_type()

    def metadata(self) -> Dict[str, Any]:
        return dict(self._record)

    def __repr__(self) -> str:
        """Detailed representation for debugging."""
        return f"RecordNode(id={self.node_id()!r}, title={self.title()!r})"


def _record_order(record: Dict[str, Any]):
    return (record.get('sort', 0), record['id'])


class _Stage:
    """Records of one stage, indexed by id and by parent id."""

    def __init__(self):
        self.records: Dict[int, Dict[str, Any]] = {}
        self._by_parent: Dict[int, Set[int]] = defaultdict(set)

    def put(self, record: Dict[str, Any]) -> None:
        self.pop(record['id'])
        self.records[record['id']] = record
        self._by_parent[record.get('parent_id') or 0].add(record['id'])

    def pop(self, record_id: int) -> Optional[Dict[str, Any]]:
        record = self.records.pop(record_id, None)
        if record is not None:
            self._by_parent[record.get('parent_id') or 0].discard(record_id)
        return record

    def get(self, record_id: int) -> Optional[Dict[str, Any]]:
        return self.records.get(record_id)

    def children(self, parent_id: int) -> List[Dict[str, Any]]:
        ids = self._by_parent.get(parent_id, ())
        records = [self.records[i] for i in ids if i != parent_id]
        records.sort(key=_record_order)
        return records

    def __contains__(self, record_id: object) -> bool:
        return record_id in self.records

    def __len__(self) -> int:
        return len(self.records)


class InMemoryHierarchyAdapter(HierarchyAdapter):
    """Adapter over dictionaries of draft and live records.

    Attributes:
        base_type: Base type shared by every record
        versioned: Whether a live stage is maintained next to the draft
        supported_types: Node types whose children can be listed (None = all)
        fetch_calls: Number of child-list queries served (for cache tests)
    """

    def __init__(self,
                 records: Iterable[Dict[str, Any]] = (),
                 base_type: str = "Node",
                 versioned: bool = False,
                 supported_types: Optional[Set[str]] = None,
                 can_view: Optional[Callable[[HierarchyNode], bool]] = None):
        """Initialize the adapter.

        Args:
            records: Initial draft records (dicts with at least ``id``)
            base_type: Base type tag for every node
            versioned: Maintain a live stage
            supported_types: Node types that can have children listed
            can_view: Permission predicate for menu children
        """
        self.base_type = base_type
        self.versioned = versioned
        self.supported_types = supported_types
        self._can_view = can_view
        self._draft = _Stage()
        self._live = _Stage()
        self._history = _Stage()
        self.fetch_calls = 0
        for record in records:
            self.add(**record)

    # === Record management ===

    def add(self, id: int, parent_id: int = 0, title: str = "", sort: Any = None,
            type: str = "Node", show_in_menus: bool = True, **fields: Any) -> RecordNode:
        """Add (or replace) a draft record and return its node.

        Without an explicit ``sort`` the record sorts after its siblings.
        """
        if sort is None:
            sort = len(self._draft.children(parent_id or 0)) + 1
        record = dict(fields, id=id, parent_id=parent_id or 0, title=title,
                      sort=sort, type=type, show_in_menus=show_in_menus)
        self._draft.put(record)
        return self._node(record)

    def update(self, id: int, **fields: Any) -> RecordNode:
        """Change fields of a draft record."""
        record = dict(self._draft.get(id), **fields)
        self._draft.put(record)
        return self._node(record)

    def publish(self, id: Optional[int] = None) -> None:
        """Copy one draft record (or all of them) to the live stage."""
        if not self.versioned:
            raise ValueError("publish() requires a versioned adapter")
        ids = [id] if id is not None else list(self._draft.records)
        for record_id in ids:
            self._live.put(dict(self._draft.get(record_id)))

    def delete_from_draft(self, id: int) -> None:
        """Remove a record from the draft only; a live copy survives."""
        self._draft.pop(id)

    def delete(self, id: int) -> None:
        """Remove a record from both stages, keeping it in history."""
        record = self._draft.pop(id)
        live_record = self._live.pop(id)
        if record is not None or live_record is not None:
            self._history.put(dict(record or live_record))

    def get(self, id: int) -> Optional[RecordNode]:
        """Return the draft node with ``id`` (falling back to live)."""
        record = self._draft.get(id) or self._live.get(id)
        return self._node(record) if record is not None else None

    def __len__(self) -> int:
        return len(self._draft)

    # === HierarchyAdapter ===

    def fetch_children(self, node: HierarchyNode, include_all: bool) -> Optional[List[HierarchyNode]]:
        if not self.supports_children(node):
            return None
        self.fetch_calls += 1
        records = self._draft.children(node.node_id())
        if not include_all:
            records = [r for r in records if r.get('show_in_menus', True)]
        return [self._node(r) for r in records]

    def get_parent(self, node: HierarchyNode) -> Optional[HierarchyNode]:
        parent_id = node.parent_id()
        if not parent_id:
            return None
        return self.get(parent_id)

    def child_count(self, node: HierarchyNode) -> int:
        return len(self._draft.children(node.node_id()))

    def has_versioning(self, node: HierarchyNode) -> bool:
        return self.versioned

    def fetch_live_only_children(self, node: HierarchyNode, include_all: bool,
                                 only_missing_from_draft: bool) -> Optional[List[HierarchyNode]]:
        if not self.versioned:
            return None
        self.fetch_calls += 1
        records = self._live.children(node.node_id())
        if not include_all:
            records = [r for r in records if r.get('show_in_menus', True)]
        if only_missing_from_draft:
            records = [r for r in records if r['id'] not in self._draft]
        return [self._node(r) for r in records]

    def compare_to_live(self, node: HierarchyNode) -> StageStatus:
        if not self.versioned:
            return StageStatus.UNCHANGED
        draft = self._draft.get(node.node_id())
        live = self._live.get(node.node_id())
        if draft is None:
            return StageStatus.DELETED if live is not None else StageStatus.UNCHANGED
        if live is None:
            return StageStatus.ADDED
        if draft != live:
            return StageStatus.MODIFIED
        return StageStatus.UNCHANGED

    def fetch_historical_children(self, node: HierarchyNode) -> Optional[List[HierarchyNode]]:
        merged: Dict[int, Dict[str, Any]] = {}
        for stage in (self._history, self._live, self._draft):
            for record in stage.children(node.node_id()):
                merged[record['id']] = record
        return [self._node(r) for r in sorted(merged.values(), key=_record_order)]

    def supports_children(self, node: HierarchyNode) -> bool:
        return self.supported_types is None or node.node_type() in self.supported_types

    def can_view(self, node: HierarchyNode) -> bool:
        return self._can_view(node) if self._can_view is not None else True

    def _node(self, record: Dict[str, Any]) -> RecordNode:
        return RecordNode(record, base_type=self.base_type)
