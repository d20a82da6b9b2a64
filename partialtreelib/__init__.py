"""PartialTreeLib - Partial marking and lazy traversal of large hierarchies.

PartialTreeLib shows a bounded, balanced slice of a hierarchy that may be far
too large to load at once - a site tree, a category tree, an org chart - and
lets a UI grow that slice on demand.

Typical flow:
━━━━━━━━━━━━━━━━━━━━━━━━━━
Mark a working set and render it:
    from partialtreelib import render_partial_tree
    html = render_partial_tree(root, adapter, min_node_count=30)

Walk in document order:
    from partialtreelib import iter_document_order
    for node in iter_document_order(root, adapter): ...
━━━━━━━━━━━━━━━━━━━━━━━━━━

Nodes come from a HierarchyAdapter you implement (or the bundled
InMemoryHierarchyAdapter); children are memoized per node in a ChildCache.
"""

__version__ = "0.1.0"

from .errors import HierarchyError, ConfigurationError, ChildFetchUnavailableError
from .config import (
    DEFAULT_MIN_NODE_COUNT,
    ChildrenVariant,
    StageStatus,
    MarkingConfig,
    RenderOptions,
)
from .core import HierarchyNode, NodeKey, HierarchyAdapter, NodeArena
from .caching import ChildCache
from .marking import MarkingFilter, MarkFlags, MarkState, FrontierMarker
from .render import TreeRenderer
from .traversal import TraversalWalker
from .adapters import InMemoryHierarchyAdapter, RecordNode

# High-level API
from .api import (
    mark_working_set,
    render_partial_tree,
    render_tree,
    natural_next,
    iter_document_order,
)

__all__ = [
    "__version__",
    # Errors
    'HierarchyError',
    'ConfigurationError',
    'ChildFetchUnavailableError',
    # Configuration
    'DEFAULT_MIN_NODE_COUNT',
    'ChildrenVariant',
    'StageStatus',
    'MarkingConfig',
    'RenderOptions',
    # Core
    'HierarchyNode',
    'NodeKey',
    'HierarchyAdapter',
    'NodeArena',
    'ChildCache',
    'MarkingFilter',
    'MarkFlags',
    'MarkState',
    'FrontierMarker',
    'TreeRenderer',
    'TraversalWalker',
    # Adapters
    'InMemoryHierarchyAdapter',
    'RecordNode',
    # API
    'mark_working_set',
    'render_partial_tree',
    'render_tree',
    'natural_next',
    'iter_document_order',
]
