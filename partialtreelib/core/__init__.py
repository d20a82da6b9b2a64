"""Core abstractions: nodes, adapters and the node arena."""

from .node import HierarchyNode, NodeKey
from .adapter import HierarchyAdapter, node_field
from .arena import NodeArena

__all__ = [
    'HierarchyNode',
    'NodeKey',
    'HierarchyAdapter',
    'node_field',
    'NodeArena',
]
