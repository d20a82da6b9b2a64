"""Built-in adapters for partialtreelib."""

from .memory import InMemoryHierarchyAdapter, RecordNode

__all__ = [
    'InMemoryHierarchyAdapter',
    'RecordNode',
]
