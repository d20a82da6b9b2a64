"""Child-list caching for partialtreelib."""

from .child_cache import ChildCache

__all__ = ['ChildCache']
