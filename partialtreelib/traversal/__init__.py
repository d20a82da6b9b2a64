"""Document-order traversal for partialtreelib."""

from .walker import TraversalWalker

__all__ = ['TraversalWalker']
