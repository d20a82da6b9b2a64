"""Testing utilities for PartialTreeLib consumers."""

from .fixtures import (
    CacheTestHelper,
    bfs_order,
    build_adapter,
    build_chain,
    build_wide_tree,
    marked_ids,
    preorder,
)

__all__ = [
    'CacheTestHelper',
    'bfs_order',
    'build_adapter',
    'build_chain',
    'build_wide_tree',
    'marked_ids',
    'preorder',
]
