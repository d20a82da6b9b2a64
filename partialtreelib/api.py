"""High-level API for partialtreelib.

This module provides simple, functional interfaces for the common UI flow:
mark a bounded working set, optionally expose a deep node, render the result,
and step through the tree in document order. These functions wrap the
object-oriented API; each call builds its own MarkState, so independent
requests never share marking flags.
"""

from typing import Any, Callable, Iterator, Mapping, Optional, Union

from .caching.child_cache import ChildCache
from .config import (
    DEFAULT_MIN_NODE_COUNT,
    ChildrenVariant,
    RenderOptions,
    parse_variant,
)
from .core.adapter import HierarchyAdapter
from .core.node import HierarchyNode
from .errors import ConfigurationError
from .marking.filters import MarkingFilter
from .marking.marker import FrontierMarker
from .marking.state import MarkState
from .render.nested_list import TreeRenderer
from .traversal.walker import RootScope, TraversalWalker

FilterSpec = Union[MarkingFilter, Mapping[str, Any], Callable[[Any], bool], None]


def mark_working_set(
    root: HierarchyNode,
    adapter: HierarchyAdapter,
    min_node_count: Any = DEFAULT_MIN_NODE_COUNT,
    marking_filter: FilterSpec = None,
    variant: Union[ChildrenVariant, str] = ChildrenVariant.ALL_INCLUDING_DELETED,
    expose: Optional[HierarchyNode] = None,
    cache: Optional[ChildCache] = None,
    context: Any = None,
) -> FrontierMarker:
    """Mark a bounded working set from ``root`` with a fresh MarkState.

    Args:
        root: Node the pass starts from
        adapter: Adapter for the hierarchy
        min_node_count: Node budget (invalid values mean the default)
        marking_filter: MarkingFilter, ``{"field", "value"}`` /
            ``{"predicate"}`` mapping, or a plain predicate
        variant: Children variant to mark through
        expose: Node whose path from the root is marked and opened
        cache: ChildCache to reuse across calls
        context: Passed through to the adapter's children hook

    Returns:
        The FrontierMarker holding the marked set and its MarkState

    Example:
        >>> marker = mark_working_set(root, adapter, min_node_count=50)
        >>> marker.is_marked(some_node)
    """
    marker = FrontierMarker(
        adapter,
        state=MarkState(),
        cache=cache,
        marking_filter=_parse_filter(marking_filter),
        variant=parse_variant(variant),
    )
    marker.mark_partial_tree(root, min_node_count, context)
    if expose is not None:
        marker.expose_path(expose, context)
    return marker


def render_partial_tree(
    root: HierarchyNode,
    adapter: HierarchyAdapter,
    min_node_count: Any = DEFAULT_MIN_NODE_COUNT,
    marking_filter: FilterSpec = None,
    variant: Union[ChildrenVariant, str] = ChildrenVariant.ALL_INCLUDING_DELETED,
    expose: Optional[HierarchyNode] = None,
    cache: Optional[ChildCache] = None,
    **render_kwargs: Any,
) -> str:
    """Mark a working set from ``root`` and render it as nested lists.

    Args:
        root: Node whose marked descendants are rendered
        adapter: Adapter for the hierarchy
        min_node_count: Node budget
        marking_filter: See mark_working_set()
        variant: Children variant for marking and rendering
        expose: Node to expose before rendering
        cache: ChildCache to reuse across calls
        **render_kwargs: RenderOptions fields (title_template, attributes, ...)

    Returns:
        Markup, or ``""`` if nothing was marked below ``root``

    Raises:
        ConfigurationError: If ``render_kwargs`` sets ``limit_to_marked``,
            which this function always turns on

    Example:
        >>> html = render_partial_tree(root, adapter, min_node_count=30,
        ...                            attributes='class="tree"')
    """
    if 'limit_to_marked' in render_kwargs:
        raise ConfigurationError(
            "render_partial_tree() always limits rendering to marked nodes; "
            "use render_tree() for an unmarked render")
    parsed_variant = parse_variant(variant)
    marker = mark_working_set(root, adapter, min_node_count, marking_filter,
                              parsed_variant, expose, cache,
                              render_kwargs.get('extra_arg'))
    options = RenderOptions(limit_to_marked=True, variant=parsed_variant,
                            min_node_count=min_node_count, **render_kwargs)
    return TreeRenderer(adapter, marker=marker).render_as_nested_list(root, options)


def render_tree(
    root: HierarchyNode,
    adapter: HierarchyAdapter,
    variant: Union[ChildrenVariant, str] = ChildrenVariant.ALL,
    cache: Optional[ChildCache] = None,
    **render_kwargs: Any,
) -> str:
    """Render every descendant of ``root`` as nested lists, without marking."""
    options = RenderOptions(variant=parse_variant(variant), **render_kwargs)
    return TreeRenderer(adapter, cache=cache).render_as_nested_list(root, options)


def natural_next(
    node: HierarchyNode,
    adapter: HierarchyAdapter,
    type_filter: Optional[str] = None,
    root_scope: RootScope = None,
    after_node: Optional[HierarchyNode] = None,
    cache: Optional[ChildCache] = None,
) -> Optional[HierarchyNode]:
    """Find the next node in document order (see TraversalWalker.natural_next)."""
    return TraversalWalker(adapter, cache=cache).natural_next(
        node, type_filter, root_scope, after_node)


def iter_document_order(
    root: HierarchyNode,
    adapter: HierarchyAdapter,
    type_filter: Optional[str] = None,
    cache: Optional[ChildCache] = None,
) -> Iterator[HierarchyNode]:
    """Yield ``root`` and its descendants in pre-order, optionally by type.

    Example:
        >>> titles = [n.title() for n in iter_document_order(root, adapter)]
    """
    yield from TraversalWalker(adapter, cache=cache).walk(root, type_filter)


def _parse_filter(marking_filter: FilterSpec) -> MarkingFilter:
    """Parse a filter given in any supported form."""
    if marking_filter is None:
        return MarkingFilter()
    if isinstance(marking_filter, MarkingFilter):
        return marking_filter
    if isinstance(marking_filter, Mapping):
        return MarkingFilter.from_config(marking_filter)
    if callable(marking_filter):
        return MarkingFilter(predicate=marking_filter)
    raise TypeError(f"Unsupported marking filter: {marking_filter!r}")
