"""Nested list rendering of a partially-known hierarchy.

TreeRenderer turns the children of a node into ``<ul>``/``<li>`` markup,
descending into each rendered child. With ``limit_to_marked`` only nodes
flagged by a marking pass are emitted, which is how a UI shows the bounded
working set produced by FrontierMarker.
"""

import logging
from typing import Any, Iterator, List, Optional

from ..caching.child_cache import ChildCache
from ..config import RenderOptions
from ..core.adapter import HierarchyAdapter
from ..core.node import HierarchyNode
from ..errors import ConfigurationError
from ..marking.marker import FrontierMarker
from ..marking.state import MarkState

logger = logging.getLogger(__name__)


class _RenderFrame:
    """One level of the explicit render stack."""

    __slots__ = ('children', 'attributes', 'items', 'open_item')

    def __init__(self, children: Iterator[HierarchyNode], attributes: str):
        self.children = children
        self.attributes = attributes
        self.items: List[str] = []
        self.open_item: Optional[str] = None

    def markup(self) -> str:
        if not self.items:
            return ""
        attributes = f" {self.attributes}" if self.attributes else ""
        return f"<ul{attributes}>\n{''.join(self.items)}</ul>\n"


class TreeRenderer:
    """Renders child structure as nested list markup.

    Attributes:
        adapter: Adapter of the hierarchy being rendered
        cache: ChildCache children are read through
        marker: FrontierMarker whose state limits rendering (optional)
    """

    def __init__(self, adapter: HierarchyAdapter,
                 cache: Optional[ChildCache] = None,
                 marker: Optional[FrontierMarker] = None):
        self.adapter = adapter
        if cache is None:
            cache = marker.cache if marker is not None else ChildCache(adapter)
        self.cache = cache
        self.marker = marker

    @property
    def state(self) -> Optional[MarkState]:
        return self.marker.state if self.marker is not None else None

    def render_as_nested_list(self, node: HierarchyNode,
                              options: Optional[RenderOptions] = None,
                              **overrides: Any) -> str:
        """Render the children of ``node`` as nested ``<ul>`` markup.

        Args:
            node: Node whose children are rendered (the node itself is not)
            options: RenderOptions; keyword overrides are applied on top

        Returns:
            Markup, or ``""`` when no child is eligible

        Raises:
            ConfigurationError: If the options are invalid or
                ``limit_to_marked`` is requested without a marker
        """
        options = options if options is not None else RenderOptions()
        if overrides:
            options = options.replace(**overrides)
        errors = options.validate()
        if options.limit_to_marked and self.marker is None:
            errors.append("limit_to_marked requires a FrontierMarker")
        if errors:
            raise ConfigurationError(f"Invalid render options: {'; '.join(errors)}")

        if options.limit_to_marked and options.is_root_call:
            if not self.marker.marked_nodes:
                self.marker.mark_partial_tree(node, options.min_node_count,
                                              options.extra_arg, options.variant)
            self.marker.marking_finished()

        stack = [_RenderFrame(self._eligible_children(node, options), options.attributes)]
        finished = ""
        while stack:
            frame = stack[-1]
            if frame.open_item is not None:
                frame.items.append(f"{frame.open_item}\n{finished}</li>\n")
                frame.open_item = None

            child = next(frame.children, None)
            if child is None:
                stack.pop()
                finished = frame.markup()
                continue

            frame.open_item = self._title(child, options)
            stack.append(_RenderFrame(self._eligible_children(child, options), ""))

        if not finished:
            logger.debug("Nothing to render under %s", node.identifier())
        return finished

    def _eligible_children(self, node: HierarchyNode,
                           options: RenderOptions) -> Iterator[HierarchyNode]:
        children = self.cache.children(node, options.variant, options.extra_arg)
        if not options.limit_to_marked:
            return iter(children)
        state = self.state
        return iter([child for child in children if state.is_marked(child)])

    def _title(self, node: HierarchyNode, options: RenderOptions) -> str:
        template = options.title_template
        if callable(template):
            return template(node, options.extra_arg, self.state)
        state = self.state
        return template.format(
            node=node,
            extra=options.extra_arg,
            classes=state.marking_classes(node) if state is not None else "",
            title=node.title(),
            id=self.adapter.node_id(node),
        )
