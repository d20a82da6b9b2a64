"""Configuration system for partialtreelib.

This module defines how callers specify a marking pass and a render pass:
which children variant to fetch, how many nodes to mark, which children the
marking filter admits, and how the nested list markup is produced.
"""

from dataclasses import dataclass, replace as _dc_replace
from enum import Enum
from html import escape
from typing import Any, Callable, List, Optional, Union

from .errors import ChildFetchUnavailableError


DEFAULT_MIN_NODE_COUNT = 30


class ChildrenVariant(Enum):
    """Which flavour of child list to fetch for a node.

    The variants form a closed set; a value outside it is a configuration
    error, not something to look up dynamically.
    """
    MENU = "menu"                                    # Visible in navigation only
    ALL = "all"                                      # Including "not in menus"
    ALL_INCLUDING_DELETED = "all_including_deleted"  # Draft plus live-only


class StageStatus(Enum):
    """Provenance of a child relative to the draft stage."""
    UNCHANGED = "same_on_stage"
    ADDED = "added_to_stage"
    MODIFIED = "modified_on_stage"
    DELETED = "deleted_from_stage"


def normalize_min_node_count(value: Any) -> int:
    """Return a usable node budget.

    Non-numeric values, booleans and anything ``<= 0`` fall back to
    ``DEFAULT_MIN_NODE_COUNT``.
    """
    if isinstance(value, bool):
        return DEFAULT_MIN_NODE_COUNT
    try:
        count = int(float(value))
    except (TypeError, ValueError, OverflowError):
        return DEFAULT_MIN_NODE_COUNT
    if count <= 0:
        return DEFAULT_MIN_NODE_COUNT
    return count


def parse_variant(variant: Union[ChildrenVariant, str, None],
                  default: ChildrenVariant = ChildrenVariant.ALL_INCLUDING_DELETED) -> ChildrenVariant:
    """Resolve a variant given as enum member, enum value or enum name.

    Raises:
        ChildFetchUnavailableError: If the value names no variant
    """
    if variant is None:
        return default
    if isinstance(variant, ChildrenVariant):
        return variant
    if isinstance(variant, str):
        lowered = variant.lower()
        for member in ChildrenVariant:
            if lowered in (member.value, member.name.lower()):
                return member
    raise ChildFetchUnavailableError(
        f"Unknown children variant: {variant!r}. "
        f"Choose from: {', '.join(m.value for m in ChildrenVariant)}"
    )


@dataclass
class MarkingConfig:
    """Complete configuration for one partial marking pass."""

    min_node_count: int = DEFAULT_MIN_NODE_COUNT
    variant: ChildrenVariant = ChildrenVariant.ALL_INCLUDING_DELETED
    marking_filter: Optional[Any] = None  # MarkingFilter instance

    @classmethod
    def menu_only(cls, min_node_count: int = DEFAULT_MIN_NODE_COUNT) -> 'MarkingConfig':
        """Config that marks only children visible in navigation."""
        return cls(min_node_count=min_node_count, variant=ChildrenVariant.MENU)

    @classmethod
    def everything(cls, min_node_count: int = DEFAULT_MIN_NODE_COUNT) -> 'MarkingConfig':
        """Config that marks draft children plus those deleted from draft."""
        return cls(min_node_count=min_node_count,
                   variant=ChildrenVariant.ALL_INCLUDING_DELETED)

    def validate(self) -> List[str]:
        """Validate configuration for consistency.

        Returns:
            List of validation errors (empty if valid)
        """
        errors = []
        if not isinstance(self.variant, ChildrenVariant):
            errors.append(f"variant must be a ChildrenVariant, got {self.variant!r}")
        if self.marking_filter is not None and not hasattr(self.marking_filter, 'matches'):
            errors.append("marking_filter must provide matches(node)")
        return errors


def default_title_template(node: Any, extra_arg: Any, state: Any) -> str:
    """Default list-item opener: ``<li>`` with id, CSS hints and escaped title."""
    classes = state.marking_classes(node) if state is not None else ""
    return '<li id="record-{}" class="{}">{}'.format(
        node.node_id(), classes, escape(str(node.title())))


TitleTemplate = Union[str, Callable[[Any, Any, Any], str]]


@dataclass
class RenderOptions:
    """Options for rendering a tree as nested list markup.

    ``title_template`` opens each item and must include the ``<li>`` tag.
    A string template is formatted with ``node``, ``extra``, ``classes``,
    ``title`` and ``id``; a callable receives ``(node, extra_arg, state)``.
    """

    title_template: TitleTemplate = default_title_template
    extra_arg: Optional[Any] = None
    limit_to_marked: bool = False
    variant: ChildrenVariant = ChildrenVariant.ALL_INCLUDING_DELETED
    is_root_call: bool = True
    min_node_count: int = DEFAULT_MIN_NODE_COUNT
    attributes: str = ""

    def replace(self, **changes) -> 'RenderOptions':
        """Return a copy with the given fields changed."""
        return _dc_replace(self, **changes)

    def validate(self) -> List[str]:
        """Validate options for consistency.

        Returns:
            List of validation errors (empty if valid)
        """
        errors = []
        if not (isinstance(self.title_template, str) or callable(self.title_template)):
            errors.append("title_template must be a format string or a callable")
        if not isinstance(self.variant, ChildrenVariant):
            errors.append(f"variant must be a ChildrenVariant, got {self.variant!r}")
        if not isinstance(self.attributes, str):
            errors.append("attributes must be a string")
        return errors


__all__ = [
    'DEFAULT_MIN_NODE_COUNT',
    'ChildrenVariant',
    'StageStatus',
    'MarkingConfig',
    'RenderOptions',
    'TitleTemplate',
    'default_title_template',
    'normalize_min_node_count',
    'parse_variant',
]
