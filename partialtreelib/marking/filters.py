"""Marking filter: decides which children a marking pass admits.

The filter is consulted for children only - the root of a pass is always
marked.
"""

import logging
from typing import Any, Callable, Mapping, Optional

from ..core.adapter import node_field

logger = logging.getLogger(__name__)

_COLLECTION_TYPES = (list, tuple, set, frozenset)


class MarkingFilter:
    """Predicate over nodes with two mutually exclusive modes.

    Field mode compares a named field against one value or a collection of
    acceptable values. Predicate mode calls an arbitrary function. With
    neither configured every node matches.

    Attributes:
        field_name: Field compared in field mode
        value: Scalar or collection of acceptable values
        predicate: Callable(node) -> bool used in predicate mode
    """

    def __init__(self, field_name: Optional[str] = None, value: Any = None,
                 predicate: Optional[Callable[[Any], bool]] = None):
        self.field_name: Optional[str] = None
        self.value: Any = None
        self.predicate: Optional[Callable[[Any], bool]] = None
        if field_name is not None and predicate is not None:
            raise ValueError("A marking filter takes a field or a predicate, not both")
        if field_name is not None:
            self.set_by_field(field_name, value)
        elif predicate is not None:
            self.set_by_predicate(predicate)

    @classmethod
    def from_config(cls, config: Optional[Mapping[str, Any]]) -> 'MarkingFilter':
        """Build a filter from ``{"field", "value"}`` or ``{"predicate"}``.

        Anything else is treated as "no filter".
        """
        if not config:
            return cls()
        field_name = config.get('field')
        predicate = config.get('predicate')
        if field_name and predicate is None:
            return cls(field_name=field_name, value=config.get('value'))
        if callable(predicate) and not field_name:
            return cls(predicate=predicate)
        logger.warning("Unrecognized marking filter configuration %r; marking without a filter",
                       sorted(config))
        return cls()

    def set_by_field(self, field_name: str, value: Any) -> None:
        """Only admit nodes whose ``field_name`` equals ``value``.

        ``value`` may be a list, tuple or set, in which case any member
        matching is enough.
        """
        self.field_name = field_name
        self.value = value
        self.predicate = None

    def set_by_predicate(self, predicate: Callable[[Any], bool]) -> None:
        """Only admit nodes for which ``predicate(node)`` is true."""
        if not callable(predicate):
            raise TypeError(f"Marking predicate must be callable, got {type(predicate).__name__}")
        self.predicate = predicate
        self.field_name = None
        self.value = None

    def clear(self) -> None:
        self.field_name = None
        self.value = None
        self.predicate = None

    @property
    def is_active(self) -> bool:
        return self.field_name is not None or self.predicate is not None

    def matches(self, node: Any, get_field: Optional[Callable[[Any, str], Any]] = None) -> bool:
        """Check whether ``node`` passes the filter.

        Args:
            node: Node to check
            get_field: Field reader, usually the adapter's node_field

        Returns:
            True if no filter is configured or the node matches
        """
        if self.field_name is not None:
            reader = get_field or node_field
            actual = reader(node, self.field_name)
            if isinstance(self.value, _COLLECTION_TYPES):
                return any(actual == candidate for candidate in self.value)
            return actual == self.value
        if self.predicate is not None:
            return bool(self.predicate(node))
        return True

    def __call__(self, node: Any) -> bool:
        return self.matches(node)

    def __repr__(self) -> str:
        if self.field_name is not None:
            return f"MarkingFilter(field={self.field_name!r}, value={self.value!r})"
        if self.predicate is not None:
            return f"MarkingFilter(predicate={self.predicate!r})"
        return "MarkingFilter()"
