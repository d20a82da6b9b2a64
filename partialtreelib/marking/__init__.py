"""Partial-tree marking: filters, per-node state and the frontier marker."""

from .filters import MarkingFilter
from .state import MarkFlags, MarkState
from .marker import FrontierMarker

__all__ = [
    'MarkingFilter',
    'MarkFlags',
    'MarkState',
    'FrontierMarker',
]
