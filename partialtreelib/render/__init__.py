"""Markup rendering for partialtreelib."""

from .nested_list import TreeRenderer

__all__ = ['TreeRenderer']
