#!/usr/bin/env python3
"""Demo script for partial marking with PartialTreeLib.

Builds a wide in-memory hierarchy, marks a small balanced slice of it,
grows the slice on demand the way a UI would when a user clicks a node,
and renders each stage as nested list markup.
"""

import logging
import sys
from pathlib import Path

# Add parent directory to path for development
sys.path.insert(0, str(Path(__file__).parent.parent))

from partialtreelib import FrontierMarker, MarkState, TreeRenderer
from partialtreelib.testing import build_wide_tree


def demo_initial_view(adapter, root):
    """Mark roughly 15 nodes breadth-first and render them."""
    print("\n=== Initial View ===")
    marker = FrontierMarker(adapter, state=MarkState())
    count = marker.mark_partial_tree(root, 15)
    print(f"Marked {count} nodes of {len(adapter)}\n")

    renderer = TreeRenderer(adapter, marker=marker)
    print(renderer.render_as_nested_list(root, limit_to_marked=True,
                                         title_template="<li class=\"{classes}\">{title}"))
    return marker, renderer


def demo_expand_on_click(marker, renderer, root, node_id):
    """Expand one more node, as a click on an 'unexpanded' item would."""
    print(f"\n=== After expanding node {node_id} ===")
    if not marker.mark_by_id(node_id, open=True):
        print(f"Node {node_id} is not in the marked set")
        return
    print(f"Now {len(marker)} nodes marked\n")
    print(renderer.render_as_nested_list(root, limit_to_marked=True,
                                         title_template="<li class=\"{classes}\">{title}"))


def demo_expose_deep_node(adapter, root):
    """Open the path to a node far below the initial view."""
    print("\n=== Exposing a deep node ===")
    marker = FrontierMarker(adapter)
    marker.mark_partial_tree(root, 10)
    target = adapter.get(len(adapter))
    opened = marker.expose_path(target)
    print(f"Opened {opened} nodes down to {target.title()}")
    print(TreeRenderer(adapter, marker=marker).render_as_nested_list(
        root, limit_to_marked=True, title_template="<li>{title}"))


def main():
    logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")
    adapter, root = build_wide_tree(depth=4, breadth=4)
    marker, renderer = demo_initial_view(adapter, root)
    demo_expand_on_click(marker, renderer, root, 3)
    demo_expose_deep_node(adapter, root)


if __name__ == "__main__":
    main()
