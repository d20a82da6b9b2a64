#!/usr/bin/env python3
"""
Complete example of a custom adapter for a database-backed site tree.

This example stores pages in SQLite with a draft table and a live table,
the way a CMS keeps an editable stage next to the published one, and shows
how to plug it into partial marking, rendering and document-order walking.
"""

import sqlite3
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

# Add parent directory to path for development
sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from partialtreelib import (
    HierarchyAdapter,
    HierarchyNode,
    StageStatus,
    iter_document_order,
    mark_working_set,
    render_partial_tree,
)

SCHEMA = """
CREATE TABLE {table} (
    id INTEGER PRIMARY KEY,
    parent_id INTEGER NOT NULL DEFAULT 0,
    class_name TEXT NOT NULL DEFAULT 'Page',
    title TEXT NOT NULL,
    sort INTEGER NOT NULL DEFAULT 0,
    show_in_menus INTEGER NOT NULL DEFAULT 1
)
"""
COLUMNS = "id, parent_id, class_name, title, sort, show_in_menus"


class SitePage(HierarchyNode):
    """A row of the page table. Every concrete page class shares the 'Page' id pool."""

    def __init__(self, row: sqlite3.Row):
        self._fields = dict(row)

    def node_id(self) -> int:
        return self._fields['id']

    def node_type(self) -> str:
        return self._fields['class_name']

    def parent_id(self) -> int:
        return self._fields['parent_id']

    def base_type(self) -> str:
        return "Page"

    def metadata(self) -> Dict[str, Any]:
        return dict(self._fields)


class SQLiteSiteTreeAdapter(HierarchyAdapter):
    """Adapter reading pages from ``page_draft`` and ``page_live`` tables."""

    def __init__(self, connection: sqlite3.Connection):
        self.db = connection
        self.db.row_factory = sqlite3.Row

    def _query(self, sql: str, *params) -> List[SitePage]:
        return [SitePage(row) for row in self.db.execute(sql, params)]

    def _children(self, table: str, node: HierarchyNode, include_all: bool) -> List[SitePage]:
        sql = f"SELECT {COLUMNS} FROM {table} WHERE parent_id = ? AND id != parent_id"
        if not include_all:
            sql += " AND show_in_menus = 1"
        return self._query(sql + " ORDER BY sort, id", node.node_id())

    def fetch_children(self, node, include_all):
        return self._children("page_draft", node, include_all)

    def get(self, page_id: int) -> Optional[SitePage]:
        rows = self._query(f"SELECT {COLUMNS} FROM page_draft WHERE id = ?", page_id)
        return rows[0] if rows else None

    def get_parent(self, node):
        if not node.parent_id():
            return None
        return self.get(node.parent_id())

    def child_count(self, node):
        (count,) = self.db.execute(
            "SELECT COUNT(*) FROM page_draft WHERE parent_id = ? AND id != parent_id",
            (node.node_id(),)).fetchone()
        return count

    def has_versioning(self, node):
        return True

    def fetch_live_only_children(self, node, include_all, only_missing_from_draft):
        live = self._children("page_live", node, include_all)
        if not only_missing_from_draft:
            return live
        draft_ids = {row[0] for row in self.db.execute("SELECT id FROM page_draft")}
        return [page for page in live if page.node_id() not in draft_ids]

    def compare_to_live(self, node):
        live = self.db.execute(f"SELECT {COLUMNS} FROM page_live WHERE id = ?",
                               (node.node_id(),)).fetchone()
        if live is None:
            return StageStatus.ADDED
        return StageStatus.UNCHANGED if dict(live) == node.metadata() else StageStatus.MODIFIED


def build_demo_database() -> sqlite3.Connection:
    """Create an in-memory site with a few hundred pages."""
    db = sqlite3.connect(":memory:")
    for table in ("page_draft", "page_live"):
        db.execute(SCHEMA.format(table=table))

    rows = [(1, 0, 'Page', 'Home', 1, 1), (2, 0, 'Page', 'About', 2, 1),
            (3, 2, 'Page', 'Team', 1, 1), (4, 2, 'RedirectorPage', 'Old team', 2, 0)]
    next_id = 5
    for section in range(3):
        section_id = next_id
        rows.append((section_id, 0, 'Page', f'Section {section + 1}', section + 3, 1))
        next_id += 1
        for article in range(60):
            rows.append((next_id, section_id, 'Page', f'Article {section + 1}.{article + 1}',
                         article + 1, 1))
            next_id += 1

    db.executemany(f"INSERT INTO page_live ({COLUMNS}) VALUES (?, ?, ?, ?, ?, ?)", rows)
    db.executemany(f"INSERT INTO page_draft ({COLUMNS}) VALUES (?, ?, ?, ?, ?, ?)", rows)
    # Unpublished edits: one page deleted from draft, one retitled, one new
    db.execute("DELETE FROM page_draft WHERE id = 3")
    db.execute("UPDATE page_draft SET title = 'About us' WHERE id = 2")
    db.execute(f"INSERT INTO page_draft ({COLUMNS}) VALUES (999, 2, 'Page', 'Careers', 3, 1)")
    return db


def virtual_root() -> SitePage:
    """Top-level pages hang off id 0, which has no row of its own."""
    return SitePage({'id': 0, 'parent_id': 0, 'class_name': 'Page', 'title': 'Site',
                     'sort': 0, 'show_in_menus': 1})


def sync_example():
    """Mark, expose, render and walk the demo site."""
    adapter = SQLiteSiteTreeAdapter(build_demo_database())
    root = virtual_root()

    (total,) = adapter.db.execute("SELECT COUNT(*) FROM page_draft").fetchone()
    marker = mark_working_set(root, adapter, min_node_count=20)
    print(f"Marked {len(marker)} of {total} pages in the initial view")
    for node in marker.marked_nodes.values():
        status = marker.cache.stage_status(node)
        label = f" [{status.name.lower()}]" if status not in (None, StageStatus.UNCHANGED) else ""
        print(f"  {node.title()} ({marker.marking_classes(node) or 'open'}){label}")

    deep = adapter.get(180)
    html = render_partial_tree(root, adapter, min_node_count=20, expose=deep,
                               attributes='class="site-tree"')
    print(f"\nRendered {html.count('<li')} list items with '{deep.title()}' exposed")

    first_redirect = next(iter_document_order(root, adapter, type_filter="RedirectorPage"), None)
    print(f"First redirector in document order: {first_redirect.title() if first_redirect else None}")


if __name__ == "__main__":
    sync_example()
