"""Full-text search with filters, and saved smart views."""

from __future__ import annotations

import re
import sqlite3
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Iterator

from .database import Database
from .errors import NoteServiceError, NotFoundError

_TAG_FILTER = re.compile(r"\btag:(\S+)")
_PATH_FILTER = re.compile(r"\bpath:(\S+)")
_TODO_FILTER = "has:todo"
_SMART_VIEW_PREFIX = "smart_view:"
_SNIPPET_CHARS = 200
_RESULT_LIMIT = 50


@contextmanager
def _sqlite_errors() -> Iterator[None]:
    try:
        yield
    except sqlite3.Error as exc:
        raise NoteServiceError(f"sqlite error: {exc}") from exc


@dataclass
class SearchFilters:
    """Filters pulled out of a search query."""

    tag: str | None = None
    has_todo: bool | None = None
    is_pinned: bool | None = None
    is_archived: bool | None = None
    path: str | None = None


@dataclass
class SearchResult:
    """A note matching a search."""

    note_id: str
    title: str
    snippet: str
    rank: float
    updated_at: str


def _take_filter(pattern: re.Pattern[str], text: str) -> tuple[str | None, str]:
    match = pattern.search(text)
    if match is None:
        return None, text
    return match.group(1), text.replace(match.group(0), "").strip()


class SearchService:
    """Searches notes and manages saved smart views."""

    def __init__(self, db: Database) -> None:
        self._db = db

    @staticmethod
    def parse_query(text: str) -> tuple[str, SearchFilters]:
        """Split a query into its full-text part and its tag:, has:todo and path: filters."""
        filters = SearchFilters()
        filters.tag, remaining = _take_filter(_TAG_FILTER, text)
        if _TODO_FILTER in remaining:
            filters.has_todo = True
            remaining = remaining.replace(_TODO_FILTER, "").strip()
        filters.path, remaining = _take_filter(_PATH_FILTER, remaining)
        return remaining, filters

    def search(self, query: str) -> list[SearchResult]:
        """Up to 50 untrashed notes matching the query, pinned first, newest first."""
        fts_query, filters = self.parse_query(query)
        clauses = ["n.is_trashed = 0"]
        params: list[object] = []

        if filters.tag is not None:
            clauses.append(
                "n.id IN (SELECT note_id FROM note_tags nt JOIN tags t ON t.id = nt.tag_id"
                " WHERE t.name = ?)"
            )
            params.append(filters.tag)
        if filters.has_todo:
            clauses.append("n.content LIKE '%[ ]%'")
        if fts_query:
            clauses.append("n.rowid IN (SELECT rowid FROM notes_fts WHERE notes_fts MATCH ?)")
            params.append(fts_query)
        if filters.is_pinned is not None:
            clauses.append("n.is_pinned = ?")
            params.append(int(filters.is_pinned))

        sql = (
            "SELECT n.id, n.title, n.content, n.updated_at FROM notes n WHERE "
            + " AND ".join(clauses)
            + f" ORDER BY n.is_pinned DESC, n.updated_at DESC LIMIT {_RESULT_LIMIT}"
        )
        with self._db.conn() as conn, _sqlite_errors():
            rows = conn.execute(sql, params).fetchall()
        return [
            SearchResult(
                note_id=row[0],
                title=row[1],
                snippet=row[2][:_SNIPPET_CHARS],
                rank=0.0,
                updated_at=row[3],
            )
            for row in rows
        ]

    def save_smart_view(self, name: str, query: str) -> None:
        """Save a query under a name, replacing any view of that name."""
        with self._db.conn() as conn, _sqlite_errors():
            conn.execute(
                "INSERT OR REPLACE INTO meta (key, value) VALUES (?, ?)",
                (_SMART_VIEW_PREFIX + name, query),
            )

    def list_smart_views(self) -> list[tuple[str, str]]:
        """All saved views as (name, query) pairs, by name."""
        with self._db.conn() as conn, _sqlite_errors():
            rows = conn.execute(
                "SELECT key, value FROM meta WHERE key LIKE 'smart_view:%' ORDER BY key"
            ).fetchall()
        return [(key.removeprefix(_SMART_VIEW_PREFIX), value) for key, value in rows]

    def delete_smart_view(self, name: str) -> None:
        """Remove a saved view."""
        with self._db.conn() as conn, _sqlite_errors():
            conn.execute("DELETE FROM meta WHERE key = ?", (_SMART_VIEW_PREFIX + name,))

    def execute_smart_view(self, name: str) -> list[SearchResult]:
        """Run the query saved under a name."""
        with self._db.conn() as conn, _sqlite_errors():
            row = conn.execute(
                "SELECT value FROM meta WHERE key = ?", (_SMART_VIEW_PREFIX + name,)
            ).fetchone()
        if row is None:
            raise NotFoundError()
        return self.search(row[0])