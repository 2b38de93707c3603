"""[[Wiki-link]] references between notes."""

from __future__ import annotations

import re
import sqlite3
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Iterator, Sequence

from .database import Database
from .errors import NoteServiceError
from .models import Note, parse_timestamp

_WIKI_LINK = re.compile(r"\[\[([^\]]+)\]\]")

_NOTE_COLUMNS = (
    "n.id, n.title, n.content, n.is_pinned, n.is_archived, n.is_trashed,"
    " n.encrypted, n.created_at, n.updated_at"
)


@contextmanager
def _sqlite_errors() -> Iterator[None]:
    try:
        yield
    except sqlite3.Error as exc:
        raise NoteServiceError(f"sqlite error: {exc}") from exc


def _row_to_note(row: Sequence) -> Note:
    return Note(
        id=row[0],
        title=row[1],
        content=row[2],
        is_pinned=row[3] != 0,
        is_archived=row[4] != 0,
        is_trashed=row[5] != 0,
        encrypted=row[6] != 0,
        created_at=parse_timestamp(row[7]),
        updated_at=parse_timestamp(row[8]),
    )


def _resolve(conn: sqlite3.Connection, title: str) -> str | None:
    try:
        row = conn.execute("SELECT id FROM notes WHERE title = ? LIMIT 1", (title,)).fetchone()
    except sqlite3.Error:
        row = None
    if row is not None:
        return row[0]

    query = '"{}"*'.format(title.replace('"', '""'))
    try:
        row = conn.execute(
            "SELECT n.id FROM notes_fts f JOIN notes n ON n.rowid = f.rowid"
            " WHERE notes_fts MATCH ? ORDER BY rank LIMIT 1",
            (query,),
        ).fetchone()
    except sqlite3.Error:
        return None
    return row[0] if row is not None else None


class BacklinkService:
    """Tracks which notes link to which."""

    def __init__(self, db: Database) -> None:
        self._db = db

    @staticmethod
    def extract_links(content: str) -> list[str]:
        """Return the trimmed titles of all [[Note Title]] references."""
        titles = (match.group(1).strip() for match in _WIKI_LINK.finditer(content))
        return [title for title in titles if title]

    def resolve_title(self, title: str) -> str | None:
        """Find a note id by exact title, falling back to a full-text prefix match."""
        with self._db.conn() as conn:
            return _resolve(conn, title)

    def refresh(self, note_id: str, content: str) -> None:
        """Replace the outgoing links of a note with those found in its content."""
        with self._db.conn() as conn, _sqlite_errors():
            conn.execute("DELETE FROM backlinks WHERE source_note_id = ?", (note_id,))
            for title in self.extract_links(content):
                target_id = _resolve(conn, title)
                if target_id is None:
                    continue
                conn.execute(
                    "INSERT OR IGNORE INTO backlinks (source_note_id, target_note_id, created_at)"
                    " VALUES (?, ?, ?)",
                    (note_id, target_id, datetime.now(timezone.utc).isoformat()),
                )

    def _linked(self, join_column: str, filter_column: str, note_id: str) -> list[Note]:
        with self._db.conn() as conn, _sqlite_errors():
            rows = conn.execute(
                f"SELECT {_NOTE_COLUMNS} FROM notes n JOIN backlinks b ON n.id = b.{join_column}"
                f" WHERE b.{filter_column} = ? ORDER BY b.created_at DESC",
                (note_id,),
            ).fetchall()
        return [_row_to_note(row) for row in rows]

    def get_linked_mentions(self, note_id: str) -> list[Note]:
        """Notes that link to this note, newest link first."""
        return self._linked("source_note_id", "target_note_id", note_id)

    def get_outgoing_links(self, note_id: str) -> list[Note]:
        """Notes this note links to, newest link first."""
        return self._linked("target_note_id", "source_note_id", note_id)