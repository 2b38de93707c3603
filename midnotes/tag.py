"""Hierarchical tags and their assignment to notes."""

from __future__ import annotations

import sqlite3
import uuid
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Iterator, Sequence

from .database import Database
from .errors import InvalidInputError, NoteServiceError
from .models import Tag, parse_timestamp

_COLUMNS = "id, name, parent_id, color, created_at"


@contextmanager
def _sqlite_errors() -> Iterator[None]:
    try:
        yield
    except sqlite3.Error as exc:
        raise NoteServiceError(f"sqlite error: {exc}") from exc


def _row_to_tag(row: Sequence) -> Tag:
    return Tag(
        id=row[0],
        name=row[1],
        parent_id=row[2],
        color=row[3],
        created_at=parse_timestamp(row[4]),
    )


def _require_name(name: str) -> None:
    if not name:
        raise InvalidInputError("tag name cannot be empty")


class TagService:
    """Operations on tags and the note-tag assignments."""

    def __init__(self, db: Database) -> None:
        self._db = db

    def _fetch_all(self, sql: str, params: tuple = ()) -> list[Tag]:
        with self._db.conn() as conn, _sqlite_errors():
            rows = conn.execute(sql, params).fetchall()
        return [_row_to_tag(row) for row in rows]

    def _fetch_one(self, sql: str, params: tuple) -> Tag | None:
        with self._db.conn() as conn, _sqlite_errors():
            row = conn.execute(sql, params).fetchone()
        return _row_to_tag(row) if row is not None else None

    def create(self, name: str, parent_id: str | None = None, color: str | None = None) -> Tag:
        """Create a tag, optionally under a parent, and return it."""
        _require_name(name)
        tag_id = str(uuid.uuid4())
        now = datetime.now(timezone.utc)
        with self._db.conn() as conn, _sqlite_errors():
            conn.execute(
                "INSERT INTO tags (id, name, parent_id, color, created_at) VALUES (?, ?, ?, ?, ?)",
                (tag_id, name, parent_id, color, now.isoformat()),
            )
        return Tag(id=tag_id, name=name, parent_id=parent_id, color=color, created_at=now)

    def get(self, tag_id: str) -> Tag | None:
        """Return the tag with this id, or None."""
        return self._fetch_one(f"SELECT {_COLUMNS} FROM tags WHERE id = ?", (tag_id,))

    def get_by_name(self, name: str) -> Tag | None:
        """Return the tag with this name, or None."""
        return self._fetch_one(f"SELECT {_COLUMNS} FROM tags WHERE name = ?", (name,))

    def update(
        self,
        tag_id: str,
        name: str,
        parent_id: str | None = None,
        color: str | None = None,
    ) -> None:
        """Replace a tag's name, parent and colour."""
        _require_name(name)
        with self._db.conn() as conn, _sqlite_errors():
            conn.execute(
                "UPDATE tags SET name = ?, parent_id = ?, color = ? WHERE id = ?",
                (name, parent_id, color, tag_id),
            )

    def delete(self, tag_id: str) -> None:
        """Delete a tag and remove it from every note."""
        with self._db.conn() as conn, _sqlite_errors():
            conn.execute("DELETE FROM note_tags WHERE tag_id = ?", (tag_id,))
            conn.execute("DELETE FROM tags WHERE id = ?", (tag_id,))

    def list_roots(self) -> list[Tag]:
        """Tags without a parent, by name."""
        return self._fetch_all(
            f"SELECT {_COLUMNS} FROM tags WHERE parent_id IS NULL ORDER BY name"
        )

    def get_children(self, parent_id: str) -> list[Tag]:
        """Direct children of a tag, by name."""
        return self._fetch_all(
            f"SELECT {_COLUMNS} FROM tags WHERE parent_id = ? ORDER BY name", (parent_id,)
        )

    def get_all(self) -> list[Tag]:
        """Every tag, by name."""
        return self._fetch_all(f"SELECT {_COLUMNS} FROM tags ORDER BY name")

    def assign_to_note(self, tag_id: str, note_id: str) -> None:
        """Attach a tag to a note; attaching twice has no further effect."""
        with self._db.conn() as conn, _sqlite_errors():
            conn.execute(
                "INSERT OR IGNORE INTO note_tags (note_id, tag_id) VALUES (?, ?)",
                (note_id, tag_id),
            )

    def remove_from_note(self, tag_id: str, note_id: str) -> None:
        """Detach a tag from a note."""
        with self._db.conn() as conn, _sqlite_errors():
            conn.execute(
                "DELETE FROM note_tags WHERE note_id = ? AND tag_id = ?", (note_id, tag_id)
            )

    def get_tags_for_note(self, note_id: str) -> list[Tag]:
        """Tags attached to a note, by name."""
        return self._fetch_all(
            "SELECT t.id, t.name, t.parent_id, t.color, t.created_at"
            " FROM tags t JOIN note_tags nt ON t.id = nt.tag_id"
            " WHERE nt.note_id = ? ORDER BY t.name",
            (note_id,),
        )

    def get_notes_for_tag(self, tag_id: str) -> list[str]:
        """Ids of the notes carrying a tag, in id order."""
        with self._db.conn() as conn, _sqlite_errors():
            rows = conn.execute(
                "SELECT note_id FROM note_tags WHERE tag_id = ? ORDER BY note_id", (tag_id,)
            ).fetchall()
        return [row[0] for row in rows]