"""Creating, reading and organising notes."""

from __future__ import annotations

import sqlite3
import uuid
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Iterator, Sequence

from . import cipher
from .database import Database
from .errors import NoteServiceError, NotFoundError
from .models import Note, parse_timestamp

_COLUMNS = (
    "id, title, content, is_pinned, is_archived, is_trashed, encrypted, created_at, updated_at"
)


@contextmanager
def _sqlite_errors() -> Iterator[None]:
    try:
        yield
    except sqlite3.Error as exc:
        raise NoteServiceError(f"sqlite error: {exc}") from exc


def _now_text() -> str:
    return datetime.now(timezone.utc).isoformat()


def _note_from_row(row: Sequence, title: str, content: str) -> Note:
    return Note(
        id=row[0],
        title=title,
        content=content,
        is_pinned=row[3] != 0,
        is_archived=row[4] != 0,
        is_trashed=row[5] != 0,
        encrypted=row[6] != 0,
        created_at=parse_timestamp(row[7]),
        updated_at=parse_timestamp(row[8]),
    )


class NoteService:
    """Operations on the notes table."""

    def __init__(self, db: Database) -> None:
        self._db = db

    def _encrypt(self, text: str) -> str:
        if self._db.is_encryption_enabled():
            try:
                sealed = cipher.xchacha20_encrypt(self._db.encryption_key(), text.encode("utf-8"))
            except cipher.CipherError:
                return text
            return sealed.hex()
        return text

    def _decrypt(self, text: str) -> str:
        if self._db.is_encryption_enabled():
            try:
                raw = bytes.fromhex(text)
                opened = cipher.xchacha20_decrypt(self._db.encryption_key(), raw)
            except (ValueError, cipher.CipherError):
                return text
            return opened.decode("utf-8", errors="replace")
        return text

    def _decrypted(self, row: Sequence) -> Note:
        return _note_from_row(row, self._decrypt(row[1]), self._decrypt(row[2]))

    def _list(self, where_and_order: str) -> list[Note]:
        with self._db.conn() as conn, _sqlite_errors():
            rows = conn.execute(f"SELECT {_COLUMNS} FROM notes {where_and_order}").fetchall()
        return [self._decrypted(row) for row in rows]

    def create(self, title: str, content: str) -> Note:
        """Create a note and return it."""
        note_id = str(uuid.uuid4())
        now = _now_text()
        with self._db.conn() as conn, _sqlite_errors():
            conn.execute(
                "INSERT INTO notes (id, title, content, created_at, updated_at)"
                " VALUES (?, ?, ?, ?, ?)",
                (note_id, self._encrypt(title), self._encrypt(content), now, now),
            )
        stamp = datetime.now(timezone.utc)
        return Note(
            id=note_id,
            title=title,
            content=content,
            is_pinned=False,
            is_archived=False,
            is_trashed=False,
            encrypted=self._db.is_encryption_enabled(),
            created_at=stamp,
            updated_at=stamp,
        )

    def get(self, note_id: str) -> Note | None:
        """Return the note with this id, or None."""
        with self._db.conn() as conn, _sqlite_errors():
            row = conn.execute(
                f"SELECT {_COLUMNS} FROM notes WHERE id = ?", (note_id,)
            ).fetchone()
        return self._decrypted(row) if row is not None else None

    def update(self, note_id: str, title: str, content: str) -> None:
        """Replace a note's title and content, keeping a snapshot of the old content."""
        now = _now_text()
        with self._db.conn() as conn, _sqlite_errors():
            old = conn.execute("SELECT content FROM notes WHERE id = ?", (note_id,)).fetchone()
            if old is not None:
                conn.execute(
                    "INSERT INTO note_history"
                    " (id, note_id, content_snapshot, title_snapshot, created_at)"
                    " VALUES (?, ?, ?, ?, ?)",
                    (str(uuid.uuid4()), note_id, old[0], title, now),
                )
            conn.execute(
                "UPDATE notes SET title = ?, content = ?, updated_at = ? WHERE id = ?",
                (title, content, now, note_id),
            )

    def trash(self, note_id: str) -> None:
        """Move a note to the trash."""
        with self._db.conn() as conn, _sqlite_errors():
            conn.execute(
                "UPDATE notes SET is_trashed = 1, updated_at = ? WHERE id = ?",
                (_now_text(), note_id),
            )

    def delete(self, note_id: str) -> None:
        """Delete a note outright."""
        with self._db.conn() as conn, _sqlite_errors():
            conn.execute("DELETE FROM notes WHERE id = ?", (note_id,))

    def _toggle(self, column: str, note_id: str) -> bool:
        with self._db.conn() as conn, _sqlite_errors():
            row = conn.execute(f"SELECT {column} FROM notes WHERE id = ?", (note_id,)).fetchone()
            if row is None:
                raise NotFoundError()
            new = row[0] == 0
            conn.execute(f"UPDATE notes SET {column} = ? WHERE id = ?", (int(new), note_id))
        return new

    def toggle_pin(self, note_id: str) -> bool:
        """Flip the pinned flag and return its new value."""
        return self._toggle("is_pinned", note_id)

    def toggle_archive(self, note_id: str) -> bool:
        """Flip the archived flag and return its new value."""
        return self._toggle("is_archived", note_id)

    def list_active(self) -> list[Note]:
        """Notes neither trashed nor archived, pinned first, newest first."""
        return self._list(
            "WHERE is_trashed = 0 AND is_archived = 0 ORDER BY is_pinned DESC, updated_at DESC"
        )

    def list_archived(self) -> list[Note]:
        """Archived notes that are not in the trash, newest first."""
        return self._list("WHERE is_archived = 1 AND is_trashed = 0 ORDER BY updated_at DESC")

    def restore(self, note_id: str) -> None:
        """Clear both the trashed and archived flags."""
        with self._db.conn() as conn, _sqlite_errors():
            conn.execute(
                "UPDATE notes SET is_trashed = 0, is_archived = 0, updated_at = ? WHERE id = ?",
                (_now_text(), note_id),
            )

    def delete_permanently(self, note_id: str) -> None:
        """Delete a note together with its tags, links and history."""
        with self._db.conn() as conn, _sqlite_errors():
            conn.execute("DELETE FROM note_tags WHERE note_id = ?", (note_id,))
            conn.execute(
                "DELETE FROM backlinks WHERE source_note_id = ? OR target_note_id = ?",
                (note_id, note_id),
            )
            conn.execute("DELETE FROM note_history WHERE note_id = ?", (note_id,))
            conn.execute("DELETE FROM notes WHERE id = ?", (note_id,))

    def list_trashed(self) -> list[Note]:
        """Notes in the trash, newest first."""
        return self._list("WHERE is_trashed = 1 ORDER BY updated_at DESC")

    def search(self, query: str) -> list[tuple[Note, float]]:
        """Full-text search; returns up to 50 notes with their rank, best first."""
        with self._db.conn() as conn, _sqlite_errors():
            rows = conn.execute(
                "SELECT n.id, n.title, n.content, n.is_pinned, n.is_archived, n.is_trashed,"
                " n.encrypted, n.created_at, n.updated_at, f.rank"
                " FROM notes_fts f JOIN notes n ON n.rowid = f.rowid"
                " WHERE notes_fts MATCH ? ORDER BY f.rank LIMIT 50",
                (query,),
            ).fetchall()
        return [(_note_from_row(row, row[1], row[2]), float(row[9])) for row in rows]