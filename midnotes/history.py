"""Version history of notes: snapshots, restoring and line diffs."""

from __future__ import annotations

import enum
import sqlite3
from contextlib import contextmanager
from dataclasses import dataclass, replace
from datetime import datetime, timezone
from itertools import takewhile
from typing import Iterator, Sequence

from .database import Database
from .errors import NoteServiceError, NotFoundError
from .models import Note, NoteHistory, parse_timestamp

_HISTORY_COLUMNS = "id, note_id, content_snapshot, title_snapshot, created_at"
_NOTE_COLUMNS = (
    "id, title, content, is_pinned, is_archived, is_trashed, encrypted, created_at, updated_at"
)
_LIST_LIMIT = 100


@contextmanager
def _sqlite_errors() -> Iterator[None]:
    try:
        yield
    except sqlite3.Error as exc:
        raise NoteServiceError(f"sqlite error: {exc}") from exc


class DiffKind(enum.Enum):
    """Which side of a diff a line belongs to."""

    LEFT = "left"
    RIGHT = "right"
    BOTH = "both"


@dataclass(frozen=True)
class DiffLine:
    """One line of a diff: only in the old text, only in the new, or in both."""

    kind: DiffKind
    left: str | None = None
    right: str | None = None

    @property
    def text(self) -> str:
        """The line's text."""
        value = self.right if self.kind is DiffKind.RIGHT else self.left
        return value if value is not None else ""


def _split_lines(text: str) -> list[str]:
    *terminated, last = text.split("\n")
    lines = [line.removesuffix("\r") for line in terminated]
    if last:
        lines.append(last)
    return lines


def _common_length(left: Sequence[str], right: Sequence[str]) -> int:
    return sum(1 for _ in takewhile(lambda pair: pair[0] == pair[1], zip(left, right)))


def diff_lines(old: str, new: str) -> list[DiffLine]:
    """Diff two texts line by line using a longest common subsequence."""
    left = _split_lines(old)
    right = _split_lines(new)

    prefix = _common_length(left, right)
    left_rest, right_rest = left[prefix:], right[prefix:]
    suffix = _common_length(left_rest[::-1], right_rest[::-1])
    a = left_rest[: len(left_rest) - suffix]
    b = right_rest[: len(right_rest) - suffix]

    n, m = len(a), len(b)
    table = [[0] * (m + 1) for _ in range(n + 1)]
    for i in reversed(range(n)):
        for j in reversed(range(m)):
            if a[i] == b[j]:
                table[i][j] = table[i + 1][j + 1] + 1
            else:
                table[i][j] = max(table[i + 1][j], table[i][j + 1])

    result = [DiffLine(DiffKind.BOTH, l, r) for l, r in zip(left[:prefix], right[:prefix])]
    i = j = 0
    while i < n and j < m:
        if a[i] == b[j]:
            result.append(DiffLine(DiffKind.BOTH, a[i], b[j]))
            i += 1
            j += 1
        elif table[i + 1][j] >= table[i][j + 1]:
            result.append(DiffLine(DiffKind.LEFT, left=a[i]))
            i += 1
        else:
            result.append(DiffLine(DiffKind.RIGHT, right=b[j]))
            j += 1
    result.extend(DiffLine(DiffKind.LEFT, left=line) for line in a[i:])
    result.extend(DiffLine(DiffKind.RIGHT, right=line) for line in b[j:])
    result.extend(
        DiffLine(DiffKind.BOTH, l, r)
        for l, r in zip(left_rest[len(a):], right_rest[len(b):])
    )
    return result


def _row_to_history(row: Sequence) -> NoteHistory:
    return NoteHistory(
        id=row[0],
        note_id=row[1],
        content_snapshot=row[2],
        title_snapshot=row[3],
        created_at=parse_timestamp(row[4]),
    )


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


class HistoryService:
    """Reads and restores note snapshots."""

    def __init__(self, db: Database) -> None:
        self._db = db

    def list(self, note_id: str) -> list[NoteHistory]:
        """Up to 100 snapshots of a note, newest first."""
        with self._db.conn() as conn, _sqlite_errors():
            rows = conn.execute(
                f"SELECT {_HISTORY_COLUMNS} FROM note_history WHERE note_id = ?"
                " ORDER BY created_at DESC, rowid DESC LIMIT ?",
                (note_id, _LIST_LIMIT),
            ).fetchall()
        return [_row_to_history(row) for row in rows]

    def get(self, history_id: str) -> NoteHistory | None:
        """Return the snapshot with this id, or None."""
        with self._db.conn() as conn, _sqlite_errors():
            row = conn.execute(
                f"SELECT {_HISTORY_COLUMNS} FROM note_history WHERE id = ?", (history_id,)
            ).fetchone()
        return _row_to_history(row) if row is not None else None

    def _require(self, history_id: str) -> NoteHistory:
        snapshot = self.get(history_id)
        if snapshot is None:
            raise NotFoundError()
        return snapshot

    def restore(self, history_id: str) -> Note:
        """Put a snapshot's title and content back into its note and return the note."""
        snapshot = self._require(history_id)
        now = datetime.now(timezone.utc)
        with self._db.conn() as conn, _sqlite_errors():
            row = conn.execute(
                f"SELECT {_NOTE_COLUMNS} FROM notes WHERE id = ?", (snapshot.note_id,)
            ).fetchone()
            if row is None:
                raise NotFoundError()
            conn.execute(
                "UPDATE notes SET title = ?, content = ?, updated_at = ? WHERE id = ?",
                (snapshot.title_snapshot, snapshot.content_snapshot, now.isoformat(),
                 snapshot.note_id),
            )
        return replace(
            _row_to_note(row),
            title=snapshot.title_snapshot,
            content=snapshot.content_snapshot,
            updated_at=now,
        )

    def diff(self, from_id: str, to_id: str) -> list[DiffLine]:
        """Line diff between the contents of two snapshots."""
        source = self._require(from_id)
        target = self._require(to_id)
        return diff_lines(source.content_snapshot, target.content_snapshot)

    def diff_with_current(self, history_id: str, current_content: str) -> list[DiffLine]:
        """Line diff from a snapshot's content to the given current content."""
        snapshot = self._require(history_id)
        return diff_lines(snapshot.content_snapshot, current_content)