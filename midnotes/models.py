"""Records stored in the notes database."""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any

_FRACTION = re.compile(r"\.(\d+)")


def _now() -> datetime:
    return datetime.now(timezone.utc)


def parse_timestamp(value: str) -> datetime:
    """Parse an RFC 3339 timestamp into a UTC datetime.

    Text that is not a valid timestamp with an offset yields the current time.
    """
    if isinstance(value, datetime):
        return value.astimezone(timezone.utc) if value.tzinfo else _now()
    if not isinstance(value, str):
        return _now()
    text = value.strip()
    if text[-1:] in ("Z", "z"):
        text = text[:-1] + "+00:00"
    text = _FRACTION.sub(lambda m: "." + m.group(1)[:6].ljust(6, "0"), text, count=1)
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return _now()
    if parsed.tzinfo is None:
        return _now()
    return parsed.astimezone(timezone.utc)


@dataclass
class Note:
    """A note entity."""

    id: str
    title: str
    content: str
    is_pinned: bool
    is_archived: bool
    is_trashed: bool
    encrypted: bool
    created_at: datetime
    updated_at: datetime

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-ready mapping of the note."""
        return {
            "id": self.id,
            "title": self.title,
            "content": self.content,
            "is_pinned": self.is_pinned,
            "is_archived": self.is_archived,
            "is_trashed": self.is_trashed,
            "encrypted": self.encrypted,
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Note:
        """Build a note from a mapping produced by :meth:`to_dict`."""
        return cls(
            id=str(data["id"]),
            title=str(data["title"]),
            content=str(data["content"]),
            is_pinned=bool(data["is_pinned"]),
            is_archived=bool(data["is_archived"]),
            is_trashed=bool(data["is_trashed"]),
            encrypted=bool(data["encrypted"]),
            created_at=parse_timestamp(data["created_at"]),
            updated_at=parse_timestamp(data["updated_at"]),
        )


@dataclass
class Tag:
    """A tag, optionally nested under a parent tag."""

    id: str
    name: str
    parent_id: str | None
    color: str | None
    created_at: datetime


@dataclass
class Backlink:
    """A [[wiki-link]] from one note to another."""

    source_note_id: str
    target_note_id: str
    created_at: datetime


@dataclass
class NoteHistory:
    """A snapshot of a note at a point in time."""

    id: str
    note_id: str
    content_snapshot: str
    title_snapshot: str
    created_at: datetime


@dataclass
class NoteSearchResult:
    """A full-text search hit."""

    note: Note
    rank: float
    snippet: str | None = None


@dataclass
class Meta:
    """An application metadata key-value pair."""

    key: str
    value: str