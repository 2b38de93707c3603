"""Schema migrations for the notes database."""

from __future__ import annotations

import sqlite3


class MigrationError(Exception):
    """A migration could not be applied."""


_VERSION_KEY = "schema_version"
_KEY = "TEXT PRIMARY KEY NOT NULL"
_STAMP = "TEXT NOT NULL DEFAULT (datetime('now'))"
_FLAG_OFF = "INTEGER NOT NULL DEFAULT 0"
_EMPTY_TEXT = "TEXT NOT NULL DEFAULT ''"


def _references(table: str, on_delete: str, *, required: bool = True) -> str:
    nullness = "TEXT NOT NULL" if required else "TEXT"
    return f"{nullness} REFERENCES {table}(id) ON DELETE {on_delete}"


def _create_table(name: str, columns: tuple[tuple[str, str], ...], *constraints: str) -> str:
    parts = [f"{column} {declaration}" for column, declaration in columns]
    parts.extend(constraints)
    return f"CREATE TABLE IF NOT EXISTS {name} ({', '.join(parts)})"


def _values(prefix: str) -> str:
    return ", ".join(f"{prefix}.{column}" for column in ("rowid", "title", "content"))


_FTS_COLUMNS = "rowid, title, content"
_FTS_ADD = f"INSERT INTO notes_fts({_FTS_COLUMNS}) VALUES ({_values('new')})"
_FTS_DROP = f"INSERT INTO notes_fts(notes_fts, {_FTS_COLUMNS}) VALUES ('delete', {_values('old')})"


def _trigger(name: str, event: str, *statements: str) -> str:
    body = " ".join(f"{statement};" for statement in statements)
    return f"CREATE TRIGGER IF NOT EXISTS {name} AFTER {event} ON notes BEGIN {body} END"


_META_TABLE = _create_table("meta", (("key", _KEY), ("value", "TEXT NOT NULL")))

MIGRATIONS: tuple[str, ...] = (
    # v1: core schema
    _create_table(
        "notes",
        (
            ("id", _KEY),
            ("title", _EMPTY_TEXT),
            ("content", _EMPTY_TEXT),
            ("is_pinned", _FLAG_OFF),
            ("is_archived", _FLAG_OFF),
            ("is_trashed", _FLAG_OFF),
            ("encrypted", "INTEGER NOT NULL DEFAULT 1"),
            ("created_at", _STAMP),
            ("updated_at", _STAMP),
        ),
    ),
    _create_table(
        "tags",
        (
            ("id", _KEY),
            ("name", "TEXT NOT NULL UNIQUE"),
            ("parent_id", _references("tags", "SET NULL", required=False)),
            ("color", "TEXT DEFAULT NULL"),
            ("created_at", _STAMP),
        ),
    ),
    _create_table(
        "note_tags",
        (
            ("note_id", _references("notes", "CASCADE")),
            ("tag_id", _references("tags", "CASCADE")),
        ),
        "PRIMARY KEY (note_id, tag_id)",
    ),
    _create_table(
        "backlinks",
        (
            ("source_note_id", _references("notes", "CASCADE")),
            ("target_note_id", _references("notes", "CASCADE")),
            ("created_at", _STAMP),
        ),
        "PRIMARY KEY (source_note_id, target_note_id)",
    ),
    _create_table(
        "note_history",
        (
            ("id", _KEY),
            ("note_id", _references("notes", "CASCADE")),
            ("content_snapshot", "TEXT NOT NULL"),
            ("title_snapshot", _EMPTY_TEXT),
            ("created_at", _STAMP),
        ),
    ),
    # v2: full-text search
    "CREATE VIRTUAL TABLE IF NOT EXISTS notes_fts "
    "USING fts5(title, content, content=notes, content_rowid=rowid)",
    # v3: keep the search index in sync
    _trigger("notes_ai", "INSERT", _FTS_ADD),
    _trigger("notes_ad", "DELETE", _FTS_DROP),
    _trigger("notes_au", "UPDATE", _FTS_DROP, _FTS_ADD),
    # v4: application metadata
    _META_TABLE,
    f"INSERT OR IGNORE INTO meta (key, value) VALUES ('{_VERSION_KEY}', '4')",
)


def _current_version(conn: sqlite3.Connection) -> int:
    try:
        row = conn.execute(
            "SELECT COALESCE((SELECT value FROM meta WHERE key = ?), '0')",
            (_VERSION_KEY,),
        ).fetchone()
    except sqlite3.Error:
        return 0
    try:
        return int(row[0])
    except (TypeError, ValueError):
        return 0


def run(conn: sqlite3.Connection) -> None:
    """Apply every migration newer than the recorded schema version."""
    try:
        conn.executescript(_META_TABLE)
        current = _current_version(conn)
        for version, migration in enumerate(MIGRATIONS, start=1):
            if version <= current:
                continue
            conn.executescript(migration)
            conn.execute(
                "INSERT OR REPLACE INTO meta (key, value) VALUES (?, ?)",
                (_VERSION_KEY, str(version)),
            )
        conn.commit()
    except sqlite3.Error as exc:
        raise MigrationError(f"sqlite error: {exc}") from exc