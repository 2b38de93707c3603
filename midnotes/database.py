"""The SQLite-backed notes database."""

from __future__ import annotations

import sqlite3
import threading
from contextlib import contextmanager
from os import PathLike
from typing import Iterator

from . import migrations

KEY_LENGTH = 32


class DatabaseError(Exception):
    """The database could not be opened or prepared."""


class Database:
    """A single SQLite connection guarded by a lock, plus the note encryption key.

    Note content is encrypted at the application layer by the note services.
    """

    def __init__(self, conn: sqlite3.Connection) -> None:
        self._conn = conn
        self._lock = threading.RLock()
        self._key: bytes | None = None

    @classmethod
    def _prepare(cls, target: str | PathLike[str]) -> Database:
        try:
            conn = sqlite3.connect(target, isolation_level=None, check_same_thread=False)
            conn.execute("PRAGMA foreign_keys = ON")
            conn.execute("PRAGMA journal_mode=WAL")
        except sqlite3.Error as exc:
            raise DatabaseError(f"sqlite error: {exc}") from exc
        try:
            migrations.run(conn)
        except migrations.MigrationError as exc:
            conn.close()
            raise DatabaseError(f"migration error: {exc}") from exc
        return cls(conn)

    @classmethod
    def open(cls, path: str | PathLike[str]) -> Database:
        """Open or create a database file and bring its schema up to date."""
        return cls._prepare(path)

    @classmethod
    def open_in_memory(cls) -> Database:
        """Open a fresh in-memory database."""
        return cls._prepare(":memory:")

    @contextmanager
    def conn(self) -> Iterator[sqlite3.Connection]:
        """Hold the connection lock and yield the connection."""
        with self._lock:
            yield self._conn

    def set_encryption_key(self, key: bytes) -> None:
        """Set the 32-byte key used to encrypt note content."""
        key = bytes(key)
        if len(key) != KEY_LENGTH:
            raise ValueError(f"encryption key must be {KEY_LENGTH} bytes")
        with self._lock:
            self._key = key

    def encryption_key(self) -> bytes:
        """Return the encryption key, or zero bytes when none is set."""
        with self._lock:
            return self._key if self._key is not None else bytes(KEY_LENGTH)

    def is_encryption_enabled(self) -> bool:
        with self._lock:
            return self._key is not None

    def close(self) -> None:
        with self._lock:
            self._conn.close()

    def __enter__(self) -> Database:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()