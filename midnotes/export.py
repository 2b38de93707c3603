"""Password-protected archives of notes."""

from __future__ import annotations

import binascii
import json
import sqlite3
import uuid
import zipfile
from contextlib import contextmanager
from datetime import datetime, timezone
from os import PathLike
from typing import Any, Iterable, Iterator, Sequence

from . import cipher, keychain
from .database import Database
from .errors import InvalidInputError, NoteServiceError, NotFoundError
from .models import Note, parse_timestamp

METADATA_NAME = "_metadata.json"
ENTRY_SUFFIX = ".enc"
FORMAT_VERSION = 1
ALGORITHM = "XChaCha20-Poly1305"
KEY_DERIVATION = "Argon2id"

_COLUMNS = (
    "id, title, content, is_pinned, is_archived, is_trashed, encrypted, created_at, updated_at"
)


@contextmanager
def _service_errors() -> Iterator[None]:
    try:
        yield
    except sqlite3.Error as exc:
        raise NoteServiceError(f"sqlite error: {exc}") from exc
    except zipfile.BadZipFile as exc:
        raise NoteServiceError(f"zip error: {exc}") from exc
    except OSError as exc:
        raise NoteServiceError(f"io error: {exc}") from exc


def _derive(password: str, salt: bytes) -> bytes:
    try:
        return keychain.derive_key(password, salt)
    except keychain.KeychainError as exc:
        raise InvalidInputError(str(exc)) from exc


def _load_json(raw: bytes) -> Any:
    try:
        return json.loads(raw)
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise NoteServiceError(f"json error: {exc}") from exc


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


def _string_field(data: Any, field: str) -> str | None:
    if isinstance(data, dict):
        value = data.get(field)
        if isinstance(value, str):
            return value
    return None


class ExportService:
    """Writes notes to encrypted zip archives and reads them back."""

    def __init__(self, db: Database) -> None:
        self._db = db

    def export_notes(
        self,
        note_ids: Iterable[str],
        output_path: str | PathLike[str],
        password: str,
    ) -> None:
        """Write the given notes, each sealed with a password-derived key, to a zip file."""
        ids = list(note_ids)
        with _service_errors(), zipfile.ZipFile(
            output_path, "w", compression=zipfile.ZIP_DEFLATED
        ) as archive:
            salt = keychain.generate_salt()
            key = _derive(password, salt)

            metadata = {
                "version": FORMAT_VERSION,
                "algorithm": ALGORITHM,
                "key_derivation": KEY_DERIVATION,
                "salt": salt.hex(),
                "note_count": len(ids),
                "exported_at": datetime.now(timezone.utc).isoformat(),
            }
            archive.writestr(METADATA_NAME, json.dumps(metadata, separators=(",", ":")))

            for note_id in ids:
                note = self._get_note(note_id)
                payload = json.dumps(note.to_dict(), separators=(",", ":")).encode("utf-8")
                try:
                    sealed = cipher.xchacha20_encrypt(key, payload)
                except cipher.CipherError as exc:
                    raise InvalidInputError(str(exc)) from exc
                archive.writestr(f"{note_id}{ENTRY_SUFFIX}", sealed)

    def import_notes(self, input_path: str | PathLike[str], password: str) -> list[Note]:
        """Read an archive written by :meth:`export_notes` and add its notes."""
        imported: list[Note] = []
        key: bytes | None = None
        with _service_errors(), zipfile.ZipFile(input_path) as archive:
            for info in archive.infolist():
                name = info.filename
                if name == METADATA_NAME:
                    metadata = _load_json(archive.read(info))
                    salt_hex = _string_field(metadata, "salt")
                    if salt_hex is not None:
                        try:
                            salt = binascii.unhexlify(salt_hex)
                        except (binascii.Error, ValueError) as exc:
                            raise InvalidInputError("invalid salt in metadata") from exc
                        if len(salt) != keychain.SALT_LENGTH:
                            salt = bytes(keychain.SALT_LENGTH)
                        key = _derive(password, salt)
                    continue

                if not name.endswith(ENTRY_SUFFIX):
                    continue
                if key is None:
                    raise InvalidInputError("no metadata found in archive")

                sealed = archive.read(info)
                try:
                    payload = cipher.xchacha20_decrypt(key, sealed)
                except cipher.CipherError as exc:
                    raise InvalidInputError(str(exc)) from exc
                imported.append(self._create_from_import(_load_json(payload)))
        return imported

    def _get_note(self, note_id: str) -> Note:
        with self._db.conn() as conn:
            row = conn.execute(
                f"SELECT {_COLUMNS} FROM notes WHERE id = ?", (note_id,)
            ).fetchone()
        if row is None:
            raise NotFoundError()
        return _row_to_note(row)

    def _create_from_import(self, data: Any) -> Note:
        note_id = _string_field(data, "id") or str(uuid.uuid4())
        title = _string_field(data, "title")
        if title is None:
            title = "Imported Note"
        content = _string_field(data, "content") or ""
        now = datetime.now(timezone.utc)
        with self._db.conn() as conn:
            conn.execute(
                "INSERT OR IGNORE INTO notes (id, title, content, created_at, updated_at)"
                " VALUES (?, ?, ?, ?, ?)",
                (note_id, title, content, now.isoformat(), now.isoformat()),
            )
        return Note(
            id=note_id,
            title=title,
            content=content,
            is_pinned=False,
            is_archived=False,
            is_trashed=False,
            encrypted=True,
            created_at=now,
            updated_at=now,
        )