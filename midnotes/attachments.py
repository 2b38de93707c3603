"""File attachments kept in a directory beside the notes."""

from __future__ import annotations

import uuid
from os import PathLike
from pathlib import Path

_DEFAULT_EXTENSION = "bin"


class AttachmentError(Exception):
    """An attachment could not be stored, read or removed."""


class AttachmentNotFoundError(AttachmentError):
    """No attachment exists at the given path."""

    def __init__(self, relative_path: str) -> None:
        super().__init__(f"attachment not found: {relative_path}")
        self.relative_path = relative_path


def _extension(filename: str) -> str:
    name = Path(filename).name
    dot = name.rfind(".")
    if dot <= 0:
        return _DEFAULT_EXTENSION
    return name[dot + 1:]


class AttachmentManager:
    """Stores attachments under a base directory with generated names."""

    def __init__(self, base_path: str | PathLike[str]) -> None:
        self.base_path = Path(base_path)

    def store(self, filename: str, data: bytes) -> str:
        """Save bytes under a fresh name keeping the file's extension; return the relative path."""
        relative = f"{uuid.uuid4()}.{_extension(filename)}"
        try:
            self.base_path.mkdir(parents=True, exist_ok=True)
            (self.base_path / relative).write_bytes(bytes(data))
        except OSError as exc:
            raise AttachmentError(f"io error: {exc}") from exc
        return relative

    def get(self, relative_path: str) -> bytes:
        """Read an attachment's bytes."""
        full_path = self.path(relative_path)
        if not full_path.exists():
            raise AttachmentNotFoundError(relative_path)
        try:
            return full_path.read_bytes()
        except OSError as exc:
            raise AttachmentError(f"io error: {exc}") from exc

    def delete(self, relative_path: str) -> None:
        """Remove an attachment if it exists."""
        full_path = self.path(relative_path)
        if not full_path.exists():
            return
        try:
            full_path.unlink()
        except OSError as exc:
            raise AttachmentError(f"io error: {exc}") from exc

    def path(self, relative_path: str) -> Path:
        """The full filesystem path of an attachment."""
        return self.base_path / relative_path