"""Password-based key derivation with Argon2id."""

from __future__ import annotations

import os

from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives.kdf.argon2 import Argon2id

SALT_LENGTH = 16
KEY_LENGTH = 32
MEMORY_COST = 65536
TIME_COST = 3
PARALLELISM = 4
MIN_PASSWORD_BYTES = 8

_MIN_SALT = 8
_MAX_SALT = 48


class KeychainError(Exception):
    """Key derivation failed."""


class WeakPasswordError(KeychainError):
    """The password is too short."""

    def __init__(self, message: str = "password too short") -> None:
        super().__init__(message)


def derive_key(password: str, salt: bytes) -> bytes:
    """Derive a 256-bit key from a password and salt."""
    salt = bytes(salt)
    if len(salt) < _MIN_SALT:
        raise KeychainError("argon2 error: salt too short")
    if len(salt) > _MAX_SALT:
        raise KeychainError("argon2 error: salt too long")
    try:
        kdf = Argon2id(
            salt=salt,
            length=KEY_LENGTH,
            iterations=TIME_COST,
            lanes=PARALLELISM,
            memory_cost=MEMORY_COST,
        )
        return kdf.derive(password.encode("utf-8"))
    except (ValueError, UnsupportedAlgorithm) as exc:
        raise KeychainError(f"argon2 error: {exc}") from exc


def generate_salt() -> bytes:
    """Return a random 16-byte salt."""
    return os.urandom(SALT_LENGTH)


def validate_password_strength(password: str) -> None:
    """Raise WeakPasswordError unless the password is at least 8 bytes long."""
    if len(password.encode("utf-8")) < MIN_PASSWORD_BYTES:
        raise WeakPasswordError()