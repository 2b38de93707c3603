"""Authenticated encryption with XChaCha20-Poly1305 and AES-256-GCM.

Ciphertexts carry their random nonce as a prefix.
"""

from __future__ import annotations

import os

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM
from nacl.bindings import (
    crypto_aead_xchacha20poly1305_ietf_decrypt,
    crypto_aead_xchacha20poly1305_ietf_encrypt,
)
from nacl.exceptions import CryptoError

KEY_LEN = 32
XCHACHA_NONCE_LEN = 24
AESGCM_NONCE_LEN = 12


class CipherError(Exception):
    """Encryption or decryption failed."""


def _check_key(key: bytes) -> bytes:
    key = bytes(key)
    if len(key) != KEY_LEN:
        raise CipherError("invalid key length")
    return key


def _split(data: bytes, nonce_len: int) -> tuple[bytes, bytes]:
    data = bytes(data)
    if len(data) < nonce_len:
        raise CipherError("invalid nonce length")
    return data[:nonce_len], data[nonce_len:]


def xchacha20_encrypt(key: bytes, plaintext: bytes) -> bytes:
    """Encrypt with XChaCha20-Poly1305; returns nonce followed by ciphertext."""
    key = _check_key(key)
    nonce = os.urandom(XCHACHA_NONCE_LEN)
    try:
        sealed = crypto_aead_xchacha20poly1305_ietf_encrypt(bytes(plaintext), None, nonce, key)
    except CryptoError as exc:
        raise CipherError("encryption failed") from exc
    return nonce + sealed


def xchacha20_decrypt(key: bytes, data: bytes) -> bytes:
    """Decrypt data produced by :func:`xchacha20_encrypt`."""
    nonce, ciphertext = _split(data, XCHACHA_NONCE_LEN)
    key = _check_key(key)
    try:
        return crypto_aead_xchacha20poly1305_ietf_decrypt(ciphertext, None, nonce, key)
    except CryptoError as exc:
        raise CipherError("decryption failed") from exc


def aes256gcm_encrypt(key: bytes, plaintext: bytes) -> bytes:
    """Encrypt with AES-256-GCM; returns nonce followed by ciphertext."""
    key = _check_key(key)
    nonce = os.urandom(AESGCM_NONCE_LEN)
    try:
        sealed = AESGCM(key).encrypt(nonce, bytes(plaintext), None)
    except (ValueError, OverflowError) as exc:
        raise CipherError("encryption failed") from exc
    return nonce + sealed


def aes256gcm_decrypt(key: bytes, data: bytes) -> bytes:
    """Decrypt data produced by :func:`aes256gcm_encrypt`."""
    nonce, ciphertext = _split(data, AESGCM_NONCE_LEN)
    key = _check_key(key)
    try:
        return AESGCM(key).decrypt(nonce, ciphertext, None)
    except (InvalidTag, ValueError) as exc:
        raise CipherError("decryption failed") from exc