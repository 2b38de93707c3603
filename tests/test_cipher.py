import pytest

from midnotes.cipher import (
    CipherError,
    aes256gcm_decrypt,
    aes256gcm_encrypt,
    xchacha20_decrypt,
    xchacha20_encrypt,
)

KEY = bytes([0x42]) * 32
OTHER_KEY = bytes([0x24]) * 32


def test_xchacha20_round_trip():
    plaintext = b"Hello, Midnight Notes!"
    assert xchacha20_decrypt(KEY, xchacha20_encrypt(KEY, plaintext)) == plaintext


def test_xchacha20_wrong_key_fails():
    encrypted = xchacha20_encrypt(KEY, b"secret data")
    with pytest.raises(CipherError, match="decryption failed"):
        xchacha20_decrypt(OTHER_KEY, encrypted)


def test_xchacha20_is_randomised():
    first = xchacha20_encrypt(KEY, b"same data")
    second = xchacha20_encrypt(KEY, b"same data")
    assert len({first, second}) == 2
    assert len({first[:24], second[:24]}) == 2
    assert xchacha20_decrypt(KEY, first) == xchacha20_decrypt(KEY, second) == b"same data"


def test_xchacha20_output_is_nonce_ciphertext_and_tag():
    plaintext = b"abc"
    assert len(xchacha20_encrypt(KEY, plaintext)) == 24 + len(plaintext) + 16


def test_aes256gcm_round_trip():
    plaintext = b"Hello, AES-256-GCM!"
    assert aes256gcm_decrypt(KEY, aes256gcm_encrypt(KEY, plaintext)) == plaintext


def test_aes256gcm_output_is_nonce_ciphertext_and_tag():
    plaintext = b"abc"
    assert len(aes256gcm_encrypt(KEY, plaintext)) == 12 + len(plaintext) + 16


def test_aes256gcm_wrong_key_fails():
    encrypted = aes256gcm_encrypt(KEY, b"secret data")
    with pytest.raises(CipherError):
        aes256gcm_decrypt(OTHER_KEY, encrypted)


def test_empty_data_round_trips():
    assert xchacha20_decrypt(KEY, xchacha20_encrypt(KEY, b"")) == b""


def test_tampered_ciphertext_is_rejected():
    encrypted = bytearray(xchacha20_encrypt(KEY, b"payload"))
    encrypted[-1] ^= 0x01
    with pytest.raises(CipherError):
        xchacha20_decrypt(KEY, bytes(encrypted))


@pytest.mark.parametrize("decrypt", [xchacha20_decrypt, aes256gcm_decrypt])
def test_data_shorter_than_nonce_is_rejected(decrypt):
    with pytest.raises(CipherError, match="invalid nonce length"):
        decrypt(KEY, b"tiny")


@pytest.mark.parametrize("encrypt", [xchacha20_encrypt, aes256gcm_encrypt])
def test_short_key_is_rejected(encrypt):
    with pytest.raises(CipherError, match="invalid key length"):
        encrypt(b"\x00" * 16, b"data")