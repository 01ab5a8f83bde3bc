"""AES-256-CBC provider with PBKDF2 password derivation.

Blob formats:

* password, current: ``base64(salt) + ":" + base64(ciphertext)`` with a fresh
  16 byte salt per call,
* password, legacy: ``base64(ciphertext)`` encrypted with a salt derived
  from the password itself (see `derive_fixed_salt`),
* no password: ``base64(ciphertext)`` under the provider's default key.

Key and IV come from one PBKDF2-HMAC-SHA1 stream (1000 iterations): the
first 32 bytes are the key, the next 16 the IV.
"""
from __future__ import annotations
import base64
import binascii
import logging
import os
from typing import Optional, Tuple

from cryptography.hazmat.primitives import hashes, padding
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC

from savebox_lib.errors import CryptoError
from savebox_lib.settings import EncryptionKind

logger = logging.getLogger(__name__)

ITERATIONS = 1000
KEY_SIZE = 32
IV_SIZE = 16
SALT_SIZE = 16
SALT_SEPARATOR = ":"


def derive_key_and_iv(password: str, salt: bytes, iterations: int = ITERATIONS) -> Tuple[bytes, bytes]:
    kdf = PBKDF2HMAC(
        algorithm=hashes.SHA1(),
        length=KEY_SIZE + IV_SIZE,
        salt=salt,
        iterations=iterations,
    )
    material = kdf.derive(password.encode("utf-8"))
    return material[:KEY_SIZE], material[KEY_SIZE:]


def derive_fixed_salt(password: str) -> bytes:
    """Salt used by blobs written before the salt was stored.

    Byte `i` is the i-th byte of the UTF-8 password, or `i` itself once the
    password is exhausted.
    """
    raw = password.encode("utf-8")
    return bytes(raw[i] if i < len(raw) else i for i in range(SALT_SIZE))


def _encrypt_bytes(data: bytes, key: bytes, iv: bytes) -> bytes:
    padder = padding.PKCS7(algorithms.AES.block_size).padder()
    padded = padder.update(data) + padder.finalize()
    encryptor = Cipher(algorithms.AES(key), modes.CBC(iv)).encryptor()
    return encryptor.update(padded) + encryptor.finalize()


def _decrypt_bytes(data: bytes, key: bytes, iv: bytes) -> bytes:
    decryptor = Cipher(algorithms.AES(key), modes.CBC(iv)).decryptor()
    padded = decryptor.update(data) + decryptor.finalize()
    unpadder = padding.PKCS7(algorithms.AES.block_size).unpadder()
    return unpadder.update(padded) + unpadder.finalize()


def _b64decode(text: str) -> bytes:
    try:
        return base64.b64decode(text.strip(), validate=True)
    except (binascii.Error, ValueError) as e:
        raise CryptoError(f"invalid base64: {e}") from e


class AesEncryptionProvider:
    """Password-based AES provider.

    Without a password, a random key and IV generated at construction are
    used. They are never persisted: data encrypted that way is unreadable by
    any other provider instance, including the same program after a restart.
    """

    kind = EncryptionKind.AES

    def __init__(self, key: Optional[bytes] = None, iv: Optional[bytes] = None) -> None:
        key = key if key is not None else os.urandom(KEY_SIZE)
        iv = iv if iv is not None else os.urandom(IV_SIZE)
        if len(key) != KEY_SIZE:
            raise ValueError(f"Key must be {KEY_SIZE} bytes ({KEY_SIZE * 8} bits)")
        if len(iv) != IV_SIZE:
            raise ValueError(f"IV must be {IV_SIZE} bytes ({IV_SIZE * 8} bits)")
        self._key = key
        self._iv = iv
        self._warned_default_key = False

    def _warn_default_key(self) -> None:
        if not self._warned_default_key:
            logger.warning(
                "Encrypting without a password uses a per-process default key that is not persisted "
                "and is not secure; set a password to keep encrypted saves readable"
            )
            self._warned_default_key = True

    def encrypt(self, text: str, password: Optional[str] = None) -> str:
        if not text:
            return text
        try:
            if not password:
                self._warn_default_key()
                return base64.b64encode(_encrypt_bytes(text.encode("utf-8"), self._key, self._iv)).decode("ascii")
            salt = os.urandom(SALT_SIZE)
            key, iv = derive_key_and_iv(password, salt)
            ciphertext = _encrypt_bytes(text.encode("utf-8"), key, iv)
            return (
                base64.b64encode(salt).decode("ascii")
                + SALT_SEPARATOR
                + base64.b64encode(ciphertext).decode("ascii")
            )
        except Exception as e:
            logger.error("AES encryption failed, returning input unchanged: %s", e)
            return text

    def decrypt(self, text: str, password: Optional[str] = None) -> str:
        if not text:
            return text
        try:
            if not password:
                self._warn_default_key()
                return _decrypt_bytes(_b64decode(text), self._key, self._iv).decode("utf-8")
            if SALT_SEPARATOR in text:
                salt_part, cipher_part = text.split(SALT_SEPARATOR, 1)
                salt = _b64decode(salt_part)
            else:
                logger.debug("No salt separator found; decrypting as legacy fixed-salt data")
                salt, cipher_part = derive_fixed_salt(password), text
            key, iv = derive_key_and_iv(password, salt)
            return _decrypt_bytes(_b64decode(cipher_part), key, iv).decode("utf-8")
        except Exception as e:
            logger.error("AES decryption failed, returning input unchanged: %s", e)
            return text

    def encrypt_legacy(self, text: str, password: str) -> str:
        """Produce a legacy (fixed-salt, no separator) blob.

        Only for migration tooling and compatibility tests; new data should
        always go through `encrypt`.
        """
        key, iv = derive_key_and_iv(password, derive_fixed_salt(password))
        return base64.b64encode(_encrypt_bytes(text.encode("utf-8"), key, iv)).decode("ascii")
