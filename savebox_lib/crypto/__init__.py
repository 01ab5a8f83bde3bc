"""Encryption providers for save payloads."""

from .interfaces import EncryptionProvider
from .aes_provider import AesEncryptionProvider, derive_fixed_salt, derive_key_and_iv
from .factory import EncryptionProviderFactory

__all__ = [
    "EncryptionProvider",
    "AesEncryptionProvider",
    "EncryptionProviderFactory",
    "derive_fixed_salt",
    "derive_key_and_iv",
]
