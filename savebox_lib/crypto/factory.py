from __future__ import annotations
import logging
from typing import Callable, Dict, Optional

from savebox_lib.settings import EncryptionKind
from .aes_provider import AesEncryptionProvider
from .interfaces import EncryptionProvider

logger = logging.getLogger(__name__)


class EncryptionProviderFactory:
    """Owns one provider instance per encryption kind.

    Providers are created on first use, so the AES default key is generated
    once per factory and shared by every operation using it.
    """

    def __init__(self, builders: Optional[Dict[EncryptionKind, Callable[[], EncryptionProvider]]] = None) -> None:
        self._builders: Dict[EncryptionKind, Callable[[], EncryptionProvider]] = {
            EncryptionKind.AES: AesEncryptionProvider,
        }
        if builders:
            self._builders.update(builders)
        self._providers: Dict[EncryptionKind, EncryptionProvider] = {}

    def register(self, provider: EncryptionProvider) -> None:
        self._providers[provider.kind] = provider

    def get(self, kind: EncryptionKind) -> EncryptionProvider:
        if kind in self._providers:
            return self._providers[kind]
        builder = self._builders.get(kind)
        if builder is None:
            raise ValueError(f"Unsupported encryption kind: {kind}")
        provider = builder()
        self._providers[kind] = provider
        logger.debug("Created %s encryption provider", kind.value)
        return provider
