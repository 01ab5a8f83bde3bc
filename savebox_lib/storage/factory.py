from __future__ import annotations
from typing import Dict, Iterable

from savebox_lib.settings import StorageKind
from .base import StorageBackend


class StorageBackendFactory:
    """Owns the backend instance for each storage kind."""

    def __init__(self, backends: Dict[StorageKind, StorageBackend]) -> None:
        self._backends: Dict[StorageKind, StorageBackend] = dict(backends)

    def register(self, kind: StorageKind, backend: StorageBackend) -> None:
        self._backends[kind] = backend

    def get(self, kind: StorageKind) -> StorageBackend:
        try:
            return self._backends[kind]
        except KeyError:
            raise NotImplementedError(f"Storage kind {kind} is not configured") from None

    def kinds(self) -> Iterable[StorageKind]:
        return list(self._backends)

    def close(self) -> None:
        for backend in self._backends.values():
            backend.close()
