"""Path/identity resolution for logical save files.

A logical file `(file_name, sub_folder, storage)` has two physical
variants: the plain path and the same path with `.encrypted` appended. The
canonical variant follows the settings' encryption flag. Reads, existence
checks and deletes try the canonical variant first and then the alternate
one, so a file stays loadable after its encryption setting changes. Writes
always go to the canonical variant and then remove the alternate one.
"""
from __future__ import annotations
import logging
import os
from typing import Tuple

from savebox_lib.errors import SaveFileNotFoundError
from savebox_lib.settings import ENCRYPTED_SUFFIX, SaveSettings, StorageKind
from savebox_lib.storage.base import StorageBackend
from savebox_lib.storage.factory import StorageBackendFactory

logger = logging.getLogger(__name__)


def _strip_suffix(name: str) -> str:
    if name.endswith(ENCRYPTED_SUFFIX):
        return name[: -len(ENCRYPTED_SUFFIX)]
    return name


class PathResolver:
    def __init__(self, backends: StorageBackendFactory) -> None:
        self.backends = backends

    def backend_for(self, settings: SaveSettings) -> StorageBackend:
        return self.backends.get(settings.storage)

    def identity_path(self, settings: SaveSettings) -> str:
        """Path of the logical file without the encryption suffix."""
        base = self.backend_for(settings).base_path()
        parts = [p for p in (base, settings.sub_folder, _strip_suffix(settings.file_name)) if p]
        return os.path.join(*parts)

    def canonical_path(self, settings: SaveSettings) -> str:
        path = self.identity_path(settings)
        return path + ENCRYPTED_SUFFIX if settings.encryption_enabled else path

    def alternate_path(self, settings: SaveSettings) -> str:
        path = self.identity_path(settings)
        return path if settings.encryption_enabled else path + ENCRYPTED_SUFFIX

    def candidates(self, settings: SaveSettings) -> Tuple[str, str]:
        return self.canonical_path(settings), self.alternate_path(settings)

    def exists(self, settings: SaveSettings) -> bool:
        backend = self.backend_for(settings)
        return any(backend.exists(p) for p in self.candidates(settings))

    def locate(self, settings: SaveSettings) -> str:
        """Return the variant that currently holds data for `settings`."""
        backend = self.backend_for(settings)
        for path in self.candidates(settings):
            if backend.exists(path):
                return path
        raise SaveFileNotFoundError(self.canonical_path(settings))

    def read(self, settings: SaveSettings) -> str:
        path = self.locate(settings)
        if path != self.canonical_path(settings):
            logger.info("Reading %s from its alternate variant %s", settings.file_name, path)
        return self.backend_for(settings).read(path)

    def write(self, settings: SaveSettings, text: str) -> str:
        backend = self.backend_for(settings)
        canonical, alternate = self.candidates(settings)
        backend.write(canonical, text)
        if backend.exists(alternate):
            backend.delete(alternate)
            logger.info("Removed stale variant %s after writing %s", alternate, canonical)
        return canonical

    def delete(self, settings: SaveSettings) -> bool:
        backend = self.backend_for(settings)
        deleted = False
        for path in self.candidates(settings):
            if backend.exists(path):
                deleted = backend.delete(path) or deleted
        return deleted

    def delete_all(self, kind: StorageKind) -> bool:
        return self.backends.get(kind).delete_all()
