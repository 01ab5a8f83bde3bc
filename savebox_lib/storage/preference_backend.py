"""Storage backend over a flat preference store.

Paths are flattened into single keys: separators become `KEY_ESCAPE` and the
backend's namespace prefix is prepended, so `saves/slot1.json` is stored as
`savebox_saves|slot1.json`. A literal `|` or `%` inside a path part is
percent-encoded first, so distinct paths never share a key. Only keys under
the prefix belong to this backend; `delete_all` leaves everything else in
the store alone.
"""
from __future__ import annotations
import logging
from concurrent.futures import Executor
from typing import List, Optional

from savebox_lib.errors import SaveFileNotFoundError
from .base import StorageBackend
from .interfaces import PreferenceStore
from .preference_store import MemoryPreferenceStore

logger = logging.getLogger(__name__)

DEFAULT_PREFIX = "savebox_"
KEY_ESCAPE = "|"


def _escape(part: str) -> str:
    # Percent-encode the separator (and the escape char) so "a|b" and "a/b" stay distinct.
    return part.replace("%", "%25").replace(KEY_ESCAPE, "%7C")


class PreferenceStoreBackend(StorageBackend):
    def __init__(
        self,
        store: Optional[PreferenceStore] = None,
        prefix: str = DEFAULT_PREFIX,
        executor: Optional[Executor] = None,
    ) -> None:
        super().__init__(executor)
        if not prefix:
            raise ValueError("PreferenceStoreBackend requires a non-empty prefix")
        self.store = store if store is not None else MemoryPreferenceStore()
        self.prefix = prefix

    def base_path(self) -> str:
        # The namespace is applied by key_for(); paths stay relative.
        return ""

    def key_for(self, path: str) -> str:
        parts = [_escape(p) for p in path.replace("\\", "/").split("/") if p]
        return self.prefix + KEY_ESCAPE.join(parts)

    def owned_keys(self) -> List[str]:
        return [k for k in self.store.keys() if k.startswith(self.prefix)]

    def exists(self, path: str) -> bool:
        return self.store.has_key(self.key_for(path))

    def read(self, path: str) -> str:
        value = self.store.get(self.key_for(path))
        if value is None:
            raise SaveFileNotFoundError(path)
        return value

    def write(self, path: str, text: str) -> None:
        self.store.set(self.key_for(path), text)

    def delete(self, path: str) -> bool:
        return self.store.delete(self.key_for(path))

    def delete_all(self) -> bool:
        keys = self.owned_keys()
        for key in keys:
            self.store.delete(key)
        logger.info("Deleted %d preference entries under prefix %r", len(keys), self.prefix)
        return True
