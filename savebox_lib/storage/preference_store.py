"""Flat key-value preference stores.

`MemoryPreferenceStore` keeps everything in a dict. `JsonFilePreferenceStore`
persists the same flat mapping to a single JSON file, rewriting it
atomically after every change.
"""
from __future__ import annotations
import json
import logging
import os
from pathlib import Path
from threading import RLock
from typing import Dict, Iterable, Optional

logger = logging.getLogger(__name__)


class MemoryPreferenceStore:
    def __init__(self, initial: Optional[Dict[str, str]] = None) -> None:
        self._lock = RLock()
        self._store: Dict[str, str] = dict(initial or {})

    def has_key(self, key: str) -> bool:
        with self._lock:
            return key in self._store

    def get(self, key: str) -> Optional[str]:
        with self._lock:
            return self._store.get(key)

    def set(self, key: str, value: str) -> None:
        with self._lock:
            self._store[key] = value
            self.flush()

    def delete(self, key: str) -> bool:
        with self._lock:
            if key not in self._store:
                return False
            del self._store[key]
            self.flush()
            return True

    def keys(self) -> Iterable[str]:
        with self._lock:
            return list(self._store.keys())

    def flush(self) -> None:
        # Nothing to persist for the in-memory store.
        return


class JsonFilePreferenceStore(MemoryPreferenceStore):
    """Preference store persisted to one JSON file.

    The file holds a single JSON object of string values. A missing file
    starts an empty store; an unreadable one is logged and treated as empty
    so the next flush rewrites it.
    """

    def __init__(self, file_path: str | Path) -> None:
        self.file_path = Path(file_path)
        if not self.file_path.parent.exists():
            os.makedirs(self.file_path.parent, exist_ok=True)
        super().__init__(self._read_file())

    def _read_file(self) -> Dict[str, str]:
        if not self.file_path.exists():
            return {}
        try:
            with open(self.file_path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError):
            logger.exception("Failed to read preferences file %s; starting empty", self.file_path)
            return {}
        if not isinstance(data, dict):
            logger.warning("Preferences file %s does not hold an object; starting empty", self.file_path)
            return {}
        return {str(k): str(v) for k, v in data.items()}

    def flush(self) -> None:
        with self._lock:
            tmp = self.file_path.with_suffix(self.file_path.suffix + ".tmp")
            with open(tmp, "w", encoding="utf-8") as f:
                json.dump(self._store, f, ensure_ascii=False, indent=1, sort_keys=True)
                f.flush()
                os.fsync(f.fileno())
            tmp.replace(self.file_path)
