from __future__ import annotations
import threading
import weakref
from contextlib import contextmanager
from typing import Iterator


class PathLocks:
    """Re-entrant lock per logical file identity.

    Locks live only while some thread holds or waits on them: the map keeps
    weak references, so identities that are no longer in use drop out.
    """

    def __init__(self) -> None:
        self._guard = threading.Lock()
        self._locks: "weakref.WeakValueDictionary[str, threading.RLock]" = weakref.WeakValueDictionary()

    def _lock_for(self, key: str) -> threading.RLock:
        with self._guard:
            lock = self._locks.get(key)
            if lock is None:
                lock = threading.RLock()
                self._locks[key] = lock
            return lock

    @contextmanager
    def hold(self, key: str) -> Iterator[None]:
        lock = self._lock_for(key)
        with lock:
            yield

    def __len__(self) -> int:
        with self._guard:
            return len(self._locks)
