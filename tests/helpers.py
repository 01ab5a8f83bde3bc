import logging
import time
from contextlib import contextmanager
from typing import Callable, Optional

from savebox_lib.core import PathResolver, SaveStore
from savebox_lib.settings import StorageKind
from savebox_lib.storage import (
    FileSystemBackend,
    MemoryPreferenceStore,
    PreferenceStoreBackend,
    StorageBackend,
    StorageBackendFactory,
)


def make_store(data_dir, backend: Optional[StorageBackend] = None, prefs=None, **kwargs) -> SaveStore:
    """Build a SaveStore over a file backend rooted at `data_dir` and an in-memory preference store.

    Usage in tests:
        from tests.helpers import make_store
        store = make_store(tmp_path, serialize_access=False)
    """
    backends = StorageBackendFactory({
        StorageKind.FILE_SYSTEM: backend or FileSystemBackend(data_dir),
        StorageKind.PREFERENCES: PreferenceStoreBackend(prefs if prefs is not None else MemoryPreferenceStore()),
    })
    return SaveStore(PathResolver(backends), **kwargs)


def wait_for(predicate: Callable[[], bool], timeout: float = 5.0) -> bool:
    # Future waiters wake before done-callbacks run, so poll for their effects.
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(0.01)
    return predicate()


@contextmanager
def preserved_root_logging():
    # Save and restore inside the test call so pytest's own handlers stay intact.
    root = logging.getLogger()
    saved_handlers, saved_level = root.handlers[:], root.level
    try:
        yield root
    finally:
        for h in root.handlers[:]:
            root.removeHandler(h)
        for h in saved_handlers:
            root.addHandler(h)
        root.setLevel(saved_level)
