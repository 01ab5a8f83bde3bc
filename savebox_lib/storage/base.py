"""Storage backend interface definitions.

A backend stores text blobs under string paths. Paths are produced by the
path resolver (`base_path()` joined with the settings' sub folder and file
name), so every backend decides what its own base path means.
"""
from __future__ import annotations
import threading
from abc import ABC, abstractmethod
from concurrent.futures import Executor, Future, ThreadPoolExecutor
from typing import Optional


class StorageBackend(ABC):
    """Abstract storage backend.

    Synchronous methods block. The `*_async` variants run them on the
    backend's executor and return a `Future`. Implementations must be
    thread-safe for calls on different paths.
    """

    def __init__(self, executor: Optional[Executor] = None) -> None:
        self._executor = executor
        self._owns_executor = executor is None
        self._executor_lock = threading.Lock()

    @abstractmethod
    def base_path(self) -> str:
        """Return the root that default paths are composed under."""

    @abstractmethod
    def exists(self, path: str) -> bool:
        """Return True if a blob is stored at `path`."""

    @abstractmethod
    def read(self, path: str) -> str:
        """Return the text stored at `path`.

        Should raise `SaveFileNotFoundError` if nothing is stored there.
        """

    @abstractmethod
    def write(self, path: str, text: str) -> None:
        """Store `text` at `path`, replacing any previous blob.

        IO errors propagate to the caller.
        """

    @abstractmethod
    def delete(self, path: str) -> bool:
        """Delete the blob at `path`. Return False if there was none."""

    @abstractmethod
    def delete_all(self) -> bool:
        """Delete every blob this backend owns."""

    def _get_executor(self) -> Executor:
        with self._executor_lock:
            if self._executor is None:
                self._executor = ThreadPoolExecutor(
                    max_workers=1, thread_name_prefix=f"savebox-{type(self).__name__}"
                )
            return self._executor

    def read_async(self, path: str) -> "Future[str]":
        return self._get_executor().submit(self.read, path)

    def write_async(self, path: str, text: str) -> "Future[None]":
        return self._get_executor().submit(self.write, path, text)

    def delete_async(self, path: str) -> "Future[bool]":
        return self._get_executor().submit(self.delete, path)

    def delete_all_async(self) -> "Future[bool]":
        return self._get_executor().submit(self.delete_all)

    def close(self) -> None:
        """Shut down the executor if this backend created it."""
        with self._executor_lock:
            if self._owns_executor and self._executor is not None:
                self._executor.shutdown(wait=True)
                self._executor = None
