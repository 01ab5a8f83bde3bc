"""Save pipeline orchestration: resolver, store, locks and async plumbing."""

from .resolver import PathResolver
from .locks import PathLocks
from .dispatcher import MainThreadDispatcher
from .operations import LoadOperation, Operation, SaveOperation
from .store import SaveStore

__all__ = [
    "PathResolver",
    "PathLocks",
    "MainThreadDispatcher",
    "Operation",
    "SaveOperation",
    "LoadOperation",
    "SaveStore",
]
