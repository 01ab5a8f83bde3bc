"""Storage abstraction package for SaveBox."""

from .base import StorageBackend
from .file_backend import FileSystemBackend
from .interfaces import PreferenceStore
from .preference_store import JsonFilePreferenceStore, MemoryPreferenceStore
from .preference_backend import PreferenceStoreBackend
from .factory import StorageBackendFactory

__all__ = [
    "StorageBackend",
    "FileSystemBackend",
    "PreferenceStore",
    "MemoryPreferenceStore",
    "JsonFilePreferenceStore",
    "PreferenceStoreBackend",
    "StorageBackendFactory",
]
