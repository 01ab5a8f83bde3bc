"""SaveBox: a persistent key-value store for application state.

Values are grouped into logical save files, encoded into a self-describing
envelope, optionally encrypted and written to a pluggable storage backend.
"""

from .settings import EncryptionKind, SaveSettings, StorageKind, ENCRYPTED_SUFFIX
from .api import SaveBox
from .bootstrap import create_savebox

__all__ = [
    "SaveBox",
    "SaveSettings",
    "EncryptionKind",
    "StorageKind",
    "ENCRYPTED_SUFFIX",
    "create_savebox",
]
