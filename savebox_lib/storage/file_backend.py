"""File-system storage backend.

Each path maps to one text file. Writes are atomic: the text goes to a
temporary sibling file which is fsynced and then renamed over the target.
"""
from __future__ import annotations
import logging
import os
import shutil
import threading
from concurrent.futures import Executor
from pathlib import Path
from typing import Optional

from savebox_lib.errors import SaveFileNotFoundError
from .base import StorageBackend

logger = logging.getLogger(__name__)


class FileSystemBackend(StorageBackend):
    def __init__(self, data_dir: str | Path = "./data/saves", executor: Optional[Executor] = None) -> None:
        super().__init__(executor)
        self.data_dir = Path(data_dir)
        self.data_dir.mkdir(parents=True, exist_ok=True)

    def base_path(self) -> str:
        return str(self.data_dir)

    def _path_for(self, path: str) -> Path:
        # Paths arrive already composed under base_path().
        return Path(path)

    def exists(self, path: str) -> bool:
        return self._path_for(path).is_file()

    def read(self, path: str) -> str:
        p = self._path_for(path)
        if not p.is_file():
            raise SaveFileNotFoundError(str(p))
        with open(p, "r", encoding="utf-8") as f:
            data = f.read()
        logger.debug("FileSystemBackend loaded %s (%d chars)", p, len(data))
        return data

    def write(self, path: str, text: str) -> None:
        p = self._path_for(path)
        p.parent.mkdir(parents=True, exist_ok=True)
        # One temp file per writer thread; concurrent unlocked writes must not share it.
        tmp = p.with_name(f"{p.name}.{os.getpid()}.{threading.get_ident()}.tmp")
        try:
            with open(tmp, "w", encoding="utf-8") as f:
                f.write(text)
                f.flush()
                os.fsync(f.fileno())
            tmp.replace(p)
        except Exception:
            tmp.unlink(missing_ok=True)
            raise

    def delete(self, path: str) -> bool:
        p = self._path_for(path)
        if not p.is_file():
            return False
        p.unlink()
        return True

    def delete_all(self) -> bool:
        if not self.data_dir.exists():
            self.data_dir.mkdir(parents=True, exist_ok=True)
            return True
        shutil.rmtree(self.data_dir)
        self.data_dir.mkdir(parents=True, exist_ok=True)
        logger.info("Deleted all save files under %s", self.data_dir)
        return True
