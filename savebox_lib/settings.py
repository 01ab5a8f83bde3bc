"""Save settings: the configuration record passed into every operation.

Settings are immutable pydantic models. Operations receive them, never change
them, and derive every path and pipeline decision from them.
"""
from __future__ import annotations
from enum import Enum
from pathlib import PurePosixPath
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, SecretStr, field_validator

ENCRYPTED_SUFFIX = ".encrypted"


class EncryptionKind(str, Enum):
    NONE = "none"
    AES = "aes"


class StorageKind(str, Enum):
    FILE_SYSTEM = "file_system"
    PREFERENCES = "preferences"


class SaveSettings(BaseModel):
    """Identity and pipeline options for one logical save file.

    `use_compression` is accepted and round-trips but has no effect; the
    store logs a warning when it is set. An empty `password` with AES
    encryption selects the provider's per-process default key, which is not
    persisted: data written that way cannot be read after a restart.
    """

    model_config = ConfigDict(frozen=True, use_enum_values=False)

    file_name: str = Field(min_length=1)
    sub_folder: Optional[str] = None
    use_compression: bool = False
    encryption: EncryptionKind = EncryptionKind.NONE
    password: SecretStr = SecretStr("")
    storage: StorageKind = StorageKind.FILE_SYSTEM

    @field_validator("file_name")
    @classmethod
    def _plain_file_name(cls, v: str) -> str:
        if "/" in v or "\\" in v or v in (".", ".."):
            raise ValueError(f"file_name must be a plain file name, got {v!r}; use sub_folder for directories")
        return v

    @field_validator("sub_folder")
    @classmethod
    def _relative_sub_folder(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        v = v.strip().strip("/\\")
        parts = v.replace("\\", "/").split("/")
        if any(p in (".", "..") for p in parts):
            raise ValueError(f"sub_folder must stay inside the data directory, got {v!r}")
        return v or None

    @classmethod
    def for_file(cls, file_name: str, **options: Any) -> "SaveSettings":
        return cls(file_name=file_name, **options)

    @property
    def encryption_enabled(self) -> bool:
        return self.encryption != EncryptionKind.NONE

    @property
    def password_value(self) -> str:
        return self.password.get_secret_value()

    def relative_path(self) -> str:
        """Return `sub_folder/file_name` without base path or suffix."""
        if self.sub_folder:
            return str(PurePosixPath(self.sub_folder) / self.file_name)
        return self.file_name

    def with_overrides(self, **changes: Any) -> "SaveSettings":
        """Return a validated copy with `changes` applied."""
        data = self.model_dump()
        data["password"] = self.password
        data.update(changes)
        return SaveSettings(**data)
