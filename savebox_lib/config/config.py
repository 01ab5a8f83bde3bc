"""Store configuration loaded from YAML.

The config file is optional. A missing file yields the defaults below; a
file that exists but cannot be parsed is an error, since silently ignoring
it would also ignore the configured data locations.
"""
from __future__ import annotations
import logging
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from savebox_lib.settings import SaveSettings

logger = logging.getLogger(__name__)

CONFIG_PATH = Path("data/config/savebox.yml")
DEFAULT_FILE_NAME = "save.json"
LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG", "NOTSET")


class StoreConfig(BaseModel):
    log_level: str = "WARNING"
    data_dir: str = "./data/saves"
    preferences_file: Optional[str] = "./data/preferences.json"
    preferences_prefix: str = "savebox_"
    async_workers: int = Field(default=2, ge=1)
    dispatcher_queue_size: int = Field(default=1024, ge=1)
    dispatcher_put_timeout: float = Field(default=1.0, gt=0)
    serialize_access: bool = True
    default_settings: SaveSettings = Field(default_factory=lambda: SaveSettings(file_name=DEFAULT_FILE_NAME))

    @field_validator("log_level")
    @classmethod
    def _known_level(cls, v: str) -> str:
        level = v.strip().upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"unknown log level {v!r}; expected one of {', '.join(LOG_LEVELS)}")
        return level


def load_yaml_file(path: Path) -> Dict[str, Any]:
    if not path.exists():
        return {}
    with open(path, "r", encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


def load_config(config_path: Optional[Path] = None) -> StoreConfig:
    """Load `StoreConfig` from `config_path` (default `data/config/savebox.yml`)."""
    path = Path(config_path) if config_path is not None else CONFIG_PATH
    try:
        data = load_yaml_file(path)
    except yaml.YAMLError as e:
        raise ValueError(f"invalid config format in {path}: parse error") from e
    if not isinstance(data, dict):
        raise ValueError(f"invalid config format in {path}: expected mapping")
    try:
        cfg = StoreConfig(**data)
    except ValidationError as e:
        raise ValueError(f"invalid config values in {path}: {e}") from e
    logger.debug("Loaded SaveBox config from %s (present=%s)", path, path.exists())
    return cfg


def dump_config(cfg: StoreConfig) -> str:
    """Render `cfg` as YAML. The default-settings password is never written."""
    data = cfg.model_dump(mode="json")
    data["default_settings"].pop("password", None)
    return yaml.safe_dump(data, sort_keys=False)
