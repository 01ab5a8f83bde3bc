from __future__ import annotations
import logging
from pathlib import Path
from typing import Optional

from savebox_lib.config.config import StoreConfig, load_config

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s]: %(message)s"


def configure_logging(config: Optional[StoreConfig] = None, *, config_path: Optional[Path] = None) -> logging.Logger:
    """Point the root logger at the configured `log_level`.

    Uses `config` when given, otherwise loads it from `config_path` (or the
    default config location). Existing root handlers are replaced so
    repeated calls do not stack handlers. Returns this module's logger.
    """
    cfg = config or load_config(config_path)
    logging.basicConfig(level=cfg.log_level, format=LOG_FORMAT, force=True)
    logger = logging.getLogger(__name__)
    logger.debug("SaveBox log level set to %s", cfg.log_level)
    return logger
