"""Composition of a ready-to-use `SaveBox`.

Everything is constructed explicitly here and handed down; no module keeps
process-wide registries or providers.
"""
from __future__ import annotations
import logging
from pathlib import Path
from typing import Optional

from savebox_lib.api import SaveBox
from savebox_lib.config.config import StoreConfig, load_config
from savebox_lib.core.dispatcher import MainThreadDispatcher
from savebox_lib.core.resolver import PathResolver
from savebox_lib.core.store import SaveStore
from savebox_lib.crypto.factory import EncryptionProviderFactory
from savebox_lib.logging_config import configure_logging
from savebox_lib.serialization.registry import TypeHandlerRegistry
from savebox_lib.settings import StorageKind
from savebox_lib.storage.factory import StorageBackendFactory
from savebox_lib.storage.file_backend import FileSystemBackend
from savebox_lib.storage.preference_backend import PreferenceStoreBackend
from savebox_lib.storage.preference_store import JsonFilePreferenceStore, MemoryPreferenceStore

logger = logging.getLogger(__name__)


def create_backends(cfg: StoreConfig) -> StorageBackendFactory:
    prefs = JsonFilePreferenceStore(cfg.preferences_file) if cfg.preferences_file else MemoryPreferenceStore()
    return StorageBackendFactory({
        StorageKind.FILE_SYSTEM: FileSystemBackend(cfg.data_dir),
        StorageKind.PREFERENCES: PreferenceStoreBackend(prefs, prefix=cfg.preferences_prefix),
    })


def create_savebox(
    config: Optional[StoreConfig] = None,
    *,
    config_path: Optional[Path] = None,
    registry: Optional[TypeHandlerRegistry] = None,
    with_dispatcher: bool = True,
    setup_logging: bool = False,
) -> SaveBox:
    """Build a `SaveBox` from `config` (or the YAML config file).

    With `with_dispatcher` the calling thread becomes the main thread: async
    completion callbacks run when it calls `SaveBox.tick()`. With
    `setup_logging` the root logger is set to the configured `log_level`.
    """
    cfg = config or load_config(config_path)
    if setup_logging:
        configure_logging(cfg)
    dispatcher = MainThreadDispatcher(cfg.dispatcher_queue_size, cfg.dispatcher_put_timeout) if with_dispatcher else None
    store = SaveStore(
        PathResolver(create_backends(cfg)),
        EncryptionProviderFactory(),
        registry or TypeHandlerRegistry(),
        dispatcher=dispatcher,
        async_workers=cfg.async_workers,
        serialize_access=cfg.serialize_access,
    )
    logger.info("SaveBox ready (data_dir=%s, preferences=%s)", cfg.data_dir, cfg.preferences_file or "<memory>")
    return SaveBox(store, cfg.default_settings)
