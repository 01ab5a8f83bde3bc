"""Save store orchestrator.

Composes codec, encryption and storage into the save pipeline:

* load:  resolve → read (canonical, then alternate variant) → decrypt →
  decompression stub → envelope decode
* store: envelope encode → compression stub → encrypt → write canonical
  variant (removing the alternate one)

The whole dictionary is the unit of durability, so every key-level call is
load → mutate → store. The store keeps no state between calls. None of the
public methods raise: failures are logged and reported as `False`, an empty
dictionary, an empty key list or the caller's default.

With `serialize_access=True` (the default) every operation on a logical
file runs under that file's lock, so concurrent `set_key` calls on the same
file cannot lose updates. With `serialize_access=False` callers must not
mutate one save file from several threads at once: the last whole-dictionary
write wins.
"""
from __future__ import annotations
import logging
import threading
from concurrent.futures import Executor, Future, ThreadPoolExecutor
from contextlib import nullcontext
from typing import Any, Callable, ContextManager, Dict, Iterable, List, Mapping, Optional

from savebox_lib.crypto.factory import EncryptionProviderFactory
from savebox_lib.serialization.dictionary_handler import DictionaryHandler
from savebox_lib.serialization.registry import TypeHandlerRegistry
from savebox_lib.settings import SaveSettings, StorageKind
from .dispatcher import MainThreadDispatcher
from .locks import PathLocks
from .operations import LoadOperation, SaveOperation
from .resolver import PathResolver

logger = logging.getLogger(__name__)

DEFAULT_ASYNC_WORKERS = 2


class SaveStore:
    def __init__(
        self,
        resolver: PathResolver,
        providers: Optional[EncryptionProviderFactory] = None,
        registry: Optional[TypeHandlerRegistry] = None,
        *,
        dispatcher: Optional[MainThreadDispatcher] = None,
        executor: Optional[Executor] = None,
        async_workers: int = DEFAULT_ASYNC_WORKERS,
        serialize_access: bool = True,
    ) -> None:
        self.resolver = resolver
        self.providers = providers or EncryptionProviderFactory()
        self.registry = registry or TypeHandlerRegistry()
        self.codec = DictionaryHandler(self.registry)
        self.dispatcher = dispatcher
        self._locks: Optional[PathLocks] = PathLocks() if serialize_access else None
        self._executor = executor
        self._owns_executor = executor is None
        self._async_workers = async_workers
        self._executor_lock = threading.Lock()

    @property
    def serialize_access(self) -> bool:
        return self._locks is not None

    def _locked(self, settings: SaveSettings) -> ContextManager[Any]:
        if self._locks is None:
            return nullcontext()
        return self._locks.hold(self.resolver.identity_path(settings))

    # -- pipeline stages -------------------------------------------------

    def _encrypt(self, text: str, settings: SaveSettings) -> str:
        if not settings.encryption_enabled:
            return text
        provider = self.providers.get(settings.encryption)
        return provider.encrypt(text, settings.password_value or None)

    def _decrypt(self, text: str, settings: SaveSettings) -> str:
        if not settings.encryption_enabled:
            return text
        provider = self.providers.get(settings.encryption)
        return provider.decrypt(text, settings.password_value or None)

    def _compress(self, text: str, settings: SaveSettings) -> str:
        if settings.use_compression:
            logger.warning("Compression is not implemented; %s is stored uncompressed", settings.file_name)
        return text

    def _decompress(self, text: str, settings: SaveSettings) -> str:
        if settings.use_compression:
            logger.warning("Decompression is not implemented; %s is read as stored", settings.file_name)
        return text

    # -- whole-dictionary operations ---------------------------------------

    def load_dictionary(self, settings: SaveSettings) -> Dict[str, Any]:
        """Return the stored dictionary, or `{}` if absent or unreadable."""
        with self._locked(settings):
            try:
                if not self.resolver.exists(settings):
                    return {}
                raw = self.resolver.read(settings)
                if not raw:
                    return {}
                text = self._decompress(self._decrypt(raw, settings), settings)
                return self.codec.decode(text)
            except Exception:
                logger.exception("Failed to load save data from %s", settings.file_name)
                return {}

    def store_dictionary(self, dictionary: Mapping[str, Any], settings: SaveSettings) -> bool:
        """Replace the stored dictionary. Returns False on any failure."""
        with self._locked(settings):
            try:
                text = self._encrypt(self._compress(self.codec.encode(dictionary), settings), settings)
                path = self.resolver.write(settings, text)
                logger.debug("Stored %d entries to %s", len(dictionary), path)
                return True
            except Exception:
                logger.exception("Failed to save dictionary to %s", settings.file_name)
                return False

    # -- key operations ----------------------------------------------------

    def set_key(self, key: str, value: Any, settings: SaveSettings) -> bool:
        if not isinstance(key, str):
            logger.error("Save keys must be strings, got %s", type(key).__name__)
            return False
        with self._locked(settings):
            try:
                data = self.load_dictionary(settings)
                data[key] = value
                return self.store_dictionary(data, settings)
            except Exception:
                logger.exception("Failed to save key %r to %s", key, settings.file_name)
                return False

    def get_key(self, key: str, settings: SaveSettings, default: Any = None) -> Any:
        try:
            data = self.load_dictionary(settings)
        except Exception:
            logger.exception("Failed to load key %r from %s", key, settings.file_name)
            return default
        if key not in data:
            logger.debug("Key %r not found in %s", key, settings.file_name)
            return default
        return data[key]

    def delete_key(self, key: str, settings: SaveSettings) -> bool:
        """Remove `key`. Deletes the file when no entries remain."""
        with self._locked(settings):
            try:
                if not self.resolver.exists(settings):
                    return False
                data = self.load_dictionary(settings)
                if key not in data:
                    return False
                del data[key]
                if data:
                    return self.store_dictionary(data, settings)
                return self.resolver.delete(settings)
            except Exception:
                logger.exception("Failed to delete key %r from %s", key, settings.file_name)
                return False

    def key_exists(self, key: str, settings: SaveSettings) -> bool:
        try:
            return key in self.load_dictionary(settings)
        except Exception:
            return False

    def list_keys(self, settings: SaveSettings) -> List[str]:
        try:
            return list(self.load_dictionary(settings).keys())
        except Exception:
            return []

    # -- file operations ---------------------------------------------------

    def file_exists(self, settings: SaveSettings) -> bool:
        try:
            return self.resolver.exists(settings)
        except Exception:
            logger.exception("Failed to check if %s exists", settings.file_name)
            return False

    def delete_file(self, settings: SaveSettings) -> bool:
        with self._locked(settings):
            try:
                return self.resolver.delete(settings)
            except Exception:
                logger.exception("Failed to delete file %s", settings.file_name)
                return False

    def delete_all(self, kinds: Optional[Iterable[StorageKind]] = None) -> bool:
        """Wipe every backend in `kinds` (all configured backends by default)."""
        ok = True
        for kind in list(kinds) if kinds is not None else self.resolver.backends.kinds():
            try:
                ok = self.resolver.delete_all(kind) and ok
            except Exception:
                logger.exception("Failed to delete all data from the %s backend", kind.value)
                ok = False
        return ok

    # -- asynchronous variants -----------------------------------------------

    def _get_executor(self) -> Executor:
        with self._executor_lock:
            if self._executor is None:
                self._executor = ThreadPoolExecutor(max_workers=self._async_workers, thread_name_prefix="savebox")
            return self._executor

    def _submit(self, fn: Callable[..., Any], *args: Any) -> "Future[Any]":
        return self._get_executor().submit(fn, *args)

    def load_dictionary_async(self, settings: SaveSettings) -> LoadOperation:
        return LoadOperation(self._submit(self.load_dictionary, settings), self.dispatcher, fallback={})

    def store_dictionary_async(self, dictionary: Mapping[str, Any], settings: SaveSettings) -> SaveOperation:
        return SaveOperation(self._submit(self.store_dictionary, dict(dictionary), settings), self.dispatcher)

    def set_key_async(self, key: str, value: Any, settings: SaveSettings) -> SaveOperation:
        return SaveOperation(self._submit(self.set_key, key, value, settings), self.dispatcher)

    def get_key_async(self, key: str, settings: SaveSettings, default: Any = None) -> LoadOperation:
        return LoadOperation(self._submit(self.get_key, key, settings, default), self.dispatcher, fallback=default)

    def delete_key_async(self, key: str, settings: SaveSettings) -> SaveOperation:
        return SaveOperation(self._submit(self.delete_key, key, settings), self.dispatcher)

    def key_exists_async(self, key: str, settings: SaveSettings) -> SaveOperation:
        return SaveOperation(self._submit(self.key_exists, key, settings), self.dispatcher)

    def list_keys_async(self, settings: SaveSettings) -> LoadOperation:
        return LoadOperation(self._submit(self.list_keys, settings), self.dispatcher, fallback=[])

    def delete_file_async(self, settings: SaveSettings) -> SaveOperation:
        return SaveOperation(self._submit(self.delete_file, settings), self.dispatcher)

    def delete_all_async(self, kinds: Optional[Iterable[StorageKind]] = None) -> SaveOperation:
        return SaveOperation(self._submit(self.delete_all, kinds), self.dispatcher)

    def close(self) -> None:
        with self._executor_lock:
            if self._owns_executor and self._executor is not None:
                self._executor.shutdown(wait=True)
                self._executor = None
