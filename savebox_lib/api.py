"""Public SaveBox API.

Every method accepts an optional `settings` argument: a `SaveSettings`, a
bare file name (plain settings for that file), or None for the configured
defaults. Methods never raise; see `SaveStore` for the failure policy.
"""
from __future__ import annotations
import logging
from typing import Any, Dict, List, Mapping, Optional, Union

from savebox_lib.core.operations import LoadOperation, SaveOperation
from savebox_lib.core.store import SaveStore
from savebox_lib.serialization.structural_handler import RecordHandler
from savebox_lib.settings import SaveSettings

logger = logging.getLogger(__name__)

SettingsLike = Union[SaveSettings, str, None]

DELETE_CONFIRMATION = "DELETE"


class SaveBox:
    def __init__(self, store: SaveStore, default_settings: SaveSettings) -> None:
        self.store = store
        self.default_settings = default_settings
        if default_settings.encryption_enabled and not default_settings.password_value:
            logger.warning(
                "Default settings enable encryption without a password; the default key is not "
                "persisted and the data will not be readable after a restart"
            )

    def _settings(self, settings: SettingsLike) -> SaveSettings:
        if settings is None:
            return self.default_settings
        if isinstance(settings, str):
            return SaveSettings.for_file(settings)
        return settings

    def register_type(self, cls: type, tag: Optional[str] = None) -> RecordHandler:
        """Register `cls` so saved instances load back as `cls`."""
        return self.store.registry.register_record(cls, tag)

    # -- synchronous API ---------------------------------------------------

    def save(self, key: str, value: Any, settings: SettingsLike = None) -> bool:
        return self.store.set_key(key, value, self._settings(settings))

    def load(self, key: str, default: Any = None, settings: SettingsLike = None) -> Any:
        """Return the value stored under `key`, or `default` if it is missing."""
        return self.store.get_key(key, self._settings(settings), default)

    def load_all(self, settings: SettingsLike = None) -> Dict[str, Any]:
        return self.store.load_dictionary(self._settings(settings))

    def save_all(self, values: Mapping[str, Any], settings: SettingsLike = None) -> bool:
        """Replace the whole file with `values`."""
        return self.store.store_dictionary(values, self._settings(settings))

    def key_exists(self, key: str, settings: SettingsLike = None) -> bool:
        return self.store.key_exists(key, self._settings(settings))

    def delete_key(self, key: str, settings: SettingsLike = None) -> bool:
        return self.store.delete_key(key, self._settings(settings))

    def get_keys(self, settings: SettingsLike = None) -> List[str]:
        return self.store.list_keys(self._settings(settings))

    def file_exists(self, settings: SettingsLike = None) -> bool:
        return self.store.file_exists(self._settings(settings))

    def delete_file(self, settings: SettingsLike = None) -> bool:
        return self.store.delete_file(self._settings(settings))

    def delete_all_data(self, confirmation: Optional[str] = None) -> bool:
        """Delete every save file in every configured backend.

        When `confirmation` is given it must be "DELETE"; anything else
        refuses the wipe.
        """
        if confirmation is not None and confirmation != DELETE_CONFIRMATION:
            logger.warning("delete_all_data confirmation must be %r", DELETE_CONFIRMATION)
            return False
        return self.store.delete_all()

    # -- asynchronous API --------------------------------------------------

    def save_async(self, key: str, value: Any, settings: SettingsLike = None) -> SaveOperation:
        return self.store.set_key_async(key, value, self._settings(settings))

    def load_async(self, key: str, default: Any = None, settings: SettingsLike = None) -> LoadOperation:
        return self.store.get_key_async(key, self._settings(settings), default)

    def load_all_async(self, settings: SettingsLike = None) -> LoadOperation:
        return self.store.load_dictionary_async(self._settings(settings))

    def save_all_async(self, values: Mapping[str, Any], settings: SettingsLike = None) -> SaveOperation:
        return self.store.store_dictionary_async(values, self._settings(settings))

    def key_exists_async(self, key: str, settings: SettingsLike = None) -> SaveOperation:
        return self.store.key_exists_async(key, self._settings(settings))

    def delete_key_async(self, key: str, settings: SettingsLike = None) -> SaveOperation:
        return self.store.delete_key_async(key, self._settings(settings))

    def get_keys_async(self, settings: SettingsLike = None) -> LoadOperation:
        return self.store.list_keys_async(self._settings(settings))

    def delete_file_async(self, settings: SettingsLike = None) -> SaveOperation:
        return self.store.delete_file_async(self._settings(settings))

    def tick(self) -> int:
        """Deliver queued completion callbacks. Call once per host frame/loop."""
        if self.store.dispatcher is None:
            return 0
        return self.store.dispatcher.drain()

    def close(self) -> None:
        self.store.close()
        self.store.resolver.backends.close()

    def __enter__(self) -> "SaveBox":
        return self

    def __exit__(self, *exc: Any) -> None:
        self.close()
