from typing import Iterable, Optional, Protocol, runtime_checkable


@runtime_checkable
class PreferenceStore(Protocol):
    """Flat string-to-string store, the platform preferences analogue.

    The store may be shared with unrelated data, so callers must only touch
    keys they own.
    """

    def has_key(self, key: str) -> bool: ...

    def get(self, key: str) -> Optional[str]: ...

    def set(self, key: str, value: str) -> None: ...

    def delete(self, key: str) -> bool: ...

    def keys(self) -> Iterable[str]: ...

    def flush(self) -> None: ...
