from typing import Optional, Protocol, runtime_checkable

from savebox_lib.settings import EncryptionKind


@runtime_checkable
class EncryptionProvider(Protocol):
    """Symmetric text cipher.

    `encrypt` and `decrypt` must round-trip any text. On failure both
    return their input unchanged and log the error instead of raising.
    """

    kind: EncryptionKind

    def encrypt(self, text: str, password: Optional[str] = None) -> str: ...

    def decrypt(self, text: str, password: Optional[str] = None) -> str: ...
