from __future__ import annotations
from enum import Enum
from typing import Any, Protocol, Tuple, runtime_checkable


class ValueKind(str, Enum):
    """Stable type tags for the built-in value kinds.

    Tags are written into every envelope entry, so the string values must
    never change. Custom handlers pick their own tags; registered record
    types use the `record:` prefix.
    """

    NULL = "null"
    BOOL = "bool"
    INT = "int"
    FLOAT = "float"
    DECIMAL = "decimal"
    STR = "str"
    DATETIME = "datetime"
    DATE = "date"
    TIME = "time"
    BYTES = "bytes"
    LIST = "list"
    TUPLE = "tuple"
    SET = "set"
    MAPPING = "mapping"
    STRUCTURAL = "structural"


RECORD_TAG_PREFIX = "record:"


@runtime_checkable
class TypeHandler(Protocol):
    """Encoder/decoder for one family of value types.

    `python_types` are matched exactly against `type(value)` when encoding;
    `tags` are matched against the stored tag when decoding.
    """

    python_types: Tuple[type, ...]
    tags: Tuple[str, ...]

    def tag_for(self, value: Any) -> str: ...

    def encode(self, value: Any) -> str: ...

    def decode(self, text: str, tag: str) -> Any: ...
