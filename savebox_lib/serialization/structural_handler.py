"""Generic handlers for aggregate values.

`StructuralHandler` is the registry's fallback. Built-in containers (list,
tuple, set, dict) are encoded element by element through the registry, so
every element keeps its own tag and decodes back to its own type::

    [date(2024, 1, 2), 1]  ->  [{"t":"date","v":"\\"2024-01-02\\""},{"t":"int","v":"1"}]
    {1: "a"}               ->  [{"kt":"int","k":"1","t":"str","v":"\\"a\\""}]

Any other object (unregistered dataclasses, pydantic models, plain objects)
is flattened into JSON-compatible data and decodes as its field mapping.

`RecordHandler` is bound to one class registered by the application and
rebuilds instances of that class on decode.
"""
from __future__ import annotations
import base64
import dataclasses
from collections.abc import Mapping
from datetime import date, datetime, time
from decimal import Decimal
from enum import Enum
from typing import TYPE_CHECKING, Any, Dict, List, Optional, Tuple

from pydantic import BaseModel, TypeAdapter

from .interfaces import RECORD_TAG_PREFIX, ValueKind
from .serializer import JSONSerializer, Serializer

if TYPE_CHECKING:
    from .registry import TypeHandlerRegistry


def to_structure(value: Any) -> Any:
    """Return a JSON-compatible copy of `value`."""
    if value is None or isinstance(value, (bool, int, float, str)):
        return value
    if isinstance(value, Enum):
        return to_structure(value.value)
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, (datetime, date, time)):
        return value.isoformat()
    if isinstance(value, (bytes, bytearray)):
        return base64.b64encode(bytes(value)).decode("ascii")
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json")
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return {f.name: to_structure(getattr(value, f.name)) for f in dataclasses.fields(value)}
    if isinstance(value, Mapping):
        return {str(k): to_structure(v) for k, v in value.items()}
    if isinstance(value, (list, tuple, set, frozenset)):
        return [to_structure(v) for v in value]
    if hasattr(value, "__dict__"):
        return {k: to_structure(v) for k, v in vars(value).items() if not k.startswith("_")}
    raise TypeError(f"cannot encode value of type {type(value).__name__}")


_CONTAINER_TAGS = {
    list: ValueKind.LIST,
    tuple: ValueKind.TUPLE,
    set: ValueKind.SET,
    frozenset: ValueKind.SET,
    dict: ValueKind.MAPPING,
}

_SEQUENCE_BUILDERS = {
    ValueKind.LIST.value: list,
    ValueKind.TUPLE.value: tuple,
    ValueKind.SET.value: set,
}


class StructuralHandler:
    python_types: Tuple[type, ...] = tuple(_CONTAINER_TAGS)
    tags: Tuple[str, ...] = (
        ValueKind.LIST.value,
        ValueKind.TUPLE.value,
        ValueKind.SET.value,
        ValueKind.MAPPING.value,
        ValueKind.STRUCTURAL.value,
    )

    def __init__(self, registry: "TypeHandlerRegistry", serializer: Optional[Serializer] = None) -> None:
        self.registry = registry
        self.serializer = serializer or JSONSerializer()

    def tag_for(self, value: Any) -> str:
        kind = _CONTAINER_TAGS.get(type(value), ValueKind.STRUCTURAL)
        return kind.value

    def _element(self, value: Any) -> Dict[str, str]:
        tag, text = self.registry.encode(value)
        return {"t": tag, "v": text}

    def encode(self, value: Any) -> str:
        kind = _CONTAINER_TAGS.get(type(value))
        if kind is None:
            return self.serializer.dump(to_structure(value))
        if kind is ValueKind.MAPPING:
            items = []
            for k, v in value.items():
                key_tag, key_text = self.registry.encode(k)
                items.append({"kt": key_tag, "k": key_text, **self._element(v)})
            return self.serializer.dump(items)
        return self.serializer.dump([self._element(v) for v in value])

    def _decode_element(self, item: Any, key: str = "v", tag_key: str = "t") -> Any:
        if not isinstance(item, dict) or tag_key not in item or key not in item:
            raise ValueError(f"malformed container element: {item!r}")
        return self.registry.decode(item[key], item[tag_key])

    def decode(self, text: str, tag: str) -> Any:
        data = self.serializer.load(text)
        if tag == ValueKind.STRUCTURAL.value:
            return data
        if not isinstance(data, list):
            raise ValueError(f"expected element list payload for tag {tag!r}")
        if tag == ValueKind.MAPPING.value:
            return {self._decode_element(item, "k", "kt"): self._decode_element(item) for item in data}
        builder = _SEQUENCE_BUILDERS.get(tag)
        if builder is None:
            raise ValueError(f"StructuralHandler does not handle tag {tag!r}")
        elements: List[Any] = [self._decode_element(item) for item in data]
        return builder(elements)


class RecordHandler:
    """Handler bound to a single application type.

    Dataclasses, pydantic models and TypedDicts go through a pydantic
    `TypeAdapter`, so nested typed fields are rebuilt too. Other classes are
    restored by populating `__dict__` without calling `__init__`.
    """

    def __init__(self, cls: type, tag: Optional[str] = None, serializer: Optional[Serializer] = None) -> None:
        self.cls = cls
        self.tag = tag or f"{RECORD_TAG_PREFIX}{cls.__module__}.{cls.__qualname__}"
        self.python_types: Tuple[type, ...] = (cls,)
        self.tags: Tuple[str, ...] = (self.tag,)
        self.serializer = serializer or JSONSerializer()
        self._adapter: Optional[TypeAdapter] = None
        if dataclasses.is_dataclass(cls) or issubclass(cls, BaseModel) or hasattr(cls, "__total__"):
            self._adapter = TypeAdapter(cls)

    def tag_for(self, value: Any) -> str:
        return self.tag

    def encode(self, value: Any) -> str:
        if self._adapter is not None:
            return self.serializer.dump(self._adapter.dump_python(value, mode="json"))
        return self.serializer.dump(to_structure(value))

    def decode(self, text: str, tag: str) -> Any:
        data = self.serializer.load(text)
        if self._adapter is not None:
            return self._adapter.validate_python(data)
        if not isinstance(data, dict):
            raise ValueError(f"expected mapping payload for {self.tag!r}")
        obj = self.cls.__new__(self.cls)
        obj.__dict__.update(data)
        return obj
