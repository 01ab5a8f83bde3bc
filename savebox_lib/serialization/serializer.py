"""Leaf serializers used by the structural and record handlers.

A leaf serializer turns plain data (dicts, lists, strings, numbers, bools,
None) into text and back. It is injected into the handlers so the envelope
codec does not depend on one object-graph format.
"""
from typing import Any, Protocol
import json
import yaml


class Serializer(Protocol):
    """Serialize/deserialize plain Python data to text.

    Implementations should be symmetric: `dump` -> str, `load` <- str.
    """

    def dump(self, value: Any) -> str: ...

    def load(self, data: str) -> Any: ...


class JSONSerializer:
    """Compact JSON. Objects without a JSON mapping fall back to `__dict__`."""

    def dump(self, value: Any) -> str:
        return json.dumps(value, ensure_ascii=False, separators=(",", ":"), default=lambda o: o.__dict__)

    def load(self, data: str) -> Any:
        return json.loads(data)


class YAMLSerializer:
    """Serializer using YAML (text). Caller must ensure values are YAML-serializable."""

    def dump(self, value: Any) -> str:
        return yaml.safe_dump(value, sort_keys=False, allow_unicode=True)

    def load(self, data: str) -> Any:
        return yaml.safe_load(data)
