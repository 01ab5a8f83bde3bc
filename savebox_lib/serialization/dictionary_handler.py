"""Envelope codec for a whole save dictionary.

The envelope is a JSON object with three arrays of equal length::

    {"keys": ["score", "name"], "values": ["42", "\"Ann\""], "types": ["int", "str"]}

Each value is the textual payload produced by the handler selected for the
entry's runtime type, and each type is that handler's stable tag.
"""
from __future__ import annotations
import json
import logging
from typing import Any, Dict, Mapping

from savebox_lib.errors import EnvelopeDecodeError
from .interfaces import ValueKind
from .registry import TypeHandlerRegistry

logger = logging.getLogger(__name__)


class DictionaryHandler:
    def __init__(self, registry: TypeHandlerRegistry) -> None:
        self.registry = registry

    def encode(self, dictionary: Mapping[str, Any]) -> str:
        """Encode `dictionary`. Raises if any single value cannot be encoded."""
        keys, values, types = [], [], []
        for key, value in dictionary.items():
            if value is None:
                tag, text = ValueKind.NULL.value, "null"
            else:
                tag, text = self.registry.encode(value)
            keys.append(str(key))
            values.append(text)
            types.append(tag)
        return json.dumps({"keys": keys, "values": values, "types": types}, ensure_ascii=False, separators=(",", ":"))

    def decode(self, text: str) -> Dict[str, Any]:
        """Decode an envelope.

        Entries whose tag has no handler, or whose payload fails to decode,
        are logged and skipped. A payload that is not an envelope at all
        raises `EnvelopeDecodeError`.
        """
        if not text or not text.strip():
            return {}
        try:
            data = json.loads(text)
        except ValueError as e:
            raise EnvelopeDecodeError("envelope is not valid JSON") from e
        if not isinstance(data, dict):
            raise EnvelopeDecodeError("envelope must be a JSON object")
        keys = data.get("keys") or []
        values = data.get("values") or []
        types = data.get("types") or []
        if not all(isinstance(a, list) for a in (keys, values, types)):
            raise EnvelopeDecodeError("envelope keys/values/types must be arrays")
        if not (len(keys) == len(values) == len(types)):
            raise EnvelopeDecodeError(
                f"envelope arrays differ in length: keys={len(keys)} values={len(values)} types={len(types)}"
            )

        result: Dict[str, Any] = {}
        for key, value, tag in zip(keys, values, types):
            if tag == ValueKind.NULL.value:
                result[key] = None
                continue
            handler = self.registry.handler_for_tag(tag)
            if handler is None:
                logger.warning("Could not resolve type tag %r for key %r; entry skipped", tag, key)
                continue
            try:
                result[key] = handler.decode(value, tag)
            except Exception as e:
                logger.error("Failed to decode value for key %r (tag %r): %s", key, tag, e)
        return result
