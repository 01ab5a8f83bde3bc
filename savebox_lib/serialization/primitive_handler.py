"""Handler for scalar values: numbers, bools, strings, date/times and bytes.

Every textual form is locale independent so a file written on one machine
decodes identically on another. Floats use `repr`, which is the shortest
string that round-trips exactly.
"""
from __future__ import annotations
import base64
import json
from datetime import date, datetime, time
from decimal import Decimal
from typing import Any, Callable, Dict, Tuple

from .interfaces import ValueKind


def _unquote(text: str) -> str:
    if len(text) >= 2 and text.startswith('"') and text.endswith('"'):
        return json.loads(text)
    return text


def _quote(text: str) -> str:
    return json.dumps(text, ensure_ascii=False)


def _encode_bool(value: bool) -> str:
    return "true" if value else "false"


def _decode_bool(text: str) -> bool:
    return text.strip().lower() == "true"


_TYPE_TAGS: Dict[type, ValueKind] = {
    type(None): ValueKind.NULL,
    bool: ValueKind.BOOL,
    int: ValueKind.INT,
    float: ValueKind.FLOAT,
    Decimal: ValueKind.DECIMAL,
    str: ValueKind.STR,
    datetime: ValueKind.DATETIME,
    date: ValueKind.DATE,
    time: ValueKind.TIME,
    bytes: ValueKind.BYTES,
    bytearray: ValueKind.BYTES,
}

_ENCODERS: Dict[ValueKind, Callable[[Any], str]] = {
    ValueKind.NULL: lambda v: "null",
    ValueKind.BOOL: _encode_bool,
    ValueKind.INT: str,
    ValueKind.FLOAT: repr,
    ValueKind.DECIMAL: str,
    ValueKind.STR: _quote,
    ValueKind.DATETIME: lambda v: _quote(v.isoformat()),
    ValueKind.DATE: lambda v: _quote(v.isoformat()),
    ValueKind.TIME: lambda v: _quote(v.isoformat()),
    ValueKind.BYTES: lambda v: _quote(base64.b64encode(bytes(v)).decode("ascii")),
}

_DECODERS: Dict[ValueKind, Callable[[str], Any]] = {
    ValueKind.NULL: lambda t: None,
    ValueKind.BOOL: _decode_bool,
    ValueKind.INT: lambda t: int(t.strip()),
    ValueKind.FLOAT: lambda t: float(t.strip()),
    ValueKind.DECIMAL: lambda t: Decimal(t.strip()),
    ValueKind.STR: _unquote,
    ValueKind.DATETIME: lambda t: datetime.fromisoformat(_unquote(t)),
    ValueKind.DATE: lambda t: date.fromisoformat(_unquote(t)),
    ValueKind.TIME: lambda t: time.fromisoformat(_unquote(t)),
    ValueKind.BYTES: lambda t: base64.b64decode(_unquote(t), validate=True),
}


class PrimitiveHandler:
    """Encode and decode the built-in scalar kinds.

    Decoding raises `ValueError` (or a subclass) on malformed text; the
    envelope codec catches it and drops the entry.
    """

    python_types: Tuple[type, ...] = tuple(_TYPE_TAGS)
    tags: Tuple[str, ...] = tuple(kind.value for kind in _ENCODERS)

    def tag_for(self, value: Any) -> str:
        return _TYPE_TAGS[type(value)].value

    def encode(self, value: Any) -> str:
        kind = _TYPE_TAGS.get(type(value))
        if kind is None:
            raise TypeError(f"PrimitiveHandler cannot encode {type(value).__name__}")
        return _ENCODERS[kind](value)

    def decode(self, text: str, tag: str) -> Any:
        try:
            kind = ValueKind(tag)
            decoder = _DECODERS[kind]
        except (ValueError, KeyError):
            raise ValueError(f"PrimitiveHandler does not handle tag {tag!r}")
        return decoder(text)
