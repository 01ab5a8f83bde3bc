"""Type handler registry.

Maps Python types to handlers for encoding and stored tags to handlers for
decoding. Lookup is by exact type, so `bool` values never reach the `int`
path and subclasses of registered types go to the structural fallback
unless they are registered themselves.
"""
from __future__ import annotations
import logging
from typing import Any, Dict, Optional, Tuple

from .interfaces import TypeHandler
from .primitive_handler import PrimitiveHandler
from .serializer import Serializer
from .structural_handler import RecordHandler, StructuralHandler

logger = logging.getLogger(__name__)


class TypeHandlerRegistry:
    def __init__(self, serializer: Optional[Serializer] = None) -> None:
        self._by_type: Dict[type, TypeHandler] = {}
        self._by_tag: Dict[str, TypeHandler] = {}
        self.serializer = serializer
        self.fallback = StructuralHandler(self, serializer)
        self.register(PrimitiveHandler())
        self.register(self.fallback)

    def register(self, handler: TypeHandler) -> TypeHandler:
        """Register `handler` for its types and tags. Later registrations win."""
        for t in handler.python_types:
            self._by_type[t] = handler
        for tag in handler.tags:
            existing = self._by_tag.get(tag)
            if existing is not None and existing is not handler:
                logger.debug("Replacing handler for tag %r", tag)
            self._by_tag[tag] = handler
        return handler

    def register_record(self, cls: type, tag: Optional[str] = None) -> RecordHandler:
        """Register `cls` so its instances decode back into `cls`.

        `tag` is written into saved files; pass an explicit one if the class
        may move between modules.
        """
        return self.register(RecordHandler(cls, tag=tag, serializer=self.serializer))  # type: ignore[return-value]

    def handler_for_type(self, t: type) -> TypeHandler:
        return self._by_type.get(t, self.fallback)

    def handler_for_value(self, value: Any) -> TypeHandler:
        return self.handler_for_type(type(value))

    def handler_for_tag(self, tag: str) -> Optional[TypeHandler]:
        return self._by_tag.get(tag)

    def encode(self, value: Any, declared_type: Optional[type] = None) -> Tuple[str, str]:
        """Return `(tag, text)` for `value`.

        `declared_type` selects the handler when given; the runtime type is
        used otherwise.
        """
        handler = self.handler_for_type(declared_type) if declared_type is not None else self.handler_for_value(value)
        return handler.tag_for(value), handler.encode(value)

    def decode(self, text: str, tag: str) -> Any:
        handler = self.handler_for_tag(tag)
        if handler is None:
            raise KeyError(tag)
        return handler.decode(text, tag)
