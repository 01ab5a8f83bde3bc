"""Value codecs: type handlers, their registry and the envelope codec."""

from .interfaces import RECORD_TAG_PREFIX, TypeHandler, ValueKind
from .serializer import JSONSerializer, Serializer, YAMLSerializer
from .primitive_handler import PrimitiveHandler
from .structural_handler import RecordHandler, StructuralHandler, to_structure
from .registry import TypeHandlerRegistry
from .dictionary_handler import DictionaryHandler

__all__ = [
    "TypeHandler",
    "ValueKind",
    "RECORD_TAG_PREFIX",
    "Serializer",
    "JSONSerializer",
    "YAMLSerializer",
    "PrimitiveHandler",
    "StructuralHandler",
    "RecordHandler",
    "to_structure",
    "TypeHandlerRegistry",
    "DictionaryHandler",
]
