from dataclasses import dataclass
from datetime import date, datetime, time, timezone
from decimal import Decimal

import pytest
from pydantic import BaseModel

from savebox_lib.serialization import (
    PrimitiveHandler,
    TypeHandlerRegistry,
    YAMLSerializer,
    to_structure,
)


@dataclass
class Position:
    x: int
    y: int


@dataclass
class Player:
    name: str
    position: Position
    tags: list


class Inventory(BaseModel):
    gold: int
    items: list[str] = []


class LegacyStats:
    def __init__(self, hp):
        self.hp = hp
        self.mp = hp // 2


def roundtrip(registry, value):
    tag, text = registry.encode(value)
    return tag, registry.decode(text, tag)


def test_primitive_tags_and_text():
    r = TypeHandlerRegistry()
    assert r.encode(True) == ("bool", "true")
    assert r.encode(42) == ("int", "42")
    assert r.encode(0.1) == ("float", "0.1")
    assert r.encode("hi") == ("str", '"hi"')
    assert r.encode(Decimal("1.10")) == ("decimal", "1.10")


def test_bool_is_not_treated_as_int():
    r = TypeHandlerRegistry()
    tag, value = roundtrip(r, False)
    assert tag == "bool"
    assert value is False


def test_primitive_values_roundtrip_exactly():
    r = TypeHandlerRegistry()
    values = [
        -7,
        10**30,
        1e-300,
        float("inf"),
        "quote \" and unicode ø",
        Decimal("3.14159"),
        datetime(2024, 5, 1, 12, 30, 15, 123456, tzinfo=timezone.utc),
        date(2020, 2, 29),
        time(23, 59, 1),
        b"\x00\xffbinary",
    ]
    for v in values:
        _, decoded = roundtrip(r, v)
        assert decoded == v
        assert type(decoded) is type(v)


def test_single_character_is_a_string():
    r = TypeHandlerRegistry()
    assert roundtrip(r, "x") == ("str", "x")


def test_primitive_handler_rejects_unknown_tag():
    with pytest.raises(ValueError):
        PrimitiveHandler().decode("1", "mystery")


def test_registry_decode_unknown_tag_raises_keyerror():
    with pytest.raises(KeyError):
        TypeHandlerRegistry().decode("1", "mystery")


def test_containers_keep_their_kind():
    r = TypeHandlerRegistry()
    assert roundtrip(r, [1, "a", None]) == ("list", [1, "a", None])
    assert roundtrip(r, (1, 2)) == ("tuple", (1, 2))
    assert roundtrip(r, {3, 4}) == ("set", {3, 4})
    assert roundtrip(r, {"a": {"b": [1]}}) == ("mapping", {"a": {"b": [1]}})


def test_unregistered_dataclass_decodes_as_mapping():
    r = TypeHandlerRegistry()
    tag, value = roundtrip(r, Position(1, 2))
    assert tag == "structural"
    assert value == {"x": 1, "y": 2}


def test_registered_dataclass_roundtrips_nested_fields():
    r = TypeHandlerRegistry()
    handler = r.register_record(Player)
    assert handler.tag == f"record:{__name__}.Player"
    player = Player("ann", Position(3, 4), ["a", "b"])
    tag, value = roundtrip(r, player)
    assert tag == handler.tag
    assert value == player
    assert isinstance(value.position, Position)


def test_registered_model_and_explicit_tag():
    r = TypeHandlerRegistry()
    r.register_record(Inventory, tag="record:inventory")
    tag, value = roundtrip(r, Inventory(gold=5, items=["sword"]))
    assert tag == "record:inventory"
    assert value == Inventory(gold=5, items=["sword"])


def test_registered_plain_class_restores_attributes():
    r = TypeHandlerRegistry()
    r.register_record(LegacyStats)
    _, value = roundtrip(r, LegacyStats(10))
    assert isinstance(value, LegacyStats)
    assert (value.hp, value.mp) == (10, 5)


def test_declared_type_selects_handler():
    r = TypeHandlerRegistry()
    tag, text = r.encode(True, declared_type=bool)
    assert (tag, text) == ("bool", "true")


def test_to_structure_rejects_opaque_values():
    with pytest.raises(TypeError):
        to_structure(object())


def test_container_elements_keep_their_types():
    r = TypeHandlerRegistry()
    value = [date(2024, 1, 2), Decimal("1.5"), b"\x01", (1, 2), None, True]
    tag, decoded = roundtrip(r, value)
    assert tag == "list"
    assert decoded == value
    assert type(decoded[0]) is date
    assert type(decoded[3]) is tuple


def test_mapping_values_and_keys_keep_their_types():
    r = TypeHandlerRegistry()
    when = {"at": datetime(2024, 1, 2, 3, 4)}
    assert roundtrip(r, when) == ("mapping", when)
    assert roundtrip(r, {1: "a", (2, 3): "b", "c": 4}) == ("mapping", {1: "a", (2, 3): "b", "c": 4})


def test_nested_containers_roundtrip():
    r = TypeHandlerRegistry()
    value = {"dates": [date(2024, 1, 2)], "grid": [[1, 2], [3.5]], "ids": {1, 2}}
    assert roundtrip(r, value) == ("mapping", value)


def test_registered_record_inside_container():
    r = TypeHandlerRegistry()
    r.register_record(Position)
    _, decoded = roundtrip(r, [Position(1, 2), Position(3, 4)])
    assert decoded == [Position(1, 2), Position(3, 4)]


def test_structural_handler_with_yaml_serializer():
    r = TypeHandlerRegistry(YAMLSerializer())
    value = {"a": [1, date(2024, 1, 2)]}
    assert roundtrip(r, value) == ("mapping", value)


@pytest.mark.parametrize("text", ['{"a": 1}', "[1, 2]", '[{"t": "int"}]'])
def test_structural_handler_rejects_malformed_payload(text):
    with pytest.raises(ValueError):
        TypeHandlerRegistry().fallback.decode(text, "list")


def test_unknown_element_tag_fails_the_whole_value():
    with pytest.raises(KeyError):
        TypeHandlerRegistry().fallback.decode('[{"t": "mystery", "v": "1"}]', "list")
