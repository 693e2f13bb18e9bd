"""Unit tests for EntityMaterializer."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Annotated

import pytest
from pydantic import BaseModel

from tik_objects.core.exceptions import (
    MappingDeclarationError,
    MissingFieldError,
    ValueConversionError,
)
from tik_objects.core.sentence import ReSentence
from tik_objects.mapping.builder import entity
from tik_objects.mapping.cache import EntityMetadataCache
from tik_objects.mapping.declaration import TikField
from tik_objects.mapping.materializer import EntityMaterializer, materialize


@dataclass
class Interface:
    name: Annotated[str, TikField(mandatory=True)] = ""
    disabled: Annotated[str, TikField(default="false")] = ""


@dataclass
class TypedInterface:
    id: Annotated[str, TikField(".id", mandatory=True)] = ""
    running: Annotated[bool, TikField(default="false")] = False
    mtu: Annotated[int | None, TikField()] = None


@dataclass(frozen=True)
class FrozenAddress:
    address: Annotated[str, TikField(mandatory=True)] = ""


class Route(BaseModel):
    dst_address: Annotated[str, TikField(mandatory=True)] = ""
    distance: Annotated[int | None, TikField(default="1")] = None


@dataclass
class NeedsArguments:
    name: Annotated[str, TikField()]


class Duplex(Enum):
    FULL = "full"
    HALF = "half"


@dataclass
class Port:
    name: Annotated[str, TikField(mandatory=True)] = ""
    running: Annotated[bool, TikField()] = False
    duplex: Annotated[Duplex, TikField()] = Duplex.FULL
    mtu: Annotated[int, TikField()] = 1500
    l2mtu: Annotated[int, TikField(default="1598")] = 0


@dataclass
class PlainPort:
    name: str = ""
    running: bool = True
    duplex: Duplex = Duplex.HALF
    mtu: int = 1500


@dataclass
class Pair:
    left: str = ""
    right: str = ""


class TestEntityMaterializer:
    def test_interface_example(self, cache: EntityMetadataCache) -> None:
        mapper = EntityMaterializer(Interface, cache)
        rows = [
            ReSentence(fields={"name": "ether1"}),
            ReSentence(fields={"name": "ether2", "disabled": "true"}),
        ]
        assert mapper.map_many(rows) == [
            Interface(name="ether1", disabled="false"),
            Interface(name="ether2", disabled="true"),
        ]

    def test_missing_mandatory_field(self, cache: EntityMetadataCache) -> None:
        row = ReSentence(fields={"disabled": "true"}, command="/interface/print")
        with pytest.raises(MissingFieldError) as exc_info:
            materialize(Interface, row, cache=cache)
        assert exc_info.value.field_name == "name"
        assert "/interface/print" in str(exc_info.value)

    def test_mandatory_field_never_defaulted(self, cache: EntityMetadataCache) -> None:
        metadata = (
            entity(Pair).field("left", mandatory=True, default="fallback").register(cache)
        )
        assert metadata.accessor("left").default_value == "fallback"
        with pytest.raises(MissingFieldError):
            materialize(Pair, ReSentence(fields={}), cache=cache)

    def test_optional_default_is_converted(self, cache: EntityMetadataCache) -> None:
        item = materialize(TypedInterface, ReSentence(fields={".id": "*1"}), cache=cache)
        assert item == TypedInterface(id="*1", running=False, mtu=None)

    def test_typed_values(self, cache: EntityMetadataCache) -> None:
        row = ReSentence(fields={".id": "*2", "running": "true", "mtu": "1500"})
        item = materialize(TypedInterface, row, cache=cache)
        assert item.running is True
        assert item.mtu == 1500

    def test_malformed_value_is_reported(self, cache: EntityMetadataCache) -> None:
        row = ReSentence(fields={".id": "*2", "running": "perhaps"})
        with pytest.raises(ValueConversionError, match="running"):
            materialize(TypedInterface, row, cache=cache)

    def test_frozen_dataclass(self, cache: EntityMetadataCache) -> None:
        row = ReSentence(fields={"address": "10.0.0.1/24"})
        item = materialize(FrozenAddress, row, cache=cache)
        assert item.address == "10.0.0.1/24"

    def test_pydantic_model(self, cache: EntityMetadataCache) -> None:
        item = materialize(Route, ReSentence(fields={"dst-address": "0.0.0.0/0"}), cache=cache)
        assert isinstance(item, Route)
        assert item.dst_address == "0.0.0.0/0"
        assert item.distance == 1

    def test_not_default_constructible(self, cache: EntityMetadataCache) -> None:
        with pytest.raises(MappingDeclarationError, match="without arguments"):
            materialize(NeedsArguments, ReSentence(fields={"name": "x"}), cache=cache)

    def test_extra_fields_ignored(self, cache: EntityMetadataCache) -> None:
        row = ReSentence(fields={"name": "ether1", "mtu": "1500", "type": "ether"})
        item = materialize(Interface, row, cache=cache)
        assert item == Interface(name="ether1", disabled="false")

    def test_same_input_same_entity(self, cache: EntityMetadataCache) -> None:
        row = ReSentence(fields={"name": "ether1", "disabled": "true"})
        first = materialize(Interface, row, cache=cache)
        second = materialize(Interface, row, cache=cache)
        assert first == second
        assert first is not second

    def test_accessor_order_irrelevant(self) -> None:
        forward = EntityMetadataCache()
        backward = EntityMetadataCache()
        entity(Pair).field("left").field("right").register(forward)
        entity(Pair).field("right").field("left").register(backward)
        row = ReSentence(fields={"left": "a", "right": "b"})
        assert materialize(Pair, row, cache=forward) == materialize(Pair, row, cache=backward)

    def test_map_many_empty(self, cache: EntityMetadataCache) -> None:
        assert EntityMaterializer(Interface, cache).map_many([]) == []

    def test_map_many_preserves_order(self, cache: EntityMetadataCache) -> None:
        rows = [ReSentence(fields={"name": f"ether{i}"}) for i in range(5)]
        names = [i.name for i in EntityMaterializer(Interface, cache).map_many(rows)]
        assert names == ["ether0", "ether1", "ether2", "ether3", "ether4"]


class TestAbsentOptionalFields:
    def test_annotated_fields_keep_class_defaults(self, cache: EntityMetadataCache) -> None:
        item = materialize(Port, ReSentence(fields={"name": "ether1"}), cache=cache)
        assert item.running is False
        assert item.duplex is Duplex.FULL
        assert item.mtu == 1500

    def test_declared_literal_is_converted(self, cache: EntityMetadataCache) -> None:
        item = materialize(Port, ReSentence(fields={"name": "ether1"}), cache=cache)
        assert item.l2mtu == 1598

    def test_present_values_still_converted(self, cache: EntityMetadataCache) -> None:
        row = ReSentence(
            fields={"name": "ether1", "running": "true", "duplex": "half", "mtu": "9000"}
        )
        item = materialize(Port, row, cache=cache)
        assert item == Port(name="ether1", running=True, duplex=Duplex.HALF, mtu=9000, l2mtu=1598)

    def test_auto_fields_keep_class_defaults(self, cache: EntityMetadataCache) -> None:
        entity(PlainPort).field("name", mandatory=True).auto_fields().register(cache)
        item = materialize(PlainPort, ReSentence(fields={"name": "ether1"}), cache=cache)
        assert item == PlainPort(name="ether1", running=True, duplex=Duplex.HALF, mtu=1500)

    def test_auto_fields_convert_present_values(self, cache: EntityMetadataCache) -> None:
        entity(PlainPort).field("name", mandatory=True).auto_fields().register(cache)
        row = ReSentence(fields={"name": "ether1", "running": "no", "mtu": "1400"})
        item = materialize(PlainPort, row, cache=cache)
        assert item.running is False
        assert item.mtu == 1400

    def test_empty_value_for_plain_int_is_malformed(self, cache: EntityMetadataCache) -> None:
        with pytest.raises(ValueConversionError, match="mtu"):
            materialize(Port, ReSentence(fields={"name": "ether1", "mtu": ""}), cache=cache)
