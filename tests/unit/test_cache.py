"""Unit tests for EntityMetadataCache."""

from __future__ import annotations

import threading
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Annotated

import pytest

from tik_objects.core.exceptions import EntityNotMappedError
from tik_objects.mapping.builder import entity
from tik_objects.mapping.cache import EntityMetadataCache, default_cache, get_metadata
from tik_objects.mapping.declaration import TikField


@dataclass
class Interface:
    name: Annotated[str, TikField(mandatory=True)] = ""
    disabled: Annotated[str, TikField(default="false")] = "false"


@dataclass
class Address:
    address: Annotated[str, TikField(mandatory=True)] = ""


@dataclass
class Unmapped:
    name: str = ""


class TestEntityMetadataCache:
    def test_builds_from_annotations(self, cache: EntityMetadataCache) -> None:
        metadata = cache.get_metadata(Interface)
        assert metadata.entity_type is Interface
        assert metadata.field_names == ["name", "disabled"]
        assert metadata.mandatory_fields == ["name"]

    def test_built_once(self, cache: EntityMetadataCache) -> None:
        first = cache.get_metadata(Interface)
        second = cache.get_metadata(Interface)
        assert first is second
        assert len(cache) == 1

    def test_has(self, cache: EntityMetadataCache) -> None:
        assert cache.has(Interface) is False
        cache.get_metadata(Interface)
        assert cache.has(Interface) is True

    def test_unmapped_type(self, cache: EntityMetadataCache) -> None:
        with pytest.raises(EntityNotMappedError, match="Unmapped"):
            cache.get_metadata(Unmapped)
        assert cache.has(Unmapped) is False

    def test_registered_table_wins(self, cache: EntityMetadataCache) -> None:
        registered = entity(Interface).field("name", "default-name").register(cache)
        assert cache.get_metadata(Interface) is registered
        assert cache.get_metadata(Interface).field_names == ["default-name"]

    def test_entity_types_sorted(self, cache: EntityMetadataCache) -> None:
        cache.get_metadata(Interface)
        cache.get_metadata(Address)
        assert cache.entity_types == [Address, Interface]

    def test_clear(self, cache: EntityMetadataCache) -> None:
        cache.get_metadata(Interface)
        cache.clear()
        assert len(cache) == 0

    def test_default_cache_shortcut(self) -> None:
        assert get_metadata(Address) is default_cache().get_metadata(Address)


class TestConcurrentFirstAccess:
    def test_same_type_returns_same_metadata(self, cache: EntityMetadataCache) -> None:
        workers = 16
        barrier = threading.Barrier(workers)

        def build() -> object:
            barrier.wait()
            return cache.get_metadata(Interface)

        with ThreadPoolExecutor(max_workers=workers) as pool:
            results = list(pool.map(lambda _: build(), range(workers)))

        assert all(result is results[0] for result in results)
        assert len(cache) == 1

    def test_different_types(self, cache: EntityMetadataCache) -> None:
        workers = 8
        barrier = threading.Barrier(workers)
        types = [Interface, Address] * (workers // 2)

        def build(entity_type: type) -> object:
            barrier.wait()
            return cache.get_metadata(entity_type)

        with ThreadPoolExecutor(max_workers=workers) as pool:
            results = list(pool.map(build, types))

        assert [r.entity_type for r in results] == types
        assert results[0] is results[2]
        assert results[1] is results[3]
        assert len(cache) == 2
