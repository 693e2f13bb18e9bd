"""Mapping layer - transform response sentences into typed entities."""

from __future__ import annotations

from tik_objects.mapping.builder import EntityMappingBuilder, entity
from tik_objects.mapping.cache import EntityMetadataCache, default_cache, get_metadata
from tik_objects.mapping.converters import Converter, converter_for, enum_converter
from tik_objects.mapping.declaration import TikField
from tik_objects.mapping.materializer import EntityMaterializer, materialize
from tik_objects.mapping.metadata import EntityMetadata, PropertyAccessor
from tik_objects.mapping.protocol import Mapper

__all__ = [
    "TikField",
    "EntityMappingBuilder",
    "entity",
    "EntityMetadataCache",
    "default_cache",
    "get_metadata",
    "EntityMetadata",
    "PropertyAccessor",
    "Converter",
    "converter_for",
    "enum_converter",
    "EntityMaterializer",
    "materialize",
    "Mapper",
]
