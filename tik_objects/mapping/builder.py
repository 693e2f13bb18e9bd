"""Explicit mapping table DSL.

Provides a fluent builder for entity types that cannot (or should not)
carry TikField annotations:

    metadata = (
        entity(Interface)
        .field("name", mandatory=True)
        .field("disabled", default="false")
        .build()
    )
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from tik_objects.core.exceptions import MappingDeclarationError
from tik_objects.mapping.cache import EntityMetadataCache, default_cache
from tik_objects.mapping.converters import Converter, converter_for
from tik_objects.mapping.declaration import (
    annotated_hints,
    attribute_names,
    default_field_name,
    entity_factory,
    is_pydantic_model,
)
from tik_objects.mapping.metadata import EntityMetadata, PropertyAccessor


def _attribute_types(cls: type) -> dict[str, Any]:
    if is_pydantic_model(cls):
        return {n: f.annotation for n, f in cls.model_fields.items()}  # type: ignore[attr-defined]
    try:
        return annotated_hints(cls)
    except MappingDeclarationError:
        return {}


def entity(entity_class: type) -> EntityMappingBuilder:
    """Entry point for the mapping DSL.

    Args:
        entity_class: The entity class to map.

    Returns:
        A builder for chaining field declarations.
    """
    return EntityMappingBuilder(entity_class)


class EntityMappingBuilder:
    """Fluent builder for entity mapping tables."""

    def __init__(self, entity_class: type) -> None:
        self._entity_class = entity_class
        self._fields: list[tuple[str, str, bool, str | None, Converter | None, Any, Any]] = []
        self._auto_fields_enabled = False
        self._factory: Callable[[], Any] | None = None

    def field(
        self,
        attr_name: str,
        field_name: str | None = None,
        *,
        mandatory: bool = False,
        default: str | None = None,
        converter: Converter | None = None,
        getter: Callable[[Any], str] | None = None,
        setter: Callable[[Any, str], None] | None = None,
    ) -> EntityMappingBuilder:
        """Map one attribute to one response field."""
        self._fields.append(
            (
                attr_name,
                field_name or default_field_name(attr_name),
                mandatory,
                default,
                converter,
                getter,
                setter,
            )
        )
        return self

    def auto_fields(self) -> EntityMappingBuilder:
        """Map every remaining attribute as an optional field named after it."""
        self._auto_fields_enabled = True
        return self

    def factory(self, factory: Callable[[], Any]) -> EntityMappingBuilder:
        """Use *factory* instead of the class itself to create blank entities."""
        self._factory = factory
        return self

    def build(self) -> EntityMetadata:
        """Compile and validate the mapping into EntityMetadata."""
        cls = self._entity_class
        types = _attribute_types(cls)

        entries = list(self._fields)
        if self._auto_fields_enabled:
            explicit = {attr for attr, *_ in entries}
            for name in attribute_names(cls):
                if name not in explicit:
                    entries.append((name, default_field_name(name), False, None, None, None, None))

        if not entries:
            raise MappingDeclarationError(f"No fields mapped for {cls.__name__}")

        seen_attrs: set[str] = set()
        seen_fields: set[str] = set()
        properties: list[PropertyAccessor] = []
        for attr_name, field_name, mandatory, default, converter, getter, setter in entries:
            if attr_name in seen_attrs:
                raise MappingDeclarationError(
                    f"Attribute '{attr_name}' is mapped twice in {cls.__name__}"
                )
            if field_name in seen_fields:
                raise MappingDeclarationError(
                    f"Field '{field_name}' is mapped twice in {cls.__name__}"
                )
            seen_attrs.add(attr_name)
            seen_fields.add(field_name)

            if converter is None:
                converter = converter_for(types.get(attr_name, str))
            properties.append(
                PropertyAccessor(
                    field_name=field_name,
                    attribute_name=attr_name,
                    is_mandatory=mandatory,
                    default_value=default,
                    converter=converter,
                    getter=getter,
                    setter=setter,
                )
            )

        return EntityMetadata(
            entity_type=cls,
            properties=tuple(properties),
            factory=self._factory or entity_factory(cls),
        )

    def register(self, cache: EntityMetadataCache | None = None) -> EntityMetadata:
        """Build the mapping and store it in *cache* (the default cache if omitted)."""
        metadata = self.build()
        if cache is None:
            cache = default_cache()
        cache.register(metadata)
        return metadata
