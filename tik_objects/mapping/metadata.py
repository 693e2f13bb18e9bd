"""Entity metadata data classes.

Frozen dataclasses describing compiled, validated field bindings.
Used by the materializer at load time.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from tik_objects.mapping.converters import STRING, Converter


@dataclass(frozen=True)
class PropertyAccessor:
    """Binding of one response field to one entity attribute."""

    field_name: str
    attribute_name: str
    is_mandatory: bool = False
    default_value: str | None = None
    converter: Converter = STRING
    getter: Callable[[Any], str] | None = None
    setter: Callable[[Any, str], None] | None = None

    def get_entity_value(self, entity: Any) -> str:
        """Read the attribute as its wire string."""
        if self.getter is not None:
            return self.getter(entity)
        return self.converter.to_string(getattr(entity, self.attribute_name))

    def set_entity_value(self, entity: Any, raw: str) -> None:
        """Convert *raw* and store it on the entity."""
        if self.setter is not None:
            self.setter(entity, raw)
            return
        value = self.converter.to_value(self.field_name, raw)
        # object.__setattr__ also covers frozen dataclasses and pydantic models
        object.__setattr__(entity, self.attribute_name, value)


@dataclass(frozen=True)
class EntityMetadata:
    """Ordered field bindings for one entity type."""

    entity_type: type
    properties: tuple[PropertyAccessor, ...]
    factory: Callable[[], Any] = field(default=None, compare=False)  # type: ignore[assignment]

    def create(self) -> Any:
        """Create a new default-valued entity instance."""
        if self.factory is not None:
            return self.factory()
        return self.entity_type()

    @property
    def field_names(self) -> list[str]:
        return [p.field_name for p in self.properties]

    @property
    def mandatory_fields(self) -> list[str]:
        return [p.field_name for p in self.properties if p.is_mandatory]

    def accessor(self, attribute_name: str) -> PropertyAccessor:
        """Look up the accessor bound to *attribute_name*."""
        for prop in self.properties:
            if prop.attribute_name == attribute_name:
                return prop
        raise KeyError(attribute_name)
