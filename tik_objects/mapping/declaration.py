"""Field mapping declarations on entity classes.

Mapped attributes are annotated with a TikField marker:

    @dataclass
    class Interface:
        id: Annotated[str, TikField(".id", mandatory=True)] = ""
        name: Annotated[str, TikField(mandatory=True)] = ""
        disabled: Annotated[bool, TikField(default="false")] = False

Works the same for dataclasses, Pydantic models and plain classes with
class-level annotations. The annotated type picks the converter.
"""

from __future__ import annotations

import dataclasses
import typing
from dataclasses import dataclass
from typing import Any

from tik_objects.core.exceptions import MappingDeclarationError
from tik_objects.mapping.converters import Converter, converter_for
from tik_objects.mapping.metadata import PropertyAccessor


@dataclass(frozen=True)
class TikField:
    """Mapping marker for one entity attribute.

    *default* is the wire value used when an optional field is absent.
    Without one, an absent field leaves the attribute at its class default.
    """

    field_name: str | None = None
    mandatory: bool = False
    default: str | None = None
    converter: Converter | None = None


def default_field_name(attribute_name: str) -> str:
    """RouterOS keys use dashes where Python attributes use underscores."""
    return attribute_name.replace("_", "-")


def is_pydantic_model(cls: type) -> bool:
    """Check if a class is a Pydantic BaseModel."""
    try:
        from pydantic import BaseModel

        return issubclass(cls, BaseModel)
    except ImportError:
        return False


def entity_factory(cls: type) -> Any:
    """Zero-argument constructor for *cls*.

    Pydantic models are built with model_construct so required fields
    without defaults do not fail validation before they are populated.
    """
    if is_pydantic_model(cls):
        return cls.model_construct  # type: ignore[attr-defined]
    return cls


def annotated_hints(cls: type) -> dict[str, Any]:
    """Resolve annotations (including string annotations) keeping Annotated extras."""
    try:
        return typing.get_type_hints(cls, include_extras=True)
    except (NameError, TypeError) as e:
        raise MappingDeclarationError(
            f"Cannot resolve annotations of {cls.__name__}: {e}"
        ) from e


def _split_annotated(hint: Any) -> tuple[Any, TikField | None]:
    if typing.get_origin(hint) is typing.Annotated:
        base, *extras = typing.get_args(hint)
        for extra in extras:
            if isinstance(extra, TikField):
                return base, extra
        return base, None
    return hint, None


def _pydantic_markers(cls: type) -> list[tuple[str, Any, TikField | None]]:
    # FieldInfo keeps unknown Annotated extras in .metadata
    result = []
    for name, info in cls.model_fields.items():  # type: ignore[attr-defined]
        marker = next((m for m in info.metadata if isinstance(m, TikField)), None)
        result.append((name, info.annotation, marker))
    return result


def _class_markers(cls: type) -> list[tuple[str, Any, TikField | None]]:
    return [
        (name, *_split_annotated(hint)) for name, hint in annotated_hints(cls).items()
    ]


def declared_properties(cls: type) -> list[PropertyAccessor]:
    """Collect accessors from TikField-annotated attributes, in declaration order."""
    properties: list[PropertyAccessor] = []
    seen_fields: set[str] = set()

    markers = _pydantic_markers(cls) if is_pydantic_model(cls) else _class_markers(cls)
    for attribute_name, base, marker in markers:
        if marker is None:
            continue

        field_name = marker.field_name or default_field_name(attribute_name)
        if field_name in seen_fields:
            raise MappingDeclarationError(
                f"Field '{field_name}' is mapped twice in {cls.__name__}"
            )
        seen_fields.add(field_name)

        properties.append(
            PropertyAccessor(
                field_name=field_name,
                attribute_name=attribute_name,
                is_mandatory=marker.mandatory,
                default_value=marker.default,
                converter=marker.converter or converter_for(base),
            )
        )

    return properties


def attribute_names(cls: type) -> list[str]:
    """Extract attribute names from a class (Pydantic, dataclass, or annotated plain)."""
    if is_pydantic_model(cls):
        return list(cls.model_fields.keys())  # type: ignore[attr-defined]
    if dataclasses.is_dataclass(cls):
        return [f.name for f in dataclasses.fields(cls)]
    return [
        name
        for name in annotated_hints(cls)
        if not name.startswith("_")
    ]
