"""Sentence-to-entity materializer."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any, Generic, TypeVar

from tik_objects.core.exceptions import MappingDeclarationError
from tik_objects.core.sentence import Sentence
from tik_objects.mapping.cache import EntityMetadataCache, default_cache
from tik_objects.mapping.metadata import EntityMetadata, PropertyAccessor

T = TypeVar("T")


def _read_value(sentence: Sentence, prop: PropertyAccessor) -> str | None:
    """Read a field value (or its default) from the sentence.

    None means the field is absent and has no declared default: the
    attribute keeps the value the entity was created with.
    """
    if prop.is_mandatory:
        return sentence.get_response_field(prop.field_name)
    if prop.default_value is None:
        return sentence.get(prop.field_name)
    return sentence.get_response_field_or_default(prop.field_name, prop.default_value)


def _create(metadata: EntityMetadata) -> Any:
    try:
        return metadata.create()
    except TypeError as e:
        raise MappingDeclarationError(
            f"{metadata.entity_type.__name__} cannot be constructed without arguments: {e}"
        ) from e


class EntityMaterializer(Generic[T]):
    """Builds entities of one type from response sentences.

    For each accessor, in metadata order: mandatory fields must be present
    (MissingFieldError otherwise); optional fields fall back to their
    declared default literal, or keep the value the entity was created with
    when none is declared. Malformed values raise ValueConversionError.

    Args:
        entity_type: The class to construct.
        cache: Metadata cache to use. Defaults to the process-wide cache.
    """

    def __init__(
        self,
        entity_type: type[T],
        cache: EntityMetadataCache | None = None,
    ) -> None:
        self._entity_type = entity_type
        self._cache = cache if cache is not None else default_cache()

    @property
    def metadata(self) -> EntityMetadata:
        return self._cache.get_metadata(self._entity_type)

    def map_one(self, sentence: Sentence) -> T:
        """Materialize a single sentence."""
        metadata = self.metadata
        result = _create(metadata)
        for prop in metadata.properties:
            raw = _read_value(sentence, prop)
            if raw is not None:
                prop.set_entity_value(result, raw)
        return result  # type: ignore[no-any-return]

    def map_many(self, sentences: Iterable[Sentence]) -> list[T]:
        """Materialize all sentences via map_one, preserving order."""
        return [self.map_one(sentence) for sentence in sentences]


def materialize(
    entity_type: type[T],
    sentence: Sentence,
    *,
    cache: EntityMetadataCache | None = None,
) -> T:
    """Build one *entity_type* instance from one sentence."""
    return EntityMaterializer(entity_type, cache).map_one(sentence)
