"""Entity metadata cache - builds and caches field bindings per entity type.

Metadata is built once per type on first request, from an explicitly
registered mapping table or from TikField annotations on the class, and
is immutable afterwards for the lifetime of the process.
"""

from __future__ import annotations

import logging
import threading

from tik_objects.core.exceptions import EntityNotMappedError, MappingDeclarationError
from tik_objects.mapping.declaration import declared_properties, entity_factory
from tik_objects.mapping.metadata import EntityMetadata

logger = logging.getLogger(__name__)


class EntityMetadataCache:
    """Thread-safe per-type cache of EntityMetadata.

    Reads of an already-built type take no lock. Construction is serialized
    under a lock with a second lookup inside it, so racing first calls for
    the same type all return the same object.
    """

    def __init__(self) -> None:
        self._metadata: dict[type, EntityMetadata] = {}
        self._lock = threading.Lock()

    def get_metadata(self, entity_type: type) -> EntityMetadata:
        """Return the metadata of *entity_type*, building it on first use.

        Raises:
            EntityNotMappedError: If the type declares no mapped fields.
        """
        metadata = self._metadata.get(entity_type)
        if metadata is not None:
            return metadata

        with self._lock:
            metadata = self._metadata.get(entity_type)
            if metadata is None:
                metadata = self._build(entity_type)
                self._metadata[entity_type] = metadata
            return metadata

    def register(self, metadata: EntityMetadata) -> None:
        """Store an explicitly built mapping table.

        Registering an equal table twice is a no-op; replacing a table
        already in use is rejected.
        """
        with self._lock:
            existing = self._metadata.get(metadata.entity_type)
            if existing is not None:
                if existing == metadata:
                    return
                raise MappingDeclarationError(
                    f"Metadata for {metadata.entity_type.__name__} is already built"
                )
            self._metadata[metadata.entity_type] = metadata
        logger.debug(
            "Registered mapping for %s (%d properties)",
            metadata.entity_type.__name__,
            len(metadata.properties),
        )

    def has(self, entity_type: type) -> bool:
        """Check if metadata for a type is already built."""
        return entity_type in self._metadata

    @property
    def entity_types(self) -> list[type]:
        """Types with built metadata, sorted by name."""
        return sorted(self._metadata, key=lambda t: t.__qualname__)

    def clear(self) -> None:
        """Drop every cached entry. Intended for tests."""
        with self._lock:
            self._metadata.clear()

    def __len__(self) -> int:
        return len(self._metadata)

    @staticmethod
    def _build(entity_type: type) -> EntityMetadata:
        properties = declared_properties(entity_type)
        if not properties:
            raise EntityNotMappedError(entity_type)
        logger.debug(
            "Built metadata for %s: %s",
            entity_type.__name__,
            [p.field_name for p in properties],
        )
        return EntityMetadata(
            entity_type=entity_type,
            properties=tuple(properties),
            factory=entity_factory(entity_type),
        )


_DEFAULT_CACHE = EntityMetadataCache()


def default_cache() -> EntityMetadataCache:
    """The process-wide cache used when no cache is passed explicitly."""
    return _DEFAULT_CACHE


def get_metadata(entity_type: type) -> EntityMetadata:
    """Shortcut for ``default_cache().get_metadata(entity_type)``."""
    return _DEFAULT_CACHE.get_metadata(entity_type)
