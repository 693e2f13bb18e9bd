"""tik-objects - typed entity loading for device-management API responses."""

from __future__ import annotations

from tik_objects.command.protocol import Command, SentenceSource
from tik_objects.command.source import QueueSentenceSource
from tik_objects.command.stream import StreamCommand
from tik_objects.core.config import CommandConfig
from tik_objects.core.enums import CallbackErrorPolicy, LoadState, SentenceKind
from tik_objects.core.exceptions import (
    ArgumentError,
    CardinalityError,
    CommandError,
    EntityNotMappedError,
    ExecutionError,
    LoadStateError,
    MappingDeclarationError,
    MappingError,
    MissingFieldError,
    SourceClosedError,
    TikObjectsError,
    TrapError,
    ValueConversionError,
)
from tik_objects.core.load import (
    aload_list,
    aload_single,
    aload_single_or_default,
    aload_with_duration,
    load_async,
    load_list,
    load_single,
    load_single_or_default,
    load_with_duration,
)
from tik_objects.core.sentence import (
    DoneSentence,
    ReSentence,
    Sentence,
    TrapSentence,
    parse_sentence,
)
from tik_objects.mapping.builder import entity
from tik_objects.mapping.cache import EntityMetadataCache, get_metadata
from tik_objects.mapping.declaration import TikField
from tik_objects.mapping.materializer import EntityMaterializer, materialize

__all__ = [
    # Load strategies
    "load_list",
    "load_single",
    "load_single_or_default",
    "load_with_duration",
    "load_async",
    "aload_list",
    "aload_single",
    "aload_single_or_default",
    "aload_with_duration",
    # Mapping
    "TikField",
    "entity",
    "EntityMetadataCache",
    "get_metadata",
    "EntityMaterializer",
    "materialize",
    # Sentences
    "Sentence",
    "ReSentence",
    "TrapSentence",
    "DoneSentence",
    "parse_sentence",
    # Commands
    "Command",
    "SentenceSource",
    "QueueSentenceSource",
    "StreamCommand",
    "CommandConfig",
    # Enums
    "LoadState",
    "CallbackErrorPolicy",
    "SentenceKind",
    # Exceptions
    "TikObjectsError",
    "ArgumentError",
    "MappingError",
    "MissingFieldError",
    "ValueConversionError",
    "EntityNotMappedError",
    "MappingDeclarationError",
    "ExecutionError",
    "CardinalityError",
    "LoadStateError",
    "CommandError",
    "TrapError",
    "SourceClosedError",
]
