"""Load strategies.

Each strategy runs a Command and materializes its data rows into entities
of the requested type:

    load_list               every row, in arrival order
    load_single             exactly one row
    load_single_or_default  zero or one row
    load_with_duration      rows collected for a limited time
    load_async              rows streamed to callbacks from a worker thread

The aload_* coroutines run the blocking strategies in a thread for asyncio
callers.
"""

from __future__ import annotations

import asyncio
import logging
import math
from collections.abc import Callable
from typing import Any, TypeVar

from tik_objects.command.protocol import Command
from tik_objects.core.exceptions import (
    ArgumentError,
    CardinalityError,
    MappingError,
    TrapError,
)
from tik_objects.core.sentence import ReSentence, TrapSentence
from tik_objects.mapping.cache import EntityMetadataCache
from tik_objects.mapping.materializer import EntityMaterializer

T = TypeVar("T")

logger = logging.getLogger(__name__)


def _require(value: Any, argument: str) -> None:
    if value is None:
        raise ArgumentError(argument)


def _check_duration(duration_sec: Any) -> None:
    valid = (
        isinstance(duration_sec, (int, float))
        and not isinstance(duration_sec, bool)
        and math.isfinite(duration_sec)
        and duration_sec > 0
    )
    if not valid:
        raise ArgumentError(
            "duration_sec", f"must be a positive number of seconds, got {duration_sec!r}"
        )


# --- Synchronous ---


def load_list(
    entity_type: type[T],
    command: Command,
    *,
    cache: EntityMetadataCache | None = None,
) -> list[T]:
    """Run *command* and materialize every returned row.

    Returns:
        Entities in arrival order; an empty list if no rows were returned.

    Raises:
        ArgumentError: If command is None (before any I/O).
        MissingFieldError: If a row lacks a mandatory field.
    """
    _require(command, "command")
    rows = command.execute_list()
    return EntityMaterializer(entity_type, cache).map_many(rows)


def load_single(
    entity_type: type[T],
    command: Command,
    *,
    cache: EntityMetadataCache | None = None,
) -> T:
    """Load exactly one entity.

    Raises CardinalityError on zero or more than one row.
    """
    entities = load_list(entity_type, command, cache=cache)
    if len(entities) != 1:
        raise CardinalityError(command, "exactly one", len(entities))
    return entities[0]


def load_single_or_default(
    entity_type: type[T],
    command: Command,
    *,
    cache: EntityMetadataCache | None = None,
) -> T | None:
    """Load one entity, or None if no row matched.

    Raises CardinalityError on more than one row.
    """
    entities = load_list(entity_type, command, cache=cache)
    if len(entities) > 1:
        raise CardinalityError(command, "zero or one", len(entities))
    return entities[0] if entities else None


def load_with_duration(
    entity_type: type[T],
    command: Command,
    duration_sec: float,
    *,
    cache: EntityMetadataCache | None = None,
) -> list[T]:
    """Collect rows for about *duration_sec* seconds, then cancel and return them.

    The deadline is soft: it governs when cancellation is requested, not
    when this call returns.

    Raises:
        ArgumentError: If command is None or duration_sec is not a positive
            finite number (before any I/O).
    """
    _require(command, "command")
    _check_duration(duration_sec)
    rows = command.execute_list_with_duration(duration_sec)
    return EntityMaterializer(entity_type, cache).map_many(rows)


# --- Asynchronous ---


def load_async(
    entity_type: type[T],
    command: Command,
    on_item: Callable[[T], Any],
    on_error: Callable[[Exception], Any] | None = None,
    on_done: Callable[[], Any] | None = None,
    *,
    cache: EntityMetadataCache | None = None,
) -> Command:
    """Start *command* in the background and stream entities to callbacks.

    Returns control immediately. All callbacks run on the command's worker
    thread: on_item once per data row (already materialized), on_error
    once per trap row (as TrapError) and once per row that cannot be
    materialized, on_done once after everything else if the stream
    completes. Traps are dropped when on_error is omitted.

    Exceptions raised by the callbacks are not handled here; the command's
    callback error policy decides whether the stream continues.

    Cancel with ``command.cancel()`` or ``command.cancel_and_join()``.

    Returns:
        The running command.

    Raises:
        ArgumentError: If command or on_item is None (nothing is started).
    """
    _require(command, "command")
    _require(on_item, "on_item")
    materializer: EntityMaterializer[T] = EntityMaterializer(entity_type, cache)

    def on_row(sentence: ReSentence) -> None:
        try:
            item = materializer.map_one(sentence)
        except MappingError as e:
            if on_error is None:
                raise
            on_error(e)
            return
        on_item(item)

    def on_trap(sentence: TrapSentence) -> None:
        if on_error is None:
            logger.debug("%s: dropped trap %r", command.command_text, sentence.message)
            return
        on_error(TrapError(command, sentence))

    def on_stream_done() -> None:
        if on_done is not None:
            on_done()

    command.execute_async(on_row, on_trap, on_stream_done)
    return command


# --- Coroutine wrappers ---


async def aload_list(
    entity_type: type[T],
    command: Command,
    *,
    cache: EntityMetadataCache | None = None,
) -> list[T]:
    """Coroutine variant of load_list."""
    _require(command, "command")
    return await asyncio.to_thread(load_list, entity_type, command, cache=cache)


async def aload_single(
    entity_type: type[T],
    command: Command,
    *,
    cache: EntityMetadataCache | None = None,
) -> T:
    """Coroutine variant of load_single."""
    _require(command, "command")
    return await asyncio.to_thread(load_single, entity_type, command, cache=cache)


async def aload_single_or_default(
    entity_type: type[T],
    command: Command,
    *,
    cache: EntityMetadataCache | None = None,
) -> T | None:
    """Coroutine variant of load_single_or_default."""
    _require(command, "command")
    return await asyncio.to_thread(load_single_or_default, entity_type, command, cache=cache)


async def aload_with_duration(
    entity_type: type[T],
    command: Command,
    duration_sec: float,
    *,
    cache: EntityMetadataCache | None = None,
) -> list[T]:
    """Coroutine variant of load_with_duration."""
    _require(command, "command")
    _check_duration(duration_sec)
    return await asyncio.to_thread(
        load_with_duration, entity_type, command, duration_sec, cache=cache
    )
