"""Shared test fixtures."""

from __future__ import annotations

from collections.abc import Iterable

import pytest

from tik_objects.command.source import QueueSentenceSource
from tik_objects.command.stream import StreamCommand
from tik_objects.core.config import CommandConfig
from tik_objects.mapping.cache import EntityMetadataCache


@pytest.fixture
def cache() -> EntityMetadataCache:
    """Fresh metadata cache, isolated from the process-wide one."""
    return EntityMetadataCache()


@pytest.fixture
def make_command():
    """Helper to build a StreamCommand over a pre-filled, closed source.

    Usage:
        make_command([["!re", "=name=ether1"], ["!done"]])
    """

    def _make(
        rows: Iterable[list[str]],
        command_text: str = "/interface/print",
        config: CommandConfig | None = None,
    ) -> StreamCommand:
        return StreamCommand(command_text, QueueSentenceSource.from_rows(rows), config)

    return _make
