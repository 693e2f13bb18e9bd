"""Mapper protocol.

All mappers implement this interface. The load strategies call map_one
for every streamed row and map_many for list results.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Protocol, TypeVar, runtime_checkable

from tik_objects.core.sentence import Sentence

T = TypeVar("T", covariant=True)


@runtime_checkable
class Mapper(Protocol[T]):
    """Base mapper protocol."""

    def map_one(self, sentence: Sentence) -> T:
        """Map a single sentence to a target object."""
        ...

    def map_many(self, sentences: Iterable[Sentence]) -> list[T]:
        """Map multiple sentences to a list of target objects."""
        ...
