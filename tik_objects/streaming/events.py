"""Typed stream events.

A running command turns every response sentence into one event on its
channel. The dispatcher consumes the channel in order.
"""

from __future__ import annotations

from dataclasses import dataclass

from tik_objects.core.sentence import DoneSentence, ReSentence, Sentence, TrapSentence


@dataclass(frozen=True)
class ResultEvent:
    """A data row arrived."""

    sentence: ReSentence


@dataclass(frozen=True)
class TrapEvent:
    """An error row arrived."""

    sentence: TrapSentence


@dataclass(frozen=True)
class DoneEvent:
    """The command finished. Always the last event of a channel."""

    sentence: DoneSentence | None = None


Event = ResultEvent | TrapEvent | DoneEvent


def event_for(sentence: Sentence) -> Event:
    """Wrap a sentence into its event type."""
    if isinstance(sentence, ReSentence):
        return ResultEvent(sentence)
    if isinstance(sentence, TrapSentence):
        return TrapEvent(sentence)
    if isinstance(sentence, DoneSentence):
        return DoneEvent(sentence)
    raise TypeError(f"Unsupported sentence type: {type(sentence).__name__}")
