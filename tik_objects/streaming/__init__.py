"""Streaming layer - typed events and their dispatcher."""

from __future__ import annotations

from tik_objects.streaming.dispatcher import EventDispatcher
from tik_objects.streaming.events import DoneEvent, Event, ResultEvent, TrapEvent, event_for

__all__ = [
    "EventDispatcher",
    "Event",
    "ResultEvent",
    "TrapEvent",
    "DoneEvent",
    "event_for",
]
