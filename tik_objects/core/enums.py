"""Enumerations shared across the package."""

from __future__ import annotations

from enum import Enum


class SentenceKind(Enum):
    """Reply tag of a response sentence."""

    RE = "!re"
    TRAP = "!trap"
    DONE = "!done"
    FATAL = "!fatal"


class LoadState(Enum):
    """Lifecycle of a single asynchronous load."""

    IDLE = "idle"
    RUNNING = "running"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    FAULTED = "faulted"


class CallbackErrorPolicy(Enum):
    """What the worker does when a consumer callback raises."""

    ABORT = "abort"
    IGNORE = "ignore"
