"""Single-consumer event dispatcher.

The dispatcher owns the lifecycle of one asynchronous load:

    IDLE -> RUNNING -> COMPLETED | CANCELLED | FAULTED

It invokes the row/trap handlers in channel order and the done handler
exactly once, after every other handler has returned. It never holds a
lock while a handler runs, so handlers may call cancel().
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Iterable
from typing import Any

from tik_objects.core.enums import CallbackErrorPolicy, LoadState
from tik_objects.core.exceptions import LoadStateError
from tik_objects.core.sentence import ReSentence, TrapSentence
from tik_objects.streaming.events import DoneEvent, Event, ResultEvent, TrapEvent

logger = logging.getLogger(__name__)

_TERMINAL_STATES = frozenset({LoadState.COMPLETED, LoadState.CANCELLED, LoadState.FAULTED})


class EventDispatcher:
    """Dispatches one channel of events to row/trap/done handlers.

    Args:
        on_row: Called with every ReSentence.
        on_trap: Called with every TrapSentence.
        on_done: Called once when the stream completes normally.
        policy: What to do when a handler raises.
        name: Label used in log records.
    """

    def __init__(
        self,
        on_row: Callable[[ReSentence], Any],
        on_trap: Callable[[TrapSentence], Any],
        on_done: Callable[[], Any],
        *,
        policy: CallbackErrorPolicy = CallbackErrorPolicy.ABORT,
        name: str = "load",
    ) -> None:
        self._on_row = on_row
        self._on_trap = on_trap
        self._on_done = on_done
        self._policy = policy
        self._name = name
        self._cancel_requested = threading.Event()
        self._state_lock = threading.Lock()
        self._state = LoadState.IDLE
        self.exception: BaseException | None = None

    @property
    def state(self) -> LoadState:
        return self._state

    @property
    def cancel_requested(self) -> bool:
        return self._cancel_requested.is_set()

    @property
    def finished(self) -> bool:
        return self._state in _TERMINAL_STATES

    def cancel(self) -> None:
        """Request that no further handler is invoked."""
        self._cancel_requested.set()
        with self._state_lock:
            if self._state is LoadState.IDLE:
                self._state = LoadState.CANCELLED

    def run(self, events: Iterable[Event]) -> LoadState:
        """Consume *events* until a done event, cancellation, or a fault.

        Returns:
            The terminal state.

        Raises:
            LoadStateError: If the dispatcher was already started.
        """
        with self._state_lock:
            if self._state is LoadState.CANCELLED:
                logger.debug("%s: cancelled before start", self._name)
                return self._state
            if self._state is not LoadState.IDLE:
                raise LoadStateError(self._state.value, "run")
            self._state = LoadState.RUNNING

        try:
            for event in events:
                if self._cancel_requested.is_set():
                    break
                if isinstance(event, DoneEvent):
                    return self._complete()
                if not self._dispatch(event):
                    return self._finish(LoadState.FAULTED)
        except Exception as e:
            # The channel itself failed (lost connection, decoding error).
            if self._cancel_requested.is_set():
                logger.debug("%s: channel closed after cancel: %s", self._name, e)
                return self._finish(LoadState.CANCELLED)
            logger.exception("%s: event channel failed", self._name)
            self.exception = e
            self._deliver_channel_failure(e)
            return self._finish(LoadState.FAULTED)

        if self._cancel_requested.is_set():
            return self._finish(LoadState.CANCELLED)
        # Channel ended without a done row: the stream is over all the same.
        return self._complete()

    def _dispatch(self, event: Event) -> bool:
        if isinstance(event, ResultEvent):
            return self._invoke(self._on_row, event.sentence)
        if isinstance(event, TrapEvent):
            return self._invoke(self._on_trap, event.sentence)
        raise TypeError(f"Unsupported event: {event!r}")

    def _complete(self) -> LoadState:
        if self._cancel_requested.is_set():
            return self._finish(LoadState.CANCELLED)
        if not self._invoke(self._on_done):
            return self._finish(LoadState.FAULTED)
        return self._finish(LoadState.COMPLETED)

    def _invoke(self, handler: Callable[..., Any], *args: Any) -> bool:
        """Run one handler. Returns False if the stream must stop."""
        try:
            handler(*args)
        except Exception as e:
            if self._policy is CallbackErrorPolicy.IGNORE:
                logger.warning("%s: callback raised, continuing", self._name, exc_info=True)
                return True
            logger.exception("%s: callback raised, aborting stream", self._name)
            self.exception = e
            return False
        return True

    def _deliver_channel_failure(self, error: Exception) -> None:
        trap = TrapSentence(fields={"message": str(error)}, fatal=True)
        self._invoke(self._on_trap, trap)

    def _finish(self, state: LoadState) -> LoadState:
        with self._state_lock:
            self._state = state
        logger.debug("%s: finished in state %s", self._name, state.value)
        return state
