"""StreamCommand - Command implementation over a SentenceSource.

Synchronous runs read the source on the calling thread. Asynchronous
runs read it on one worker thread owned by the command, through an
EventDispatcher, so row/trap/done handlers fire in arrival order on that
thread.
"""

from __future__ import annotations

import dataclasses
import logging
import threading
from collections.abc import Callable, Iterator
from typing import Any

from tik_objects.command.protocol import SentenceSource
from tik_objects.core.config import CommandConfig
from tik_objects.core.enums import LoadState
from tik_objects.core.exceptions import LoadStateError, TrapError
from tik_objects.core.sentence import DoneSentence, ReSentence, Sentence, TrapSentence
from tik_objects.streaming.dispatcher import EventDispatcher
from tik_objects.streaming.events import Event, event_for

logger = logging.getLogger(__name__)


class StreamCommand:
    """One command bound to the source of its response sentences.

    Args:
        command_text: Command path, e.g. '/interface/print'.
        source: Where response sentences come from.
        config: Execution settings. Defaults to CommandConfig().
    """

    def __init__(
        self,
        command_text: str,
        source: SentenceSource,
        config: CommandConfig | None = None,
    ) -> None:
        self._command_text = command_text
        self._source = source
        self._config = config or CommandConfig()
        self._lock = threading.Lock()
        self._dispatcher: EventDispatcher | None = None
        self._worker: threading.Thread | None = None

    def __repr__(self) -> str:
        return f"StreamCommand({self._command_text!r})"

    @property
    def command_text(self) -> str:
        return self._command_text

    @property
    def config(self) -> CommandConfig:
        return self._config

    @property
    def state(self) -> LoadState:
        """State of the asynchronous run (IDLE if none was started)."""
        if self._dispatcher is None:
            return LoadState.IDLE
        return self._dispatcher.state

    @property
    def exception(self) -> BaseException | None:
        """The exception that faulted the asynchronous run, if any."""
        if self._dispatcher is None:
            return None
        return self._dispatcher.exception

    @property
    def is_running(self) -> bool:
        worker = self._worker
        return worker is not None and worker.is_alive()

    # --- Synchronous ---

    def execute_list(self) -> list[ReSentence]:
        """Run the command and return every data row.

        Raises:
            TrapError: If the device returns a trap row.
        """
        rows = self._collect(cancel_requested=lambda: False)
        logger.debug("%s returned %d rows", self._command_text, len(rows))
        return rows

    def execute_list_with_duration(self, duration_sec: float) -> list[ReSentence]:
        """Collect rows for about *duration_sec*, then cancel and return them.

        The deadline is soft: cancellation is requested when it expires and
        the call returns once the device acknowledges it. The 'interrupted'
        trap caused by that cancellation is not an error.
        """
        deadline_hit = threading.Event()

        def on_deadline() -> None:
            deadline_hit.set()
            logger.debug(
                "%s: duration of %ss elapsed, cancelling", self._command_text, duration_sec
            )
            self._source.cancel()

        timer = threading.Timer(duration_sec, on_deadline)
        timer.daemon = True
        timer.start()
        try:
            rows = self._collect(cancel_requested=deadline_hit.is_set)
        finally:
            timer.cancel()
        logger.debug(
            "%s returned %d rows within %ss", self._command_text, len(rows), duration_sec
        )
        return rows

    def _collect(self, cancel_requested: Callable[[], bool]) -> list[ReSentence]:
        rows: list[ReSentence] = []
        for sentence in self._stamped(self._source.sentences()):
            if isinstance(sentence, ReSentence):
                rows.append(sentence)
            elif isinstance(sentence, TrapSentence):
                if cancel_requested() and self._is_interrupted(sentence):
                    continue
                raise TrapError(self, sentence)
            elif isinstance(sentence, DoneSentence):
                break
        return rows

    # --- Asynchronous ---

    def execute_async(
        self,
        on_row: Callable[[ReSentence], Any],
        on_trap: Callable[[TrapSentence], Any],
        on_done: Callable[[], Any],
    ) -> None:
        """Start reading on a worker thread and return immediately.

        Raises:
            LoadStateError: If an asynchronous run was already started.
        """
        with self._lock:
            if self._dispatcher is not None:
                raise LoadStateError(self._dispatcher.state.value, "start")
            dispatcher = EventDispatcher(
                on_row,
                on_trap,
                on_done,
                policy=self._config.callback_error_policy,
                name=self._command_text,
            )
            worker = threading.Thread(
                target=self._run_worker,
                args=(dispatcher,),
                name=f"{self._config.worker_name}:{self._command_text}",
                daemon=self._config.daemon_worker,
            )
            self._dispatcher = dispatcher
            worker.start()
            self._worker = worker
        logger.debug("%s: started worker %s", self._command_text, worker.name)

    def _run_worker(self, dispatcher: EventDispatcher) -> None:
        dispatcher.run(self._events())

    def _events(self) -> Iterator[Event]:
        for sentence in self._stamped(self._source.sentences()):
            yield event_for(sentence)

    def cancel(self) -> None:
        """Signal cancellation and return; the worker stops soon after.

        Repeated calls, and calls after the run finished, do nothing.
        """
        dispatcher = self._dispatcher
        if dispatcher is not None:
            if dispatcher.finished or dispatcher.cancel_requested:
                return
            dispatcher.cancel()
        self._source.cancel()
        logger.debug("%s: cancel requested", self._command_text)

    def cancel_and_join(self, timeout: float | None = None) -> bool:
        """Signal cancellation and block until the worker has stopped.

        Called from inside a callback (on the worker itself) it only signals.

        Returns:
            True if the worker is no longer running.
        """
        self.cancel()
        return self.wait(timeout)

    def wait(self, timeout: float | None = None) -> bool:
        """Block until the asynchronous run finishes.

        Returns:
            True if the worker is no longer running.
        """
        with self._lock:
            worker = self._worker
        if worker is None:
            return True
        if worker is threading.current_thread():
            return False
        if timeout is None:
            timeout = self._config.join_timeout
        worker.join(timeout)
        return not worker.is_alive()

    # --- Helpers ---

    def _stamped(self, sentences: Iterator[Sentence]) -> Iterator[Sentence]:
        for sentence in sentences:
            if sentence.command is None:
                sentence = dataclasses.replace(sentence, command=self)
            yield sentence

    def _is_interrupted(self, trap: TrapSentence) -> bool:
        return trap.category == self._config.interrupted_category
