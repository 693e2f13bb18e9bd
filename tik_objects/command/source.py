"""In-process sentence source.

QueueSentenceSource is fed by a producer (a protocol reader thread, a
test, a replay file) and consumed by exactly one StreamCommand.
"""

from __future__ import annotations

import logging
import queue
import threading
from collections.abc import Iterable, Iterator
from typing import Any

from tik_objects.core.exceptions import SourceClosedError
from tik_objects.core.sentence import DoneSentence, Sentence, TrapSentence, parse_sentence

logger = logging.getLogger(__name__)

_CLOSED = object()


class QueueSentenceSource:
    """Thread-safe, single-consumer sentence queue.

    Args:
        interrupted_category: Trap category emitted when the command is
            cancelled (RouterOS uses category 2, message 'interrupted').
    """

    def __init__(self, interrupted_category: str = "2") -> None:
        self._queue: queue.Queue[Any] = queue.Queue()
        self._interrupted_category = interrupted_category
        self._lock = threading.Lock()
        self._closed = False
        self._cancelled = False
        self.cancel_count = 0

    @classmethod
    def from_rows(cls, rows: Iterable[Iterable[str] | Sentence]) -> QueueSentenceSource:
        """Build a closed source pre-filled with *rows* (word lists or sentences)."""
        source = cls()
        for row in rows:
            if isinstance(row, Sentence):
                source.push_sentence(row)
            else:
                source.push(row)
        source.close()
        return source

    @property
    def closed(self) -> bool:
        """True once the stream has ended; further pushes are rejected."""
        return self._closed

    def push(self, words: Iterable[str]) -> None:
        """Parse a word list and enqueue it."""
        self.push_sentence(parse_sentence(words))

    def push_sentence(self, sentence: Sentence) -> None:
        """Enqueue one sentence.

        Raises:
            SourceClosedError: If the source was closed, finished with a done
                sentence, or cancelled.
        """
        with self._lock:
            if self._closed:
                raise SourceClosedError("cancelled" if self._cancelled else "closed")
            self._queue.put(sentence)
            if isinstance(sentence, DoneSentence):
                self._closed = True

    def close(self) -> None:
        """End the stream without a done sentence."""
        with self._lock:
            if not self._closed:
                self._closed = True
                self._queue.put(_CLOSED)

    def cancel(self) -> None:
        """Emulate the device's reply to a cancel request."""
        with self._lock:
            self.cancel_count += 1
            if self._closed:
                return
            self._closed = True
            self._cancelled = True
            self._queue.put(
                TrapSentence(
                    fields={"category": self._interrupted_category, "message": "interrupted"}
                )
            )
            self._queue.put(DoneSentence())
        logger.debug("Sentence source cancelled")

    def sentences(self) -> Iterator[Sentence]:
        while True:
            item = self._queue.get()
            if item is _CLOSED:
                return
            yield item
            if isinstance(item, DoneSentence):
                return
