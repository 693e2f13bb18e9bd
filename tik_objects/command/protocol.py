"""Command and sentence source protocols.

The load strategies only talk to a Command. How a command reaches the
device (wire encoding, login, tagging) is the business of the
SentenceSource behind it.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator
from typing import Any, Protocol, runtime_checkable

from tik_objects.core.sentence import ReSentence, Sentence, TrapSentence


@runtime_checkable
class SentenceSource(Protocol):
    """Blocking stream of response sentences for one command run."""

    def sentences(self) -> Iterator[Sentence]:
        """Yield sentences as they arrive. Ends after the done sentence."""
        ...

    def cancel(self) -> None:
        """Ask the remote side to stop the running command."""
        ...


@runtime_checkable
class Command(Protocol):
    """Executable command protocol consumed by the load strategies."""

    @property
    def command_text(self) -> str:
        """Command path, e.g. '/interface/print'. Used in error messages."""
        ...

    def execute_list(self) -> list[ReSentence]:
        """Run the command and return every data row."""
        ...

    def execute_list_with_duration(self, duration_sec: float) -> list[ReSentence]:
        """Collect data rows for about *duration_sec*, then cancel and return them."""
        ...

    def execute_async(
        self,
        on_row: Callable[[ReSentence], Any],
        on_trap: Callable[[TrapSentence], Any],
        on_done: Callable[[], Any],
    ) -> None:
        """Start the command on a worker thread and return immediately."""
        ...

    def cancel(self) -> None:
        """Request cancellation and return."""
        ...

    def cancel_and_join(self, timeout: float | None = None) -> bool:
        """Request cancellation and wait for the worker to stop."""
        ...
