"""tik-objects exception hierarchy.

Every error raised by the library derives from TikObjectsError. Errors
coming from collaborators are chained, never re-raised bare.
"""

from __future__ import annotations

from typing import Any


def _describe(command: Any) -> str:
    if command is None:
        return "<unknown command>"
    text = getattr(command, "command_text", None)
    if isinstance(text, str):
        return text
    return str(command)


class TikObjectsError(Exception):
    """Base exception for all tik-objects errors."""


class ArgumentError(TikObjectsError, ValueError):
    """Raised when a required argument is missing or invalid."""

    def __init__(self, argument: str, detail: str = "must not be None") -> None:
        self.argument = argument
        super().__init__(f"Argument '{argument}' {detail}")


# --- Mapping ---


class MappingError(TikObjectsError):
    """Base for mapping errors."""


class MissingFieldError(MappingError):
    """Raised when a mandatory field is absent from a response sentence."""

    def __init__(self, field_name: str, command: Any = None) -> None:
        self.field_name = field_name
        self.command = command
        super().__init__(
            f"Missing mandatory field '{field_name}' in response of {_describe(command)}"
        )


class ValueConversionError(MappingError):
    """Raised when a present field value cannot be converted to its attribute type."""

    def __init__(self, field_name: str, value: str, target: str) -> None:
        self.field_name = field_name
        self.value = value
        self.target = target
        super().__init__(f"Cannot convert field '{field_name}' value {value!r} to {target}")


class EntityNotMappedError(MappingError):
    """Raised when an entity type declares no mapped fields."""

    def __init__(self, entity_type: type) -> None:
        self.entity_type = entity_type
        super().__init__(f"No field mappings declared for {entity_type.__name__}")


class MappingDeclarationError(MappingError):
    """Raised when a mapping declaration is inconsistent."""


# --- Execution ---


class ExecutionError(TikObjectsError):
    """Base for load execution errors."""


class CardinalityError(ExecutionError):
    """Raised when a single-entity load sees an unexpected row count."""

    def __init__(self, command: Any, expected: str, actual: int) -> None:
        self.command = command
        self.expected = expected
        self.actual = actual
        super().__init__(f"{_describe(command)} returned {actual} rows (expected {expected})")


class LoadStateError(ExecutionError):
    """Raised on invalid load state transitions."""

    def __init__(self, current_state: str, attempted_action: str) -> None:
        self.current_state = current_state
        self.attempted_action = attempted_action
        super().__init__(f"Cannot {attempted_action} load in state '{current_state}'")


# --- Command ---


class CommandError(TikObjectsError):
    """Base for errors reported by the remote side."""


class TrapError(CommandError):
    """A '!trap' row returned by the device, wrapped with its command context."""

    def __init__(self, command: Any, trap: Any) -> None:
        self.command = command
        self.trap = trap
        self.category: str | None = trap.category
        self.message: str = trap.message
        super().__init__(f"{_describe(command)} trapped: {self.message} (category={self.category})")


class SourceClosedError(CommandError):
    """Raised when a sentence is pushed to a source that is already closed."""

    def __init__(self, reason: str = "closed") -> None:
        self.reason = reason
        super().__init__(f"Cannot push to a {reason} sentence source")
