"""Command execution configuration.

CommandConfig is a Pydantic model so values coming from settings files or
environment dictionaries are validated before a command is built.
"""

from __future__ import annotations

from pydantic import BaseModel, field_validator

from tik_objects.core.enums import CallbackErrorPolicy


class CommandConfig(BaseModel):
    """Configuration for StreamCommand execution."""

    callback_error_policy: CallbackErrorPolicy = CallbackErrorPolicy.ABORT
    join_timeout: float | None = None
    worker_name: str = "tik-load"
    daemon_worker: bool = True
    interrupted_category: str = "2"

    @field_validator("join_timeout")
    @classmethod
    def _check_join_timeout(cls, value: float | None) -> float | None:
        if value is not None and value < 0:
            raise ValueError("join_timeout must be non-negative")
        return value
