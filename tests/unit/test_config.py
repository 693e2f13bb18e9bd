"""Unit tests for CommandConfig."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from tik_objects.core.config import CommandConfig
from tik_objects.core.enums import CallbackErrorPolicy


class TestCommandConfig:
    def test_defaults(self) -> None:
        config = CommandConfig()
        assert config.callback_error_policy is CallbackErrorPolicy.ABORT
        assert config.join_timeout is None
        assert config.worker_name == "tik-load"
        assert config.daemon_worker is True
        assert config.interrupted_category == "2"

    def test_policy_from_string(self) -> None:
        config = CommandConfig(callback_error_policy="ignore")
        assert config.callback_error_policy is CallbackErrorPolicy.IGNORE

    def test_unknown_policy(self) -> None:
        with pytest.raises(ValidationError):
            CommandConfig(callback_error_policy="retry")

    def test_negative_join_timeout(self) -> None:
        with pytest.raises(ValidationError, match="join_timeout"):
            CommandConfig(join_timeout=-1)

    def test_zero_join_timeout_allowed(self) -> None:
        assert CommandConfig(join_timeout=0).join_timeout == 0

    def test_from_mapping(self) -> None:
        config = CommandConfig.model_validate({"join_timeout": "2.5", "worker_name": "poller"})
        assert config.join_timeout == 2.5
        assert config.worker_name == "poller"
