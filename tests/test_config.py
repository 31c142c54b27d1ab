"""Tests for the shell configuration object."""

import dataclasses

import pytest

from xsh.config import ShellConfig
from xsh.logging import DEFAULT_CAPACITY, LogLevel


class TestShellConfig:
    """Verify defaults and validation."""

    def test_defaults(self) -> None:
        """Defaults should match the traditional table sizes."""
        config = ShellConfig()
        assert config.max_env_vars == 100
        assert config.max_stages == 10
        assert config.prompt == "xsh# "
        assert config.exit_keywords == ("exit", "quit")
        assert config.path_variable == "PATH"
        assert config.log_capacity == DEFAULT_CAPACITY
        assert config.log_level is LogLevel.INFO

    def test_is_frozen(self) -> None:
        """A config cannot be mutated after creation."""
        config = ShellConfig()
        with pytest.raises(dataclasses.FrozenInstanceError):
            config.max_args = 5  # type: ignore[misc]

    @pytest.mark.parametrize("field", ["max_env_vars", "max_args", "max_stages", "log_capacity"])
    def test_rejects_non_positive_limits(self, field: str) -> None:
        """Zero or negative limits are rejected."""
        with pytest.raises(ValueError, match=field):
            ShellConfig(**{field: 0})

    def test_rejects_empty_exit_keywords(self) -> None:
        """There must be a way to leave the shell."""
        with pytest.raises(ValueError, match="exit keyword"):
            ShellConfig(exit_keywords=())
