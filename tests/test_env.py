"""Tests for the shell variable table.

Shell variables are name/value string pairs set with ``set`` and read
back through ``$NAME``.  The table is bounded: going over a limit
raises ``CapacityError`` rather than silently truncating.
"""

import pytest

from xsh.config import CapacityError, ShellConfig
from xsh.env import Environment


class TestEnvironment:
    """Verify the Environment key-value store."""

    def test_get_and_set(self) -> None:
        """Setting a variable should make it retrievable."""
        env = Environment()
        env.set("HOME", "/root")
        assert env.get("HOME") == "/root"

    def test_get_missing_returns_none(self) -> None:
        """Getting a missing name should return None, not raise."""
        env = Environment()
        assert env.get("MISSING") is None

    def test_get_missing_with_default(self) -> None:
        """Getting a missing name with a default should return the default."""
        env = Environment()
        assert env.get("MISSING", "fallback") == "fallback"

    def test_set_overwrites(self) -> None:
        """Setting an existing name should overwrite the value in place."""
        env = Environment()
        env.set("X", "old")
        env.set("X", "new")
        assert env.get("X") == "new"
        assert len(env) == 1

    def test_unset(self) -> None:
        """Unsetting a variable should remove it."""
        env = Environment()
        env.set("X", "val")
        env.unset("X")
        assert env.get("X") is None
        assert len(env) == 0

    def test_unset_missing_is_noop(self) -> None:
        """Unsetting a name that was never set is not an error."""
        env = Environment()
        env.set("A", "1")
        env.unset("NOPE")
        assert len(env) == 1

    def test_unset_keeps_other_entries(self) -> None:
        """Removing one entry should leave the rest intact."""
        env = Environment()
        for name in ("A", "B", "C"):
            env.set(name, name.lower())
        env.unset("B")
        assert (env.get("A"), env.get("B"), env.get("C")) == ("a", None, "c")
        assert len(env) == 2

    def test_initial_is_copied(self) -> None:
        """Initial variables are copied, not referenced."""
        initial = {"A": "1"}
        env = Environment(initial)
        initial["A"] = "changed"
        assert env.get("A") == "1"

    def test_independent_of_os_environ(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """The table starts empty regardless of the process environment."""
        monkeypatch.setenv("XSH_TEST_VAR", "outside")
        env = Environment()
        assert env.get("XSH_TEST_VAR") is None


class TestEnvironmentCapacity:
    """Verify that limits are enforced loudly."""

    def test_full_table_rejects_new_name(self) -> None:
        """A new name beyond max_env_vars should raise CapacityError."""
        env = Environment(config=ShellConfig(max_env_vars=2))
        env.set("A", "1")
        env.set("B", "2")
        with pytest.raises(CapacityError, match="maximum environment variables"):
            env.set("C", "3")
        assert env.get("C") is None

    def test_full_table_still_overwrites(self) -> None:
        """Overwriting an existing name is allowed when the table is full."""
        env = Environment(config=ShellConfig(max_env_vars=1))
        env.set("A", "1")
        env.set("A", "2")
        assert env.get("A") == "2"

    def test_unset_frees_a_slot(self) -> None:
        """After unset, a new name fits again."""
        env = Environment(config=ShellConfig(max_env_vars=1))
        env.set("A", "1")
        env.unset("A")
        env.set("B", "2")
        assert env.get("B") == "2"

    def test_long_name_rejected(self) -> None:
        """Names longer than max_name_length are not truncated."""
        env = Environment(config=ShellConfig(max_name_length=4))
        with pytest.raises(CapacityError, match="name too long"):
            env.set("TOOLONG", "x")
        assert len(env) == 0

    def test_long_value_rejected(self) -> None:
        """Values longer than max_value_length are not truncated."""
        env = Environment(config=ShellConfig(max_value_length=3))
        with pytest.raises(CapacityError, match="too long"):
            env.set("A", "abcd")

    def test_initial_over_capacity_raises(self) -> None:
        """Initial variables are subject to the same limits."""
        with pytest.raises(CapacityError):
            Environment({"A": "1", "B": "2"}, config=ShellConfig(max_env_vars=1))
