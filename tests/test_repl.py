"""Tests for the REPL (Read-Eval-Print Loop).

The REPL reads lines with ``input()``, so the tests replace ``input``
with a scripted sequence and check what gets printed.
"""

import io
from collections.abc import Iterator
from pathlib import Path

import pytest

from xsh import repl
from xsh.config import ShellConfig
from xsh.shell import Shell


def _script(monkeypatch: pytest.MonkeyPatch, *lines: str) -> list[str]:
    """Feed *lines* to ``input()``; end of input after the last one.

    Returns:
        The prompts that were shown, in order.

    """
    prompts: list[str] = []
    feed: Iterator[str] = iter(lines)

    def _fake_input(prompt: str = "") -> str:
        prompts.append(prompt)
        try:
            return next(feed)
        except StopIteration:
            raise EOFError from None

    monkeypatch.setattr("builtins.input", _fake_input)
    return prompts


class TestRun:
    """Verify the loop's control flow."""

    def test_exit_keyword_stops_loop(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Lines after ``exit`` are never read."""
        prompts = _script(monkeypatch, "exit", "pwd")
        assert repl.run(shell=Shell(stderr=io.StringIO())) == 0
        assert len(prompts) == 1

    def test_quit_keyword_stops_loop(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """``quit`` works like ``exit``."""
        prompts = _script(monkeypatch, "quit", "pwd")
        repl.run(shell=Shell(stderr=io.StringIO()))
        assert len(prompts) == 1

    def test_end_of_input_stops_loop(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """EOF ends the session with status 0."""
        prompts = _script(monkeypatch)
        assert repl.run(shell=Shell(stderr=io.StringIO())) == 0
        assert prompts == ["xsh# "]

    def test_prints_builtin_output(
        self,
        tmp_path: Path,
        monkeypatch: pytest.MonkeyPatch,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        """Built-in output is printed after the command runs."""
        monkeypatch.chdir(tmp_path)
        _script(monkeypatch, "pwd", "exit")
        repl.run(shell=Shell(stderr=io.StringIO()))
        assert str(tmp_path.resolve()) in capsys.readouterr().out

    def test_state_persists_between_lines(
        self,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        """Variables set on one line are visible on the next."""
        shell = Shell(stderr=io.StringIO())
        _script(monkeypatch, "set NAME value", "set COPY $NAME", "exit")
        repl.run(shell=shell)
        assert shell.env.get("COPY") == "value"

    def test_uses_configured_prompt(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """The prompt comes from the config."""
        prompts = _script(monkeypatch, "exit")
        repl.run(config=ShellConfig(prompt="> "))
        assert prompts == ["> "]

    def test_keyboard_interrupt_ends_loop(
        self,
        monkeypatch: pytest.MonkeyPatch,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        """Ctrl+C at the prompt ends the session gracefully."""

        def _interrupt(_prompt: str = "") -> str:
            raise KeyboardInterrupt

        monkeypatch.setattr("builtins.input", _interrupt)
        assert repl.run(shell=Shell(stderr=io.StringIO())) == 0
        assert "Interrupted" in capsys.readouterr().out

    def test_main_exits_with_zero(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """The console entry point exits with status 0."""
        _script(monkeypatch, "exit")
        with pytest.raises(SystemExit) as excinfo:
            repl.main()
        assert excinfo.value.code == 0
