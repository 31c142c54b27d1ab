"""The shell — command interpreter tying the components together.

``Shell.execute()`` takes one raw line and carries it through the whole
chain:

    raw line → expand ``$NAME`` → parse into a pipeline →
        built-in (in this process) or executor (child processes)

Built-ins (``cd``, ``pwd``, ``set``, ``unset``) run inside the shell's
own process — that is the whole point of them.  Changing directory or
setting a variable in a child would be invisible to the next command.
They are only recognised as the sole stage of a pipeline; ``pwd | cat``
looks ``pwd`` up on the search path instead.

Design choices:
    - **Returns strings, not prints.**  Built-in output comes back as the
      return value, so the shell is testable without a terminal.  External
      programs write straight to the inherited stdout.
    - **Diagnostics go to an error stream.**  Problems are written as
      ``xsh: ...`` lines to ``stderr`` and recorded in the event log;
      none of them stop the shell.
    - **Command dispatch via a dict.**  Adding a built-in means writing a
      method and adding one dict entry.
"""

import os
import sys
from collections.abc import Callable, Mapping
from typing import TextIO, TypeAlias

from xsh.config import CapacityError, ShellConfig
from xsh.env import Environment
from xsh.executor import PipelineExecutor, error_reason
from xsh.expand import expand
from xsh.jobs import JobTable
from xsh.logging import Logger
from xsh.parser import Command, ParseError, parse_pipeline
from xsh.path import SearchPath

# Type alias for a built-in handler: takes a list of args, returns output.
_Handler: TypeAlias = Callable[[list[str]], str]


class Shell:
    """Command interpreter owning all per-session state.

    Nothing is global: two ``Shell`` instances have separate variables,
    search paths and job tables.
    """

    EXIT_SENTINEL = "__EXIT__"

    def __init__(
        self,
        *,
        config: ShellConfig | None = None,
        environ: Mapping[str, str] | None = None,
        variables: dict[str, str] | None = None,
        stderr: TextIO | None = None,
    ) -> None:
        """Create a shell.

        Args:
            config: Limits and settings (defaults to ``ShellConfig()``).
            environ: Inherited environment to read the search path from
                (defaults to ``os.environ``).
            variables: Initial shell variables.
            stderr: Stream for diagnostics (defaults to ``sys.stderr``).

        """
        self._config = config or ShellConfig()
        self._logger = Logger(
            capacity=self._config.log_capacity, min_level=self._config.log_level
        )
        self._env = Environment(variables, config=self._config)
        self._search_path = SearchPath.from_environ(
            environ, config=self._config, logger=self._logger
        )
        self._logger.info(
            f"search path: {os.pathsep.join(self._search_path.dirs) or '(empty)'}",
            source="path",
        )
        self._jobs = JobTable()
        self._executor = PipelineExecutor(
            search_path=self._search_path, jobs=self._jobs, logger=self._logger
        )
        self._stderr = stderr
        self._last_status = 0

        # Built-in dispatch table — maps command names to handler methods.
        self._builtins: dict[str, _Handler] = {
            "cd": self._cmd_cd,
            "pwd": self._cmd_pwd,
            "set": self._cmd_set,
            "unset": self._cmd_unset,
        }

    @property
    def config(self) -> ShellConfig:
        """Return the shell's configuration."""
        return self._config

    @property
    def env(self) -> Environment:
        """Return the shell variable table."""
        return self._env

    @property
    def search_path(self) -> SearchPath:
        """Return the search path used to resolve commands."""
        return self._search_path

    @property
    def jobs(self) -> JobTable:
        """Return the background job table."""
        return self._jobs

    @property
    def logger(self) -> Logger:
        """Return the shell's event log."""
        return self._logger

    @property
    def last_status(self) -> int:
        """Return the exit status of the last foreground pipeline."""
        return self._last_status

    def builtin_names(self) -> list[str]:
        """Return the names of all built-in commands, sorted."""
        return sorted(self._builtins)

    def execute(self, line: str) -> str:
        """Expand, parse and run one command line.

        Args:
            line: The raw line, without its trailing newline.

        Returns:
            Output of a built-in, a ``[job] pid`` notice for a background
            pipeline, ``EXIT_SENTINEL`` for an exit keyword, or "".

        """
        self._report_finished_jobs()

        if line in self._config.exit_keywords:
            still_running = self._jobs.running()
            if still_running:
                self._logger.info(
                    f"leaving {len(still_running)} background job(s) running", source="jobs"
                )
            return self.EXIT_SENTINEL
        if not line.strip():
            return ""

        try:
            pipeline = parse_pipeline(expand(line, self._env), config=self._config)
        except ParseError as e:
            self._error(str(e), source="parser")
            return ""
        for warning in pipeline.warnings:
            self._warn(warning, source="parser")
        if not pipeline.commands:
            return ""

        if len(pipeline) == 1 and pipeline.commands[0].name in self._builtins:
            return self._run_builtin(pipeline.commands[0])

        command_text = line.strip().removesuffix("&").rstrip()
        result = self._executor.run(pipeline, command_text=command_text)
        for failure in result.failures:
            self._write_stderr(f"xsh: {failure}")
        if result.job is not None:
            return f"[{result.job.job_id}] {result.job.pids[-1]}"
        self._last_status = result.status or 0
        return ""

    def _run_builtin(self, command: Command) -> str:
        """Run a built-in in this process, honouring ``> file``."""
        handler = self._builtins[command.name]
        self._logger.debug(f"builtin: {' '.join(command.argv)}", source="builtin")
        output = handler(command.argv[1:])
        if command.stdout is None:
            return output
        try:
            with open(command.stdout, "w") as f:  # noqa: PTH123
                f.write(f"{output}\n" if output else "")
        except (OSError, ValueError) as e:
            self._error(f"{command.stdout}: {error_reason(e)}", source="builtin")
        return ""

    def _report_finished_jobs(self) -> None:
        """Reap background jobs and announce the ones that finished."""
        for job in self._jobs.reap():
            self._logger.info(f"job [{job.job_id}] exited with {job.returncodes}", source="jobs")
            self._write_stderr(f"[{job.job_id}] done {job.command}")

    def _warn(self, message: str, *, source: str) -> None:
        self._logger.warning(message, source=source)
        self._write_stderr(f"xsh: {message}")

    def _error(self, message: str, *, source: str) -> None:
        self._logger.error(message, source=source)
        self._write_stderr(f"xsh: {message}")

    def _write_stderr(self, message: str) -> None:
        stream = self._stderr if self._stderr is not None else sys.stderr
        print(message, file=stream)  # noqa: T201
        stream.flush()

    # -- Built-in handlers -----------------------------------------------

    def _cmd_cd(self, args: list[str]) -> str:
        """Change the working directory; no argument is a no-op."""
        if not args:
            return ""
        try:
            os.chdir(args[0])
        except (OSError, ValueError) as e:
            self._error(f"cd: {args[0]}: {error_reason(e)}", source="builtin")
        return ""

    def _cmd_pwd(self, _args: list[str]) -> str:
        """Return the current working directory."""
        return os.getcwd()  # noqa: PTH109

    def _cmd_set(self, args: list[str]) -> str:
        """Set a shell variable (NAME VALUE)."""
        if len(args) < 2:  # noqa: PLR2004
            return "Usage: set NAME VALUE"
        try:
            self._env.set(args[0], args[1])
        except CapacityError as e:
            self._error(f"set: {e}", source="env")
        return ""

    def _cmd_unset(self, args: list[str]) -> str:
        """Remove a shell variable."""
        if not args:
            return "Usage: unset NAME"
        self._env.unset(args[0])
        return ""
