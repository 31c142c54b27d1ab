"""Pipeline executor — running external commands as connected processes.

For a pipeline of N stages the executor:

    1. Creates N-1 pipes.  Stage *i* reads from pipe *i-1* and writes to
       pipe *i*; the first stage reads the shell's stdin and the last
       writes the shell's stdout.
    2. Applies per-stage file redirections on top of that wiring — a
       stage that says ``> out.txt`` writes to the file even if a pipe
       was waiting for its output.
    3. Spawns one process per stage, left to right, with
       ``subprocess.Popen``.  Popen installs the stage's stdin/stdout
       and closes every other descriptor in the child before the new
       program starts, so no stray pipe end keeps a reader waiting.
    4. Closes all of the parent's copies of the pipe and file
       descriptors as soon as the last stage is spawned.
    5. Waits for every process, in whatever order they finish — unless
       the pipeline runs in the background, in which case the processes
       are handed to the job table and nobody waits.

A stage that cannot be started (unknown command, unreadable input file,
exec failure) does not stop the others.  It is reported as a
``StageFailure`` and counts as exit status 1.
"""

import contextlib
import os
import subprocess
from dataclasses import dataclass, field
from typing import IO, TypeAlias

from xsh.jobs import Job, JobTable
from xsh.logging import Logger
from xsh.parser import Command, Pipeline
from xsh.path import SearchPath

# Exit status recorded for a stage that never started.
FAILED_STAGE_STATUS = 1

_OUTPUT_FLAGS = os.O_WRONLY | os.O_CREAT | os.O_TRUNC
_OUTPUT_MODE = 0o644

# Anything Popen accepts for stdin/stdout/stderr.
_Stream: TypeAlias = int | IO[bytes] | IO[str] | None


class _StageError(Exception):
    """Raised internally when a stage cannot be spawned."""

    def __init__(self, subject: str, reason: str) -> None:
        super().__init__(f"{subject}: {reason}")
        self.subject = subject
        self.reason = reason


def error_reason(error: OSError | ValueError) -> str:
    """Return a short cause for a failed OS call.

    ``OSError`` carries ``strerror`` ("No such file or directory"); a
    ``ValueError`` such as "embedded null byte" only has its message.
    """
    return getattr(error, "strerror", None) or str(error)


@dataclass(frozen=True)
class StageFailure:
    """Why a pipeline stage could not be started.

    Attributes:
        index: Position of the stage in the pipeline (0-based).
        subject: What failed — the command name or a redirection path.
        reason: Human-readable cause (e.g. "command not found").

    """

    index: int
    subject: str
    reason: str

    def __str__(self) -> str:
        """Format as ``subject: reason``."""
        return f"{self.subject}: {self.reason}"


@dataclass
class PipelineResult:
    """Outcome of running a pipeline.

    Attributes:
        statuses: Exit status per stage; None for stages still running
            in the background.
        failures: Stages that could not be started.
        job: The background job, if the pipeline was backgrounded.

    """

    statuses: list[int | None] = field(default_factory=list)
    failures: list[StageFailure] = field(default_factory=list)
    job: Job | None = None

    @property
    def status(self) -> int | None:
        """Return the last stage's exit status, like ``$?`` in sh."""
        return self.statuses[-1] if self.statuses else None


class PipelineExecutor:
    """Spawn, wire and wait for the processes of a pipeline."""

    def __init__(
        self,
        *,
        search_path: SearchPath,
        jobs: JobTable,
        logger: Logger,
        stdin: _Stream = None,
        stdout: _Stream = None,
        stderr: _Stream = None,
    ) -> None:
        """Create an executor.

        Args:
            search_path: Resolves command names to executables.
            jobs: Receives background pipelines.
            logger: Records spawns and failures.
            stdin: Input for the first stage (None inherits the shell's).
            stdout: Output for the last stage (None inherits the shell's).
            stderr: Error stream for every stage (None inherits).

        """
        self._search_path = search_path
        self._jobs = jobs
        self._logger = logger
        self._stdin = stdin
        self._stdout = stdout
        self._stderr = stderr

    def run(self, pipeline: Pipeline, *, command_text: str = "") -> PipelineResult:
        """Run every stage of *pipeline* and collect the outcome.

        Args:
            pipeline: The parsed pipeline (must not be empty).
            command_text: Original line, used to name a background job.

        Returns:
            Per-stage exit statuses, failures, and the job if backgrounded.

        """
        commands = pipeline.commands
        result = PipelineResult(statuses=[FAILED_STAGE_STATUS] * len(commands))
        spawned: list[tuple[int, subprocess.Popen[bytes]]] = []

        with contextlib.ExitStack() as fds:
            pipes = [self._open_pipe(fds) for _ in range(len(commands) - 1)]
            for i, command in enumerate(commands):
                stdin = pipes[i - 1][0] if i > 0 else self._stdin
                stdout = pipes[i][1] if i < len(commands) - 1 else self._stdout
                try:
                    process = self._spawn(command, stdin, stdout, fds)
                except _StageError as e:
                    failure = StageFailure(index=i, subject=e.subject, reason=e.reason)
                    result.failures.append(failure)
                    self._logger.error(f"stage {i}: {failure}", source="executor")
                    continue
                self._logger.info(
                    f"stage {i}: spawned pid {process.pid}: {' '.join(command.argv)}",
                    source="executor",
                )
                spawned.append((i, process))

        if pipeline.background:
            if spawned:
                result.job = self._jobs.add([p for _, p in spawned], command_text)
                self._logger.info(
                    f"job [{result.job.job_id}] started in background: {command_text}",
                    source="jobs",
                )
            for i, _process in spawned:
                result.statuses[i] = None
            return result

        try:
            for i, process in spawned:
                result.statuses[i] = process.wait()
        except KeyboardInterrupt:
            # The stages got the same SIGINT; collect them before unwinding.
            for _i, process in spawned:
                process.wait()
            raise
        self._logger.debug(f"pipeline exited with {result.statuses}", source="executor")
        return result

    def _spawn(
        self,
        command: Command,
        stdin: _Stream,
        stdout: _Stream,
        fds: contextlib.ExitStack,
    ) -> subprocess.Popen[bytes]:
        """Start one stage, applying file redirections over the pipe wiring."""
        if command.stdin is not None:
            stdin = self._open_file(command.stdin, os.O_RDONLY, fds)
        if command.stdout is not None:
            stdout = self._open_file(command.stdout, _OUTPUT_FLAGS, fds)

        executable = self._search_path.resolve(command.name)
        if executable is None:
            raise _StageError(command.name, "command not found")

        try:
            return subprocess.Popen(  # noqa: S603
                command.argv,
                executable=executable,
                stdin=stdin,
                stdout=stdout,
                stderr=self._stderr,
                close_fds=True,
            )
        except (OSError, ValueError) as e:
            raise _StageError(command.name, error_reason(e)) from e

    @staticmethod
    def _open_pipe(fds: contextlib.ExitStack) -> tuple[int, int]:
        """Create a pipe whose ends are closed when *fds* unwinds."""
        read_end, write_end = os.pipe()
        fds.callback(os.close, read_end)
        fds.callback(os.close, write_end)
        return read_end, write_end

    @staticmethod
    def _open_file(path: str, flags: int, fds: contextlib.ExitStack) -> int:
        """Open *path* for a redirection; the descriptor is owned by *fds*."""
        try:
            fd = os.open(path, flags, _OUTPUT_MODE)
        except (OSError, ValueError) as e:
            raise _StageError(path, error_reason(e)) from e
        fds.callback(os.close, fd)
        return fd
