"""Background jobs — keeping track of pipelines started with ``&``.

When you run ``sleep 60 &`` the shell starts the process and immediately
returns to the prompt.  Somebody still has to collect the exit status
once the process finishes; otherwise it lingers as a zombie.  The job
table holds the process handles of every background pipeline and reaps
them without blocking.

Key ideas:
    - **A job is a whole pipeline** — ``a | b | c &`` is one job with
      three processes.  It is done only when all of them have exited.
    - **Job numbers are small** — ``[1]``, ``[2]``, etc., for human
      convenience (unlike PIDs which can be large).
    - **Lazy reaping** — the shell calls ``reap()`` before each command;
      finished jobs are reported once and then forgotten.
"""

import subprocess
from dataclasses import dataclass, field
from enum import StrEnum
from itertools import count


class JobStatus(StrEnum):
    """Status of a background job."""

    RUNNING = "running"
    DONE = "done"


@dataclass
class Job:
    """A background pipeline.

    Attributes:
        job_id: Small human-friendly job number ([1], [2], ...).
        command: The command line that started the job.
        processes: Handles of the spawned stages, left to right.
        status: Current job status.

    """

    job_id: int
    command: str
    processes: list[subprocess.Popen[bytes]] = field(default_factory=list)
    status: JobStatus = JobStatus.RUNNING

    @property
    def pids(self) -> list[int]:
        """Return the PIDs of the job's processes."""
        return [p.pid for p in self.processes]

    @property
    def returncodes(self) -> list[int | None]:
        """Return each process's exit status (None while still running)."""
        return [p.returncode for p in self.processes]

    def poll(self) -> bool:
        """Collect any exited processes; return True once all have exited."""
        exited = [p.poll() is not None for p in self.processes]
        return all(exited)

    def __str__(self) -> str:
        """Format as ``[id] status command``."""
        return f"[{self.job_id}] {self.status} {self.command}"


class JobTable:
    """Registry of background jobs owned by one shell."""

    def __init__(self) -> None:
        """Create an empty job table."""
        self._jobs: dict[int, Job] = {}
        self._counter = count(start=1)

    def add(self, processes: list[subprocess.Popen[bytes]], command: str) -> Job:
        """Register a newly started background pipeline.

        Args:
            processes: The spawned process handles.
            command: The command text, for reporting.

        Returns:
            The newly created job.

        """
        job = Job(job_id=next(self._counter), command=command, processes=list(processes))
        self._jobs[job.job_id] = job
        return job

    def running(self) -> list[Job]:
        """Return all jobs that have not been reaped yet."""
        return list(self._jobs.values())

    def reap(self) -> list[Job]:
        """Collect finished jobs without blocking.

        Returns:
            Jobs whose processes have all exited, now marked DONE and
            removed from the table.

        """
        finished: list[Job] = []
        for job in list(self._jobs.values()):
            if job.poll():
                job.status = JobStatus.DONE
                finished.append(job)
                del self._jobs[job.job_id]
        return finished

    def __len__(self) -> int:
        """Return the number of tracked jobs."""
        return len(self._jobs)
