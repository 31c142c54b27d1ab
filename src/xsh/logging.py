"""Shell event log — a bounded, in-memory record of what the shell did.

The terminal only ever sees a one-line ``xsh: ...`` diagnostic.  The
event log keeps the structured version: which stage was spawned under
which PID, which command could not be found, which limit dropped part of
a line, which background job was collected.

An interactive session can run for days, so the log is a ring buffer:
once ``capacity`` entries are held, each new entry pushes out the
oldest.  Entries below ``min_level`` are never stored at all, which
keeps per-command DEBUG chatter out unless it is asked for.

Each entry carries a ``source`` naming the component that wrote it
(``env``, ``path``, ``parser``, ``builtin``, ``executor``, ``jobs``), so
``filter(source="executor")`` answers "what did the executor do?".
"""

from collections import deque
from dataclasses import dataclass
from enum import IntEnum

DEFAULT_CAPACITY = 1000


class LogLevel(IntEnum):
    """Severity of an event; higher is more serious."""

    DEBUG = 0
    INFO = 1
    WARNING = 2
    ERROR = 3


@dataclass(frozen=True)
class LogEntry:
    """One recorded event.

    Attributes:
        level: How serious the event is.
        message: What happened, in words.
        source: The component that wrote the entry (e.g. "executor").

    """

    level: LogLevel
    message: str
    source: str

    def __str__(self) -> str:
        """Format as ``[LEVEL] source: message``."""
        return f"[{self.level.name}] {self.source}: {self.message}"


class Logger:
    """Ring buffer of ``LogEntry`` records with level and source filters."""

    def __init__(
        self,
        *,
        capacity: int = DEFAULT_CAPACITY,
        min_level: LogLevel = LogLevel.DEBUG,
    ) -> None:
        """Create an empty logger.

        Args:
            capacity: Most entries kept; older ones are discarded first.
            min_level: Entries below this level are dropped on arrival.

        """
        self._entries: deque[LogEntry] = deque(maxlen=capacity)
        self._min_level = min_level

    @property
    def entries(self) -> list[LogEntry]:
        """Return the retained entries, oldest first."""
        return list(self._entries)

    def log(self, level: LogLevel, message: str, *, source: str) -> None:
        """Record an event unless it is below the logger's threshold."""
        if level < self._min_level:
            return
        self._entries.append(LogEntry(level=level, message=message, source=source))

    def debug(self, message: str, *, source: str) -> None:
        """Log at DEBUG level."""
        self.log(LogLevel.DEBUG, message, source=source)

    def info(self, message: str, *, source: str) -> None:
        """Log at INFO level."""
        self.log(LogLevel.INFO, message, source=source)

    def warning(self, message: str, *, source: str) -> None:
        """Log at WARNING level."""
        self.log(LogLevel.WARNING, message, source=source)

    def error(self, message: str, *, source: str) -> None:
        """Log at ERROR level."""
        self.log(LogLevel.ERROR, message, source=source)

    def filter(
        self,
        *,
        min_level: LogLevel | None = None,
        source: str | None = None,
    ) -> list[LogEntry]:
        """Return retained entries at or above *min_level* from *source*.

        Either criterion may be omitted.
        """
        return [
            e
            for e in self._entries
            if (min_level is None or e.level >= min_level)
            and (source is None or e.source == source)
        ]

    def clear(self) -> None:
        """Drop every retained entry."""
        self._entries.clear()

    def __len__(self) -> int:
        """Return the number of retained entries."""
        return len(self._entries)
