"""Shell configuration — the limits and knobs a shell instance runs with.

Classic small shells hard-code their limits as compile-time constants:
how many variables fit in the environment table, how many arguments a
command may carry, how many stages a pipeline may have.  Overflowing one
of those tables usually means silent truncation.

Here every limit lives on a ``ShellConfig`` instance that is handed to
each component explicitly.  When a limit is hit, the component either
raises ``CapacityError`` or records a warning — it never truncates
quietly.

The defaults mirror the traditional table sizes so behaviour matches a
stock ``xsh`` out of the box.
"""

from dataclasses import dataclass, field

from xsh.logging import DEFAULT_CAPACITY, LogLevel


class CapacityError(Exception):
    """Raise when a configured limit would be exceeded.

    Examples: too many environment variables, a variable name longer
    than ``max_name_length``.
    """


@dataclass(frozen=True)
class ShellConfig:
    """Immutable settings for one shell instance.

    Attributes:
        max_env_vars: Maximum number of shell variables.
        max_name_length: Maximum length of a variable name.
        max_value_length: Maximum length of a variable value.
        max_path_dirs: Maximum number of search-path directories kept.
        max_args: Maximum number of arguments per command.
        max_stages: Maximum number of stages per pipeline.
        prompt: Prompt string shown by the REPL.
        exit_keywords: Lines that terminate the REPL (exact match).
        path_variable: Inherited variable holding the search path.
        log_capacity: Most event-log entries kept before the oldest go.
        log_level: Lowest severity recorded in the event log.

    """

    max_env_vars: int = 100
    max_name_length: int = 63
    max_value_length: int = 255
    max_path_dirs: int = 64
    max_args: int = 63
    max_stages: int = 10
    prompt: str = "xsh# "
    exit_keywords: tuple[str, ...] = field(default=("exit", "quit"))
    path_variable: str = "PATH"
    log_capacity: int = DEFAULT_CAPACITY
    log_level: LogLevel = LogLevel.INFO

    def __post_init__(self) -> None:
        """Reject limits that would make the shell unusable.

        Raises:
            ValueError: If a limit is not positive or no exit keyword is set.

        """
        limits = {
            "max_env_vars": self.max_env_vars,
            "max_name_length": self.max_name_length,
            "max_value_length": self.max_value_length,
            "max_path_dirs": self.max_path_dirs,
            "max_args": self.max_args,
            "max_stages": self.max_stages,
            "log_capacity": self.log_capacity,
        }
        for name, value in limits.items():
            if value < 1:
                msg = f"{name} must be positive, got {value}"
                raise ValueError(msg)
        if not self.exit_keywords:
            msg = "at least one exit keyword is required"
            raise ValueError(msg)
