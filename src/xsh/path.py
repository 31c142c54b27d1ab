"""Search path — locating the executable behind a bare command name.

When you type ``ls``, the shell has to find a file called ``ls``.  It
walks the directories listed in the inherited ``PATH`` variable, in
order, and runs the first executable match.  ``/bin/ls`` or ``./ls``
(anything containing a ``/``) skips the search and is used as given.

The directory list is read once, when the shell starts, and never
changes afterwards — later edits to the OS environment do not affect it.
"""

import os
from collections.abc import Mapping

from xsh.config import ShellConfig
from xsh.logging import Logger


def is_executable(path: str) -> bool:
    """Return True if *path* is a regular file the caller may execute."""
    return os.path.isfile(path) and os.access(path, os.X_OK)


class SearchPath:
    """An immutable, ordered list of directories searched for executables."""

    def __init__(self, dirs: tuple[str, ...] = ()) -> None:
        """Create a search path from an explicit directory list."""
        self._dirs = tuple(dirs)

    @classmethod
    def from_environ(
        cls,
        environ: Mapping[str, str] | None = None,
        *,
        config: ShellConfig | None = None,
        logger: Logger | None = None,
    ) -> "SearchPath":
        """Build a search path from the inherited environment.

        Empty entries (``::``) are skipped.  Directories beyond the
        configured maximum are dropped and a warning is logged.

        Args:
            environ: Variables to read from (defaults to ``os.environ``).
            config: Supplies the variable name and the directory limit.
            logger: Receives a warning if directories are dropped.

        Returns:
            The search path; empty if the variable is missing.

        """
        config = config or ShellConfig()
        source = os.environ if environ is None else environ
        raw = source.get(config.path_variable)
        if not raw:
            return cls()
        dirs = [d for d in raw.split(os.pathsep) if d]
        if len(dirs) > config.max_path_dirs:
            if logger is not None:
                logger.warning(
                    f"{config.path_variable} has {len(dirs)} directories; "
                    f"ignoring all after the first {config.max_path_dirs}",
                    source="path",
                )
            dirs = dirs[: config.max_path_dirs]
        return cls(tuple(dirs))

    @property
    def dirs(self) -> tuple[str, ...]:
        """Return the directories in search order."""
        return self._dirs

    def resolve(self, name: str) -> str | None:
        """Return the executable that *name* refers to, or None.

        A name containing a path separator is checked directly.  A bare
        name is joined to each directory in order; the first executable
        candidate wins.
        """
        if not name:
            return None
        if os.sep in name:
            return name if is_executable(name) else None
        for directory in self._dirs:
            candidate = os.path.join(directory, name)
            if is_executable(candidate):
                return candidate
        return None

    def __len__(self) -> int:
        """Return the number of directories."""
        return len(self._dirs)
