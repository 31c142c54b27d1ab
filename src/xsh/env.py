"""Shell variables — the table behind ``set``, ``unset`` and ``$NAME``.

The shell keeps its own variable table, separate from the operating
system environment it inherited.  ``set GREETING hello`` stores a pair
here; ``$GREETING`` on a later line is replaced with ``hello``.  Nothing
in this table is exported to child processes.

Key design properties:
    - **Names are unique** — setting an existing name overwrites its
      value in place.
    - **Strings only** — both names and values are strings.
    - **Bounded** — the number of variables and the length of each name
      and value are capped by ``ShellConfig``.  Going over a cap raises
      ``CapacityError`` instead of truncating.
"""

from xsh.config import CapacityError, ShellConfig


class Environment:
    """A bounded key-value store for shell variables.

    Each shell instance owns one; two shells never share variables.
    """

    def __init__(
        self,
        initial: dict[str, str] | None = None,
        *,
        config: ShellConfig | None = None,
    ) -> None:
        """Create an environment, optionally pre-populated.

        Args:
            initial: Starting variables (copied, not referenced).
            config: Limits to enforce (defaults to ``ShellConfig()``).

        Raises:
            CapacityError: If *initial* violates the configured limits.

        """
        self._config = config or ShellConfig()
        self._vars: dict[str, str] = {}
        for name, value in (initial or {}).items():
            self.set(name, value)

    def get(self, name: str, default: str | None = None) -> str | None:
        """Return the value for *name*, or *default* if not set."""
        return self._vars.get(name, default)

    def set(self, name: str, value: str) -> None:
        """Set *name* to *value* (creates or overwrites).

        Raises:
            CapacityError: If the name or value is too long, or the table
                is full and *name* is new.

        """
        if len(name) > self._config.max_name_length:
            msg = f"variable name too long ({len(name)} > {self._config.max_name_length})"
            raise CapacityError(msg)
        if len(value) > self._config.max_value_length:
            msg = f"value of {name} too long ({len(value)} > {self._config.max_value_length})"
            raise CapacityError(msg)
        if name not in self._vars and len(self._vars) >= self._config.max_env_vars:
            msg = f"maximum environment variables reached ({self._config.max_env_vars})"
            raise CapacityError(msg)
        self._vars[name] = value

    def unset(self, name: str) -> None:
        """Remove *name* if present; a missing name is not an error."""
        self._vars.pop(name, None)

    def __len__(self) -> int:
        """Return the number of variables."""
        return len(self._vars)
