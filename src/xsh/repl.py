"""Interactive REPL (Read-Eval-Print Loop) for the shell.

The REPL is the thin I/O wrapper around ``Shell``:

    1. **Read** — display the ``xsh# `` prompt and read one line.
    2. **Eval** — pass the line to ``shell.execute()``.
    3. **Print** — display whatever the shell returned.
    4. **Loop** — repeat until ``exit``/``quit`` or end of input.

The shell itself never touches ``stdin``; keeping the loop here means
the interpreter stays testable without a terminal.
"""

import sys

from xsh.config import ShellConfig
from xsh.shell import Shell


def run(*, shell: Shell | None = None, config: ShellConfig | None = None) -> int:
    """Run the interactive loop until the user leaves.

    Handles:
    - ``exit`` / ``quit`` (exact, case-sensitive) — stop.
    - Ctrl+D (end of input) — stop quietly.
    - Ctrl+C at the prompt — stop with a short notice.

    Args:
        shell: Shell to drive (a new one is created if omitted).
        config: Configuration for the new shell; ignored if *shell* is given.

    Returns:
        The exit status of the shell process, always 0.

    """
    shell = shell or Shell(config=config)
    prompt = shell.config.prompt

    try:
        while True:
            try:
                line = input(prompt)
            except EOFError:
                # Ctrl+D — graceful exit
                print()  # noqa: T201
                break

            result = shell.execute(line)
            if result == Shell.EXIT_SENTINEL:
                break
            if result:
                print(result, flush=True)  # noqa: T201

    except KeyboardInterrupt:
        print("\nInterrupted.")  # noqa: T201

    return 0


def main() -> None:
    """Console entry point for the ``xsh`` command."""
    sys.exit(run())
