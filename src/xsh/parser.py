"""Line parser — turning an expanded line into a pipeline of commands.

The grammar is deliberately small::

    pipeline := stage ( "|" stage )*
    stage    := token*            (tokens separated by whitespace)

Inside a stage a few tokens are special:

    ``< file``   read standard input from *file*
    ``> file``   write standard output to *file* (created or truncated)
    ``&``        run the pipeline in the background; ends the stage

``<file`` and ``>file`` written without a space mean the same thing.
There is no quoting, escaping or globbing — every token is taken
literally.

Limits from ``ShellConfig`` (stages per pipeline, arguments per command)
are enforced by dropping the excess and recording a warning on the
result, so the caller can tell the user what was ignored.
"""

from dataclasses import dataclass, field

from xsh.config import ShellConfig


class ParseError(Exception):
    """Raise when a line cannot be parsed into a pipeline."""


@dataclass
class Command:
    """One pipeline stage.

    Attributes:
        argv: Program name followed by its arguments.
        stdin: Path to read standard input from, if redirected.
        stdout: Path to write standard output to, if redirected.
        background: True if the stage ended with ``&``.

    """

    argv: list[str] = field(default_factory=list)
    stdin: str | None = None
    stdout: str | None = None
    background: bool = False

    @property
    def name(self) -> str:
        """Return the program name (first argument)."""
        return self.argv[0] if self.argv else ""


@dataclass
class Pipeline:
    """An ordered sequence of commands joined by pipes.

    Attributes:
        commands: The stages, left to right.
        warnings: Limits that were hit while parsing (excess dropped).

    """

    commands: list[Command] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    @property
    def background(self) -> bool:
        """Return True if the whole pipeline should run in the background.

        Only the last stage's ``&`` counts.
        """
        return bool(self.commands) and self.commands[-1].background

    def __len__(self) -> int:
        """Return the number of stages."""
        return len(self.commands)


def _take_path(tokens: list[str], i: int, operator: str) -> tuple[str, int]:
    """Return the redirection target for *operator* at ``tokens[i]``."""
    token = tokens[i]
    if len(token) > 1:
        return token[1:], i + 1
    if i + 1 >= len(tokens):
        msg = f"syntax error: expected a file name after '{operator}'"
        raise ParseError(msg)
    return tokens[i + 1], i + 2


def parse_command(
    stage: str,
    *,
    config: ShellConfig | None = None,
    warnings: list[str] | None = None,
) -> Command:
    """Parse one stage into a ``Command``.

    Args:
        stage: Raw text of a single stage (no ``|``).
        config: Supplies the argument limit.
        warnings: If given, receives a message when arguments are dropped.

    Returns:
        The parsed command.  Its ``argv`` may be empty if the stage was
        blank.

    Raises:
        ParseError: If ``<`` or ``>`` has no file name after it.

    """
    config = config or ShellConfig()
    command = Command()
    tokens = stage.split()
    dropped = 0
    i = 0
    while i < len(tokens):
        token = tokens[i]
        if token.startswith("<"):
            command.stdin, i = _take_path(tokens, i, "<")
            continue
        if token.startswith(">"):
            command.stdout, i = _take_path(tokens, i, ">")
            continue
        if token == "&":
            command.background = True
            break
        if len(command.argv) < config.max_args:
            command.argv.append(token)
        else:
            dropped += 1
        i += 1
    if dropped and warnings is not None:
        warnings.append(
            f"{command.name}: too many arguments; "
            f"ignoring {dropped} after the first {config.max_args}"
        )
    return command


def parse_pipeline(line: str, *, config: ShellConfig | None = None) -> Pipeline:
    """Split *line* on ``|`` and parse each stage.

    An empty or whitespace-only line yields an empty pipeline.

    Raises:
        ParseError: If a stage has no command name, or a redirection is
            missing its file name.

    """
    config = config or ShellConfig()
    pipeline = Pipeline()
    if not line.strip():
        return pipeline

    stages = line.split("|")
    # A dropped last stage still decides whether the pipeline is backgrounded.
    keep_background = False
    if len(stages) > config.max_stages:
        keep_background = "&" in stages[-1].split()
        pipeline.warnings.append(
            f"pipeline has {len(stages)} stages; "
            f"ignoring all after the first {config.max_stages}"
        )
        stages = stages[: config.max_stages]

    for stage in stages:
        command = parse_command(stage, config=config, warnings=pipeline.warnings)
        if not command.argv:
            msg = "syntax error: missing command" if stage.strip() else "syntax error near '|'"
            raise ParseError(msg)
        pipeline.commands.append(command)
    if keep_background:
        pipeline.commands[-1].background = True
    return pipeline
