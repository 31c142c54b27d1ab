"""Variable expansion — replacing ``$NAME`` with its value.

Before a line is split into commands, every ``$NAME`` in it is replaced
with the value of the shell variable ``NAME``.  Undefined variables
expand to the empty string, like an unset variable in ``sh``.

The scan is done by ``segments()``, a lazy tokenizer that yields
literal text and substitutions in order; ``expand()`` joins them.

Rules:
    - A name is the longest run of ASCII letters, digits and ``_``
      following the ``$`` (so ``$1x`` names ``1x``).
    - A ``$`` with no name after it (``$``, ``$ ``, ``$-``) is kept as a
      literal ``$``.
    - There is no escaping; every ``$`` starts a substitution attempt.
"""

import re
from collections.abc import Iterator
from dataclasses import dataclass
from typing import TypeAlias

from xsh.env import Environment

_VARIABLE = re.compile(r"\$([A-Za-z0-9_]*)")


@dataclass(frozen=True)
class Literal:
    """Text copied through unchanged."""

    text: str


@dataclass(frozen=True)
class Substitution:
    """A ``$NAME`` reference to be replaced by the variable's value."""

    name: str


Segment: TypeAlias = Literal | Substitution


def segments(line: str) -> Iterator[Segment]:
    """Yield the literal and substitution segments of *line*, left to right."""
    pos = 0
    for match in _VARIABLE.finditer(line):
        if match.start() > pos:
            yield Literal(line[pos : match.start()])
        name = match.group(1)
        yield Substitution(name) if name else Literal("$")
        pos = match.end()
    if pos < len(line):
        yield Literal(line[pos:])


def expand(line: str, env: Environment) -> str:
    """Return *line* with every ``$NAME`` replaced from *env*."""
    parts: list[str] = []
    for segment in segments(line):
        match segment:
            case Literal(text):
                parts.append(text)
            case Substitution(name):
                parts.append(env.get(name) or "")
    return "".join(parts)
