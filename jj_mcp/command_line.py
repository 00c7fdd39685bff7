"""Command-line construction for jj invocations.

A ``CommandLine`` is an ordered list of discrete argv tokens. It has two
renderings:

- ``argv()``: the exact tokens, spawned directly without a shell.
- ``render()``: one shell-ready line. Literal tokens are quoted with
  ``shlex.quote``. Free-text tokens (messages) travel as a base64 payload
  decoded into a shell variable ahead of the command, then passed as
  ``"$var"``; quotes, newlines and other metacharacters never reach the
  shell parser.

The rendered form is also what appears in logs and failure text.
"""

from __future__ import annotations

import base64
import shlex
from dataclasses import dataclass
from typing import Iterable, Optional, Union


# Appended inside the command substitution and removed afterwards, so
# trailing newlines of the decoded text are kept.
SENTINEL = "x"


def encode_shell_argument(raw: str) -> str:
    """Return a shell fragment that expands to ``raw`` followed by ``SENTINEL``.

    The payload alphabet is ``[A-Za-z0-9+/=]`` so it cannot terminate the
    surrounding double quotes or start a new command.
    """

    payload = base64.b64encode(raw.encode("utf-8")).decode("ascii")
    return f'"$(printf %s {payload} | base64 -d; printf {SENTINEL})"'


def decode_into(variable: str, raw: str) -> str:
    """Shell statements that leave exactly ``raw`` in ``$variable``."""

    return f'{variable}={encode_shell_argument(raw)}; {variable}="${{{variable}%{SENTINEL}}}"'


@dataclass(frozen=True)
class EncodedArgument:
    """Free-text argument that must survive a shell round trip unchanged."""

    value: str

    def render(self, variable: str) -> tuple[Optional[str], str]:
        """Return ``(prelude, token)``; the prelude is None for empty text."""

        if self.value == "":
            return None, '""'
        return decode_into(variable, self.value), f'"${variable}"'


Token = Union[str, EncodedArgument]


class CommandLine:
    """Ordered argv builder for one jj subcommand.

    Builder methods return ``self`` so a handler can read top to bottom in
    the same order the flags appear on the command line.
    """

    def __init__(self, *tokens: str) -> None:
        self._tokens: list[Token] = [str(t) for t in tokens]

    @property
    def tokens(self) -> tuple[Token, ...]:
        return tuple(self._tokens)

    def add(self, *tokens: str) -> "CommandLine":
        self._tokens.extend(str(t) for t in tokens)
        return self

    def add_option(self, flag: str, value: Optional[str]) -> "CommandLine":
        """Append ``flag value`` when ``value`` is a non-empty string."""

        if value:
            self._tokens.extend([flag, str(value)])
        return self

    def add_repeated(self, flag: str, values: Optional[Iterable[str]]) -> "CommandLine":
        """Append ``flag v`` once per value, preserving order."""

        for value in values or ():
            self._tokens.extend([flag, str(value)])
        return self

    def add_positionals(self, values: Optional[Iterable[str]]) -> "CommandLine":
        self._tokens.extend(str(v) for v in values or ())
        return self

    def add_flag(self, flag: str, enabled: Optional[bool]) -> "CommandLine":
        if enabled:
            self._tokens.append(flag)
        return self

    def add_message(self, flag: str, message: str) -> "CommandLine":
        """Append ``flag`` followed by free text that is encoded when rendered."""

        self._tokens.extend([flag, EncodedArgument(message)])
        return self

    def argv(self) -> list[str]:
        return [t.value if isinstance(t, EncodedArgument) else t for t in self._tokens]

    def render(self, program: Optional[str] = None) -> str:
        """Shell-ready line, optionally prefixed with the quoted ``program``."""

        prelude: list[str] = []
        parts: list[str] = [shlex.quote(program)] if program else []
        for token in self._tokens:
            if isinstance(token, EncodedArgument):
                statements, rendered = token.render(f"_jj_arg{len(prelude) + 1}")
                if statements:
                    prelude.append(statements)
                parts.append(rendered)
            else:
                parts.append(shlex.quote(token))
        return "; ".join(prelude + [" ".join(parts)])

    def __str__(self) -> str:
        return self.render()

    def __repr__(self) -> str:
        return f"CommandLine({self.render()!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, CommandLine):
            return NotImplemented
        return self._tokens == other._tokens

    __hash__ = None  # type: ignore[assignment]


__all__ = [
    "CommandLine",
    "EncodedArgument",
    "SENTINEL",
    "decode_into",
    "encode_shell_argument",
]
