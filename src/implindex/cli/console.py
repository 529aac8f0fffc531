# topmark:header:start
#
#   project      : ImplIndex
#   file         : console.py
#   file_relpath : src/implindex/cli/console.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Verbosity-aware console for program output.

Commands write their results with `ConsoleLike.print`. Status lines that a
script may want to silence (``Wrote ...``, check summaries) go through
`ConsoleLike.note`, which ``-q`` suppresses; per-page statistics go through
`ConsoleLike.detail`, which only ``-v`` enables. Diagnostics never pass
through here: they are logged, so ``IMPLINDEX_LOG_LEVEL`` cannot change
what a command prints.
"""

from __future__ import annotations

import sys
from typing import Any, Protocol, TextIO

import click


class ConsoleLike(Protocol):
    """What CLI commands and emitters need from a console."""

    verbosity: int

    def print(self, text: str = "", *, nl: bool = True) -> None:
        """Write program output to stdout, whatever the verbosity."""
        ...

    def note(self, text: str) -> None:
        """Write a status line to stdout unless quiet."""
        ...

    def detail(self, text: str) -> None:
        """Write a dimmed line to stdout only when verbose."""
        ...

    def warn(self, text: str) -> None:
        """Write a warning to stderr."""
        ...

    def error(self, text: str) -> None:
        """Write an error to stderr."""
        ...

    def styled(self, text: str, **style_kwargs: Any) -> str:
        """Return ``text`` styled, or unchanged when color is off."""
        ...


class ClickConsole:
    """`ConsoleLike` backed by `click.echo`.

    Args:
        enable_color (bool): Emit ANSI styles.
        verbosity (int): ``-1`` quiet, ``0`` terse, ``>0`` verbose.
        out (TextIO | None): Program output stream (`sys.stdout` when omitted).
        err (TextIO | None): Warning and error stream (`sys.stderr` when omitted).
    """

    def __init__(
        self,
        *,
        enable_color: bool = True,
        verbosity: int = 0,
        out: TextIO | None = None,
        err: TextIO | None = None,
    ) -> None:
        self.enable_color = enable_color
        self.verbosity = verbosity
        self._out = out
        self._err = err

    # Streams are looked up per call so CliRunner's stream swap is honored.
    @property
    def out(self) -> TextIO:
        return self._out or sys.stdout

    @property
    def err(self) -> TextIO:
        return self._err or sys.stderr

    @property
    def quiet(self) -> bool:
        return self.verbosity < 0

    @property
    def verbose(self) -> bool:
        return self.verbosity > 0

    def print(self, text: str = "", *, nl: bool = True) -> None:
        click.echo(text, nl=nl, file=self.out, color=self.enable_color)

    def note(self, text: str) -> None:
        if not self.quiet:
            self.print(text)

    def detail(self, text: str) -> None:
        if self.verbose:
            self.print(self.styled(text, dim=True))

    def warn(self, text: str) -> None:
        click.echo(self.styled(text, fg="yellow"), file=self.err, color=self.enable_color)

    def error(self, text: str) -> None:
        click.echo(self.styled(text, fg="bright_red"), file=self.err, color=self.enable_color)

    def styled(self, text: str, **style_kwargs: Any) -> str:
        return click.style(text, **style_kwargs) if self.enable_color else text
