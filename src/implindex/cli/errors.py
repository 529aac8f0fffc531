# topmark:header:start
#
#   project      : ImplIndex
#   file         : errors.py
#   file_relpath : src/implindex/cli/errors.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Exceptions for the ImplIndex CLI.

Raise these from commands to stop with a standardized message and exit code.
Library errors (`implindex.errors`) are translated into them at the command
boundary.

Styling:
    Errors print through the project console when one is present in the Click
    context (see `ImplIndexCliError.show`); otherwise Click's default styling
    applies.
"""

from __future__ import annotations

from typing import IO, Any

import click

from implindex.cli.exit_codes import ExitCode


class ImplIndexCliError(click.ClickException):
    """Base class for all ImplIndex CLI errors."""

    exit_code = ExitCode.FAILURE

    def format_message(self) -> str:  # pragma: no cover - trivial
        """Return the plain error message text (colorization happens in `show`)."""
        return str(getattr(self, "message", ""))

    def show(self, file: IO[Any] | None = None) -> None:  # pragma: no cover - Click prints errors
        """Display the error using the project console if available."""
        ctx: click.Context | None = click.get_current_context(silent=True)
        if ctx is not None and isinstance(getattr(ctx, "obj", None), dict):
            console = ctx.obj.get("console")
            if console is not None:
                console.error(f"Error: {self.format_message()}")
                return
        super().show(file)


class ImplIndexUsageError(ImplIndexCliError):
    """Invalid combination of flags or arguments."""

    exit_code = ExitCode.USAGE_ERROR


class ImplIndexDataError(ImplIndexCliError):
    """Malformed fragment, payload or module name."""

    exit_code = ExitCode.DATA_ERROR


class ImplIndexFileNotFoundError(ImplIndexCliError):
    """Input path does not exist."""

    exit_code = ExitCode.FILE_NOT_FOUND


class ImplIndexSoftwareError(ImplIndexCliError):
    """Internal failure, such as a consumer intake raising during replay."""

    exit_code = ExitCode.SOFTWARE_ERROR


class ImplIndexIOError(ImplIndexCliError):
    """Error reading or writing files."""

    exit_code = ExitCode.IO_ERROR


class ImplIndexConfigError(ImplIndexCliError):
    """Configuration file missing, unreadable or malformed."""

    exit_code = ExitCode.CONFIG_ERROR
