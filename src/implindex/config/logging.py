# topmark:header:start
#
#   project      : ImplIndex
#   file         : logging.py
#   file_relpath : src/implindex/config/logging.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""ImplIndex diagnostics logging with a TRACE level below DEBUG.

The registry logs buffering, replay and duplicate handling at DEBUG and every
live forward at TRACE, so TRACE is the level to use when debugging delivery
order between producers and the consumer. Producers often run on worker
threads (``implindex show --jobs N``); below INFO each record names its thread.

Diagnostics are written to stderr so that machine output on stdout
(``--format json`` / ``ndjson``) stays parseable whatever ``IMPLINDEX_LOG_LEVEL``
is set to.
"""

from __future__ import annotations

import logging
import os
import sys
from typing import TYPE_CHECKING, Final, cast

from yachalk import chalk

from implindex.constants import ENV_LOG_LEVEL

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping

TRACE_LEVEL: Final[int] = logging.DEBUG - 5

logging.addLevelName(TRACE_LEVEL, "TRACE")


class ImplIndexLogger(logging.Logger):
    """Logger with a `trace` method for per-delivery records."""

    def trace(
        self,
        msg: object,
        *args: object,
        extra: Mapping[str, object] | None = None,
    ) -> None:
        """Log ``msg % args`` at TRACE level.

        Args:
            msg (object): The message to be logged.
            *args (object): Arguments merged into ``msg``.
            extra (Mapping[str, object] | None): Extra attributes for the record.
        """
        if self.isEnabledFor(TRACE_LEVEL):
            self._log(TRACE_LEVEL, msg, args, extra=extra, stacklevel=2)


logging.setLoggerClass(ImplIndexLogger)


LOG_FORMAT: Final[str] = "[%(levelname)s] %(message)s"
DEBUG_LOG_FORMAT: Final[str] = "[%(levelname)s] [%(threadName)s] [%(name)s:%(lineno)d] %(message)s"

# Checked in order; the first threshold a record reaches picks its color.
_LEVEL_STYLES: Final[tuple[tuple[int, Callable[[str], str]], ...]] = (
    (logging.CRITICAL, chalk.red_bright),
    (logging.ERROR, chalk.red),
    (logging.WARNING, chalk.yellow),
    (logging.INFO, chalk.green),
    (logging.DEBUG, chalk.gray),
    (TRACE_LEVEL, chalk.blue),
)


class ChalkFormatter(logging.Formatter):
    """Formatter that colors each record by severity."""

    def format(self, record: logging.LogRecord) -> str:
        """Format ``record`` and color it according to its level.

        Args:
            record (logging.LogRecord): The record to format.

        Returns:
            str: The colored message.
        """
        message: str = super().format(record)
        for threshold, style in _LEVEL_STYLES:
            if record.levelno >= threshold:
                return style(message)
        return chalk.dim(message)


_LEVEL_NAMES: Final[dict[str, int]] = {
    "TRACE": TRACE_LEVEL,
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "WARN": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
    "FATAL": logging.CRITICAL,
    "NOTSET": logging.NOTSET,
}


def parse_log_level(value: str) -> int | None:
    """Parse a level name (``"TRACE"``, ``"debug"``) or a number (``"10"``).

    Returns:
        int | None: The numeric level, or ``None`` when the value is not recognized.
    """
    v = value.strip().upper()
    if v.isdigit():
        return int(v)
    return _LEVEL_NAMES.get(v)


def resolve_env_log_level() -> int | None:
    """Return the level named by ``IMPLINDEX_LOG_LEVEL``, or ``None`` if unset or invalid."""
    raw: str | None = os.environ.get(ENV_LOG_LEVEL)
    return parse_log_level(raw) if raw else None


def setup_logging(level: int | None = None) -> None:
    """Route ImplIndex diagnostics to stderr at ``level``.

    Any handlers already on the root logger are replaced, so calling this
    repeatedly (once per CLI invocation) never duplicates records.

    Args:
        level (int | None): Threshold; ``None`` consults ``IMPLINDEX_LOG_LEVEL``
            and falls back to CRITICAL (effectively silent).
    """
    if level is None:
        level = resolve_env_log_level() or logging.CRITICAL

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(ChalkFormatter(LOG_FORMAT if level >= logging.INFO else DEBUG_LOG_FORMAT))
    root_logger.addHandler(handler)


def get_logger(name: str) -> ImplIndexLogger:
    """Return the `ImplIndexLogger` for ``name``."""
    return cast("ImplIndexLogger", logging.getLogger(name))
