# topmark:header:start
#
#   project      : ImplIndex
#   file         : conftest.py
#   file_relpath : tests/cli/conftest.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Helpers for invoking the ``implindex`` group in-process.

`run_cli_in()` runs a command from inside a temporary directory so relative
fragment paths and config discovery (``implindex.toml``, ``pyproject.toml``)
see only what the test wrote there. `run_cli()` leaves the working directory
alone and suits ``version`` or absolute paths.

The ``assert_<EXIT_CODE>`` helpers check a result's exit code and show the
command output when it differs.
"""

from __future__ import annotations

import os
from collections.abc import Callable, Iterator, Sequence
from typing import IO, TYPE_CHECKING, Any

import pytest
from click.testing import CliRunner, Result

from implindex.cli.exit_codes import ExitCode
from implindex.cli.main import cli
from implindex.config import logging

if TYPE_CHECKING:
    from pathlib import Path

Argv = str | Sequence[str] | None
StdinInput = str | bytes | IO[Any] | None


@pytest.fixture(autouse=True)
def restore_test_logging() -> Iterator[None]:
    """Put TRACE logging back after each test.

    Every CLI run reconfigures the root logger from ``IMPLINDEX_LOG_LEVEL``;
    non-CLI tests rely on the TRACE setup from the top-level conftest.
    """
    yield
    logging.setup_logging(level=logging.TRACE_LEVEL)


def run_cli(argv: Argv, *, input_text: StdinInput = None) -> Result:
    """Invoke the CLI in the current working directory."""
    return CliRunner().invoke(cli, argv, input=input_text)


def run_cli_in(tmp_path: Path, argv: Argv, *, input_text: StdinInput = None) -> Result:
    """Invoke the CLI with ``tmp_path`` as the working directory.

    Example:
        ```python
        write_fragment(tmp_path, "core::fmt::Debug", DEBUG_FRAGMENT)
        assert_SUCCESS(run_cli_in(tmp_path, ["check", "implementors"]))
        ```
    """
    previous: str = os.getcwd()
    os.chdir(tmp_path)
    try:
        return run_cli(argv, input_text=input_text)
    finally:
        os.chdir(previous)


def _exit_code_assertion(expected: ExitCode) -> Callable[[Result], None]:
    def check(result: Result) -> None:
        assert result.exit_code == expected, (
            f"expected exit {int(expected)} ({expected.name}), got {result.exit_code}\n"
            f"{result.output}"
        )

    check.__name__ = f"assert_{expected.name}"
    check.__doc__ = f"Assert that the command exited with {expected.name} ({int(expected)})."
    return check


assert_SUCCESS = _exit_code_assertion(ExitCode.SUCCESS)
assert_USAGE_ERROR = _exit_code_assertion(ExitCode.USAGE_ERROR)
assert_DATA_ERROR = _exit_code_assertion(ExitCode.DATA_ERROR)
assert_FILE_NOT_FOUND = _exit_code_assertion(ExitCode.FILE_NOT_FOUND)
assert_CONFIG_ERROR = _exit_code_assertion(ExitCode.CONFIG_ERROR)
