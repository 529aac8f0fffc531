# topmark:header:start
#
#   project      : ImplIndex
#   file         : cmd_common.py
#   file_relpath : src/implindex/cli/cmd_common.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Helpers shared by ImplIndex CLI commands."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from implindex.cli.console import ClickConsole
from implindex.cli.errors import ImplIndexDataError, ImplIndexFileNotFoundError, ImplIndexIOError
from implindex.errors import FragmentFormatError
from implindex.fragments import discover_fragments, load_fragment

if TYPE_CHECKING:
    from collections.abc import Sequence
    from pathlib import Path

    from implindex.cli.console import ConsoleLike
    from implindex.fragments import Fragment


def get_console(ctx: click.Context) -> ConsoleLike:
    """Return the console stored on the context (a plain one if the group did not run)."""
    ctx.ensure_object(dict)
    console: ConsoleLike | None = ctx.obj.get("console")
    if console is None:
        verbosity: int = int(ctx.obj.get("verbosity_level", 0))
        console = ClickConsole(enable_color=False, verbosity=verbosity)
        ctx.obj["console"] = console
    return console


def require_existing(paths: Sequence[Path]) -> None:
    """Raise `ImplIndexFileNotFoundError` for the first missing path."""
    for path in paths:
        if not path.exists():
            raise ImplIndexFileNotFoundError(f"No such file or directory: {path}")


def load_fragments(paths: Sequence[Path], *, exclude: Sequence[str] = ()) -> list[Fragment]:
    """Discover and parse fragment files, failing on the first bad one.

    Raises:
        ImplIndexFileNotFoundError: If an input path does not exist.
        ImplIndexDataError: If a fragment is malformed.
        ImplIndexIOError: If a fragment cannot be read.
    """
    require_existing(paths)
    fragments: list[Fragment] = []
    for path in discover_fragments(paths, exclude=exclude):
        try:
            fragments.append(load_fragment(path))
        except FragmentFormatError as exc:
            raise ImplIndexDataError(str(exc)) from exc
        except UnicodeDecodeError as exc:
            raise ImplIndexDataError(f"{path}: not valid UTF-8 ({exc.reason})") from exc
        except OSError as exc:
            raise ImplIndexIOError(f"Cannot read {path}: {exc}") from exc
    return fragments
