# topmark:header:start
#
#   project      : ImplIndex
#   file         : main.py
#   file_relpath : src/implindex/cli/main.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""The ``implindex`` command group.

The group callback builds one `ClickConsole` from ``-v``/``-q`` and the
color flags and stores it on ``ctx.obj``; subcommands fetch it with
`implindex.cli.cmd_common.get_console`. Logging is configured separately,
from ``IMPLINDEX_LOG_LEVEL`` alone.
"""

from __future__ import annotations

import click

from implindex.cli.commands.check import check_command
from implindex.cli.commands.config import config_command
from implindex.cli.commands.render import render_command
from implindex.cli.commands.show import show_command
from implindex.cli.commands.version import version_command
from implindex.cli.console import ClickConsole
from implindex.cli.options import (
    ColorMode,
    color_options,
    resolve_color,
    resolve_verbosity,
    verbosity_options,
)
from implindex.config.logging import setup_logging

_HINT = "Hint: use 'implindex show PATHS...' to print an implementor index."


@click.group(
    context_settings={"help_option_names": ["-h", "--help"]},
    invoke_without_command=True,
    help="ImplIndex: assemble implementor indexes from documentation fragments.",
)
@verbosity_options
@color_options
@click.pass_context
def cli(
    ctx: click.Context,
    verbose: int,
    quiet: int,
    color_mode: ColorMode,
    no_color: bool,
) -> None:
    setup_logging()

    ctx.ensure_object(dict)
    verbosity: int = resolve_verbosity(verbose, quiet)
    ctx.obj["verbosity_level"] = verbosity
    ctx.color = resolve_color(ColorMode.NEVER if no_color else color_mode)
    console = ClickConsole(enable_color=bool(ctx.color), verbosity=verbosity)
    ctx.obj["console"] = console

    if ctx.invoked_subcommand is None:
        console.print(_HINT)
        console.print()
        console.print(ctx.get_help())


for _command in (show_command, check_command, render_command, config_command, version_command):
    cli.add_command(_command)


if __name__ == "__main__":
    cli()
