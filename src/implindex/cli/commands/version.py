# topmark:header:start
#
#   project      : ImplIndex
#   file         : version.py
#   file_relpath : src/implindex/cli/commands/version.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""ImplIndex `version` command.

Prints the ImplIndex version as installed in the active Python environment.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from implindex.cli.cli_types import OutputFormat
from implindex.cli.cmd_common import get_console
from implindex.cli.options import format_option
from implindex.constants import IMPLINDEX_VERSION
from implindex.machine import (
    MachineKey,
    MachineKind,
    serialize_json_envelope,
    serialize_ndjson_items,
)

if TYPE_CHECKING:
    from implindex.cli.console import ConsoleLike


@click.command(
    name="version",
    help="Show the current version of ImplIndex.",
)
@format_option()
def version_command(*, output_format: OutputFormat) -> None:
    """Show the current version of ImplIndex."""
    ctx = click.get_current_context()
    console: ConsoleLike = get_console(ctx)

    if output_format is OutputFormat.JSON:
        console.print(serialize_json_envelope(**{MachineKey.VERSION: IMPLINDEX_VERSION}))
    elif output_format is OutputFormat.NDJSON:
        console.print(
            serialize_ndjson_items(MachineKind.VERSION, [{MachineKey.VERSION: IMPLINDEX_VERSION}]),
            nl=False,
        )
    elif output_format is OutputFormat.MARKDOWN:
        console.print("# ImplIndex Version\n")
        console.print(f"**ImplIndex version: {IMPLINDEX_VERSION}**")
    elif console.verbosity > 0:
        console.print(console.styled("ImplIndex version:\n", bold=True, underline=True))
        console.print(f"    {console.styled(IMPLINDEX_VERSION, bold=True)}")
    else:
        console.print(console.styled(IMPLINDEX_VERSION, bold=True))
