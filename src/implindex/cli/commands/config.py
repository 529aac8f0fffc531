# topmark:header:start
#
#   project      : ImplIndex
#   file         : config.py
#   file_relpath : src/implindex/cli/commands/config.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""ImplIndex `config` command.

Prints the effective registry configuration after merging defaults, discovered
config files, ``--config`` files and overrides. TOML output is wrapped between
``# === BEGIN ===`` and ``# === END ===`` markers for easy extraction.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from implindex.cli.cli_types import OutputFormat
from implindex.cli.cmd_common import get_console
from implindex.cli.config_resolver import resolve_config_from_click
from implindex.cli.options import config_options, format_option
from implindex.config.io import to_toml
from implindex.machine import (
    MachineKey,
    MachineKind,
    serialize_json_envelope,
    serialize_ndjson_items,
)

if TYPE_CHECKING:
    from implindex.cli.console import ConsoleLike
    from implindex.config import DuplicatePolicy, RegistryConfig

BEGIN_MARKER = "# === BEGIN ==="
END_MARKER = "# === END ==="


@click.command(
    name="config",
    help="Print the effective registry configuration.",
)
@config_options
@format_option()
def config_command(
    *,
    config_paths: tuple[str, ...],
    no_config: bool,
    duplicate_policy: DuplicatePolicy | None,
    output_format: OutputFormat,
) -> None:
    """Print the merged configuration (TOML by default)."""
    ctx = click.get_current_context()
    console: ConsoleLike = get_console(ctx)

    config: RegistryConfig = resolve_config_from_click(
        config_paths=config_paths, no_config=no_config, duplicate_policy=duplicate_policy
    )
    payload: dict[str, object] = dict(config.to_toml_dict())
    files: list[str] = [p.as_posix() for p in config.config_files]

    if output_format is OutputFormat.JSON:
        console.print(serialize_json_envelope(**{MachineKey.CONFIG: {**payload, "files": files}}))
        return
    if output_format is OutputFormat.NDJSON:
        console.print(
            serialize_ndjson_items(MachineKind.CONFIG, [{**payload, "files": files}]), nl=False
        )
        return

    if output_format is OutputFormat.MARKDOWN:
        console.print("# ImplIndex configuration\n")
        console.print("```toml")
        console.print(to_toml(payload).rstrip())
        console.print("```")
        return

    for path in files:
        console.detail(f"# from {path}")
    console.print(BEGIN_MARKER)
    console.print(to_toml(payload).rstrip())
    console.print(END_MARKER)
