# topmark:header:start
#
#   project      : ImplIndex
#   file         : show.py
#   file_relpath : src/implindex/cli/commands/show.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""ImplIndex `show` command.

Loads fragment files, feeds each into its own registry through a producer,
attaches an `ImplementorIndex` per page and prints the resulting index.

Input:
  - PATHS: fragment files or directories containing an ``implementors`` tree.

Output:
  - default / markdown: interface -> module -> implementors.
  - json: ``{"meta": ..., "pages": [...]}`` (readable by ``implindex render``).
  - ndjson: one ``page`` record per interface.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import click

from implindex.cli.cli_types import OutputFormat
from implindex.cli.cmd_common import get_console, load_fragments
from implindex.cli.config_resolver import resolve_config_from_click
from implindex.cli.emitters import emit_pages_default, render_pages_markdown
from implindex.cli.errors import ImplIndexSoftwareError, ImplIndexUsageError
from implindex.cli.options import (
    config_options,
    format_option,
    fragment_selection_options,
)
from implindex.config.logging import get_logger
from implindex.errors import ImplIndexError
from implindex.machine import (
    MachineKey,
    MachineKind,
    serialize_json_envelope,
    serialize_ndjson_items,
)
from implindex.pages import PageResult, build_page

if TYPE_CHECKING:
    from implindex.cli.console import ConsoleLike
    from implindex.config import DuplicatePolicy, RegistryConfig
    from implindex.config.logging import ImplIndexLogger
    from implindex.fragments import Fragment

logger: ImplIndexLogger = get_logger(__name__)


@click.command(
    name="show",
    help="Show the implementor index assembled from fragment files.",
)
@fragment_selection_options
@config_options
@format_option()
@click.option(
    "--jobs",
    "-j",
    type=click.IntRange(min=1),
    default=1,
    show_default=True,
    help="Run the producers of each fragment on this many threads.",
)
@click.option(
    "--attach-first",
    is_flag=True,
    help="Attach the consumer before the producers run (live forwarding instead of replay).",
)
def show_command(
    *,
    paths: tuple[str, ...],
    exclude_patterns: tuple[str, ...],
    config_paths: tuple[str, ...],
    no_config: bool,
    duplicate_policy: DuplicatePolicy | None,
    output_format: OutputFormat,
    jobs: int,
    attach_first: bool,
) -> None:
    """Print the interface -> module -> implementors index."""
    ctx = click.get_current_context()
    console: ConsoleLike = get_console(ctx)

    config: RegistryConfig = resolve_config_from_click(
        config_paths=config_paths, no_config=no_config, duplicate_policy=duplicate_policy
    )
    fragments: list[Fragment] = load_fragments(
        [Path(p) for p in paths], exclude=exclude_patterns
    )
    if not fragments:
        raise ImplIndexUsageError("No fragment files found.")

    pages: list[PageResult] = []
    for fragment in fragments:
        try:
            pages.append(build_page(fragment, config, jobs=jobs, attach_first=attach_first))
        except ImplIndexError as exc:
            raise ImplIndexSoftwareError(
                f"Cannot assemble page {fragment.interface_path}: {exc}"
            ) from exc
    logger.debug("Built %d page(s)", len(pages))

    if output_format is OutputFormat.JSON:
        payloads = [p.to_payload() for p in pages]
        console.print(serialize_json_envelope(**{MachineKey.PAGES: payloads}))
    elif output_format is OutputFormat.NDJSON:
        console.print(
            serialize_ndjson_items(MachineKind.PAGE, (p.to_payload() for p in pages)), nl=False
        )
    elif output_format is OutputFormat.MARKDOWN:
        console.print(render_pages_markdown(pages), nl=False)
    else:
        emit_pages_default(console=console, pages=pages)
