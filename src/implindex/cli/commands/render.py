# topmark:header:start
#
#   project      : ImplIndex
#   file         : render.py
#   file_relpath : src/implindex/cli/commands/render.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""ImplIndex `render` command.

Turns the JSON written by ``implindex show --format json`` back into fragment
scripts, either under ``--output-dir`` (one file per interface, at its
canonical ``implementors/...`` path) or on stdout.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import TYPE_CHECKING, Any

import click

from implindex.cli.cmd_common import get_console
from implindex.cli.errors import ImplIndexDataError, ImplIndexFileNotFoundError, ImplIndexIOError
from implindex.config.logging import get_logger
from implindex.errors import FragmentFormatError
from implindex.fragments import fragment_path_for, render_fragment
from implindex.machine import MachineKey, PagePayload, page_from_payload

if TYPE_CHECKING:
    from implindex.cli.console import ConsoleLike
    from implindex.config.logging import ImplIndexLogger

logger: ImplIndexLogger = get_logger(__name__)


def read_pages(text: str) -> list[PagePayload]:
    """Decode a ``show --format json`` envelope into page payloads.

    Raises:
        ImplIndexDataError: If the document is not valid JSON or has the wrong shape.
    """
    try:
        envelope: Any = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ImplIndexDataError(f"Invalid JSON input: {exc}") from exc
    if not isinstance(envelope, dict) or not isinstance(envelope.get(MachineKey.PAGES), list):
        raise ImplIndexDataError(f"Input must be a JSON object with a '{MachineKey.PAGES}' list.")
    try:
        return [page_from_payload(p) for p in envelope[MachineKey.PAGES] if isinstance(p, dict)]
    except FragmentFormatError as exc:
        raise ImplIndexDataError(str(exc)) from exc


@click.command(
    name="render",
    help="Write fragment files from the JSON produced by 'implindex show --format json'.",
)
@click.argument("input_path", metavar="INPUT", type=click.Path(path_type=str))
@click.option(
    "--output-dir",
    "-o",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Directory receiving the 'implementors/...' tree (default: print to stdout).",
)
def render_command(*, input_path: str, output_dir: Path | None) -> None:
    """Render fragment scripts from page JSON (``-`` reads stdin)."""
    ctx = click.get_current_context()
    console: ConsoleLike = get_console(ctx)

    if input_path == "-":
        text: str = click.get_text_stream("stdin").read()
    else:
        source = Path(input_path)
        if not source.is_file():
            raise ImplIndexFileNotFoundError(f"No such file: {source}")
        try:
            text = source.read_text(encoding="utf-8")
        except OSError as exc:
            raise ImplIndexIOError(f"Cannot read {source}: {exc}") from exc

    pages: list[PagePayload] = read_pages(text)
    for page in pages:
        fragment_text: str = render_fragment(page.modules)
        if output_dir is None:
            if len(pages) > 1:
                console.print(f"// {fragment_path_for(page.interface, page.kind).as_posix()}")
            console.print(fragment_text)
            continue

        target: Path = fragment_path_for(page.interface, page.kind, root=output_dir)
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(fragment_text, encoding="utf-8")
        except OSError as exc:
            raise ImplIndexIOError(f"Cannot write {target}: {exc}") from exc
        logger.info("Wrote %s", target)
        console.note(f"Wrote {target}")
