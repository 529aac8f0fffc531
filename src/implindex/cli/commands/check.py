# topmark:header:start
#
#   project      : ImplIndex
#   file         : check.py
#   file_relpath : src/implindex/cli/commands/check.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""ImplIndex `check` command.

Validates fragment files without printing the index: every fragment must
parse, and every module registration must be accepted by a producer and the
registry under the effective configuration. All problems are listed; the
command exits with `ExitCode.DATA_ERROR` when there is at least one.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import click

from implindex.cli.cli_types import OutputFormat
from implindex.cli.cmd_common import get_console, require_existing
from implindex.cli.config_resolver import resolve_config_from_click
from implindex.cli.emitters import emit_problems_default, render_problem_line
from implindex.cli.exit_codes import ExitCode
from implindex.cli.options import (
    config_options,
    format_option,
    fragment_selection_options,
)
from implindex.config.logging import get_logger
from implindex.errors import FragmentFormatError
from implindex.fragments import discover_fragments, load_fragment
from implindex.machine import (
    MachineKey,
    MachineKind,
    ProblemPayload,
    serialize_json_envelope,
    serialize_ndjson_items,
)
from implindex.pages import build_page

if TYPE_CHECKING:
    from implindex.cli.console import ConsoleLike
    from implindex.config import DuplicatePolicy, RegistryConfig
    from implindex.config.logging import ImplIndexLogger
    from implindex.fragments import Fragment

logger: ImplIndexLogger = get_logger(__name__)


def collect_problems(
    paths: list[Path],
    config: RegistryConfig,
    *,
    exclude: tuple[str, ...] = (),
) -> tuple[int, list[ProblemPayload]]:
    """Validate fragments below ``paths``.

    Returns:
        tuple[int, list[ProblemPayload]]: Number of fragment files checked and
            the problems found, in file order.
    """
    problems: list[ProblemPayload] = []
    found: list[Path] = discover_fragments(paths, exclude=exclude)
    for path in found:
        try:
            fragment: Fragment = load_fragment(path)
        except FragmentFormatError as exc:
            problems.append(ProblemPayload(path=path, message=exc.message, line=exc.line))
            continue
        except (OSError, UnicodeDecodeError) as exc:
            problems.append(ProblemPayload(path=path, message=f"cannot read file: {exc}"))
            continue
        page = build_page(fragment, config)
        problems.extend(ProblemPayload(path=path, message=str(exc)) for exc in page.rejected)
    logger.info("Checked %d fragment(s), %d problem(s)", len(found), len(problems))
    return len(found), problems


@click.command(
    name="check",
    help="Validate fragment files and the module names they register.",
)
@fragment_selection_options
@config_options
@format_option()
def check_command(
    *,
    paths: tuple[str, ...],
    exclude_patterns: tuple[str, ...],
    config_paths: tuple[str, ...],
    no_config: bool,
    duplicate_policy: DuplicatePolicy | None,
    output_format: OutputFormat,
) -> None:
    """Report malformed fragments and rejected registrations."""
    ctx = click.get_current_context()
    console: ConsoleLike = get_console(ctx)

    config: RegistryConfig = resolve_config_from_click(
        config_paths=config_paths, no_config=no_config, duplicate_policy=duplicate_policy
    )
    roots: list[Path] = [Path(p) for p in paths]
    require_existing(roots)
    checked, problems = collect_problems(roots, config, exclude=exclude_patterns)

    if output_format is OutputFormat.JSON:
        console.print(serialize_json_envelope(**{MachineKey.PROBLEMS: problems}))
    elif output_format is OutputFormat.NDJSON:
        console.print(serialize_ndjson_items(MachineKind.PROBLEM, problems), nl=False)
    elif output_format is OutputFormat.MARKDOWN:
        console.print("# Fragment check\n")
        if problems:
            for problem in problems:
                console.print(f"- `{render_problem_line(problem)}`")
        else:
            console.print(f"All {checked} fragment(s) are valid.")
    else:
        emit_problems_default(console=console, problems=problems, checked=checked)

    if problems:
        ctx.exit(ExitCode.DATA_ERROR)
