# topmark:header:start
#
#   project      : ImplIndex
#   file         : options.py
#   file_relpath : src/implindex/cli/options.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Option bundles shared by the ImplIndex group and its commands.

Each bundle is a decorator stacking related Click options, so every command
spells ``--config``, ``--format`` and friends the same way. The ``resolve_*``
helpers turn the raw option values into the settings the console uses.
"""

from __future__ import annotations

import os
import sys
from enum import Enum
from typing import Callable, ParamSpec, TypeVar

import click

from implindex.cli.cli_types import EnumChoiceParam, OutputFormat
from implindex.cli.errors import ImplIndexUsageError
from implindex.config.model import DuplicatePolicy

P = ParamSpec("P")
R = TypeVar("R")

Decorator = Callable[[Callable[P, R]], Callable[P, R]]


def _bundle(*decorators: Decorator[P, R]) -> Decorator[P, R]:
    """Apply ``decorators`` bottom-up, as if stacked in the order given."""

    def apply(f: Callable[P, R]) -> Callable[P, R]:
        for decorator in reversed(decorators):
            f = decorator(f)
        return f

    return apply


class ColorMode(str, Enum):
    AUTO = "auto"
    ALWAYS = "always"
    NEVER = "never"


def resolve_verbosity(verbose_count: int, quiet_count: int) -> int:
    """Collapse ``-v``/``-q`` counts to one level: ``-1`` quiet, else the ``-v`` count.

    Raises:
        ImplIndexUsageError: If both flags are given.
    """
    if verbose_count and quiet_count:
        raise ImplIndexUsageError("The '--verbose' and '--quiet' options are mutually exclusive.")
    return -1 if quiet_count else verbose_count


def resolve_color(mode: ColorMode, *, stdout_isatty: bool | None = None) -> bool:
    """Decide whether human output is colored.

    An explicit ``always``/``never`` wins. ``auto`` honors ``FORCE_COLOR``
    (any value but ``0``), then ``NO_COLOR``, then whether stdout is a TTY.
    """
    if mode is not ColorMode.AUTO:
        return mode is ColorMode.ALWAYS
    if os.getenv("FORCE_COLOR", "0") != "0":
        return True
    if "NO_COLOR" in os.environ:
        return False
    if stdout_isatty is None:
        isatty = getattr(sys.stdout, "isatty", None)
        stdout_isatty = bool(isatty and isatty())
    return stdout_isatty


verbosity_options = _bundle(
    click.option("-v", "--verbose", count=True, help="Print more detail; repeatable."),
    click.option("-q", "--quiet", count=True, help="Print results and errors only."),
)

color_options = _bundle(
    click.option(
        "--color",
        "color_mode",
        type=EnumChoiceParam(ColorMode),
        default=ColorMode.AUTO.value,
        help="Colorize human output.",
    ),
    click.option("--no-color", is_flag=True, help="Same as --color=never."),
)

config_options = _bundle(
    click.option(
        "--config",
        "config_paths",
        multiple=True,
        metavar="FILE",
        type=click.Path(dir_okay=False),
        help="Merge this TOML file over the discovered configuration (repeatable).",
    ),
    click.option(
        "--no-config",
        is_flag=True,
        help="Skip implindex.toml and pyproject.toml in the working directory.",
    ),
    click.option(
        "--duplicate-policy",
        type=EnumChoiceParam(DuplicatePolicy, DuplicatePolicy.parse),
        default=None,
        help="How a second registration for a module is handled.",
    ),
)

fragment_selection_options = _bundle(
    click.argument("paths", nargs=-1, required=True, type=click.Path(path_type=str)),
    click.option(
        "--exclude",
        "-e",
        "exclude_patterns",
        multiple=True,
        metavar="PATTERN",
        help="Skip fragments matching this gitwildmatch pattern (repeatable).",
    ),
)


def format_option(*, default: OutputFormat = OutputFormat.DEFAULT) -> Decorator[P, R]:
    return click.option(
        "--format",
        "output_format",
        type=EnumChoiceParam(OutputFormat),
        default=default.value,
        show_default=True,
        help="Output format.",
    )
