# topmark:header:start
#
#   project      : ImplIndex
#   file         : __init__.py
#   file_relpath : src/implindex/cli/__init__.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""ImplIndex CLI package.

The console script entry point is defined in ``pyproject.toml`` as::

    [project.scripts]
    implindex = "implindex.cli.main:cli"

All subcommands live in `implindex.cli.commands`.
"""

from __future__ import annotations

__all__: list[str] = []
