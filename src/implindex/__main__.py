# topmark:header:start
#
#   project      : ImplIndex
#   file         : __main__.py
#   file_relpath : src/implindex/__main__.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Module entry point for running ImplIndex via ``python -m implindex``.

Delegates to `implindex.cli.main.cli`, the single CLI entry point.
"""

from __future__ import annotations

from implindex.cli.main import cli

if __name__ == "__main__":
    cli()
