# topmark:header:start
#
#   project      : ImplIndex
#   file         : __init__.py
#   file_relpath : src/implindex/cli/commands/__init__.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""ImplIndex CLI subcommands."""
