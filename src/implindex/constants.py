# topmark:header:start
#
#   project      : ImplIndex
#   file         : constants.py
#   file_relpath : src/implindex/constants.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""ImplIndex Constants."""

from __future__ import annotations

from importlib.metadata import version as get_version

IMPLINDEX_VERSION: str = get_version("implindex")

TOOL_NAME: str = "implindex"

# Config file names (discovered in the working directory)
IMPLINDEX_TOML_NAME: str = "implindex.toml"
PYPROJECT_TOML_NAME: str = "pyproject.toml"

# Environment variables
ENV_LOG_LEVEL: str = "IMPLINDEX_LOG_LEVEL"
ENV_DUPLICATE_POLICY: str = "IMPLINDEX_DUPLICATE_POLICY"

# Fragment layout: `implementors/<path>/<kind>.<Name>.js`
FRAGMENT_DIR_NAME: str = "implementors"
FRAGMENT_SUFFIX: str = ".js"

FRAGMENT_PROLOGUE: str = "(function() {var implementors = {};"
FRAGMENT_EPILOGUE: str = (
    "if (window.register_implementors) {window.register_implementors(implementors);} "
    "else {window.pending_implementors = implementors;}})()"
)
