# topmark:header:start
#
#   project      : ImplIndex
#   file         : keys.py
#   file_relpath : src/implindex/config/keys.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Canonical TOML section and key names for ImplIndex configuration.

Keys defined here are the external configuration API as it appears in
``implindex.toml`` and in ``[tool.implindex]`` inside ``pyproject.toml``.
Renaming or removing a key is a breaking change.
"""

from __future__ import annotations

from typing import Final


class Toml:
    """TOML section names and keys used by ImplIndex configuration."""

    # pyproject.toml nesting
    SECTION_TOOL: Final[str] = "tool"
    SECTION_TOOL_IMPLINDEX: Final[str] = "implindex"

    # [registry]
    SECTION_REGISTRY: Final[str] = "registry"

    KEY_DUPLICATE_POLICY: Final[str] = "duplicate_policy"
    KEY_STRICT_MODULE_NAMES: Final[str] = "strict_module_names"
    KEY_WARN_UNDELIVERED: Final[str] = "warn_undelivered"
