# topmark:header:start
#
#   project      : ImplIndex
#   file         : __init__.py
#   file_relpath : src/implindex/config/__init__.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Configuration for ImplIndex registries.

Build a `MutableRegistryConfig` (tri-state, mergeable) from TOML sources, then
`freeze()` it into the immutable `RegistryConfig` a registry is created with.
"""

from __future__ import annotations

from implindex.config.model import DuplicatePolicy, MutableRegistryConfig, RegistryConfig

__all__ = [
    "DuplicatePolicy",
    "MutableRegistryConfig",
    "RegistryConfig",
]
