# topmark:header:start
#
#   project      : ImplIndex
#   file         : __init__.py
#   file_relpath : src/implindex/registry/__init__.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Registry handoff between implementor index producers and their consumer.

`RegistryHandoff` is the coordination point; `implindex.registry.runtime`
owns the single process-wide instance.
"""

from __future__ import annotations

from implindex.registry.handoff import (
    IntakeFn,
    RegistryHandoff,
    RegistryPhase,
    RegistryStats,
)
from implindex.registry.runtime import (
    get_registry,
    init_registry,
    is_initialized,
    registry_scope,
    shutdown_registry,
)

__all__ = [
    "IntakeFn",
    "RegistryHandoff",
    "RegistryPhase",
    "RegistryStats",
    "get_registry",
    "init_registry",
    "is_initialized",
    "registry_scope",
    "shutdown_registry",
]
