# topmark:header:start
#
#   project      : ImplIndex
#   file         : __init__.py
#   file_relpath : src/implindex/model/__init__.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Value types for implementor indexes (records, references, module groups)."""

from __future__ import annotations

from implindex.model.records import (
    ImplementorRecord,
    ItemKind,
    ItemRef,
    ModuleIndex,
    RelationKind,
    TypeConstraint,
)

__all__ = [
    "ImplementorRecord",
    "ItemKind",
    "ItemRef",
    "ModuleIndex",
    "RelationKind",
    "TypeConstraint",
]
