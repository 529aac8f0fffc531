# topmark:header:start
#
#   project      : ImplIndex
#   file         : __init__.py
#   file_relpath : src/implindex/__init__.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""ImplIndex package.

ImplIndex assembles "implementors" indexes for documentation sites: each
documented module contributes the (interface, implementing type) relationships
it knows about, and one consumer per interface page renders them. Producers and
the consumer run in any order; a `RegistryHandoff` buffers registrations until
the consumer attaches and forwards them afterwards.

Typical usage:
    ```python
    from implindex import ImplementorIndex, IndexFragmentProducer, RegistryHandoff

    registry = RegistryHandoff("core::fmt::Debug")
    IndexFragmentProducer(registry).register("crate_a", records)
    index = ImplementorIndex("core::fmt::Debug")
    registry.attach_consumer(index)
    ```
"""

from __future__ import annotations

from implindex.config import DuplicatePolicy, RegistryConfig
from implindex.consumer import ImplementorIndex
from implindex.errors import DoubleAttachment, ImplIndexError, InvalidModuleName
from implindex.model import ImplementorRecord, ItemKind, ItemRef, ModuleIndex
from implindex.producer import IndexFragmentProducer
from implindex.registry import RegistryHandoff, RegistryPhase

__all__ = [
    "DoubleAttachment",
    "DuplicatePolicy",
    "ImplIndexError",
    "ImplementorIndex",
    "ImplementorRecord",
    "IndexFragmentProducer",
    "InvalidModuleName",
    "ItemKind",
    "ItemRef",
    "ModuleIndex",
    "RegistryConfig",
    "RegistryHandoff",
    "RegistryPhase",
]
