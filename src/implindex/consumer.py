# topmark:header:start
#
#   project      : ImplIndex
#   file         : consumer.py
#   file_relpath : src/implindex/consumer.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Reference consumer for implementor registrations.

Any callable ``(module_name, records) -> None`` can be attached to a
`implindex.registry.RegistryHandoff`. `ImplementorIndex` is the one ImplIndex
ships: it accepts deliveries from the attachment replay and from live
forwarding alike, keeps the delivery log, and answers the lookups a page
renderer needs (modules in delivery order, implementors de-duplicated by type
path).

One `ImplementorIndex` belongs to one interface page, mirroring the one
registry per page that feeds it.
"""

from __future__ import annotations

from dataclasses import dataclass
from threading import RLock
from types import MappingProxyType
from typing import TYPE_CHECKING

from implindex.config.logging import get_logger

if TYPE_CHECKING:
    from collections.abc import Mapping

    from implindex.config.logging import ImplIndexLogger
    from implindex.model import ImplementorRecord

logger: ImplIndexLogger = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class Delivery:
    """One intake call as received.

    Attributes:
        sequence: 0-based position in the delivery log.
        module: Module name.
        records: Records delivered for the module.
    """

    sequence: int
    module: str
    records: tuple[ImplementorRecord, ...]


class ImplementorIndex:
    """Thread-safe intake that accumulates module registrations for one interface page.

    A module delivered again replaces its previous records but keeps its
    original position.

    Args:
        interface (str): Qualified path of the interface page (informational).
    """

    def __init__(self, interface: str = "") -> None:
        self.interface: str = interface
        self._lock = RLock()
        self._modules: dict[str, tuple[ImplementorRecord, ...]] = {}
        self._deliveries: list[Delivery] = []

    def __repr__(self) -> str:
        return f"ImplementorIndex(interface={self.interface!r}, modules={len(self._modules)})"

    def __call__(self, module_name: str, records: tuple[ImplementorRecord, ...]) -> None:
        self.intake(module_name, records)

    def intake(self, module_name: str, records: tuple[ImplementorRecord, ...]) -> None:
        """Accept one module delivery (replayed or live).

        Args:
            module_name (str): Module name.
            records (tuple[ImplementorRecord, ...]): The module's records.
        """
        with self._lock:
            self._deliveries.append(Delivery(len(self._deliveries), module_name, tuple(records)))
            self._modules[module_name] = tuple(records)
        logger.trace("%s: received module '%s'", self.interface or "index", module_name)

    @property
    def deliveries(self) -> tuple[Delivery, ...]:
        """Every intake call received, in order."""
        with self._lock:
            return tuple(self._deliveries)

    def modules(self) -> tuple[str, ...]:
        """Module names in first-delivery order."""
        with self._lock:
            return tuple(self._modules)

    def records_for(self, module_name: str) -> tuple[ImplementorRecord, ...]:
        """Return the latest records delivered for ``module_name`` (empty if unknown)."""
        with self._lock:
            return self._modules.get(module_name, ())

    def as_mapping(self) -> Mapping[str, tuple[ImplementorRecord, ...]]:
        """Return a **read-only** snapshot ``module -> records``."""
        with self._lock:
            return MappingProxyType(dict(self._modules))

    def implementors(self) -> list[tuple[str, ImplementorRecord]]:
        """Return ``(module, record)`` pairs, skipping records whose types were already listed.

        Records are visited in module delivery order; a record is dropped when an
        earlier record already listed all of its type paths for the same interface.
        Records without type paths (blanket relationships) are always kept.

        Returns:
            list[tuple[str, ImplementorRecord]]: De-duplicated implementors.
        """
        seen: set[tuple[str, str]] = set()
        out: list[tuple[str, ImplementorRecord]] = []
        with self._lock:
            for module, records in self._modules.items():
                for rec in records:
                    iface = rec.interface.qualified_name
                    keys = [(iface, p) for p in rec.type_paths]
                    if keys and all(k in seen for k in keys):
                        continue
                    seen.update(keys)
                    out.append((module, rec))
        return out

    def interfaces(self) -> tuple[str, ...]:
        """Return the distinct interface paths named by the held records, in first-seen order."""
        found: dict[str, None] = {}
        with self._lock:
            for records in self._modules.values():
                for rec in records:
                    found.setdefault(rec.interface.qualified_name, None)
        return tuple(found)

    def implementors_of(self, interface_path: str) -> list[tuple[str, ImplementorRecord]]:
        """Return the de-duplicated implementors of one interface.

        Args:
            interface_path (str): Qualified interface path (``"core::fmt::Debug"``).

        Returns:
            list[tuple[str, ImplementorRecord]]: ``(module, record)`` pairs.
        """
        return [
            (module, rec)
            for module, rec in self.implementors()
            if rec.interface.qualified_name == interface_path
        ]

    def record_count(self) -> int:
        """Total number of records currently held."""
        with self._lock:
            return sum(len(r) for r in self._modules.values())
