# topmark:header:start
#
#   project      : ImplIndex
#   file         : payloads.py
#   file_relpath : src/implindex/machine/payloads.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Payload builders for machine-readable output.

A payload is the domain data placed inside a JSON envelope or an NDJSON
record; it carries no ``meta``/``kind`` keys of its own.

A page payload keeps each record's fragment payload (``text``, ``synthetic``,
``types``) intact, so the JSON written by ``implindex show --format json`` can
be turned back into fragment files by ``implindex render``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from functools import lru_cache
from typing import TYPE_CHECKING, Any

from implindex.constants import IMPLINDEX_VERSION, TOOL_NAME
from implindex.errors import FragmentFormatError
from implindex.fragments.codec import record_from_payload, record_to_payload
from implindex.machine.schemas import MachineKey, MetaPayload
from implindex.model import ImplementorRecord, ItemKind, ModuleIndex

if TYPE_CHECKING:
    from collections.abc import Mapping
    from pathlib import Path

    from implindex.registry import RegistryStats


@lru_cache(maxsize=1)
def build_meta_payload() -> MetaPayload:
    """Return the cached ``{tool, version}`` metadata payload."""
    return MetaPayload(tool=TOOL_NAME, version=IMPLINDEX_VERSION)


def build_record_payload(record: ImplementorRecord) -> dict[str, Any]:
    """Return the fragment payload of ``record`` plus informational structured fields."""
    payload: dict[str, Any] = record_to_payload(record)
    payload[MachineKey.INTERFACE] = record.interface.qualified_name
    payload[MachineKey.IMPLEMENTOR] = record.implementor.qualified_name
    payload[MachineKey.RELATION] = record.relation.value
    payload[MachineKey.GENERICS] = list(record.generics)
    return payload


@dataclass(slots=True)
class PagePayload:
    """Everything delivered to one interface page.

    Attributes:
        interface: Qualified interface path.
        kind: Interface kind.
        modules: Module registrations as delivered to the consumer, in order.
        path: Fragment file the page was read from, if any.
        stats: Registry counters after feeding, if known.
    """

    interface: str
    kind: ItemKind
    modules: list[ModuleIndex] = field(default_factory=list)
    path: Path | None = None
    stats: RegistryStats | None = None

    def to_dict(self) -> dict[str, object]:
        """Return a JSON-friendly mapping."""
        out: dict[str, object] = {
            MachineKey.INTERFACE: self.interface,
            MachineKey.KIND: self.kind.value,
            MachineKey.MODULES: [
                {
                    MachineKey.NAME: index.name,
                    MachineKey.RECORDS: [build_record_payload(r) for r in index.records],
                }
                for index in self.modules
            ],
        }
        if self.path is not None:
            out[MachineKey.PATH] = self.path.as_posix()
        if self.stats is not None:
            out[MachineKey.STATS] = {
                "submitted": self.stats.submitted,
                "replayed": self.stats.replayed,
                "forwarded": self.stats.forwarded,
                "rejected": self.stats.rejected,
                "undelivered": self.stats.buffered,
            }
        return out


def page_from_payload(payload: Mapping[str, Any]) -> PagePayload:
    """Rebuild a `PagePayload` from its JSON form.

    Raises:
        FragmentFormatError: If required keys are missing or malformed.
    """
    interface: object = payload.get(MachineKey.INTERFACE)
    if not isinstance(interface, str) or not interface:
        raise FragmentFormatError(f"page needs a non-empty '{MachineKey.INTERFACE}'")
    try:
        kind = ItemKind(payload.get(MachineKey.KIND, ItemKind.TRAIT.value))
    except ValueError as exc:
        raise FragmentFormatError(f"page '{interface}': {exc}") from exc

    modules_raw: object = payload.get(MachineKey.MODULES, [])
    if not isinstance(modules_raw, list):
        raise FragmentFormatError(f"page '{interface}': '{MachineKey.MODULES}' must be a list")
    modules: list[ModuleIndex] = []
    for entry in modules_raw:
        if not isinstance(entry, dict) or not isinstance(entry.get(MachineKey.NAME), str):
            raise FragmentFormatError(
                f"page '{interface}': module entries need a '{MachineKey.NAME}'"
            )
        records = tuple(record_from_payload(r) for r in entry.get(MachineKey.RECORDS, []))
        modules.append(ModuleIndex(entry[MachineKey.NAME], records))
    return PagePayload(interface=interface, kind=kind, modules=modules)


@dataclass(frozen=True, slots=True)
class ProblemPayload:
    """A validation problem reported by ``implindex check``."""

    path: Path
    message: str
    line: int | None = None

    def to_dict(self) -> dict[str, object]:
        """Return a JSON-friendly mapping."""
        return {
            MachineKey.PATH: self.path.as_posix(),
            MachineKey.LINE: self.line,
            MachineKey.MESSAGE: self.message,
        }
