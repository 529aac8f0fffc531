# topmark:header:start
#
#   project      : ImplIndex
#   file         : shapes.py
#   file_relpath : src/implindex/machine/shapes.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end


"""Frame normalized payloads for output; serialization is left to the caller.

A JSON envelope carries ``meta`` followed by named sections::

    {"meta": {...}, "pages": [...]}

An NDJSON record carries one payload nested under its own kind::

    {"kind": "page", "meta": {...}, "page": {...}}
"""

from __future__ import annotations

from implindex.machine.schemas import MachineKey, MetaPayload, normalize_payload


def build_json_envelope(*, meta: MetaPayload, **sections: object) -> dict[str, object]:
    return {
        MachineKey.META: dict(meta),
        **{name: normalize_payload(section) for name, section in sections.items()},
    }


def build_ndjson_record(*, kind: str, meta: MetaPayload, payload: object) -> dict[str, object]:
    return {MachineKey.KIND: kind, MachineKey.META: dict(meta), kind: normalize_payload(payload)}
