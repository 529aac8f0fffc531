# topmark:header:start
#
#   project      : ImplIndex
#   file         : __init__.py
#   file_relpath : src/implindex/machine/__init__.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Machine-readable (JSON / NDJSON) output.

Layers, from data to text:

1. `implindex.machine.schemas`: keys, kinds, `normalize_payload`.
2. `implindex.machine.payloads`: domain payloads (`PagePayload`, `ProblemPayload`).
3. `implindex.machine.shapes`: JSON envelopes and NDJSON records.
4. `implindex.machine.serializers`: strings.

Printing lives in `implindex.cli`; nothing here imports click.
"""

from __future__ import annotations

from implindex.machine.payloads import (
    PagePayload,
    ProblemPayload,
    build_meta_payload,
    build_record_payload,
    page_from_payload,
)
from implindex.machine.schemas import MachineKey, MachineKind, MetaPayload, normalize_payload
from implindex.machine.serializers import (
    serialize_json_envelope,
    serialize_json_object,
    serialize_ndjson,
    serialize_ndjson_items,
)
from implindex.machine.shapes import build_json_envelope, build_ndjson_record

__all__ = [
    "MachineKey",
    "MachineKind",
    "MetaPayload",
    "PagePayload",
    "ProblemPayload",
    "build_json_envelope",
    "build_meta_payload",
    "build_ndjson_record",
    "build_record_payload",
    "normalize_payload",
    "page_from_payload",
    "serialize_json_envelope",
    "serialize_json_object",
    "serialize_ndjson",
    "serialize_ndjson_items",
]
