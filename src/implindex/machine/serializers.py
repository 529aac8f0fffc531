# topmark:header:start
#
#   project      : ImplIndex
#   file         : serializers.py
#   file_relpath : src/implindex/machine/serializers.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

r"""JSON/NDJSON serialization of already-shaped machine output.

Conventions:
- `json.dumps()` does not append a trailing newline.
- `serialize_ndjson()` returns a string that *does* end with a final `\n`.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING

from implindex.machine.payloads import build_meta_payload
from implindex.machine.schemas import normalize_payload
from implindex.machine.shapes import build_json_envelope, build_ndjson_record

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator, Mapping

    from implindex.machine.schemas import MetaPayload


def serialize_json_object(obj: object) -> str:
    """Serialize an object to pretty-printed JSON (no trailing newline)."""
    return json.dumps(normalize_payload(obj), indent=2, ensure_ascii=False)


def serialize_json_envelope(meta: MetaPayload | None = None, **payloads: object) -> str:
    """Serialize a JSON envelope with `meta` plus named payloads."""
    envelope: dict[str, object] = build_json_envelope(
        meta=meta or build_meta_payload(),
        **payloads,
    )
    return serialize_json_object(envelope)


def iter_ndjson_strings(records: Iterable[Mapping[str, object]]) -> Iterator[str]:
    """Yield one compact JSON string per shaped record."""
    for record in records:
        yield json.dumps(record, ensure_ascii=False)


def serialize_ndjson(records: Iterable[Mapping[str, object]]) -> str:
    """Serialize records into a newline-delimited string ending with a newline."""
    lines: list[str] = list(iter_ndjson_strings(records))
    return "\n".join(lines) + "\n" if lines else ""


def serialize_ndjson_items(
    kind: str,
    payloads: Iterable[object],
    meta: MetaPayload | None = None,
) -> str:
    """Shape each payload as a ``kind`` record and serialize them as NDJSON."""
    resolved: MetaPayload = meta or build_meta_payload()
    return serialize_ndjson(
        build_ndjson_record(kind=kind, meta=resolved, payload=p) for p in payloads
    )
