# topmark:header:start
#
#   project      : ImplIndex
#   file         : test_machine_serializers.py
#   file_relpath : tests/machine/test_machine_serializers.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Tests for machine-output shaping and serialization."""

from __future__ import annotations

import json
from enum import Enum
from pathlib import Path

from implindex.machine import (
    MetaPayload,
    build_json_envelope,
    build_ndjson_record,
    normalize_payload,
    serialize_json_envelope,
    serialize_ndjson,
    serialize_ndjson_items,
)

META = MetaPayload(tool="implindex", version="0.0.0")


class _Color(Enum):
    RED = "red"


class _HasToDict:
    def to_dict(self) -> dict[str, object]:
        return {"where": Path("a/b"), "tags": ("x", "y")}


def test_normalize_payload_converts_nested_values() -> None:
    """Paths, enums, ``to_dict`` objects and containers become JSON types."""
    data = {1: _Color.RED, "obj": _HasToDict(), "set": frozenset(["only"])}

    assert normalize_payload(data) == {
        "1": "red",
        "obj": {"where": "a/b", "tags": ["x", "y"]},
        "set": ["only"],
    }


def test_json_envelope_puts_meta_first() -> None:
    """An envelope is ``meta`` followed by the named payloads."""
    envelope = build_json_envelope(meta=META, pages=[_HasToDict()])

    assert list(envelope) == ["meta", "pages"]
    assert envelope["meta"] == {"tool": "implindex", "version": "0.0.0"}


def test_serialize_json_envelope_is_pretty_without_newline() -> None:
    """JSON output is indented and does not end with a newline."""
    text = serialize_json_envelope(META, config={"a": 1})

    assert text.startswith("{\n  ")
    assert not text.endswith("\n")
    assert json.loads(text) == {"meta": dict(META), "config": {"a": 1}}


def test_ndjson_record_nests_payload_under_its_kind() -> None:
    """Each NDJSON record names its kind and nests the payload under it."""
    assert build_ndjson_record(kind="page", meta=META, payload={"x": 1}) == {
        "kind": "page",
        "meta": dict(META),
        "page": {"x": 1},
    }


def test_serialize_ndjson_trailing_newline() -> None:
    """NDJSON ends with a newline, except when there are no records."""
    assert serialize_ndjson([{"a": 1}, {"b": 2}]) == '{"a": 1}\n{"b": 2}\n'
    assert serialize_ndjson([]) == ""


def test_serialize_ndjson_items_shapes_each_payload() -> None:
    """Every payload becomes one line of the given kind."""
    text = serialize_ndjson_items("problem", [{"n": 1}, {"n": 2}], META)

    lines = [json.loads(line) for line in text.splitlines()]
    assert [line["kind"] for line in lines] == ["problem", "problem"]
    assert [line["problem"]["n"] for line in lines] == [1, 2]
