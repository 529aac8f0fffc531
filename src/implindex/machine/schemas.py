# topmark:header:start
#
#   project      : ImplIndex
#   file         : schemas.py
#   file_relpath : src/implindex/machine/schemas.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end


"""Vocabulary of ImplIndex machine output and the JSON normalizer.

Every key and ``kind`` emitted by ``--format json`` / ``ndjson`` is declared
here so that producers (`implindex.machine.payloads`) and consumers
(``implindex render``) cannot drift apart.
"""

from __future__ import annotations

from collections.abc import Mapping
from enum import Enum
from pathlib import PurePath
from typing import Final, TypedDict


class MachineKey:
    """Keys used in envelopes, records and page payloads."""

    # envelope / record framing
    KIND: Final = "kind"
    META: Final = "meta"

    # envelope sections
    PAGES: Final = "pages"
    PROBLEMS: Final = "problems"
    CONFIG: Final = "config"
    VERSION: Final = "version"

    # a page: one interface and its modules
    INTERFACE: Final = "interface"
    PATH: Final = "path"
    MODULES: Final = "modules"
    NAME: Final = "name"
    RECORDS: Final = "records"
    STATS: Final = "stats"

    # derived fields added next to a record's fragment payload
    IMPLEMENTOR: Final = "implementor"
    RELATION: Final = "relation"
    GENERICS: Final = "generics"

    # a check problem
    MESSAGE: Final = "message"
    LINE: Final = "line"


class MachineKind:
    """``kind`` values of NDJSON records; one record per page, problem, etc."""

    PAGE: Final = "page"
    PROBLEM: Final = "problem"
    CONFIG: Final = "config"
    VERSION: Final = "version"


class MetaPayload(TypedDict):
    tool: str
    version: str


def normalize_payload(obj: object) -> object:
    """Reduce ``obj`` to dicts, lists and scalars that `json.dumps` accepts.

    Paths become POSIX strings and enums their values. Objects offering
    ``to_dict()`` are normalized through it. Mapping keys are stringified and
    any list, tuple or set becomes a list. Everything else passes through.
    """
    if isinstance(obj, PurePath):
        return obj.as_posix()
    if isinstance(obj, Enum):
        return obj.value
    if isinstance(obj, Mapping):
        return {str(key): normalize_payload(value) for key, value in obj.items()}
    if isinstance(obj, (list, tuple, set, frozenset)):
        return [normalize_payload(item) for item in obj]
    to_dict = getattr(obj, "to_dict", None)
    return normalize_payload(to_dict()) if callable(to_dict) else obj
