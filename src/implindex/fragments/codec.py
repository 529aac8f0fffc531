# topmark:header:start
#
#   project      : ImplIndex
#   file         : codec.py
#   file_relpath : src/implindex/fragments/codec.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Encode and decode implementor index fragments.

A fragment is the script a documentation build emits for one interface page::

    (function() {var implementors = {};
    implementors["crate_a"] = [{"text":"impl ...","synthetic":false,"types":["crate_a::Foo"]}];
    implementors["crate_b"] = [];
    if (window.register_implementors) {...} else {window.pending_implementors = implementors;}})()

Each ``implementors[...]`` line is one module registration. The closing line is
the script-side version of the registry handoff: forward to a consumer that is
already attached, otherwise leave the data pending for a late one.

`parse_fragment` returns the module registrations in file order, exactly as
they were written (duplicate module keys included); feeding them to a producer
is the caller's job.
"""

from __future__ import annotations

import json
import re
from typing import TYPE_CHECKING, Any

from implindex.config.logging import get_logger
from implindex.constants import FRAGMENT_EPILOGUE, FRAGMENT_PROLOGUE
from implindex.errors import FragmentFormatError
from implindex.fragments.html import parse_record_html, render_record_html
from implindex.model import ImplementorRecord, ModuleIndex

if TYPE_CHECKING:
    from collections.abc import Iterable
    from pathlib import Path

    from implindex.config.logging import ImplIndexLogger

logger: ImplIndexLogger = get_logger(__name__)

ENTRY_RE = re.compile(
    r'^implementors\[(?P<key>"(?:[^"\\]|\\.)*")\]\s*=\s*(?P<payload>\[.*\]);?$',
    re.DOTALL,
)

# Payload keys of a single record
KEY_TEXT: str = "text"
KEY_SYNTHETIC: str = "synthetic"
KEY_TYPES: str = "types"


def _dumps(value: Any) -> str:
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False)


def record_to_payload(record: ImplementorRecord) -> dict[str, Any]:
    """Return the fragment payload (``text``/``synthetic``/``types``) for a record."""
    return {
        KEY_TEXT: render_record_html(record),
        KEY_SYNTHETIC: record.synthetic,
        KEY_TYPES: list(record.type_paths),
    }


def record_from_payload(
    payload: object,
    *,
    path: Path | None = None,
    line: int | None = None,
) -> ImplementorRecord:
    """Decode one fragment payload into an `ImplementorRecord`.

    Args:
        payload (object): Decoded JSON value.
        path (Path | None): Source file, for error messages.
        line (int | None): Source line, for error messages.

    Returns:
        ImplementorRecord: The decoded record (``text`` kept verbatim).

    Raises:
        FragmentFormatError: If the payload shape or its HTML text is invalid.
    """
    if not isinstance(payload, dict):
        raise FragmentFormatError(
            f"record payload must be an object, got {type(payload).__name__}", path=path, line=line
        )
    text: object = payload.get(KEY_TEXT)
    if not isinstance(text, str):
        raise FragmentFormatError(
            f"record payload needs a string '{KEY_TEXT}'", path=path, line=line
        )
    synthetic: object = payload.get(KEY_SYNTHETIC, False)
    if not isinstance(synthetic, bool):
        raise FragmentFormatError(f"'{KEY_SYNTHETIC}' must be a boolean", path=path, line=line)
    types: object = payload.get(KEY_TYPES, [])
    if not isinstance(types, list) or not all(isinstance(t, str) for t in types):
        raise FragmentFormatError(f"'{KEY_TYPES}' must be a list of strings", path=path, line=line)

    try:
        return parse_record_html(text, synthetic=synthetic, types=types)
    except FragmentFormatError as exc:
        raise FragmentFormatError(exc.message, path=path, line=line) from exc


def render_module_line(index: ModuleIndex) -> str:
    """Return the ``implementors["name"] = [...];`` line for one module."""
    payloads: list[dict[str, Any]] = [record_to_payload(rec) for rec in index.records]
    return f"implementors[{_dumps(index.name)}] = {_dumps(payloads)};"


def render_fragment(modules: Iterable[ModuleIndex]) -> str:
    """Render a complete fragment script for one interface page.

    Args:
        modules (Iterable[ModuleIndex]): Module registrations in output order.

    Returns:
        str: The fragment text (no trailing newline).
    """
    lines: list[str] = [FRAGMENT_PROLOGUE]
    lines.extend(render_module_line(index) for index in modules)
    lines.append(FRAGMENT_EPILOGUE)
    return "\n".join(lines)


def parse_fragment(text: str, *, path: Path | None = None) -> list[ModuleIndex]:
    """Parse a fragment script into its module registrations.

    Args:
        text (str): Fragment text.
        path (Path | None): Source file, for error messages.

    Returns:
        list[ModuleIndex]: Registrations in file order.

    Raises:
        FragmentFormatError: On a missing prologue/epilogue or a malformed line.
    """
    lines: list[tuple[int, str]] = [
        (number, raw.strip())
        for number, raw in enumerate(text.splitlines(), start=1)
        if raw.strip()
    ]
    if not lines or lines[0][1] != FRAGMENT_PROLOGUE:
        raise FragmentFormatError(
            "fragment does not start with the implementors prologue", path=path, line=1
        )
    if len(lines) < 2 or lines[-1][1] != FRAGMENT_EPILOGUE:
        raise FragmentFormatError(
            "fragment does not end with the registration epilogue",
            path=path,
            line=lines[-1][0],
        )

    modules: list[ModuleIndex] = []
    for number, line in lines[1:-1]:
        match: re.Match[str] | None = ENTRY_RE.match(line)
        if match is None:
            raise FragmentFormatError(
                "expected 'implementors[\"name\"] = [...];'", path=path, line=number
            )
        try:
            name: object = json.loads(match.group("key"))
            payloads: object = json.loads(match.group("payload"))
        except json.JSONDecodeError as exc:
            raise FragmentFormatError(f"invalid JSON: {exc.msg}", path=path, line=number) from exc
        if not isinstance(payloads, list):
            raise FragmentFormatError("module payload must be a list", path=path, line=number)
        records = tuple(record_from_payload(p, path=path, line=number) for p in payloads)
        modules.append(ModuleIndex(str(name), records))

    logger.debug(
        "Parsed %d module registration(s)%s", len(modules), f" from {path}" if path else ""
    )
    return modules
