# topmark:header:start
#
#   project      : ImplIndex
#   file         : io.py
#   file_relpath : src/implindex/config/io.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end


"""TOML reading and writing for ImplIndex configuration.

Both directions go through `tomlkit`. Documents are unwrapped into builtin
``dict``/``list`` values on load, so `implindex.config.model` never handles
tomlkit item types.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import tomlkit
from tomlkit.exceptions import ParseError as TomlkitParseError

from implindex.config.logging import get_logger

if TYPE_CHECKING:
    from pathlib import Path

    from implindex.config.logging import ImplIndexLogger

TomlTable = dict[str, Any]

logger: ImplIndexLogger = get_logger(__name__)


def sub_table(table: TomlTable, *keys: str) -> TomlTable:
    """Walk ``keys`` down nested tables (``sub_table(doc, "tool", "implindex")``).

    A missing key yields ``{}``. So does a key bound to a non-table value,
    which is also logged as a warning since it usually means a typo.
    """
    current: TomlTable = table
    for depth, key in enumerate(keys, start=1):
        value: object = current.get(key)
        if value is None:
            return {}
        if not isinstance(value, dict):
            dotted: str = ".".join(keys[:depth])
            logger.warning("Expected a TOML table for '%s', got %s", dotted, type(value).__name__)
            return {}
        current = value
    return current


def load_toml_dict(path: Path, *, strict: bool = False) -> TomlTable:
    """Read the UTF-8 TOML document at ``path`` as a plain dict.

    Failures are logged. A lenient load then returns ``{}`` so that a broken
    discovered file cannot stop a run; ``strict`` loads (files named with
    ``--config``) re-raise instead.

    Raises:
        OSError: If ``strict`` and the file cannot be read.
        tomlkit.exceptions.ParseError: If ``strict`` and the file is not valid TOML.
    """
    try:
        data: object = tomlkit.parse(path.read_text(encoding="utf-8")).unwrap()
    except (OSError, TomlkitParseError) as exc:
        logger.error("Cannot load TOML from %s: %s", path, exc)
        if strict:
            raise
        return {}
    return data if isinstance(data, dict) else {}


def to_toml(data: TomlTable) -> str:
    return tomlkit.dumps(data)
