# topmark:header:start
#
#   project      : ImplIndex
#   file         : config_resolver.py
#   file_relpath : src/implindex/cli/config_resolver.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Resolve the effective `RegistryConfig` for a CLI invocation.

Layers, lowest to highest precedence: defaults, discovered
``pyproject.toml`` / ``implindex.toml``, ``--config`` files,
``IMPLINDEX_DUPLICATE_POLICY``, then ``--duplicate-policy``.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from tomlkit.exceptions import ParseError as TomlkitParseError

from implindex.cli.errors import ImplIndexConfigError
from implindex.config import MutableRegistryConfig, RegistryConfig
from implindex.config.logging import get_logger

if TYPE_CHECKING:
    from collections.abc import Sequence

    from implindex.config import DuplicatePolicy
    from implindex.config.logging import ImplIndexLogger

logger: ImplIndexLogger = get_logger(__name__)


def resolve_config_from_click(
    *,
    config_paths: Sequence[str] = (),
    no_config: bool = False,
    duplicate_policy: DuplicatePolicy | None = None,
    start: Path | None = None,
) -> RegistryConfig:
    """Build the frozen registry config from CLI options.

    Raises:
        ImplIndexConfigError: If an explicit config file is missing, unreadable
            or not valid TOML.
    """
    extra: list[Path] = [Path(p) for p in config_paths]
    for path in extra:
        if not path.is_file():
            raise ImplIndexConfigError(f"Config file not found: {path}")
    try:
        draft: MutableRegistryConfig = MutableRegistryConfig.load_merged(
            start=start, extra_config_files=extra, no_config=no_config
        )
    except TomlkitParseError as exc:
        raise ImplIndexConfigError(f"Invalid TOML in config file: {exc}") from exc
    except OSError as exc:
        raise ImplIndexConfigError(f"Cannot read config file: {exc}") from exc

    if duplicate_policy is not None:
        draft = draft.merge_with(MutableRegistryConfig(duplicate_policy=duplicate_policy))
    config: RegistryConfig = draft.freeze()
    logger.debug("Effective registry config: %s", config)
    return config
