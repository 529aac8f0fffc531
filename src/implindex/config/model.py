# topmark:header:start
#
#   project      : ImplIndex
#   file         : model.py
#   file_relpath : src/implindex/config/model.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Registry configuration model (frozen runtime view + mutable builder).

Design:
    * ``MutableRegistryConfig`` uses tri-state options (``X | None``) to represent
      explicit values vs. *unset*. This enables non-destructive merges when
      composing multiple sources (defaults → pyproject → implindex.toml →
      ``--config`` → environment).
    * ``RegistryConfig`` is the fully-resolved, immutable view the registry reads;
      it never branches on ``None``.

TOML mapping:

    [registry]
    duplicate_policy = "overwrite"   # reject | overwrite | merge-append
    strict_module_names = true
    warn_undelivered = true
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING, Any

from implindex.config.io import load_toml_dict, sub_table
from implindex.config.keys import Toml
from implindex.config.logging import get_logger
from implindex.constants import ENV_DUPLICATE_POLICY, IMPLINDEX_TOML_NAME, PYPROJECT_TOML_NAME

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

    from implindex.config.io import TomlTable
    from implindex.config.logging import ImplIndexLogger

logger: ImplIndexLogger = get_logger(__name__)


class DuplicatePolicy(str, Enum):
    """What the registry does when a module name is submitted twice before attachment.

    Members:
      REJECT: Raise `DuplicateModule` unless the records are identical.
      OVERWRITE: Last submission wins; the module keeps its first position.
      MERGE_APPEND: Append records not already buffered for the module.
    """

    REJECT = "reject"
    OVERWRITE = "overwrite"
    MERGE_APPEND = "merge-append"

    @classmethod
    def parse(cls, value: str) -> DuplicatePolicy | None:
        """Parse a policy name, accepting ``_`` for ``-`` and any case.

        Returns:
            DuplicatePolicy | None: The policy, or ``None`` if unknown.
        """
        key = value.strip().lower().replace("_", "-")
        for member in cls:
            if member.value == key:
                return member
        return None


@dataclass(frozen=True, slots=True)
class RegistryConfig:
    """Immutable, runtime configuration for a registry handoff.

    Attributes:
        duplicate_policy (DuplicatePolicy): Policy for repeated module names while buffering.
        strict_module_names (bool): Reject module names that cannot be embedded in a
            fragment (quotes, backslashes, control characters).
        warn_undelivered (bool): Log a warning at teardown when buffered modules were
            never delivered to a consumer.
        config_files (tuple[Path, ...]): Files that contributed to this config.
    """

    duplicate_policy: DuplicatePolicy = DuplicatePolicy.OVERWRITE
    strict_module_names: bool = True
    warn_undelivered: bool = True
    config_files: tuple[Path, ...] = ()

    def thaw(self) -> MutableRegistryConfig:
        """Return a mutable builder initialized from this frozen config."""
        return MutableRegistryConfig(
            duplicate_policy=self.duplicate_policy,
            strict_module_names=self.strict_module_names,
            warn_undelivered=self.warn_undelivered,
            config_files=list(self.config_files),
        )

    def to_toml_dict(self) -> dict[str, Any]:
        """Serialize to a TOML-friendly dict (``[registry]`` table)."""
        return {
            Toml.SECTION_REGISTRY: {
                Toml.KEY_DUPLICATE_POLICY: self.duplicate_policy.value,
                Toml.KEY_STRICT_MODULE_NAMES: self.strict_module_names,
                Toml.KEY_WARN_UNDELIVERED: self.warn_undelivered,
            }
        }


@dataclass
class MutableRegistryConfig:
    """Mutable builder for `RegistryConfig`, merged in a **last-wins** manner.

    Attributes:
        duplicate_policy (DuplicatePolicy | None): See `RegistryConfig`. `None` means "inherit".
        strict_module_names (bool | None): See `RegistryConfig`. `None` means "inherit".
        warn_undelivered (bool | None): See `RegistryConfig`. `None` means "inherit".
        config_files (list[Path]): Files merged into this draft, in merge order.
    """

    duplicate_policy: DuplicatePolicy | None = None
    strict_module_names: bool | None = None
    warn_undelivered: bool | None = None
    config_files: list[Path] = field(default_factory=lambda: [])

    def merge_with(self, other: MutableRegistryConfig) -> MutableRegistryConfig:
        """Return a new draft by applying ``other`` over ``self`` (last-wins).

        ``None`` fields in ``other`` do not override explicit values in ``self``.

        Args:
            other (MutableRegistryConfig): The draft whose values override current ones.

        Returns:
            MutableRegistryConfig: Merged draft.
        """
        return MutableRegistryConfig(
            duplicate_policy=(
                other.duplicate_policy
                if other.duplicate_policy is not None
                else self.duplicate_policy
            ),
            strict_module_names=(
                other.strict_module_names
                if other.strict_module_names is not None
                else self.strict_module_names
            ),
            warn_undelivered=(
                other.warn_undelivered
                if other.warn_undelivered is not None
                else self.warn_undelivered
            ),
            config_files=[*self.config_files, *other.config_files],
        )

    def resolve(self, base: RegistryConfig) -> RegistryConfig:
        """Resolve tri-state fields against a base frozen config.

        Args:
            base (RegistryConfig): Base config that provides defaults for unset fields.

        Returns:
            RegistryConfig: A fully-resolved immutable config.
        """
        return RegistryConfig(
            duplicate_policy=(
                base.duplicate_policy if self.duplicate_policy is None else self.duplicate_policy
            ),
            strict_module_names=(
                base.strict_module_names
                if self.strict_module_names is None
                else self.strict_module_names
            ),
            warn_undelivered=(
                base.warn_undelivered if self.warn_undelivered is None else self.warn_undelivered
            ),
            config_files=tuple(self.config_files),
        )

    def freeze(self) -> RegistryConfig:
        """Freeze to a concrete `RegistryConfig` using built-in defaults for unset fields."""
        return self.resolve(RegistryConfig())

    def to_toml_table(self) -> dict[str, Any]:
        """Serialize only explicitly set keys to a TOML-friendly dict."""
        out: dict[str, Any] = {}
        if self.duplicate_policy is not None:
            out[Toml.KEY_DUPLICATE_POLICY] = self.duplicate_policy.value
        if self.strict_module_names is not None:
            out[Toml.KEY_STRICT_MODULE_NAMES] = self.strict_module_names
        if self.warn_undelivered is not None:
            out[Toml.KEY_WARN_UNDELIVERED] = self.warn_undelivered
        return out

    # ------------------------------- Loading -------------------------------

    @classmethod
    def from_toml_table(cls, tbl: Mapping[str, Any] | None) -> MutableRegistryConfig:
        """Create a draft from a ``[registry]`` TOML table.

        Unspecified keys become ``None`` (inherit at freeze time). Invalid policy
        names and flag values that are neither booleans nor integers are logged
        and ignored.

        Args:
            tbl (Mapping[str, Any] | None): Table with keys matching the attributes.

        Returns:
            MutableRegistryConfig: Parsed draft.
        """
        if not tbl:
            return cls()

        def pick_bool(key: str) -> bool | None:
            value: object = tbl.get(key)
            if value is None:
                return None
            # bool is a subclass of int
            if isinstance(value, int):
                return bool(value)
            logger.error("Invalid value for '%s': %r (expected true or false)", key, value)
            return None

        policy: DuplicatePolicy | None = None
        raw_policy: object = tbl.get(Toml.KEY_DUPLICATE_POLICY)
        if raw_policy is not None:
            policy = DuplicatePolicy.parse(str(raw_policy))
            if policy is None:
                logger.error(
                    "Invalid duplicate policy found: %s (allowed values: %s)",
                    raw_policy,
                    ", ".join(p.value for p in DuplicatePolicy),
                )

        return cls(
            duplicate_policy=policy,
            strict_module_names=pick_bool(Toml.KEY_STRICT_MODULE_NAMES),
            warn_undelivered=pick_bool(Toml.KEY_WARN_UNDELIVERED),
        )

    @classmethod
    def from_toml_file(cls, path: Path, *, strict: bool = False) -> MutableRegistryConfig | None:
        """Load a draft from ``implindex.toml`` or ``pyproject.toml``.

        For ``pyproject.toml`` the ``[tool.implindex]`` section is used.

        Args:
            path (Path): Path to the TOML file.
            strict (bool): Propagate read and TOML syntax errors.

        Returns:
            MutableRegistryConfig | None: The draft, or ``None`` if the relevant
                section is missing.
        """
        logger.debug("Creating MutableRegistryConfig from TOML config: %s", path)
        toml_data: TomlTable = load_toml_dict(path, strict=strict)

        if path.name == PYPROJECT_TOML_NAME:
            toml_data = sub_table(toml_data, Toml.SECTION_TOOL, Toml.SECTION_TOOL_IMPLINDEX)
            if not toml_data:
                logger.debug("[tool.implindex] section missing in %s", path)
                return None

        draft = cls.from_toml_table(sub_table(toml_data, Toml.SECTION_REGISTRY))
        draft.config_files = [path]
        return draft

    @classmethod
    def from_env(cls) -> MutableRegistryConfig:
        """Create a draft from environment overrides (``IMPLINDEX_DUPLICATE_POLICY``)."""
        raw: str | None = os.environ.get(ENV_DUPLICATE_POLICY)
        if not raw:
            return cls()
        policy = DuplicatePolicy.parse(raw)
        if policy is None:
            logger.error("Ignoring invalid %s=%r", ENV_DUPLICATE_POLICY, raw)
            return cls()
        return cls(duplicate_policy=policy)

    @classmethod
    def load_merged(
        cls,
        *,
        start: Path | None = None,
        extra_config_files: Iterable[Path] | None = None,
        no_config: bool = False,
    ) -> MutableRegistryConfig:
        """Discover and merge configuration layers into a draft.

        Merge order (lowest → highest precedence):
            1) Built-in defaults (unset fields)
            2) ``pyproject.toml`` ``[tool.implindex]`` in ``start``
            3) ``implindex.toml`` in ``start``
            4) Extra config files passed explicitly (in the order provided); their read
               and syntax errors propagate
            5) Environment overrides

        Args:
            start (Path | None): Directory to look for config files in (CWD if None).
            extra_config_files (Iterable[Path] | None): Explicit files merged after discovery.
            no_config (bool): If True, skip discovery in ``start``.

        Returns:
            MutableRegistryConfig: A draft ready to be frozen.

        Raises:
            OSError: If an explicit config file cannot be read.
            tomlkit.exceptions.ParseError: If an explicit config file is not valid TOML.
        """
        draft = cls()
        anchor: Path = start or Path.cwd()

        if not no_config:
            for name in (PYPROJECT_TOML_NAME, IMPLINDEX_TOML_NAME):
                candidate = anchor / name
                if candidate.is_file():
                    layer = cls.from_toml_file(candidate)
                    if layer is not None:
                        draft = draft.merge_with(layer)

        for extra in extra_config_files or ():
            layer = cls.from_toml_file(Path(extra), strict=True)
            if layer is not None:
                draft = draft.merge_with(layer)

        return draft.merge_with(cls.from_env())
