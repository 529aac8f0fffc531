# topmark:header:start
#
#   project      : ImplIndex
#   file         : producer.py
#   file_relpath : src/implindex/producer.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Index fragment producer: the entry point documentation builds call per module.

A producer validates the module name, freezes the records and delegates to
whatever phase the injected registry is in. It never waits for the consumer
and carries no state of its own, so any number of producers may share one
registry and run in any order.

A malformed module name raises `InvalidModuleName` and leaves the registry
untouched; that module simply shows no implementors downstream.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

from implindex.config.logging import get_logger
from implindex.errors import InvalidModuleName
from implindex.model import ImplementorRecord, ModuleIndex

if TYPE_CHECKING:
    from collections.abc import Iterable

    from implindex.config.logging import ImplIndexLogger
    from implindex.registry import RegistryHandoff

logger: ImplIndexLogger = get_logger(__name__)

# Characters that cannot be embedded verbatim in a fragment's `implementors["..."]` key.
_UNEMBEDDABLE = re.compile(r'["\\\x00-\x1f\x7f]')


def validate_module_name(module_name: object, *, strict: bool = True) -> str:
    """Check that ``module_name`` is usable as a registry key.

    Args:
        module_name (object): Candidate name.
        strict (bool): Also reject surrounding whitespace, quotes, backslashes and
            control characters.

    Returns:
        str: The validated name (unchanged).

    Raises:
        InvalidModuleName: If the name is not a non-empty string, or (``strict``)
            contains characters that cannot be embedded in a fragment.
    """
    if not isinstance(module_name, str):
        raise InvalidModuleName(module_name, "module name must be a string")
    if not module_name.strip():
        raise InvalidModuleName(module_name, "module name must not be empty")
    if strict:
        if module_name != module_name.strip():
            raise InvalidModuleName(module_name, "module name has surrounding whitespace")
        if _UNEMBEDDABLE.search(module_name):
            raise InvalidModuleName(
                module_name, "module name contains quotes, backslashes or control characters"
            )
    return module_name


class IndexFragmentProducer:
    """Registers implementor records for modules into an injected registry.

    Args:
        registry (RegistryHandoff): The handoff point to deliver into.
    """

    def __init__(self, registry: RegistryHandoff) -> None:
        self._registry = registry

    @property
    def registry(self) -> RegistryHandoff:
        """The registry this producer delivers into."""
        return self._registry

    def register(self, module_name: str, records: Iterable[ImplementorRecord]) -> None:
        """Register one module's implementor records.

        Args:
            module_name (str): Non-empty module name.
            records (Iterable[ImplementorRecord]): Records in order; empty means the
                module documents no implementor relationships.

        Raises:
            InvalidModuleName: If the module name is malformed (registry unchanged).
            TypeError: If an element of ``records`` is not an `ImplementorRecord`.
        """
        try:
            validate_module_name(module_name, strict=self._registry.config.strict_module_names)
        except InvalidModuleName as exc:
            logger.warning("Dropping registration: %s", exc)
            raise

        frozen: tuple[ImplementorRecord, ...] = tuple(records)
        for rec in frozen:
            if not isinstance(rec, ImplementorRecord):
                raise TypeError(
                    f"Module '{module_name}': expected ImplementorRecord, got {type(rec).__name__}"
                )

        logger.debug("Registering module '%s' with %d record(s)", module_name, len(frozen))
        self._registry.submit(module_name, frozen)

    def register_index(self, index: ModuleIndex) -> None:
        """Register a prebuilt `ModuleIndex`."""
        self.register(index.name, index.records)

    def register_all(self, modules: Iterable[ModuleIndex]) -> list[InvalidModuleName]:
        """Register several modules, continuing past malformed names.

        Args:
            modules (Iterable[ModuleIndex]): Modules in producer order.

        Returns:
            list[InvalidModuleName]: One error per rejected module (empty if all
                were accepted).
        """
        rejected: list[InvalidModuleName] = []
        for index in modules:
            try:
                self.register_index(index)
            except InvalidModuleName as exc:
                rejected.append(exc)
        return rejected
