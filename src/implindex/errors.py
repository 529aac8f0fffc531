# topmark:header:start
#
#   project      : ImplIndex
#   file         : errors.py
#   file_relpath : src/implindex/errors.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Exceptions raised by the ImplIndex library.

Every library error derives from `ImplIndexError` and additionally from the
closest builtin exception (`ValueError` for bad input, `RuntimeError` for
lifecycle misuse), so callers that only know the builtins still catch them.

None of these errors leaves shared state half-updated: a rejected call is a
no-op on the registry it targeted.
"""

from __future__ import annotations

from pathlib import Path


class ImplIndexError(Exception):
    """Base class for all ImplIndex errors."""


class InvalidModuleName(ImplIndexError, ValueError):
    """A producer passed a malformed module name; the registration was dropped.

    Attributes:
        module_name: The offending value, as received.
        reason: Short human-readable explanation.
    """

    def __init__(self, module_name: object, reason: str) -> None:
        self.module_name = module_name
        self.reason = reason
        super().__init__(f"Invalid module name {module_name!r}: {reason}")


class DoubleAttachment(ImplIndexError, RuntimeError):
    """A second consumer tried to attach to a registry that is already forwarding.

    The first consumer keeps receiving deliveries; the second one receives nothing.
    """

    def __init__(self, registry_name: str) -> None:
        self.registry_name = registry_name
        super().__init__(f"A consumer is already attached to registry '{registry_name}'")


class DuplicateModule(ImplIndexError, ValueError):
    """A module name was submitted twice with different records under the ``reject`` policy."""

    def __init__(self, module_name: str) -> None:
        self.module_name = module_name
        super().__init__(f"Module '{module_name}' is already registered with different records")


class FragmentFormatError(ImplIndexError, ValueError):
    """A fragment file or record payload could not be decoded.

    Attributes:
        message: What went wrong.
        path: Source file, if known.
        line: 1-based line number within the source, if known.
    """

    def __init__(self, message: str, *, path: Path | None = None, line: int | None = None) -> None:
        self.message = message
        self.path = path
        self.line = line
        location = ""
        if path is not None:
            location = f"{path}:{line}: " if line is not None else f"{path}: "
        elif line is not None:
            location = f"line {line}: "
        super().__init__(f"{location}{message}")


class RegistryNotInitialized(ImplIndexError, RuntimeError):
    """The process registry was requested before `init_registry()` or after shutdown."""


class RegistryAlreadyInitialized(ImplIndexError, RuntimeError):
    """`init_registry()` was called while a process registry is already live."""
