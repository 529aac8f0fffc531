# topmark:header:start
#
#   project      : ImplIndex
#   file         : runtime.py
#   file_relpath : src/implindex/registry/runtime.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Process-wide registry handle with an explicit lifecycle.

The handoff point between producers and the consumer has to be reachable from
code that runs in any order, so there is exactly one process registry. It is
not an implicit global, though: somebody must create it with `init_registry`,
and everybody else obtains the handle through `get_registry` (or receives it
by injection) and never touches module state directly.

Lifecycle:
    1. `init_registry(config)` creates the registry in the buffering phase.
    2. Producers and the consumer use the handle (see
       `implindex.producer.IndexFragmentProducer` and
       `RegistryHandoff.attach_consumer`).
    3. `shutdown_registry()` tears it down, logging modules that were never
       delivered. An ``atexit`` hook performs this step at interpreter exit if
       the owner did not.

Typical usage:
    ```python
    from implindex.registry import registry_scope

    with registry_scope() as registry:
        producer = IndexFragmentProducer(registry)
        ...
    ```
"""

from __future__ import annotations

import atexit
from contextlib import contextmanager
from threading import Lock
from typing import TYPE_CHECKING

from implindex.config.logging import get_logger
from implindex.errors import RegistryAlreadyInitialized, RegistryNotInitialized
from implindex.registry.handoff import RegistryHandoff

if TYPE_CHECKING:
    from collections.abc import Iterator

    from implindex.config import RegistryConfig
    from implindex.config.logging import ImplIndexLogger

logger: ImplIndexLogger = get_logger(__name__)

PROCESS_REGISTRY_NAME: str = "process"

_lock = Lock()
_registry: RegistryHandoff | None = None
_atexit_installed: bool = False


def init_registry(
    config: RegistryConfig | None = None,
    *,
    name: str = PROCESS_REGISTRY_NAME,
) -> RegistryHandoff:
    """Create the process registry.

    Args:
        config (RegistryConfig | None): Registry configuration (defaults if None).
        name (str): Registry label used in logs.

    Returns:
        RegistryHandoff: The new registry, in the buffering phase.

    Raises:
        RegistryAlreadyInitialized: If a process registry is already live.
    """
    global _registry, _atexit_installed
    with _lock:
        if _registry is not None:
            raise RegistryAlreadyInitialized(
                f"Process registry '{_registry.name}' is already initialized"
            )
        _registry = RegistryHandoff(name, config=config)
        if not _atexit_installed:
            atexit.register(_shutdown_at_exit)
            _atexit_installed = True
        logger.debug("Initialized process registry '%s'", name)
        return _registry


def get_registry() -> RegistryHandoff:
    """Return the live process registry.

    Raises:
        RegistryNotInitialized: If `init_registry` was not called or the registry
            was shut down.
    """
    with _lock:
        if _registry is None:
            raise RegistryNotInitialized("Process registry is not initialized")
        return _registry


def is_initialized() -> bool:
    """Return True while a process registry is live."""
    with _lock:
        return _registry is not None


def shutdown_registry() -> tuple[str, ...]:
    """Tear down the process registry (idempotent).

    Returns:
        tuple[str, ...]: Module names that were buffered but never delivered
            (empty if a consumer attached, or if there was no registry).
    """
    global _registry
    with _lock:
        registry, _registry = _registry, None
    if registry is None:
        return ()

    undelivered: tuple[str, ...] = registry.undelivered()
    if undelivered and registry.config.warn_undelivered:
        logger.warning(
            "Registry '%s' shut down with %d undelivered module(s): %s",
            registry.name,
            len(undelivered),
            ", ".join(undelivered),
        )
    logger.debug("Shut down process registry '%s'", registry.name)
    return undelivered


@contextmanager
def registry_scope(
    config: RegistryConfig | None = None,
    *,
    name: str = PROCESS_REGISTRY_NAME,
) -> Iterator[RegistryHandoff]:
    """Own the process registry for the duration of a ``with`` block.

    Yields:
        RegistryHandoff: The freshly initialized process registry.
    """
    registry: RegistryHandoff = init_registry(config, name=name)
    try:
        yield registry
    finally:
        shutdown_registry()


def _shutdown_at_exit() -> None:
    # Interpreter teardown: only report, never raise.
    shutdown_registry()
