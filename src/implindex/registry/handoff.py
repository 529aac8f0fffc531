# topmark:header:start
#
#   project      : ImplIndex
#   file         : handoff.py
#   file_relpath : src/implindex/registry/handoff.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Deferred-registration handoff between index producers and one consumer.

Producers call `RegistryHandoff.submit` whenever their data is ready; the
consumer calls `RegistryHandoff.attach_consumer` whenever *it* is ready. Neither
side knows whether the other has run yet. The registry reconciles the two:

* **Buffering** (initial phase): submissions are stored by module name, in
  first-insertion order.
* **Forwarding** (terminal phase): entered exactly once, by the first
  `attach_consumer` call. The buffered modules are replayed into the consumer
  intake synchronously, the buffer is discarded, and every later submission is
  forwarded to the intake immediately.

All phase reads, buffer writes and deliveries happen under one re-entrant lock,
so a submission racing with the attachment is either part of the replay or
forwarded after it, never both and never lost. Because deliveries run under the
lock, an intake may itself call `submit` (the nested module is forwarded at once),
but it must not wait on another thread that submits to the same registry.

Typical usage:
    ```python
    registry = RegistryHandoff("trait.Debug")
    registry.submit("crate_a", [])
    registry.attach_consumer(index.intake)  # replays "crate_a"
    registry.submit("crate_b", records)  # forwarded immediately
    ```

Warning:
    A registry is shared mutable state. Create it once per handoff point and
    inject it into the producers and the consumer that use it (see
    `implindex.registry.runtime` for the process-wide instance).
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from threading import RLock
from types import MappingProxyType
from typing import TYPE_CHECKING, Callable

from implindex.config import DuplicatePolicy, RegistryConfig
from implindex.config.logging import get_logger
from implindex.errors import DoubleAttachment, DuplicateModule, InvalidModuleName
from implindex.model import ImplementorRecord, ModuleIndex

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

    from implindex.config.logging import ImplIndexLogger

logger: ImplIndexLogger = get_logger(__name__)

IntakeFn = Callable[[str, tuple[ImplementorRecord, ...]], None]
"""Consumer intake: called once per delivered module with its records."""


class RegistryPhase(str, Enum):
    """Lifecycle phase of a `RegistryHandoff`."""

    BUFFERING = "buffering"
    FORWARDING = "forwarding"


@dataclass(frozen=True, slots=True)
class RegistryStats:
    """Counters describing what a registry has done so far.

    Attributes:
        submitted: Accepted `submit` calls (both phases). A forwarded module
            counts once the intake has returned.
        buffered: Modules currently held in the buffer.
        replayed: Modules delivered by the attachment replay.
        forwarded: Modules delivered live after attachment.
        rejected: Submissions refused by the duplicate policy.
    """

    submitted: int
    buffered: int
    replayed: int
    forwarded: int
    rejected: int

    @property
    def delivered(self) -> int:
        """Total deliveries made to the consumer."""
        return self.replayed + self.forwarded


class RegistryHandoff:
    """Single coordination point between producers and a late-attaching consumer.

    Args:
        name (str): Label used in logs and errors (e.g. the interface page name).
        config (RegistryConfig | None): Duplicate policy and teardown behavior;
            defaults to `RegistryConfig()`.
    """

    def __init__(self, name: str = "default", *, config: RegistryConfig | None = None) -> None:
        self._name: str = name
        self._config: RegistryConfig = config or RegistryConfig()
        self._lock = RLock()
        self._phase: RegistryPhase = RegistryPhase.BUFFERING
        self._buffer: dict[str, ModuleIndex] = {}
        self._intake: IntakeFn | None = None
        self._submitted: int = 0
        self._replayed: int = 0
        self._forwarded: int = 0
        self._rejected: int = 0

    def __repr__(self) -> str:
        return f"RegistryHandoff(name={self._name!r}, phase={self._phase.value})"

    # ------------------------------- Views -------------------------------

    @property
    def name(self) -> str:
        """Registry label."""
        return self._name

    @property
    def config(self) -> RegistryConfig:
        """The frozen configuration this registry was created with."""
        return self._config

    @property
    def phase(self) -> RegistryPhase:
        """Current phase."""
        with self._lock:
            return self._phase

    @property
    def is_attached(self) -> bool:
        """Return True once a consumer has attached (forwarding phase)."""
        with self._lock:
            return self._phase is RegistryPhase.FORWARDING

    def pending(self) -> Mapping[str, ModuleIndex]:
        """Return a **read-only** snapshot of the buffered modules.

        The mapping preserves first-insertion order and is empty once a consumer
        has attached.

        Returns:
            Mapping[str, ModuleIndex]: Module name -> buffered index.
        """
        with self._lock:
            return MappingProxyType(dict(self._buffer))

    def pending_names(self) -> tuple[str, ...]:
        """Return buffered module names in insertion order."""
        with self._lock:
            return tuple(self._buffer)

    def stats(self) -> RegistryStats:
        """Return a consistent snapshot of the registry counters."""
        with self._lock:
            return RegistryStats(
                submitted=self._submitted,
                buffered=len(self._buffer),
                replayed=self._replayed,
                forwarded=self._forwarded,
                rejected=self._rejected,
            )

    # ------------------------------ Operations ------------------------------

    def submit(self, module_name: str, records: Iterable[ImplementorRecord]) -> None:
        """Hand one module's records to the registry.

        While buffering, the module is stored according to the configured
        `DuplicatePolicy`; resubmitting identical records is always a no-op.
        While forwarding, the intake is called synchronously with
        ``(module_name, records)`` and nothing is stored.

        Args:
            module_name (str): Non-empty module name.
            records (Iterable[ImplementorRecord]): Records in producer order (may be empty).

        Raises:
            InvalidModuleName: If ``module_name`` is not a non-empty string.
            DuplicateModule: Under ``reject`` policy, if the module is already
                buffered with different records.
        """
        if not isinstance(module_name, str) or not module_name.strip():
            raise InvalidModuleName(module_name, "module name must be a non-empty string")
        frozen: tuple[ImplementorRecord, ...] = tuple(records)

        with self._lock:
            if self._phase is RegistryPhase.FORWARDING:
                intake = self._intake
                assert intake is not None
                logger.trace(
                    "%s: forwarding module '%s' (%d record(s))",
                    self._name,
                    module_name,
                    len(frozen),
                )
                intake(module_name, frozen)
                self._submitted += 1
                self._forwarded += 1
                return

            self._buffer_module(module_name, frozen)
            self._submitted += 1

    def _buffer_module(self, module_name: str, records: tuple[ImplementorRecord, ...]) -> None:
        """Insert or combine a module in the buffer (caller holds the lock)."""
        existing: ModuleIndex | None = self._buffer.get(module_name)
        if existing is None:
            self._buffer[module_name] = ModuleIndex(module_name, records)
            logger.debug(
                "%s: buffered module '%s' (%d record(s))", self._name, module_name, len(records)
            )
            return

        if existing.records == records:
            logger.debug("%s: identical resubmission of '%s' ignored", self._name, module_name)
            return

        policy: DuplicatePolicy = self._config.duplicate_policy
        if policy is DuplicatePolicy.REJECT:
            self._rejected += 1
            logger.warning(
                "%s: rejected duplicate registration of module '%s'", self._name, module_name
            )
            raise DuplicateModule(module_name)
        if policy is DuplicatePolicy.MERGE_APPEND:
            self._buffer[module_name] = existing.appended(records)
            logger.debug("%s: merged records into module '%s'", self._name, module_name)
            return

        # OVERWRITE: assigning to an existing key keeps its insertion position
        self._buffer[module_name] = ModuleIndex(module_name, records)
        logger.debug("%s: overwrote buffered module '%s'", self._name, module_name)

    def attach_consumer(self, intake: IntakeFn) -> int:
        """Attach the consumer, replay buffered modules into it, then forward live.

        The replay happens synchronously before this method returns, in the
        order the modules were first submitted. Afterwards the buffer is
        discarded and the registry stays in the forwarding phase for good.

        If ``intake`` raises during the replay, the error propagates; the
        registry remains attached and the modules not yet replayed are dropped
        (and logged).

        Args:
            intake (IntakeFn): Callable receiving ``(module_name, records)``.

        Returns:
            int: Number of modules replayed.

        Raises:
            DoubleAttachment: If a consumer is already attached. The attached
                consumer is left untouched and ``intake`` receives nothing.
        """
        with self._lock:
            if self._phase is RegistryPhase.FORWARDING:
                logger.error("%s: refused second consumer attachment", self._name)
                raise DoubleAttachment(self._name)

            backlog: list[ModuleIndex] = list(self._buffer.values())
            self._intake = intake
            self._phase = RegistryPhase.FORWARDING
            self._buffer = {}
            logger.info(
                "%s: consumer attached, replaying %d buffered module(s)", self._name, len(backlog)
            )

            for position, index in enumerate(backlog):
                try:
                    intake(index.name, index.records)
                except Exception:
                    dropped = [m.name for m in backlog[position + 1 :]]
                    if dropped:
                        logger.warning(
                            "%s: replay aborted; %d module(s) not delivered: %s",
                            self._name,
                            len(dropped),
                            ", ".join(dropped),
                        )
                    raise
                self._replayed += 1
            return len(backlog)

    def undelivered(self) -> tuple[str, ...]:
        """Return module names that are buffered and were never delivered.

        This is empty once a consumer has attached. A registry that never gets
        a consumer is a valid steady state; this helper only reports it.
        """
        return self.pending_names()
