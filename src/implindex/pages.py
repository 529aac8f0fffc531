# topmark:header:start
#
#   project      : ImplIndex
#   file         : pages.py
#   file_relpath : src/implindex/pages.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Assemble interface pages: one registry, one producer and one consumer per fragment.

This is the wiring a documentation site performs for every interface page,
done in-process: the page gets its own `RegistryHandoff`, the fragment's
modules are registered through an `IndexFragmentProducer`, and an
`ImplementorIndex` attaches either before the producers run (everything is
forwarded live) or after them (everything is replayed). Both orders end with
the same index.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from implindex.config.logging import get_logger
from implindex.consumer import ImplementorIndex
from implindex.fragments.loader import feed_fragment
from implindex.machine.payloads import PagePayload
from implindex.model import ModuleIndex
from implindex.producer import IndexFragmentProducer
from implindex.registry import RegistryHandoff

if TYPE_CHECKING:
    from implindex.config import RegistryConfig
    from implindex.config.logging import ImplIndexLogger
    from implindex.errors import DuplicateModule, InvalidModuleName
    from implindex.fragments.loader import Fragment
    from implindex.registry import RegistryStats

logger: ImplIndexLogger = get_logger(__name__)


@dataclass(slots=True)
class PageResult:
    """Outcome of assembling one interface page.

    Attributes:
        fragment: The fragment the page was fed from.
        index: The consumer holding everything delivered.
        stats: Registry counters after feeding.
        rejected: Registrations refused by the producer or the registry.
    """

    fragment: Fragment
    index: ImplementorIndex
    stats: RegistryStats
    rejected: list[InvalidModuleName | DuplicateModule] = field(default_factory=list)

    @property
    def interface_path(self) -> str:
        """Qualified path of the page's interface."""
        return self.fragment.interface_path

    def modules(self) -> list[ModuleIndex]:
        """Delivered modules in first-delivery order."""
        return [ModuleIndex(name, records) for name, records in self.index.as_mapping().items()]

    def to_payload(self) -> PagePayload:
        """Return the machine-output payload for this page."""
        return PagePayload(
            interface=self.fragment.interface_path,
            kind=self.fragment.kind,
            modules=self.modules(),
            path=self.fragment.path,
            stats=self.stats,
        )


def build_page(
    fragment: Fragment,
    config: RegistryConfig | None = None,
    *,
    jobs: int = 1,
    attach_first: bool = False,
) -> PageResult:
    """Feed one fragment through a fresh registry into a fresh `ImplementorIndex`.

    Args:
        fragment (Fragment): The parsed fragment.
        config (RegistryConfig | None): Registry configuration.
        jobs (int): Producer worker threads.
        attach_first (bool): Attach the consumer before the producers run.

    Returns:
        PageResult: The assembled page.
    """
    registry = RegistryHandoff(fragment.interface_path, config=config)
    index = ImplementorIndex(fragment.interface_path)
    producer = IndexFragmentProducer(registry)

    if attach_first:
        registry.attach_consumer(index)
    rejected: list[InvalidModuleName | DuplicateModule] = feed_fragment(
        fragment, producer, jobs=jobs
    )
    if not attach_first:
        registry.attach_consumer(index)

    stats: RegistryStats = registry.stats()
    logger.debug(
        "Page %s: %d module(s) delivered, %d rejected",
        fragment.interface_path,
        stats.delivered,
        len(rejected),
    )
    return PageResult(fragment=fragment, index=index, stats=stats, rejected=rejected)
