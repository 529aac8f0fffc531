# topmark:header:start
#
#   project      : ImplIndex
#   file         : conftest.py
#   file_relpath : tests/conftest.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Shared fixtures and builders for the ImplIndex test suite.

Every test runs with TRACE logging, without inherited ``IMPLINDEX_*``
environment overrides, and with the process registry torn down afterwards.

Configs are built through `make_config`, which edits a
`implindex.config.MutableRegistryConfig` and freezes it; frozen configs are
never mutated in place.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator
from typing import TYPE_CHECKING, Any, TypeVar, cast

import pytest

from implindex.config import MutableRegistryConfig, logging
from implindex.model import ImplementorRecord, ItemKind, ItemRef
from implindex.registry import shutdown_registry

if TYPE_CHECKING:
    from implindex.config import RegistryConfig

F = TypeVar("F", bound=Callable[..., object])


def _typed(mark: pytest.MarkDecorator) -> Callable[[F], F]:
    """Apply ``mark`` without losing the test function's signature for pyright."""

    def apply(func: F) -> F:
        return cast("F", mark(func))

    return apply


mark_slow = _typed(pytest.mark.slow)


def parametrize(*args: Any, **kwargs: Any) -> Callable[[F], F]:
    """`pytest.mark.parametrize` that keeps the decorated test's type."""
    return _typed(pytest.mark.parametrize(*args, **kwargs))


@pytest.fixture(autouse=True)
def silence_implindex_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Drop ``IMPLINDEX_LOG_LEVEL`` and ``IMPLINDEX_DUPLICATE_POLICY`` from the test environment."""
    monkeypatch.delenv("IMPLINDEX_LOG_LEVEL", raising=False)
    monkeypatch.delenv("IMPLINDEX_DUPLICATE_POLICY", raising=False)


@pytest.fixture(autouse=True)
def reset_process_registry() -> Iterator[None]:
    """Shut the process registry down after each test so none inherits it."""
    yield
    shutdown_registry()


@pytest.hookimpl(tryfirst=True)
def pytest_configure(config: pytest.Config) -> None:
    logging.setup_logging(level=logging.TRACE_LEVEL)


def make_config(**overrides: Any) -> RegistryConfig:
    """Freeze the defaults with ``overrides`` applied (``make_config(duplicate_policy=...)``)."""
    draft = MutableRegistryConfig()
    for field_name, value in overrides.items():
        setattr(draft, field_name, value)
    return draft.freeze()


DEBUG_REF = ItemRef(
    "Debug",
    "https://doc.rust-lang.org/nightly/core/fmt/trait.Debug.html",
    ItemKind.TRAIT,
    "core::fmt::Debug",
)


def make_record(
    type_name: str,
    *,
    crate: str = "crate_a",
    kind: ItemKind = ItemKind.STRUCT,
    interface: ItemRef = DEBUG_REF,
) -> ImplementorRecord:
    """Return a direct `ImplementorRecord` for ``crate::type_name``.

    Args:
        type_name (str): Implementing type name (``"Foo"``).
        crate (str): Crate holding the type.
        kind (ItemKind): Kind of the implementing type.
        interface (ItemRef): Implemented interface.

    Returns:
        ImplementorRecord: The record (no pre-rendered text).
    """
    implementor = ItemRef(
        type_name,
        f"{crate}/{kind.value}.{type_name}.html",
        kind,
        f"{crate}::{type_name}",
    )
    return ImplementorRecord(interface=interface, implementor=implementor)


class Recorder:
    """Consumer intake that records every call it receives, in order."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, tuple[ImplementorRecord, ...]]] = []

    def __call__(self, module_name: str, records: tuple[ImplementorRecord, ...]) -> None:
        self.calls.append((module_name, records))

    @property
    def names(self) -> list[str]:
        """Module names in delivery order."""
        return [name for name, _ in self.calls]
