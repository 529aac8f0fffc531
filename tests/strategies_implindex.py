# topmark:header:start
#
#   project      : ImplIndex
#   file         : strategies_implindex.py
#   file_relpath : tests/strategies_implindex.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

# pyright: strict

"""Hypothesis strategies for implementor records and producer/consumer schedules.

A schedule is a list of steps, each either a submission ``("submit", name, records)``
or the single consumer attachment ``("attach",)``. Property tests run a schedule
against a `RegistryHandoff` and compare what the consumer saw with a simple model.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, Literal, Union

from hypothesis import strategies as st

from implindex.model import ImplementorRecord, ItemKind, ItemRef

Draw = Callable[[st.SearchStrategy[Any]], Any]

SubmitStep = tuple[Literal["submit"], str, tuple[ImplementorRecord, ...]]
AttachStep = tuple[Literal["attach"]]
Step = Union[SubmitStep, AttachStep]

IDENT_ALPHABET: str = "abcdefghijklmnopqrstuvwxyz_"

IMPLEMENTOR_KINDS: tuple[ItemKind, ...] = (
    ItemKind.STRUCT,
    ItemKind.ENUM,
    ItemKind.UNION,
    ItemKind.PRIMITIVE,
)

INTERFACES: tuple[ItemRef, ...] = (
    ItemRef("Debug", "core/fmt/trait.Debug.html", ItemKind.TRAIT, "core::fmt::Debug"),
    ItemRef("Display", "core/fmt/trait.Display.html", ItemKind.TRAIT, "core::fmt::Display"),
    ItemRef("Clone", "core/clone/trait.Clone.html", ItemKind.TRAIT, "core::clone::Clone"),
)


def module_names() -> st.SearchStrategy[str]:
    """Short crate-like module names; a small pool makes repeats likely."""
    return st.text(alphabet=IDENT_ALPHABET, min_size=1, max_size=3)


def type_names() -> st.SearchStrategy[str]:
    """Capitalized type names."""
    return st.text(alphabet="ABCDEFGHIJKLMNOPQRSTUVWXYZ", min_size=1, max_size=4)


@st.composite
def implementor_records(draw: Draw) -> ImplementorRecord:
    """A direct record linking a generated type to one of a few interfaces."""
    crate: str = draw(module_names())
    name: str = draw(type_names())
    kind: ItemKind = draw(st.sampled_from(IMPLEMENTOR_KINDS))
    interface: ItemRef = draw(st.sampled_from(INTERFACES))
    implementor = ItemRef(name, f"{crate}/{kind.value}.{name}.html", kind, f"{crate}::{name}")
    return ImplementorRecord(
        interface=interface,
        implementor=implementor,
        synthetic=draw(st.booleans()),
    )


def record_sequences(max_size: int = 3) -> st.SearchStrategy[tuple[ImplementorRecord, ...]]:
    """Ordered (possibly empty) record sequences."""
    return st.lists(implementor_records(), max_size=max_size).map(tuple)


@st.composite
def schedules(draw: Draw, max_submits: int = 12) -> list[Step]:
    """Submissions with one attachment inserted at an arbitrary position (or none)."""
    submits: list[SubmitStep] = draw(
        st.lists(
            st.tuples(st.just("submit"), module_names(), record_sequences()),
            max_size=max_submits,
        )
    )
    steps: list[Step] = list(submits)
    if draw(st.booleans()):
        position: int = draw(st.integers(min_value=0, max_value=len(steps)))
        steps.insert(position, ("attach",))
    return steps
