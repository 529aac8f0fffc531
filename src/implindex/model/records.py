# topmark:header:start
#
#   project      : ImplIndex
#   file         : records.py
#   file_relpath : src/implindex/model/records.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Immutable value types describing implementor relationships.

An `ImplementorRecord` states that one implementing type satisfies one
interface, optionally under type parameter constraints. A `ModuleIndex` groups
the records surfaced for one originating module. Both are frozen: once a
producer has built them they are handed through the registry unchanged.

Typical usage:
    ```python
    from implindex.model import ImplementorRecord, ItemKind, ItemRef, ModuleIndex

    debug = ItemRef("Debug", "core/fmt/trait.Debug.html", ItemKind.TRAIT, "core::fmt::Debug")
    foo = ItemRef("Foo", "crate_a/struct.Foo.html", ItemKind.STRUCT, "crate_a::Foo")
    index = ModuleIndex("crate_a", (ImplementorRecord(debug, foo),))
    ```
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator


class ItemKind(str, Enum):
    """Kind of a documented item, as used in link CSS classes.

    ``PLAIN`` marks text that is not a link (type parameters, lifetimes,
    ``?Sized`` bounds).
    """

    TRAIT = "trait"
    TRAIT_ALIAS = "traitalias"
    STRUCT = "struct"
    ENUM = "enum"
    UNION = "union"
    TYPE = "type"
    PRIMITIVE = "primitive"
    FOREIGN_TYPE = "foreigntype"
    PLAIN = "plain"


class RelationKind(str, Enum):
    """How an implementor satisfies an interface.

    DIRECT: a concrete, named type implements the interface.
    BLANKET: the implementor is a bare type parameter, so every type meeting the
        constraints implements the interface.
    """

    DIRECT = "direct"
    BLANKET = "blanket"


@dataclass(frozen=True, slots=True)
class ItemRef:
    """Display label plus resolvable link target for one documented item.

    Attributes:
        label: Text shown to the reader (e.g. ``"Debug"``).
        href: Link target, relative or absolute; empty for `ItemKind.PLAIN`.
        kind: Item kind.
        path: Fully-qualified path (e.g. ``"core::fmt::Debug"``); may be empty.
    """

    label: str
    href: str = ""
    kind: ItemKind = ItemKind.PLAIN
    path: str = ""

    @property
    def is_link(self) -> bool:
        """Return True if this reference resolves to a documentation page."""
        return bool(self.href) and self.kind is not ItemKind.PLAIN

    @property
    def qualified_name(self) -> str:
        """Return the fully-qualified path, falling back to the label."""
        return self.path or self.label


@dataclass(frozen=True, slots=True)
class TypeConstraint:
    """Bounds placed on one type parameter (``K: Eq + Hash``).

    Attributes:
        param: Type parameter (or lifetime) name.
        bounds: Bounds in declaration order.
    """

    param: str
    bounds: tuple[ItemRef, ...] = ()


@dataclass(frozen=True, slots=True)
class ImplementorRecord:
    """One (interface, implementing type) relationship.

    Attributes:
        interface: The implemented interface.
        implementor: The implementing type (a `ItemKind.PLAIN` ref for blanket
            relationships over a type parameter).
        relation: Direct or blanket relationship.
        generics: Type parameters declared by the relationship, in order.
        implementor_args: Type arguments applied to the implementor
            (``("K", "V")`` for ``BinMap<K, V>``).
        constraints: Constraints on the declared parameters, inline bounds first,
            then ``where`` predicates.
        synthetic: True if the relationship is derived automatically rather than
            written in the documented source.
        types: Fully-qualified paths of the implementing types, used to
            de-duplicate implementors across modules.
        text: Pre-rendered HTML; empty means "render from the structured fields".
    """

    interface: ItemRef
    implementor: ItemRef
    relation: RelationKind = RelationKind.DIRECT
    generics: tuple[str, ...] = ()
    implementor_args: tuple[str, ...] = ()
    constraints: tuple[TypeConstraint, ...] = ()
    synthetic: bool = False
    types: tuple[str, ...] = ()
    text: str = field(default="", compare=False)

    @property
    def type_paths(self) -> tuple[str, ...]:
        """Return `types`, or the implementor's qualified path when `types` is empty."""
        if self.types:
            return self.types
        if self.implementor.is_link:
            return (self.implementor.qualified_name,)
        return ()

    @property
    def is_blanket(self) -> bool:
        """Return True for blanket relationships."""
        return self.relation is RelationKind.BLANKET

    def with_text(self, text: str) -> ImplementorRecord:
        """Return a copy carrying pre-rendered HTML."""
        return replace(self, text=text)


@dataclass(frozen=True, slots=True)
class ModuleIndex:
    """Implementor records registered for one originating module.

    Attributes:
        name: Module name, unique within a build.
        records: Records in producer order; may be empty.
    """

    name: str
    records: tuple[ImplementorRecord, ...] = ()

    def __iter__(self) -> Iterator[ImplementorRecord]:
        return iter(self.records)

    def appended(self, records: Iterable[ImplementorRecord]) -> ModuleIndex:
        """Return a new index with ``records`` appended, skipping ones already present.

        Args:
            records (Iterable[ImplementorRecord]): Records to append.

        Returns:
            ModuleIndex: The merged index (``self`` if nothing was new).
        """
        merged: list[ImplementorRecord] = list(self.records)
        for rec in records:
            if rec not in merged:
                merged.append(rec)
        if len(merged) == len(self.records):
            return self
        return ModuleIndex(self.name, tuple(merged))
