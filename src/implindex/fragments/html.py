# topmark:header:start
#
#   project      : ImplIndex
#   file         : html.py
#   file_relpath : src/implindex/fragments/html.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Render and parse the one-line HTML summary of an implementor record.

Every record in a fragment carries a ``text`` such as::

    impl&lt;K:&nbsp;<a class="trait" href="..." title="trait core::fmt::Debug">Debug</a>&gt;
    <a class="trait" href="..." title="trait core::fmt::Debug">Debug</a> for
    <a class="struct" href="..." title="struct crate::BinMap">BinMap</a>&lt;K&gt;
    <span class="where fmt-newline">where<br>&nbsp;&nbsp;&nbsp;&nbsp;K: ...,&nbsp;</span>

(on one line). `parse_record_html` recovers the structured fields of an
`ImplementorRecord` from that text and keeps the text verbatim, so a parsed
record renders back byte-for-byte. `render_record_html` builds the text from
the structured fields when a record has none.

Elements (``<a>`` links, the ``<span class="where">`` clause) are read with
BeautifulSoup, so attribute order and quoting do not matter. The Rust type
grammar between them is handled by a small scanner over the escaped markup:
tags are skipped as opaque tokens, ``&lt;``/``&gt;``, parentheses and brackets
are tracked for nesting, and separators (``,``, ``:``, ``+``, `` for ``) only
count at nesting depth zero.
"""

from __future__ import annotations

import html
import re
from typing import TYPE_CHECKING

from bs4 import BeautifulSoup, Tag

from implindex.errors import FragmentFormatError
from implindex.model import ImplementorRecord, ItemKind, ItemRef, RelationKind, TypeConstraint

if TYPE_CHECKING:
    from collections.abc import Sequence

WHITESPACE_RE = re.compile(r"\s+")
_ANCHOR_START_RE = re.compile(r"<a[\s>]", re.IGNORECASE)
_ANCHOR_END = "</a>"

_LT = "&lt;"
_GT = "&gt;"
_NBSP = "&nbsp;"
_INDENT = _NBSP * 4
_REFERENCE_PREFIX_RE = re.compile(r"^(?:&(?:mut\s+)?|\*(?:const|mut)\s+|'\w+\s+)+")


# --- Scanning helpers ---


def _is_arrow(s: str, i: int) -> bool:
    """Return True if the ``&gt;`` at ``i`` is the tail of a ``->`` arrow."""
    return i > 0 and s[i - 1] == "-"


def split_top_level(s: str, sep: str, maxsplit: int = -1) -> list[str]:
    """Split ``s`` on ``sep`` occurring outside tags and at nesting depth zero.

    Args:
        s (str): Escaped markup.
        sep (str): Separator text.
        maxsplit (int): Maximum number of splits (``-1`` for no limit).

    Returns:
        list[str]: The pieces (always at least one).
    """
    parts: list[str] = []
    depth = 0
    start = 0
    i = 0
    n = len(s)
    while i < n:
        ch = s[i]
        if ch == "<":
            end = s.find(">", i)
            i = n if end < 0 else end + 1
            continue
        if s.startswith(_LT, i):
            depth += 1
            i += len(_LT)
            continue
        if s.startswith(_GT, i):
            if not _is_arrow(s, i):
                depth = max(0, depth - 1)
            i += len(_GT)
            continue
        if ch in "([":
            depth += 1
        elif ch in ")]":
            depth = max(0, depth - 1)
        elif depth == 0 and s.startswith(sep, i) and (maxsplit < 0 or len(parts) < maxsplit):
            # `::` path separators are never a `:` bound separator
            if sep == ":" and (s.startswith("::", i) or (i > 0 and s[i - 1] == ":")):
                i += 1
                continue
            parts.append(s[start:i])
            i += len(sep)
            start = i
            continue
        i += 1
    parts.append(s[start:])
    return parts


def _closing_angle(s: str, start: int) -> int:
    """Return the index of the ``&gt;`` closing the ``&lt;`` at ``start``."""
    depth = 0
    i = start
    n = len(s)
    while i < n:
        if s[i] == "<":
            end = s.find(">", i)
            if end < 0:
                break
            i = end + 1
            continue
        if s.startswith(_LT, i):
            depth += 1
            i += len(_LT)
            continue
        if s.startswith(_GT, i) and not _is_arrow(s, i):
            depth -= 1
            if depth == 0:
                return i
            i += len(_GT)
            continue
        i += 1
    raise FragmentFormatError("unbalanced '<' in implementor text")


def _soup(markup: str) -> BeautifulSoup:
    return BeautifulSoup(markup, "html.parser")


def _collapse(text: str) -> str:
    return WHITESPACE_RE.sub(" ", text.replace("\xa0", " ")).strip()


def plain_text(fragment: str) -> str:
    """Strip tags, unescape entities and collapse whitespace."""
    if "<" not in fragment and "&" not in fragment:
        return _collapse(fragment)
    return _collapse(_soup(fragment).get_text())


def _anchors(fragment: str) -> list[Tag]:
    return [tag for tag in _soup(fragment).find_all("a") if isinstance(tag, Tag)]


def _attr(tag: Tag, name: str) -> str:
    """Return attribute ``name`` of ``tag`` as one string (``""`` when absent)."""
    value = tag.get(name)
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    return " ".join(value)


# --- References ---


def _item_kind(css_class: str) -> ItemKind:
    try:
        return ItemKind(css_class)
    except ValueError:
        # Unknown item classes (macros, associated types, ...) still link somewhere.
        return ItemKind.TYPE


def _ref_from_anchor(tag: Tag) -> ItemRef:
    # rustdoc titles read "<kind> <path>"
    _, _, path = _attr(tag, "title").partition(" ")
    classes: list[str] = _attr(tag, "class").split()
    return ItemRef(
        label=_collapse(tag.get_text()),
        href=_attr(tag, "href"),
        kind=_item_kind(classes[0] if classes else ""),
        path=path.strip(),
    )


def ref_from_markup(fragment: str) -> ItemRef:
    """Build an `ItemRef` from a markup fragment.

    A fragment that is exactly one anchor yields that anchor. A fragment that
    mixes text and anchors (``&amp;'a <a>Foo</a>``) yields its plain text as the
    label and links to the first anchor. A fragment without anchors yields a
    `ItemKind.PLAIN` reference.
    """
    stripped = fragment.strip()
    anchors = _anchors(stripped)
    if not anchors:
        return ItemRef(label=plain_text(stripped))
    linked = _ref_from_anchor(anchors[0])
    return ItemRef(
        label=plain_text(stripped), href=linked.href, kind=linked.kind, path=linked.path
    )


def _parse_bounds(fragment: str) -> tuple[ItemRef, ...]:
    return tuple(
        ref_from_markup(piece) for piece in split_top_level(fragment, "+") if piece.strip()
    )


def _parse_predicate(fragment: str) -> tuple[str, TypeConstraint | None]:
    """Parse ``K: A + B`` (or bare ``K``) into its name and constraint."""
    pieces = split_top_level(fragment, ":", maxsplit=1)
    name = plain_text(pieces[0])
    if len(pieces) == 1 or not pieces[1].strip():
        return name, None
    return name, TypeConstraint(name, _parse_bounds(pieces[1]))


def _base_type_name(label: str) -> str:
    """Strip reference and pointer prefixes (``&'a mut T`` -> ``T``)."""
    return _REFERENCE_PREFIX_RE.sub("", label).strip()


# --- Public API ---


def parse_record_html(
    text: str,
    *,
    synthetic: bool = False,
    types: Sequence[str] = (),
) -> ImplementorRecord:
    """Parse an implementor summary line into an `ImplementorRecord`.

    Args:
        text (str): The record's HTML ``text``.
        synthetic (bool): Value of the payload's ``synthetic`` flag.
        types (Sequence[str]): Value of the payload's ``types`` list.

    Returns:
        ImplementorRecord: The structured record; ``text`` is kept verbatim.

    Raises:
        FragmentFormatError: If the text is not an ``impl ... for ...`` summary.
    """
    source = text.strip()
    if not source.startswith("impl"):
        raise FragmentFormatError(f"implementor text must start with 'impl': {text[:40]!r}")

    # `str(soup)` keeps text escaped (`&lt;`) but turns `&nbsp;` into U+00A0.
    soup = _soup(source)
    where_body = ""
    span = soup.find("span", class_="where")
    if isinstance(span, Tag):
        where_body = span.decode_contents()
        span.extract()
    main = str(soup).replace("\xa0", " ").replace(_NBSP, " ")
    if not where_body:
        pieces = split_top_level(main, " where ", maxsplit=1)
        if len(pieces) == 2:
            main, where_body = pieces[0], "where " + pieces[1]

    rest = main[len("impl") :]
    generics: list[str] = []
    constraints: list[TypeConstraint] = []
    if rest.startswith(_LT):
        end = _closing_angle(rest, 0)
        for param in split_top_level(rest[len(_LT) : end], ","):
            if not param.strip():
                continue
            name, constraint = _parse_predicate(param)
            generics.append(name)
            if constraint is not None:
                constraints.append(constraint)
        rest = rest[end + len(_GT) :]

    halves = split_top_level(rest.strip(), " for ", maxsplit=1)
    if len(halves) != 2:
        raise FragmentFormatError(f"implementor text has no 'for' clause: {text[:60]!r}")
    trait_part, impl_part = halves[0].strip().lstrip("!"), halves[1].strip()

    trait_anchors = _anchors(trait_part)
    interface = (
        _ref_from_anchor(trait_anchors[0])
        if trait_anchors
        else ItemRef(label=plain_text(trait_part))
    )

    implementor_args: tuple[str, ...] = ()
    head_end = impl_part.find(_ANCHOR_END) if _ANCHOR_START_RE.match(impl_part) else -1
    head_anchors = _anchors(impl_part[: head_end + len(_ANCHOR_END)]) if head_end >= 0 else []
    if head_anchors:
        implementor = _ref_from_anchor(head_anchors[0])
        tail = impl_part[head_end + len(_ANCHOR_END) :].strip()
        if tail.startswith(_LT):
            end = _closing_angle(tail, 0)
            implementor_args = tuple(
                plain_text(arg) for arg in split_top_level(tail[len(_LT) : end], ",") if arg.strip()
            )
    else:
        implementor = ref_from_markup(impl_part)

    if where_body:
        body = where_body.replace("\xa0", " ").replace(_NBSP, " ")
        body = body.replace("<br/>", " ").replace("<br>", " ").strip()
        if body.startswith("where"):
            body = body[len("where") :]
        for predicate in split_top_level(body, ","):
            if not predicate.strip():
                continue
            _, constraint = _parse_predicate(predicate)
            if constraint is not None:
                constraints.append(constraint)

    relation = RelationKind.DIRECT
    if not implementor.is_link and _base_type_name(implementor.label) in generics:
        relation = RelationKind.BLANKET

    return ImplementorRecord(
        interface=interface,
        implementor=implementor,
        relation=relation,
        generics=tuple(generics),
        implementor_args=implementor_args,
        constraints=tuple(constraints),
        synthetic=synthetic,
        types=tuple(types),
        text=text,
    )


def render_ref(ref: ItemRef) -> str:
    """Render an `ItemRef` as an anchor (or escaped text for plain references)."""
    label = html.escape(ref.label, quote=False)
    if not ref.is_link:
        return label
    title = f"{ref.kind.value} {ref.qualified_name}"
    return (
        f'<a class="{ref.kind.value}" href="{html.escape(ref.href)}" '
        f'title="{html.escape(title)}">{label}</a>'
    )


def _render_bounds(bounds: Sequence[ItemRef]) -> str:
    return " + ".join(render_ref(b) for b in bounds)


def render_record_html(record: ImplementorRecord, *, prefer_text: bool = True) -> str:
    """Return the HTML summary line for ``record``.

    Args:
        record (ImplementorRecord): The record to render.
        prefer_text (bool): Return ``record.text`` verbatim when it is set.

    Returns:
        str: The summary line.
    """
    if prefer_text and record.text:
        return record.text

    inline: dict[str, TypeConstraint] = {}
    where: list[TypeConstraint] = []
    for constraint in record.constraints:
        if constraint.param in record.generics and constraint.param not in inline:
            inline[constraint.param] = constraint
        elif constraint.bounds:
            where.append(constraint)

    out: list[str] = ["impl"]
    if record.generics:
        params: list[str] = []
        for name in record.generics:
            param = html.escape(name, quote=False)
            bound = inline.get(name)
            if bound is not None and bound.bounds:
                param += f":{_NBSP}{_render_bounds(bound.bounds)}"
            params.append(param)
        out.append(f"{_LT}{', '.join(params)}{_GT}")
    out.append(f" {render_ref(record.interface)} for {render_ref(record.implementor)}")
    if record.implementor_args:
        args = ", ".join(html.escape(a, quote=False) for a in record.implementor_args)
        out.append(f"{_LT}{args}{_GT}")
    if where:
        predicates = ",<br>".join(
            f"{_INDENT}{html.escape(c.param, quote=False)}: {_render_bounds(c.bounds)}"
            for c in where
        )
        out.append(f' <span class="where fmt-newline">where<br>{predicates},{_NBSP}</span>')
    return "".join(out)
