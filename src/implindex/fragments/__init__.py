# topmark:header:start
#
#   project      : ImplIndex
#   file         : __init__.py
#   file_relpath : src/implindex/fragments/__init__.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Implementor index fragments: record HTML, fragment scripts, and on-disk layout."""

from __future__ import annotations

from implindex.fragments.codec import (
    parse_fragment,
    record_from_payload,
    record_to_payload,
    render_fragment,
)
from implindex.fragments.html import parse_record_html, render_record_html
from implindex.fragments.loader import (
    Fragment,
    discover_fragments,
    feed_fragment,
    fragment_path_for,
    interface_path_for,
    load_fragment,
)

__all__ = [
    "Fragment",
    "discover_fragments",
    "feed_fragment",
    "fragment_path_for",
    "interface_path_for",
    "load_fragment",
    "parse_fragment",
    "parse_record_html",
    "record_from_payload",
    "record_to_payload",
    "render_fragment",
    "render_record_html",
]
