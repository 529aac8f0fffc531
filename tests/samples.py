# topmark:header:start
#
#   project      : ImplIndex
#   file         : samples.py
#   file_relpath : tests/samples.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Sample fragment texts shared by the fragment, pages and CLI tests.

The record texts are written out literally, in the exact shape a documentation
build emits them, so the codec is tested against real output rather than against
its own encoder.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pathlib import Path

PROLOGUE = "(function() {var implementors = {};"
EPILOGUE = (
    "if (window.register_implementors) {window.register_implementors(implementors);} "
    "else {window.pending_implementors = implementors;}})()"
)

DEBUG_HREF = "https://doc.rust-lang.org/nightly/core/fmt/trait.Debug.html"
DEBUG_ANCHOR = f'<a class="trait" href="{DEBUG_HREF}" title="trait core::fmt::Debug">Debug</a>'
DISPLAY_ANCHOR = (
    '<a class="trait" href="https://doc.rust-lang.org/nightly/core/fmt/trait.Display.html" '
    'title="trait core::fmt::Display">Display</a>'
)

ARCHIVE_ERROR_TEXT = (
    f"impl {DEBUG_ANCHOR} for "
    '<a class="enum" href="archive/enum.ArchiveError.html" '
    'title="enum archive::ArchiveError">ArchiveError</a>'
)
COMPLETIONS_TEXT = (
    f"impl {DEBUG_ANCHOR} for "
    '<a class="struct" href="volta/command/completions/struct.Completions.html" '
    'title="struct volta::command::completions::Completions">Completions</a>'
)
BINMAP_TEXT = (
    f"impl&lt;K:&nbsp;{DEBUG_ANCHOR}, V:&nbsp;{DEBUG_ANCHOR}&gt; {DEBUG_ANCHOR} for "
    '<a class="struct" href="volta_core/manifest/serial/struct.BinMap.html" '
    'title="struct volta_core::manifest::serial::BinMap">BinMap</a>&lt;K, V&gt; '
    '<span class="where fmt-newline">where<br>&nbsp;&nbsp;&nbsp;&nbsp;K: '
    '<a class="trait" href="https://doc.rust-lang.org/nightly/core/cmp/trait.Eq.html" '
    'title="trait core::cmp::Eq">Eq</a> + '
    '<a class="trait" href="https://doc.rust-lang.org/nightly/core/hash/trait.Hash.html" '
    'title="trait core::hash::Hash">Hash</a>,&nbsp;</span>'
)
BLANKET_TEXT = f"impl&lt;T:&nbsp;?Sized + {DEBUG_ANCHOR}&gt; {DISPLAY_ANCHOR} for &amp;T"


def js_string(text: str) -> str:
    """Escape ``text`` for a double-quoted string the way the fragment writer does."""
    return text.replace("\\", "\\\\").replace('"', '\\"')


def record_json(text: str, types: list[str], *, synthetic: bool = False) -> str:
    """Return one compact record payload as it appears in a fragment line."""
    type_list = ",".join(f'"{t}"' for t in types)
    flag = "true" if synthetic else "false"
    return f'{{"text":"{js_string(text)}","synthetic":{flag},"types":[{type_list}]}}'


def module_line(name: str, *records: str) -> str:
    """Return one ``implementors["name"] = [...];`` line."""
    return f'implementors["{name}"] = [{",".join(records)}];'


DEBUG_FRAGMENT: str = "\n".join(
    [
        PROLOGUE,
        module_line("archive", record_json(ARCHIVE_ERROR_TEXT, ["archive::ArchiveError"])),
        module_line(
            "volta",
            record_json(COMPLETIONS_TEXT, ["volta::command::completions::Completions"]),
        ),
        module_line(
            "volta_core",
            record_json(BINMAP_TEXT, ["volta_core::manifest::serial::BinMap"]),
        ),
        module_line("empty_crate"),
        EPILOGUE,
    ]
)
"""A ``core::fmt::Debug`` fragment with four modules (one without implementors)."""

DISPLAY_FRAGMENT: str = "\n".join(
    [
        PROLOGUE,
        module_line("volta_core", record_json(BLANKET_TEXT, [], synthetic=True)),
        EPILOGUE,
    ]
)
"""A ``core::fmt::Display`` fragment holding one synthetic blanket relationship."""


def write_fragment(root: Path, interface_path: str, text: str, *, kind: str = "trait") -> Path:
    """Write ``text`` at the canonical fragment location below ``root``.

    Args:
        root (Path): Directory receiving the ``implementors`` tree.
        interface_path (str): Qualified interface path (``"core::fmt::Debug"``).
        text (str): Fragment text.
        kind (str): Item kind used as file name prefix.

    Returns:
        Path: The written file.
    """
    *parents, name = interface_path.split("::")
    target: Path = root.joinpath("implementors", *parents, f"{kind}.{name}.js")
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(text + "\n", encoding="utf-8")
    return target
