# topmark:header:start
#
#   project      : ImplIndex
#   file         : test_fragment_loader.py
#   file_relpath : tests/fragments/test_fragment_loader.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Tests for fragment discovery, loading and feeding (`implindex.fragments.loader`)."""

from __future__ import annotations

from pathlib import Path

import pytest

from implindex.config import DuplicatePolicy
from implindex.errors import DuplicateModule, FragmentFormatError, InvalidModuleName
from implindex.fragments import (
    Fragment,
    discover_fragments,
    feed_fragment,
    fragment_path_for,
    interface_path_for,
    load_fragment,
)
from implindex.fragments.loader import split_fragment_path
from implindex.model import ItemKind, ModuleIndex
from implindex.producer import IndexFragmentProducer
from implindex.registry import RegistryHandoff
from tests.conftest import Recorder, make_config, make_record, parametrize
from tests.samples import DEBUG_FRAGMENT, DISPLAY_FRAGMENT, write_fragment


def _fragment(*modules: ModuleIndex) -> Fragment:
    return Fragment(
        path=Path("implementors/core/fmt/trait.Debug.js"),
        interface_path="core::fmt::Debug",
        kind=ItemKind.TRAIT,
        modules=modules,
    )


@parametrize(
    ("path", "expected"),
    [
        ("implementors/core/fmt/trait.Debug.js", ("core::fmt::Debug", ItemKind.TRAIT)),
        (
            "doc/implementors/serde/ser/trait.Serialize.js",
            ("serde::ser::Serialize", ItemKind.TRAIT),
        ),
        ("implementors/mycrate/traitalias.Alias.js", ("mycrate::Alias", ItemKind.TRAIT_ALIAS)),
        ("implementors/implementors/a/trait.B.js", ("a::B", ItemKind.TRAIT)),
    ],
)
def test_split_fragment_path(path: str, expected: tuple[str, ItemKind]) -> None:
    """The interface path follows the last ``implementors`` directory."""
    assert split_fragment_path(Path(path)) == expected


@parametrize(
    ("path", "message"),
    [
        ("core/fmt/trait.Debug.js", "not under"),
        ("implementors/core/fmt/trait.Debug.json", "must end in"),
        ("implementors/core/fmt/Debug.js", "<kind>.<Name>.js"),
        ("implementors/core/fmt/widget.Debug.js", "unknown item kind"),
    ],
)
def test_split_fragment_path_rejects_bad_paths(path: str, message: str) -> None:
    """Paths outside the fragment layout are format errors."""
    with pytest.raises(FragmentFormatError, match=message):
        split_fragment_path(Path(path))


def test_fragment_path_for_mirrors_interface_path(tmp_path: Path) -> None:
    """Path segments become directories; the last one becomes ``<kind>.<Name>.js``."""
    rel = fragment_path_for("core::fmt::Debug")

    assert rel == Path("implementors/core/fmt/trait.Debug.js")
    assert interface_path_for(rel) == "core::fmt::Debug"
    assert fragment_path_for("a::B", ItemKind.STRUCT, root=tmp_path) == (
        tmp_path / "implementors" / "a" / "struct.B.js"
    )


def test_fragment_path_for_rejects_empty_path() -> None:
    """An interface path without segments has no file."""
    with pytest.raises(ValueError, match="Empty interface path"):
        fragment_path_for("::")


def test_discover_fragments_recurses_and_sorts(tmp_path: Path) -> None:
    """Directories are searched recursively; results are unique and sorted."""
    debug = write_fragment(tmp_path, "core::fmt::Debug", DEBUG_FRAGMENT)
    display = write_fragment(tmp_path, "core::fmt::Display", DISPLAY_FRAGMENT)
    (tmp_path / "stray.js").write_text("// not a fragment\n", encoding="utf-8")

    found = discover_fragments([tmp_path, debug])

    assert found == sorted([debug, display])


def test_discover_fragments_applies_exclude_patterns(tmp_path: Path) -> None:
    """Exclude patterns use gitwildmatch syntax relative to the root."""
    debug = write_fragment(tmp_path, "core::fmt::Debug", DEBUG_FRAGMENT)
    write_fragment(tmp_path, "core::fmt::Display", DISPLAY_FRAGMENT)

    assert discover_fragments([tmp_path], exclude=["**/trait.Display.js"]) == [debug]


def test_discover_fragments_skips_missing_roots(
    tmp_path: Path, caplog: pytest.LogCaptureFixture
) -> None:
    """A missing path is logged and skipped."""
    caplog.set_level("WARNING")
    missing = tmp_path / "nope"

    assert discover_fragments([missing]) == []
    assert "Skipping missing path" in caplog.text


def test_load_fragment_reads_interface_and_modules(tmp_path: Path) -> None:
    """Loading combines the path-derived interface with the parsed registrations."""
    path = write_fragment(tmp_path, "core::fmt::Debug", DEBUG_FRAGMENT)

    fragment = load_fragment(path)

    assert fragment.interface_path == "core::fmt::Debug"
    assert fragment.kind is ItemKind.TRAIT
    assert [m.name for m in fragment.modules] == ["archive", "volta", "volta_core", "empty_crate"]


def test_load_fragment_reports_file_and_line(tmp_path: Path) -> None:
    """Parse errors name the file they came from."""
    path = write_fragment(tmp_path, "a::B", "not a fragment")

    with pytest.raises(FragmentFormatError) as excinfo:
        load_fragment(path)

    assert excinfo.value.path == path
    assert excinfo.value.line == 1


def test_feed_fragment_sequential_keeps_file_order() -> None:
    """With one job, modules are registered in file order."""
    registry = RegistryHandoff()
    fragment = _fragment(ModuleIndex("b"), ModuleIndex("a"), ModuleIndex("c"))

    rejected = feed_fragment(fragment, IndexFragmentProducer(registry))

    assert rejected == []
    assert registry.pending_names() == ("b", "a", "c")


def test_feed_fragment_collects_rejections() -> None:
    """Malformed names and rejected duplicates are returned, not raised."""
    registry = RegistryHandoff(config=make_config(duplicate_policy=DuplicatePolicy.REJECT))
    foo = make_record("Foo")
    fragment = _fragment(
        ModuleIndex("a", (foo,)),
        ModuleIndex(""),
        ModuleIndex("a", (make_record("Bar"),)),
    )

    rejected = feed_fragment(fragment, IndexFragmentProducer(registry))

    assert [type(exc) for exc in rejected] == [InvalidModuleName, DuplicateModule]
    assert registry.pending()["a"].records == (foo,)


def test_feed_fragment_on_a_thread_pool_delivers_every_module() -> None:
    """Concurrent feeding loses nothing; the consumer sees each module once."""
    registry = RegistryHandoff()
    intake = Recorder()
    registry.attach_consumer(intake)
    names = [f"crate_{i:02d}" for i in range(40)]
    fragment = _fragment(*(ModuleIndex(name) for name in names))

    rejected = feed_fragment(fragment, IndexFragmentProducer(registry), jobs=4)

    assert rejected == []
    assert sorted(intake.names) == names
