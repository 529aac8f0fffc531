# topmark:header:start
#
#   project      : ImplIndex
#   file         : loader.py
#   file_relpath : src/implindex/fragments/loader.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Locate fragment files on disk, load them, and feed them to a producer.

Fragments live in a tree mirroring the interface's path::

    implementors/core/fmt/trait.Debug.js   ->  core::fmt::Debug (trait)

`feed_fragment` replays one fragment's registrations through an
`IndexFragmentProducer`, optionally on a thread pool, so that producers run
in whatever order the scheduler picks, as they do in a real build.
"""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

from pathspec import PathSpec
from pathspec.patterns.gitwildmatch import GitWildMatchPattern

from implindex.config.logging import get_logger
from implindex.constants import FRAGMENT_DIR_NAME, FRAGMENT_SUFFIX
from implindex.errors import DuplicateModule, FragmentFormatError, InvalidModuleName
from implindex.fragments.codec import parse_fragment
from implindex.model import ItemKind, ModuleIndex

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from implindex.config.logging import ImplIndexLogger
    from implindex.producer import IndexFragmentProducer

logger: ImplIndexLogger = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class Fragment:
    """One parsed fragment file.

    Attributes:
        path: Source file.
        interface_path: Qualified interface path (``"core::fmt::Debug"``).
        kind: Interface kind taken from the file name prefix.
        modules: Module registrations in file order.
    """

    path: Path
    interface_path: str
    kind: ItemKind
    modules: tuple[ModuleIndex, ...]


def split_fragment_path(path: Path) -> tuple[str, ItemKind]:
    """Return ``(interface_path, kind)`` for a fragment file path.

    Raises:
        FragmentFormatError: If the path is not under an ``implementors``
            directory or the file name is not ``<kind>.<Name>.js``.
    """
    parts: tuple[str, ...] = path.parts
    try:
        anchor: int = len(parts) - 1 - parts[::-1].index(FRAGMENT_DIR_NAME)
    except ValueError:
        raise FragmentFormatError(
            f"not under an '{FRAGMENT_DIR_NAME}' directory", path=path
        ) from None

    if path.suffix != FRAGMENT_SUFFIX:
        raise FragmentFormatError(f"fragment file must end in '{FRAGMENT_SUFFIX}'", path=path)
    kind_name, dot, item_name = path.stem.partition(".")
    if not dot or not item_name:
        raise FragmentFormatError("fragment file name must be '<kind>.<Name>.js'", path=path)
    try:
        kind = ItemKind(kind_name)
    except ValueError:
        raise FragmentFormatError(f"unknown item kind '{kind_name}'", path=path) from None

    segments: list[str] = [*parts[anchor + 1 : -1], item_name]
    return "::".join(segments), kind


def interface_path_for(path: Path) -> str:
    """Return the qualified interface path documented by a fragment file."""
    return split_fragment_path(path)[0]


def fragment_path_for(
    interface_path: str,
    kind: ItemKind = ItemKind.TRAIT,
    *,
    root: Path | None = None,
) -> Path:
    """Return the fragment file path for an interface.

    Args:
        interface_path (str): Qualified path (``"core::fmt::Debug"``).
        kind (ItemKind): Interface kind used as file name prefix.
        root (Path | None): Directory containing the ``implementors`` tree.

    Returns:
        Path: e.g. ``implementors/core/fmt/trait.Debug.js``.
    """
    segments: list[str] = [s for s in interface_path.split("::") if s]
    if not segments:
        raise ValueError(f"Empty interface path: {interface_path!r}")
    rel = Path(FRAGMENT_DIR_NAME, *segments[:-1], f"{kind.value}.{segments[-1]}{FRAGMENT_SUFFIX}")
    return rel if root is None else root / rel


def _rel_for_match(path: Path, base: Path) -> str:
    """Return a POSIX-style relative path (or absolute as fallback) for PathSpec matching."""
    try:
        return path.resolve().relative_to(base.resolve()).as_posix()
    except ValueError:
        return path.as_posix()


def discover_fragments(roots: Iterable[Path], *, exclude: Sequence[str] = ()) -> list[Path]:
    """Find fragment files below the given roots.

    Directories are searched recursively for ``*.js`` files inside an
    ``implementors`` tree; files given explicitly are kept as-is. Exclude
    patterns use gitwildmatch syntax relative to each root.

    Args:
        roots (Iterable[Path]): Files or directories.
        exclude (Sequence[str]): Patterns removing matches.

    Returns:
        list[Path]: Unique fragment paths, sorted.
    """
    spec: PathSpec | None = (
        PathSpec.from_lines(GitWildMatchPattern, list(exclude)) if exclude else None
    )
    found: set[Path] = set()
    for root in roots:
        if root.is_file():
            candidates: list[Path] = [root]
            base: Path = root.parent
        elif root.is_dir():
            candidates = [
                p
                for p in root.rglob(f"*{FRAGMENT_SUFFIX}")
                if FRAGMENT_DIR_NAME in p.parts and p.is_file()
            ]
            base = root
        else:
            logger.warning("Skipping missing path: %s", root)
            continue
        for p in candidates:
            if spec is not None and spec.match_file(_rel_for_match(p, base)):
                logger.trace("Excluded %s", p)
                continue
            found.add(p)
    logger.debug("Discovered %d fragment file(s)", len(found))
    return sorted(found)


def load_fragment(path: Path) -> Fragment:
    """Read and parse one fragment file.

    Raises:
        FragmentFormatError: If the path or the contents are malformed.
        OSError: If the file cannot be read.
    """
    interface_path, kind = split_fragment_path(path)
    text: str = path.read_text(encoding="utf-8")
    modules: list[ModuleIndex] = parse_fragment(text, path=path)
    return Fragment(path=path, interface_path=interface_path, kind=kind, modules=tuple(modules))


def feed_fragment(
    fragment: Fragment,
    producer: IndexFragmentProducer,
    *,
    jobs: int = 1,
) -> list[InvalidModuleName | DuplicateModule]:
    """Register every module of a fragment through ``producer``.

    With ``jobs > 1`` the registrations run concurrently on a thread pool;
    the registry then sees them in scheduler order. Rejected registrations
    (malformed names, duplicates under the ``reject`` policy) are collected
    rather than raised, so one bad module never hides the others.

    Args:
        fragment (Fragment): The parsed fragment.
        producer (IndexFragmentProducer): Producer bound to the page's registry.
        jobs (int): Worker threads (1 = sequential, file order).

    Returns:
        list[InvalidModuleName | DuplicateModule]: Rejections, in module order.
    """

    def register(index: ModuleIndex) -> InvalidModuleName | DuplicateModule | None:
        try:
            producer.register_index(index)
        except (InvalidModuleName, DuplicateModule) as exc:
            return exc
        return None

    if jobs <= 1 or len(fragment.modules) <= 1:
        outcomes = [register(index) for index in fragment.modules]
    else:
        with ThreadPoolExecutor(max_workers=jobs, thread_name_prefix="implindex") as pool:
            outcomes = list(pool.map(register, fragment.modules))
    return [exc for exc in outcomes if exc is not None]
