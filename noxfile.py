# topmark:header:start
#
#   project      : ImplIndex
#   file         : noxfile.py
#   file_relpath : noxfile.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Nox sessions for ImplIndex.

``nox`` alone runs the quick checks (``lint``, ``format_check``). Others:

- ``tests``: the fast pytest suite on every supported Python.
- ``typecheck``: pyright, once per supported Python.
- ``concurrency``: the slow handoff property and threading tests.
- ``format``: rewrite files with ruff.
- ``package_check``: build sdist and wheel, then ``twine check`` them.

Extra arguments go to the underlying tool: ``nox -s tests-3.12 -- -k handoff``.
"""

from __future__ import annotations

import re
import shutil
import sys
from pathlib import Path

import nox

if sys.version_info >= (3, 11):
    import tomllib as toml_reader
else:
    import toml as toml_reader

ROOT = Path(__file__).parent
DEV_INSTALL = ("-e", ".[test,dev]")
SLOW_MARKERS = "slow or hypothesis_slow"
_PY_CLASSIFIER = re.compile(r"^Programming Language :: Python :: (\d+)\.(\d+)$")


def supported_pythons() -> list[str]:
    """Return the ``X.Y`` versions listed in the pyproject classifiers.

    Falls back to the running interpreter when the classifiers name none,
    so ``nox -l`` works even on a half-edited pyproject.
    """
    pyproject: dict[str, object] = toml_reader.loads(
        (ROOT / "pyproject.toml").read_text(encoding="utf-8")
    )
    project = pyproject.get("project")
    classifiers = project.get("classifiers", []) if isinstance(project, dict) else []
    found = sorted(
        {(int(m[1]), int(m[2])) for c in classifiers if (m := _PY_CLASSIFIER.match(str(c)))}
    )
    if not found:
        return [f"{sys.version_info.major}.{sys.version_info.minor}"]
    return [f"{major}.{minor}" for major, minor in found]


PYTHONS = supported_pythons()

nox.options.sessions = ["lint", "format_check"]


@nox.session(python=PYTHONS)
def tests(session: nox.Session) -> None:
    session.install(*DEV_INSTALL)
    session.run("pytest", "-q", "-m", f"not ({SLOW_MARKERS})", *session.posargs)


@nox.session(python=PYTHONS)
def typecheck(session: nox.Session) -> None:
    session.install(*DEV_INSTALL)
    session.run("pyright", "--pythonversion", str(session.python), *session.posargs)


@nox.session
def concurrency(session: nox.Session) -> None:
    """Run the slow handoff tests (many threads, many hypothesis examples)."""
    session.install(*DEV_INSTALL)
    session.run("pytest", "-vv", "-m", SLOW_MARKERS, "tests/registry", *session.posargs)


@nox.session
def lint(session: nox.Session) -> None:
    session.install(*DEV_INSTALL)
    session.run("ruff", "check", ".", *session.posargs)


@nox.session
def format_check(session: nox.Session) -> None:
    session.install(*DEV_INSTALL)
    session.run("ruff", "format", "--check", ".")


@nox.session
def format(session: nox.Session) -> None:
    session.install(*DEV_INSTALL)
    session.run("ruff", "format", ".")


@nox.session
def package_check(session: nox.Session) -> None:
    """Build into a clean ``dist/`` and validate the metadata."""
    session.install(*DEV_INSTALL)
    shutil.rmtree(ROOT / "dist", ignore_errors=True)
    session.run("python", "-m", "build", "--sdist", "--wheel")
    session.run("twine", "check", "dist/*")
