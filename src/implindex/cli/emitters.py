# topmark:header:start
#
#   project      : ImplIndex
#   file         : emitters.py
#   file_relpath : src/implindex/cli/emitters.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Human-facing emitters (default text and Markdown).

``emit_*`` functions print through a `ConsoleLike`; ``render_*`` functions
return strings. Machine formats are handled by `implindex.machine`.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from implindex.fragments.html import plain_text, render_record_html

if TYPE_CHECKING:
    from collections.abc import Sequence

    from implindex.cli.console import ConsoleLike
    from implindex.machine.payloads import ProblemPayload
    from implindex.model import ImplementorRecord
    from implindex.pages import PageResult


def render_record_line(record: ImplementorRecord) -> str:
    """Return the plain-text summary of a record (``impl Debug for Foo``)."""
    summary: str = plain_text(render_record_html(record))
    return f"{summary} (synthetic)" if record.synthetic else summary


def emit_pages_default(
    *,
    console: ConsoleLike,
    pages: Sequence[PageResult],
) -> None:
    """Print the interface -> module -> implementors index as indented text.

    Delivery statistics for each page appear only on a verbose console.
    """
    for page in pages:
        console.print(console.styled(page.interface_path, bold=True))
        stats = page.stats
        console.detail(
            f"  [{page.fragment.path}] submitted={stats.submitted} "
            f"replayed={stats.replayed} forwarded={stats.forwarded} "
            f"rejected={stats.rejected}"
        )
        for module in page.modules():
            console.print(f"  {console.styled(module.name, fg='cyan')}")
            if not module.records:
                console.print(console.styled("    (no implementors)", dim=True))
            for rec in module.records:
                console.print(f"    {render_record_line(rec)}")
        for exc in page.rejected:
            console.warn(f"  rejected: {exc}")


def render_pages_markdown(pages: Sequence[PageResult]) -> str:
    """Return the index as a Markdown document."""
    lines: list[str] = ["# Implementors", ""]
    for page in pages:
        lines.extend([f"## `{page.interface_path}`", ""])
        for module in page.modules():
            lines.extend([f"### {module.name}", ""])
            if not module.records:
                lines.append("_No implementors._")
            lines.extend(f"- `{render_record_line(rec)}`" for rec in module.records)
            lines.append("")
    return "\n".join(lines).rstrip() + "\n"


def render_problem_line(problem: ProblemPayload) -> str:
    """Return ``path[:line]: message``."""
    location: str = problem.path.as_posix()
    if problem.line is not None:
        location += f":{problem.line}"
    return f"{location}: {problem.message}"


def emit_problems_default(
    *,
    console: ConsoleLike,
    problems: Sequence[ProblemPayload],
    checked: int,
) -> None:
    """Print validation problems, then a summary unless the console is quiet."""
    for problem in problems:
        console.error(render_problem_line(problem))
    if problems:
        console.note(
            console.styled(f"{len(problems)} problem(s) in {checked} fragment(s)", fg="red")
        )
    else:
        console.note(console.styled(f"{checked} fragment(s) OK", fg="green"))
