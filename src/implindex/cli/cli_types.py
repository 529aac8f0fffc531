# topmark:header:start
#
#   project      : ImplIndex
#   file         : cli_types.py
#   file_relpath : src/implindex/cli/cli_types.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Click parameter types shared by ImplIndex commands."""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING, Callable, Generic, TypeVar

import click

if TYPE_CHECKING:
    from click.shell_completion import CompletionItem

E = TypeVar("E", bound=Enum)


class OutputFormat(str, Enum):
    """How a command prints its result.

    ``default`` and ``markdown`` are for people and may be colored;
    ``json`` and ``ndjson`` are for scripts and never are.
    """

    DEFAULT = "default"
    MARKDOWN = "markdown"
    JSON = "json"
    NDJSON = "ndjson"

    @property
    def is_machine(self) -> bool:
        return self in (OutputFormat.JSON, OutputFormat.NDJSON)


def _lookup_by_value(enum_cls: type[E]) -> Callable[[str], E | None]:
    table: dict[str, E] = {str(member.value).lower(): member for member in enum_cls}
    return lambda raw: table.get(raw.strip().lower())


class EnumChoiceParam(click.ParamType, Generic[E]):
    """Case-insensitive choice that converts to an Enum member.

    Args:
        enum_cls (type[E]): The Enum to convert to.
        parse (Callable[[str], E | None] | None): Custom lookup for enums that
            accept spellings besides their values (``DuplicatePolicy.parse``
            takes ``merge_append`` for ``merge-append``). Defaults to matching
            the member values.
    """

    def __init__(
        self,
        enum_cls: type[E],
        parse: Callable[[str], E | None] | None = None,
    ) -> None:
        self.enum_cls = enum_cls
        self.name = enum_cls.__name__.lower()
        self.choices: list[str] = [str(member.value) for member in enum_cls]
        self._parse = parse or _lookup_by_value(enum_cls)

    def get_metavar(self, param: click.Parameter, ctx: click.Context | None = None) -> str:
        return "[" + "|".join(self.choices) + "]"

    def convert(
        self,
        value: object,
        param: click.Parameter | None,
        ctx: click.Context | None,
    ) -> E:
        if isinstance(value, self.enum_cls):
            return value
        member: E | None = self._parse(str(value))
        if member is None:
            self.fail(
                f"Invalid value '{value}'. Must be one of: {', '.join(self.choices)}",
                param,
                ctx,
            )
        return member

    def shell_complete(
        self,
        ctx: click.Context,
        param: click.Parameter,
        incomplete: str,
    ) -> list[CompletionItem]:
        """Complete member values (``eval "$(_IMPLINDEX_COMPLETE=bash_source implindex)"``)."""
        from click.shell_completion import CompletionItem

        prefix: str = incomplete.lower()
        return [CompletionItem(choice) for choice in self.choices if choice.startswith(prefix)]
