"""Registry of commands the collection service understands.

The client only needs each command's shape: how many positional arguments
it takes, how to validate them, and whether it prompts for a record.
What the command does is the service's business.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field

import click

from colctl.domain.records import TICKET_FIELDS, TICKET_TYPE, RecordField


@dataclass(frozen=True)
class Argument:
    """A positional argument: its display name and click type."""

    name: str
    type: click.ParamType = click.STRING


@dataclass(frozen=True)
class CommandSpec:
    """Client-side description of one remote command."""

    name: str
    description: str
    arguments: tuple[Argument, ...] = ()
    record: tuple[RecordField, ...] = field(default=())

    @property
    def arity(self) -> int:
        return len(self.arguments)

    @property
    def usage(self) -> str:
        return " ".join([self.name, *(f"<{a.name}>" for a in self.arguments)])


class CommandRegistry:
    """Name -> CommandSpec lookup, in registration order."""

    def __init__(self, specs: list[CommandSpec] | None = None) -> None:
        self._specs: dict[str, CommandSpec] = {}
        for spec in specs or []:
            self.register(spec)

    def register(self, spec: CommandSpec) -> None:
        self._specs[spec.name] = spec

    def get(self, name: str) -> CommandSpec | None:
        return self._specs.get(name)

    def names(self) -> list[str]:
        return list(self._specs)

    def __contains__(self, name: object) -> bool:
        return name in self._specs

    def __iter__(self) -> Iterator[CommandSpec]:
        return iter(self._specs.values())

    def __len__(self) -> int:
        return len(self._specs)


_ID = Argument("id", click.INT)


def default_registry() -> CommandRegistry:
    """The ticket collection service's command set."""
    return CommandRegistry(
        [
            CommandSpec("help", "show the available commands"),
            CommandSpec("info", "show information about the collection"),
            CommandSpec("show", "show every element of the collection"),
            CommandSpec("add", "add a new element", record=TICKET_FIELDS),
            CommandSpec("update", "replace the element with the given id", (_ID,), TICKET_FIELDS),
            CommandSpec("remove_by_id", "remove the element with the given id", (_ID,)),
            CommandSpec("clear", "remove every element"),
            CommandSpec("exit", "stop the client"),
            CommandSpec("remove_head", "show and remove the first element"),
            CommandSpec(
                "remove_lower", "remove every element lower than the given one", record=TICKET_FIELDS
            ),
            CommandSpec("max_by_creation_date", "show the most recently created element"),
            CommandSpec(
                "filter_by_type",
                "show elements of the given type",
                (Argument("type", TICKET_TYPE),),
            ),
            CommandSpec(
                "add_if_max", "add an element if it exceeds the largest one", record=TICKET_FIELDS
            ),
            CommandSpec("average_of_price", "show the average price of all elements"),
        ]
    )
