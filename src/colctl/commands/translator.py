"""CommandTranslator — turn one input line into a Request or a directive.

``execute_script <path>`` is handled locally and never reaches the wire:
the translator returns a :class:`ScriptDirective` and the session pushes
the script.  Every other first token must name a registered command.

Record prompts read through :meth:`InputSourceStack.read_prompt`, so inside
a script the answers are the script's following lines and the terminal is
never consulted.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

import click

from colctl.domain.messages import Request, RequestBody
from colctl.errors import ArityError, InvalidField, UnknownCommand

if TYPE_CHECKING:
    from colctl.commands.registry import CommandRegistry, CommandSpec
    from colctl.console.stack import InputSourceStack
    from colctl.domain.records import RecordField

SCRIPT_DIRECTIVE = "execute_script"


@dataclass(frozen=True)
class ScriptDirective:
    """A request to run the script at *path*."""

    path: str


class CommandTranslator:
    """Parse lines against a command registry.

    Args:
        registry: Known remote commands.
        stack: Source of answers for record prompts.
        report: Receives one-line notices when an interactive answer is
            rejected and the field is asked again.
    """

    def __init__(
        self,
        registry: CommandRegistry,
        stack: InputSourceStack,
        *,
        report: Callable[[str], None] = click.echo,
    ) -> None:
        self._registry = registry
        self._stack = stack
        self._report = report

    def translate(self, line: str) -> Request | ScriptDirective | None:
        """Return the Request or directive for *line*, or None if it is blank.

        Raises:
            ArityError: wrong number of arguments.
            UnknownCommand: first token is not a registered command.
            InvalidField: an argument or scripted record field is invalid.
            ScriptInputExhausted: a script ended mid-record.
            EndOfInput: the console closed mid-record.
        """
        tokens = line.split()
        if not tokens:
            return None
        name, args = tokens[0], tokens[1:]

        if name == SCRIPT_DIRECTIVE:
            if len(args) != 1:
                msg = f"{SCRIPT_DIRECTIVE} takes exactly one argument <path>, got {len(args)}"
                raise ArityError(msg)
            return ScriptDirective(args[0])

        spec = self._registry.get(name)
        if spec is None:
            raise UnknownCommand(name)

        values = self._parse_arguments(spec, args)
        record = self._collect_record(spec.record) if spec.record else None

        body = None
        if values or record is not None:
            body = RequestBody(args=tuple(values), record=record)
        return Request(command=name, body=body)

    def _parse_arguments(self, spec: CommandSpec, args: list[str]) -> list[str]:
        if len(args) != spec.arity:
            msg = (
                f"'{spec.name}' takes {spec.arity} argument(s), got {len(args)}; "
                f"usage: {spec.usage}"
            )
            raise ArityError(msg)

        values: list[str] = []
        for argument, raw in zip(spec.arguments, args, strict=True):
            try:
                values.append(str(argument.type.convert(raw, None, None)))
            except click.BadParameter as exc:
                raise InvalidField(f"{argument.name}: {exc.message}") from exc
        return values

    def _collect_record(self, fields: tuple[RecordField, ...]) -> dict[str, Any]:
        return {f.name: self._read_field(f) for f in fields}

    def _read_field(self, record_field: RecordField) -> Any:
        while True:
            raw = self._stack.read_prompt(record_field.prompt)
            try:
                return record_field.convert(raw)
            except click.BadParameter as exc:
                if not self._stack.active.interactive:
                    raise InvalidField(f"{record_field.name}: {exc.message}") from exc
                self._report(f"Invalid {record_field.name}: {exc.message}")
