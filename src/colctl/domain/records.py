"""Record schema for commands that prompt for a collection element.

The collection service stores tickets.  Commands such as ``add`` and
``update`` collect one ticket field by field before the request is built.
Each field carries a click parameter type, so a typed answer and a script
line are converted and rejected the same way (``click.BadParameter``).
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import StrEnum
from typing import Any

import click


class TicketType(StrEnum):
    """Ticket categories understood by the service."""

    VIP = "VIP"
    USUAL = "USUAL"
    BUDGETARY = "BUDGETARY"
    CHEAP = "CHEAP"


class NonEmptyText(click.ParamType):
    """A string that is not blank once surrounding whitespace is removed."""

    name = "text"

    def convert(
        self, value: Any, param: click.Parameter | None, ctx: click.Context | None
    ) -> str:
        text = str(value).strip()
        if not text:
            self.fail("must not be empty", param, ctx)
        return text


class FiniteFloat(click.types.FloatParamType):
    """``click.FLOAT`` without ``inf`` and ``nan``, which JSON cannot carry."""

    def convert(
        self, value: Any, param: click.Parameter | None, ctx: click.Context | None
    ) -> float:
        number: float = super().convert(value, param, ctx)
        if not math.isfinite(number):
            self.fail(f"{value!r} is not a finite number.", param, ctx)
        return number


TICKET_TYPE = click.Choice([t.value for t in TicketType], case_sensitive=False)


@dataclass(frozen=True)
class RecordField:
    """One prompted field: its wire name, operator prompt, and click type."""

    name: str
    prompt: str
    type: click.ParamType

    def convert(self, raw: str) -> Any:
        """Convert one answer. Raises click.BadParameter if it is invalid."""
        return self.type.convert(raw.strip(), None, None)


TICKET_FIELDS: tuple[RecordField, ...] = (
    RecordField("name", "Enter ticket name: ", NonEmptyText()),
    RecordField("x", "Enter coordinate x (number): ", FiniteFloat()),
    RecordField("y", "Enter coordinate y (integer): ", click.INT),
    RecordField("price", "Enter price (integer > 0): ", click.IntRange(min=1)),
    RecordField("type", f"Enter type ({', '.join(TicketType)}): ", TICKET_TYPE),
)
