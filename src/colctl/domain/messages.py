"""Wire messages exchanged with the collection service.

One Request goes out per non-directive input line; at most one Response
comes back.  Both are frozen: a Request is immutable once built, and the
client never edits what the server sent.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class RequestBody(BaseModel):
    """Arguments collected for a command.

    Attributes:
        args: Positional arguments typed after the command name.
        record: Field values prompted for commands that carry a record.
    """

    model_config = {"frozen": True}

    args: tuple[str, ...] = ()
    record: dict[str, Any] | None = None


class Request(BaseModel):
    """A command addressed to the collection service."""

    model_config = {"frozen": True}

    command: str
    body: RequestBody | None = None


class Response(BaseModel):
    """The service's answer to one Request.

    Attributes:
        message: Human-readable outcome, displayed verbatim.
        payload: Domain records, displayed in order; may be empty.
        terminate: When True the client session stops after display.
    """

    model_config = {"frozen": True}

    message: str = ""
    payload: list[dict[str, Any]] = Field(default_factory=list)
    terminate: bool = False
