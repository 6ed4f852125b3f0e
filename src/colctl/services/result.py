"""LineResult and LineError — the per-line outcome contract.

INVARIANT: Session.step() returns exactly one LineResult for every input
line it processes.  Renderers and tests consume this type; nothing above
the session ever sees a raw exception.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class LineError(BaseModel):
    """Structured error payload within a LineResult."""

    model_config = {"frozen": True}

    code: str
    message: str


class LineResult(BaseModel):
    """Outcome of processing one input line.

    Attributes:
        ok: Whether the line was handled without error.
        op: Command name, or ``execute_script`` for directives.
        data: ``message`` and ``payload`` from the Response, or ``path``
            for a pushed script.
        error: Structured error if ``ok`` is False.
        terminate: The service asked the client to stop.
    """

    model_config = {"frozen": True}

    ok: bool
    op: str
    data: dict[str, Any] = Field(default_factory=dict)
    error: LineError | None = None
    terminate: bool = False
