"""Session — the console loop driving stack, translator, and transport.

One line is fully processed (read, translated, sent, answered) before the
next is read.  The session owns the input stack and the transport, and it
alone decides when the loop stops:

* the service answers with ``terminate`` set, or
* the interactive console reaches end-of-input (at any script depth).

Every other failure is reported as a one-line LineResult and the loop moves
on to the next line.  Both the stack and the transport are released when
the loop ends, whatever the exit path.
"""

from __future__ import annotations

import logging
from collections import deque
from collections.abc import Callable, Iterable
from enum import StrEnum
from typing import TYPE_CHECKING

import click

from colctl.commands.registry import CommandRegistry, default_registry
from colctl.commands.translator import SCRIPT_DIRECTIVE, CommandTranslator, ScriptDirective
from colctl.console.sources import InteractiveSource, LineSource
from colctl.console.stack import InputSourceStack
from colctl.errors import ColctlError, EndOfInput
from colctl.services.result import LineError, LineResult

if TYPE_CHECKING:
    from pathlib import Path

    from colctl.domain.messages import Request
    from colctl.transport.udp import DatagramTransport

logger = logging.getLogger(__name__)


class SessionState(StrEnum):
    """Lifecycle of the console loop."""

    RUNNING = "running"
    AWAITING_SCRIPT_FRAME = "awaiting_script_frame"
    STOPPED = "stopped"


def _discard(_result: LineResult) -> None:
    pass


class Session:
    """Console session against one service address.

    Args:
        transport: An open transport; closed when the session stops.
        interactive: Base line source (default: stdin).
        registry: Known remote commands (default: the ticket service's).
        prompt: Shown before each interactive line.
        echo_script: Echo each script line before running it.
        emit: Receives each LineResult, including script completion notices.
        echo: Writes echoed script lines and re-prompt notices.
        startup_scripts: Scripts run one after another, each to completion,
            before the console is read.
    """

    def __init__(
        self,
        transport: DatagramTransport,
        *,
        interactive: LineSource | None = None,
        registry: CommandRegistry | None = None,
        prompt: str = "> ",
        echo_script: bool = True,
        emit: Callable[[LineResult], None] = _discard,
        echo: Callable[[str], None] = click.echo,
        startup_scripts: Iterable[str] = (),
    ) -> None:
        self.state = SessionState.RUNNING
        self._transport = transport
        self._prompt = prompt
        self._echo_script = echo_script
        self._emit = emit
        self._echo = echo
        self._startup = deque(startup_scripts)

        self._stack = InputSourceStack(
            interactive if interactive is not None else InteractiveSource(),
            on_pop=self._script_finished,
        )
        self._translator = CommandTranslator(
            registry if registry is not None else default_registry(),
            self._stack,
            report=echo,
        )

    @property
    def stack(self) -> InputSourceStack:
        return self._stack

    @property
    def running(self) -> bool:
        return self.state is not SessionState.STOPPED

    def run(self) -> None:
        """Process lines until the session stops, then release resources."""
        logger.debug("Session started against %s:%d", self._transport.host, self._transport.port)
        try:
            while self.running:
                result = self.step()
                if result is not None:
                    self._emit(result)
        finally:
            self.stop()

    def stop(self) -> None:
        """Enter STOPPED and release the stack and transport."""
        self.state = SessionState.STOPPED
        self._stack.close()
        self._transport.close()

    def step(self) -> LineResult | None:
        """Read and process one line.

        Returns the line's LineResult, or None when nothing was reported
        (blank or comment line, a script frame change, or already stopped).
        """
        if not self.running:
            return None

        if self._startup and not self._stack.is_active:
            return self._push_script(ScriptDirective(self._startup.popleft()))

        console = not self._startup
        try:
            line = self._stack.next_line(self._prompt, console=console)
        except ColctlError as exc:
            return self._failure(SCRIPT_DIRECTIVE, exc)

        if line is None:
            if not console:
                return None
            return self._end_of_input()

        text = line.strip()
        if not text or text.startswith("#"):
            return None
        if self._stack.is_active and self._echo_script:
            self._echo(f"{self._prompt}{text}")

        op = text.split()[0]
        try:
            parsed = self._translator.translate(text)
            if parsed is None:
                return None
            if isinstance(parsed, ScriptDirective):
                return self._push_script(parsed)
            return self._exchange(parsed)
        except EndOfInput:
            return self._end_of_input()
        except ColctlError as exc:
            return self._failure(op, exc)

    # ── Transitions ──────────────────────────────────────────────────

    def _exchange(self, request: Request) -> LineResult:
        response = self._transport.exchange(request)
        if response.terminate:
            logger.debug("Service requested termination after %s", request.command)
            self.state = SessionState.STOPPED
        return LineResult(
            ok=True,
            op=request.command,
            data={"message": response.message, "payload": response.payload},
            terminate=response.terminate,
        )

    def _push_script(self, directive: ScriptDirective) -> LineResult:
        self.state = SessionState.AWAITING_SCRIPT_FRAME
        try:
            frame = self._stack.push(directive.path)
        except ColctlError as exc:
            return self._failure(SCRIPT_DIRECTIVE, exc)
        finally:
            self.state = SessionState.RUNNING
        return LineResult(
            ok=True,
            op=SCRIPT_DIRECTIVE,
            data={"path": str(frame.path), "message": f"Running script {frame.path}"},
        )

    def _script_finished(self, path: Path) -> None:
        self._emit(
            LineResult(
                ok=True,
                op=SCRIPT_DIRECTIVE,
                data={"path": str(path), "message": f"Script {path} completed"},
            )
        )

    def _end_of_input(self) -> LineResult:
        logger.debug("End of input at script depth %d", self._stack.depth)
        self.state = SessionState.STOPPED
        return LineResult(
            ok=True,
            op="eof",
            data={"message": "End of input, shutting down"},
            terminate=True,
        )

    def _failure(self, op: str, exc: ColctlError) -> LineResult:
        logger.debug("%s failed: %s %s", op, exc.code, exc)
        return LineResult(
            ok=False,
            op=op,
            error=LineError(code=exc.code, message=str(exc)),
        )
