"""AppContext — wiring between settings, output, and the session.

Created once by the root CLI command.  Configures logging, opens the
transport, builds the session, and routes each LineResult to stdout
(success) or stderr (failure) in the requested output mode.
"""

from __future__ import annotations

import io
from collections.abc import Iterable
from typing import IO, TYPE_CHECKING

import click

from colctl.output.renderers import format_result

if TYPE_CHECKING:
    from colctl.config.settings import ColSettings
    from colctl.services.result import LineResult
    from colctl.services.session import Session


class AppContext:
    """Shared context for one colctl invocation."""

    def __init__(self, settings: ColSettings) -> None:
        self.settings = settings

        from colctl.config.logging import bind_server, configure_logging

        configure_logging(verbose=settings.verbose, log_json=settings.log_json)
        bind_server(settings.server.host, settings.server.port)

    @property
    def plain_output(self) -> bool:
        """True when only results may reach stdout (``--json`` / ``--quiet``)."""
        return self.settings.json_output or self.settings.quiet

    def emit(self, result: LineResult) -> None:
        """Format and output one LineResult.

        Failures go to stderr so piped output carries only answers.  Unlike
        a one-shot command, a failure never exits: the session continues.
        """
        output = format_result(
            result,
            json_output=self.settings.json_output,
            quiet=self.settings.quiet,
            verbose=self.settings.verbose,
        )
        if output:
            click.echo(output, err=not result.ok)

    def banner(self) -> None:
        if self.plain_output:
            return
        host, port = self.settings.server_address
        click.echo(f"Connected to collection service at {host}:{port} (UDP).")
        click.echo("Type 'help' for the list of commands, Ctrl-D to quit.")

    def create_session(
        self,
        *,
        scripts: Iterable[str] = (),
        stream: IO[str] | None = None,
    ) -> Session:
        """Open the transport and build a session around it.

        Raises TransportUnavailable if the transport cannot be opened.
        """
        from colctl.console.sources import InteractiveSource
        from colctl.services.session import Session
        from colctl.transport.udp import DatagramTransport

        transport = DatagramTransport.from_settings(self.settings)
        transport.open()

        if self.settings.no_interact:
            stream = io.StringIO()
        console = self.settings.console
        return Session(
            transport,
            interactive=InteractiveSource(stream),
            prompt="" if self.plain_output else console.prompt,
            echo_script=console.echo_script and not self.plain_output,
            emit=self.emit,
            startup_scripts=scripts,
        )
