"""Root CLI command for colctl with global flags."""

from __future__ import annotations

import click

from colctl import __version__
from colctl.config.settings import ColSettings
from colctl.context import AppContext
from colctl.errors import TransportUnavailable


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(version=__version__, prog_name="colctl")
@click.option("--host", default=None, help="Service host (overrides [server] host).")
@click.option("--port", type=click.IntRange(1, 65535), default=None, help="Service UDP port.")
@click.option(
    "--timeout",
    type=click.FloatRange(min=0, min_open=True),
    default=None,
    help="Seconds to wait for each response.",
)
@click.option("--json", "json_output", is_flag=True, help="Structured JSON output.")
@click.option("-q", "--quiet", is_flag=True, help="Minimal output.")
@click.option("-v", "--verbose", is_flag=True, help="Detailed output with debug info.")
@click.option("--log-json", is_flag=True, help="Structured JSON log output to stderr.")
@click.option("--no-interact", is_flag=True, help="Stop after the scripts; never read stdin.")
@click.option("-c", "--config", "config_path", default=None, help="Override config file path.")
@click.argument("scripts", nargs=-1, type=click.Path(dir_okay=False))
def cli(
    host: str | None,
    port: int | None,
    timeout: float | None,
    json_output: bool,
    quiet: bool,
    verbose: bool,
    log_json: bool,
    no_interact: bool,
    config_path: str | None,
    scripts: tuple[str, ...],
) -> None:
    """colctl — console for a remote collection service.

    Reads commands from stdin (prompt "> ") and sends each one to the
    service as a UDP datagram.  SCRIPTS, if given, run first, in order.
    Inside any script, "execute_script <path>" runs another script.
    """
    settings = ColSettings.from_cli(
        config_path=config_path,
        host=host,
        port=port,
        timeout=timeout,
        json_output=json_output,
        quiet=quiet,
        verbose=verbose,
        log_json=log_json,
        no_interact=no_interact,
    )
    app = AppContext(settings)

    try:
        session = app.create_session(scripts=scripts)
    except TransportUnavailable as exc:
        click.echo(f"ERROR: {exc}", err=True)
        raise SystemExit(1) from exc

    app.banner()
    session.run()
