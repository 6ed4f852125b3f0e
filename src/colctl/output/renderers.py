"""Rich and JSON renderers for LineResult.

Human mode prints the service's message followed by its payload records
as a table, one row per record.  Errors are a single line.
Machine mode (``--json``) prints one compact JSON object per result.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from rich.table import Table
from rich.text import Text

from colctl.output.console import create_console, get_output

if TYPE_CHECKING:
    from rich.console import Console

    from colctl.services.result import LineResult


# ── Public API ────────────────────────────────────────────────────────


def render_result(result: LineResult, *, verbose: bool = False) -> str:
    """Render a LineResult to a styled string via Rich.

    Returns plain text (no ANSI) when Rich detects no terminal,
    which is the case inside Click's CliRunner and piped output.
    """
    console = create_console()

    if not result.ok:
        _render_error(result, console, verbose=verbose)
    elif result.op in _NOTICE_OPS:
        console.print(Text(_message(result), style="col.notice"))
    else:
        _render_response(result, console, verbose=verbose)

    return get_output(console).rstrip("\n")


def render_quiet(result: LineResult) -> str:
    """Render minimal output for ``--quiet`` mode: one line, no payload."""
    if not result.ok:
        msg = result.error.message if result.error else "Unknown error"
        return f"ERROR: {result.op} - {msg}"
    return _message(result)


def render_json(result: LineResult) -> str:
    """Render one compact JSON object for ``--json`` mode."""
    return result.model_dump_json(exclude_none=True)


def format_result(
    result: LineResult,
    *,
    json_output: bool = False,
    quiet: bool = False,
    verbose: bool = False,
) -> str:
    """Dispatch to the renderer matching the output mode."""
    if json_output:
        return render_json(result)
    if quiet:
        return render_quiet(result)
    return render_result(result, verbose=verbose)


# ── Helpers ───────────────────────────────────────────────────────────

_NOTICE_OPS = frozenset({"execute_script", "eof"})


def _message(result: LineResult) -> str:
    return str(result.data.get("message", ""))


def _render_error(result: LineResult, console: Console, *, verbose: bool) -> None:
    msg = result.error.message if result.error else "Unknown error"
    line = Text()
    line.append("ERROR: ", style="col.error")
    line.append(result.op, style="col.op")
    line.append(f" - {msg}")
    if verbose and result.error is not None:
        line.append(f" [{result.error.code}]", style="col.code")
    console.print(line)


def _render_response(result: LineResult, console: Console, *, verbose: bool) -> None:
    message = _message(result)
    if message:
        console.print(Text(message, style="col.message"))
    elif verbose:
        console.print(Text("OK", style="col.ok"), Text(result.op, style="col.op"))

    records: list[dict[str, Any]] = result.data.get("payload") or []
    if records:
        _render_records(records, console)


def _render_records(records: list[dict[str, Any]], console: Console) -> None:
    columns = _columns(records)
    table = Table(show_header=True, header_style="col.key")
    for column in columns:
        table.add_column(column)
    for record in records:
        table.add_row(*(_cell(record.get(column)) for column in columns))
    console.print(table)


def _columns(records: list[dict[str, Any]]) -> list[str]:
    """Union of record keys in first-seen order."""
    columns: dict[str, None] = {}
    for record in records:
        for key in record:
            columns.setdefault(str(key), None)
    return list(columns)


def _cell(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, dict):
        return ", ".join(f"{k}={_cell(v)}" for k, v in value.items())
    return str(value)
