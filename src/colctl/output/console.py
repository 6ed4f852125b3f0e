"""Rich Console factory and theme for colctl output.

Creates Console instances that render to a StringIO buffer, preserving
the ``render_result() -> str`` contract.  In non-TTY environments
(tests, pipes) Rich automatically disables color codes.
"""

from __future__ import annotations

from io import StringIO

from rich.console import Console
from rich.theme import Theme

COL_THEME = Theme(
    {
        "col.ok": "bold green",
        "col.error": "bold red",
        "col.op": "bold cyan",
        "col.code": "dim red",
        "col.key": "dim",
        "col.message": "bold",
        "col.notice": "italic cyan",
    }
)


CONSOLE_WIDTH = 120


def create_console() -> Console:
    """Create a Console that renders to a StringIO buffer.

    The width is fixed so payload tables wrap the same way everywhere.
    """
    return Console(
        file=StringIO(),
        theme=COL_THEME,
        highlight=False,
        width=CONSOLE_WIDTH,
    )


def get_output(console: Console) -> str:
    """Extract rendered text from a StringIO-backed Console."""
    assert isinstance(console.file, StringIO)
    return console.file.getvalue()
