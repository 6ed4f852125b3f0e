"""Line sources: the interactive console and script files.

Both variants expose the same capability, ``readline(prompt)``, returning
the next line without its trailing newline, or None once the source is
exhausted.  Nothing above this module distinguishes the two except the
stack, which never pops the interactive source.
"""

from __future__ import annotations

import sys
from collections.abc import Callable, Iterator
from pathlib import Path
from typing import IO, Protocol

import click

from colctl.errors import UnreadableSource


def canonical_path(path: str | Path) -> Path:
    """Absolute, symlink-free form of *path*, relative to the working directory."""
    return Path(path).expanduser().resolve()


class LineSource(Protocol):
    """Anything that produces a finite, lazy sequence of lines."""

    interactive: bool

    def readline(self, prompt: str = "") -> str | None: ...

    def close(self) -> None: ...


class InteractiveSource:
    """The operator's console.

    Writes *prompt* through *echo* and reads one line from *stream*.  An
    empty read means end-of-input (Ctrl-D, closed pipe).
    """

    interactive = True

    def __init__(
        self,
        stream: IO[str] | None = None,
        echo: Callable[..., None] = click.echo,
    ) -> None:
        self._stream = stream if stream is not None else sys.stdin
        self._echo = echo
        self.exhausted = False

    def readline(self, prompt: str = "") -> str | None:
        if self.exhausted:
            return None
        if prompt:
            self._echo(prompt, nl=False)
        line = self._stream.readline()
        if line == "":
            self.exhausted = True
            return None
        return line.rstrip("\r\n")

    def close(self) -> None:
        """The console belongs to the process; it is never closed here."""


class ScriptSource:
    """One script file, read lazily line by line. Not restartable."""

    interactive = False

    def __init__(self, path: str | Path) -> None:
        self.path = canonical_path(path)
        try:
            self._file: IO[str] | None = self.path.open(encoding="utf-8")
        except OSError as exc:
            raise UnreadableSource(str(path), exc.strerror or str(exc)) from exc
        self._lines: Iterator[str] = iter(self._file)
        self.line_number = 0

    def readline(self, prompt: str = "") -> str | None:
        if self._file is None:
            return None
        try:
            line = next(self._lines)
        except StopIteration:
            self.close()
            return None
        except UnicodeDecodeError as exc:
            self.close()
            reason = f"not UTF-8 text near line {self.line_number + 1}"
            raise UnreadableSource(str(self.path), reason) from exc
        self.line_number += 1
        return line.rstrip("\r\n")

    def close(self) -> None:
        if self._file is not None:
            self._file.close()
            self._file = None
