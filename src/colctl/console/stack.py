"""InputSourceStack — which line source is active, and script nesting.

The stack is the call history of ``execute_script``: the interactive
console sits at the base and is never popped, and each accepted script
directive pushes one frame tagged with the script's canonical path.

INVARIANT: No canonical path appears twice on the stack.  The check runs
at push time, so a script that includes itself (directly or through other
scripts) is rejected at the offending directive and nothing else changes.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

from colctl.console.sources import LineSource, ScriptSource, canonical_path
from colctl.errors import EndOfInput, RecursionDetected, ScriptInputExhausted

logger = logging.getLogger(__name__)


@dataclass
class ScriptFrame:
    """One running script: its canonical path and its open line source.

    ``recursion_rejected`` is set once the script tries to include a script
    that is already running; such a frame pops without a completion notice.
    """

    path: Path
    source: ScriptSource
    recursion_rejected: bool = False


class InputSourceStack:
    """Ordered stack of script frames above the interactive console.

    Args:
        interactive: The base source, normally the operator's console.
        on_pop: Called with the script path each time an exhausted script
            frame is popped (the completion notice), except for frames that
            had a recursive directive rejected.
    """

    def __init__(
        self,
        interactive: LineSource,
        *,
        on_pop: Callable[[Path], None] | None = None,
    ) -> None:
        self._interactive = interactive
        self._frames: list[ScriptFrame] = []
        self._on_pop = on_pop

    @property
    def is_active(self) -> bool:
        """True while any script frame remains above the console."""
        return bool(self._frames)

    @property
    def depth(self) -> int:
        return len(self._frames)

    @property
    def paths(self) -> tuple[Path, ...]:
        """Canonical paths of the running scripts, outermost first."""
        return tuple(frame.path for frame in self._frames)

    @property
    def active(self) -> LineSource:
        """The source the next line (or prompt answer) will come from."""
        if self._frames:
            return self._frames[-1].source
        return self._interactive

    def push(self, path: str | Path) -> ScriptFrame:
        """Open *path* and make it the active source.

        Raises:
            RecursionDetected: *path* is already running somewhere on the stack.
            UnreadableSource: *path* cannot be opened for reading.
        """
        canonical = canonical_path(path)
        if canonical in self.paths:
            self._frames[-1].recursion_rejected = True
            logger.debug("Rejected recursive script %s at depth %d", canonical, self.depth)
            raise RecursionDetected(str(canonical))

        frame = ScriptFrame(canonical, ScriptSource(canonical))
        self._frames.append(frame)
        logger.debug("Pushed script %s (depth %d)", canonical, self.depth)
        return frame

    def next_line(self, prompt: str = "", *, console: bool = True) -> str | None:
        """Return the next line from the innermost source that has one.

        Exhausted script frames are popped on the way down.  Returns None
        when the interactive console has reached end-of-input, or as soon as
        the scripts run out if *console* is False.
        """
        while self._frames:
            line = self._frames[-1].source.readline()
            if line is not None:
                return line
            self._pop()
        if not console:
            return None
        return self._interactive.readline(prompt)

    def read_prompt(self, prompt: str) -> str:
        """Read one answer for a command's prompt from the active source.

        Inside a script the answer is the script's next line; the frame is
        never popped here.

        Raises:
            EndOfInput: the console reached end-of-input.
            ScriptInputExhausted: the running script ended first.
        """
        source = self.active
        line = source.readline(prompt)
        if line is not None:
            return line
        if source.interactive:
            raise EndOfInput("end of input while reading a prompt")
        path = self._frames[-1].path
        raise ScriptInputExhausted(f"script {path} ended while a command was reading input")

    def close(self) -> None:
        """Close every script frame without completion notices."""
        while self._frames:
            frame = self._frames.pop()
            frame.source.close()
            logger.debug("Abandoned script %s", frame.path)

    def _pop(self) -> None:
        frame = self._frames.pop()
        frame.source.close()
        logger.debug("Popped script %s (depth %d)", frame.path, self.depth)
        if self._on_pop is not None and not frame.recursion_rejected:
            self._on_pop(frame.path)
