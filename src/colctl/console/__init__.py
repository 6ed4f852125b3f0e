"""Input layer — line sources and the script frame stack."""

from colctl.console.sources import InteractiveSource, LineSource, ScriptSource
from colctl.console.stack import InputSourceStack

__all__ = ["InputSourceStack", "InteractiveSource", "LineSource", "ScriptSource"]
