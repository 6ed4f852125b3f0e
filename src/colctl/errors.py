"""Error taxonomy for the console client.

Every failure a component can raise is a :class:`ColctlError` carrying a
stable ``code``.  Components raise; :class:`colctl.services.session.Session`
is the only catcher, turning each error into a one-line LineResult.

INVARIANT: Only ``TransportUnavailable`` at startup is fatal to the process.
``EndOfInput`` is not a failure at all; it requests a clean stop.
"""

from __future__ import annotations


class ColctlError(Exception):
    """Base class for all colctl errors."""

    code = "ERROR"


# --- Transport ---


class TransportError(ColctlError):
    """Base class for transport-layer errors."""

    code = "TRANSPORT"


class ExchangeTimeout(TransportError):
    """No response datagram arrived before the deadline."""

    code = "TIMEOUT"


class MalformedResponse(TransportError):
    """A datagram arrived but could not be decoded as a Response."""

    code = "MALFORMED_RESPONSE"


class EncodingTooLarge(TransportError):
    """The encoded request does not fit in a single datagram."""

    code = "ENCODING_TOO_LARGE"


class TransportUnavailable(TransportError):
    """The socket could not be opened, or a send failed at the OS level."""

    code = "TRANSPORT_UNAVAILABLE"


class ExchangeInFlight(TransportError):
    """An exchange was started while another one is still pending."""

    code = "EXCHANGE_IN_FLIGHT"


# --- Input ---


class InputError(ColctlError):
    """Base class for errors rejecting a single input line."""

    code = "INPUT"


class RecursionDetected(InputError):
    """A script tried to include a script that is already running."""

    code = "RECURSION"

    def __init__(self, path: str) -> None:
        super().__init__(f"recursion detected, script is already running: {path}")
        self.path = path


class UnreadableSource(InputError):
    """A script file could not be opened for reading."""

    code = "UNREADABLE_SOURCE"

    def __init__(self, path: str, reason: str = "") -> None:
        detail = f": {reason}" if reason else ""
        super().__init__(f"cannot read script {path}{detail}")
        self.path = path


class UnknownCommand(InputError):
    """The first token of a line names no known command."""

    code = "UNKNOWN_COMMAND"

    def __init__(self, name: str) -> None:
        super().__init__(f"unknown command '{name}', type 'help' for the list of commands")
        self.name = name


class ArityError(InputError):
    """A command was given the wrong number of arguments."""

    code = "ARITY"


class InvalidField(InputError):
    """An argument or record field value failed validation."""

    code = "INVALID_FIELD"


class ScriptInputExhausted(InputError):
    """A script ended while a command was still prompting for input."""

    code = "SCRIPT_INPUT_EXHAUSTED"


class EndOfInput(ColctlError):
    """The interactive console reached end-of-input."""

    code = "EOF"
