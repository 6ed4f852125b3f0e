"""Single-flight request/response exchange over a UDP socket.

The protocol allows exactly one outstanding request.  A call to
:meth:`DatagramTransport.exchange` sends one datagram, then waits in short
readiness polls until the first datagram arrives or the deadline passes.
There is no retransmission: a lost request or a lost response both surface
as ExchangeTimeout, and the caller moves on.

Responses are correlated with requests purely by call/return order, so
there are no sequence numbers on the wire.  Datagrams that arrive after an
exchange has already returned (late answers to a timed-out request, or
duplicates) are discarded at the start of the next exchange, before its
request is sent.
"""

from __future__ import annotations

import logging
import selectors
import socket
import time
from typing import TYPE_CHECKING, Self

from colctl.errors import (
    ExchangeInFlight,
    ExchangeTimeout,
    MalformedResponse,
    TransportUnavailable,
)
from colctl.transport.codec import MAX_DATAGRAM, decode_response, encode_request

if TYPE_CHECKING:
    from types import TracebackType

    from colctl.config.settings import ColSettings
    from colctl.domain.messages import Request, Response

logger = logging.getLogger(__name__)


class PendingExchange:
    """The one request currently awaiting its response."""

    def __init__(self, request: Request, timeout: float) -> None:
        self.request = request
        self.started = time.monotonic()
        self.deadline = self.started + timeout

    def remaining(self) -> float:
        return self.deadline - time.monotonic()

    def elapsed(self) -> float:
        return time.monotonic() - self.started


class DatagramTransport:
    """Connectionless client transport to one server address.

    The socket and its selector are acquired by :meth:`open` and released by
    :meth:`close`; use the instance as a context manager so release happens
    on every exit path.

    Attributes:
        timeout: Overall deadline for one exchange, in seconds.
        poll_interval: Upper bound on a single readiness wait, in seconds.
        max_datagram: Largest request accepted and receive buffer size.
    """

    def __init__(
        self,
        host: str,
        port: int,
        *,
        timeout: float = 10.0,
        poll_interval: float = 0.1,
        max_datagram: int = MAX_DATAGRAM,
    ) -> None:
        self.host = host
        self.port = int(port)
        self.timeout = timeout
        self.poll_interval = poll_interval
        self.max_datagram = max_datagram

        self._address: tuple[object, ...] | None = None
        self._socket: socket.socket | None = None
        self._selector: selectors.BaseSelector | None = None
        self._pending: PendingExchange | None = None

    @classmethod
    def from_settings(cls, settings: ColSettings) -> DatagramTransport:
        return cls(
            settings.server.host,
            settings.server.port,
            timeout=settings.transport.timeout,
            poll_interval=settings.transport.poll_interval,
            max_datagram=settings.transport.max_datagram,
        )

    # ── Lifecycle ────────────────────────────────────────────────────

    @property
    def is_open(self) -> bool:
        return self._socket is not None

    @property
    def pending(self) -> PendingExchange | None:
        """The exchange in flight, if any."""
        return self._pending

    def open(self) -> None:
        """Resolve the server address and create the socket.

        Raises TransportUnavailable if either step fails.
        """
        if self._socket is not None:
            return

        try:
            infos = socket.getaddrinfo(self.host, self.port, type=socket.SOCK_DGRAM)
        except OSError as exc:
            msg = f"cannot resolve {self.host}:{self.port}: {exc}"
            raise TransportUnavailable(msg) from exc

        family, kind, proto, _canon, address = infos[0]
        try:
            sock = socket.socket(family, kind, proto)
        except OSError as exc:
            msg = f"cannot open UDP socket: {exc}"
            raise TransportUnavailable(msg) from exc

        sock.setblocking(False)
        selector = selectors.DefaultSelector()
        selector.register(sock, selectors.EVENT_READ)

        self._address = address
        self._socket = sock
        self._selector = selector
        logger.debug("Transport open for %s:%d", self.host, self.port)

    def close(self) -> None:
        """Release the selector and socket. Safe to call more than once."""
        if self._selector is not None:
            self._selector.close()
            self._selector = None
        if self._socket is not None:
            self._socket.close()
            self._socket = None
            logger.debug("Transport closed for %s:%d", self.host, self.port)
        self._pending = None

    def __enter__(self) -> Self:
        self.open()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    # ── Exchange ─────────────────────────────────────────────────────

    def exchange(self, request: Request) -> Response:
        """Send *request* and return the first response datagram, decoded.

        Raises:
            EncodingTooLarge: before any network I/O, if the request does
                not fit in one datagram.
            ExchangeInFlight: if another exchange is still pending.
            ExchangeTimeout: if nothing arrives before the deadline.
            MalformedResponse: if the first datagram does not decode.
            TransportUnavailable: if the transport is closed or the OS
                rejects the send.
        """
        if self._socket is None or self._selector is None:
            raise TransportUnavailable("transport is not open")
        if self._pending is not None:
            msg = f"'{self._pending.request.command}' is still awaiting a response"
            raise ExchangeInFlight(msg)

        data = encode_request(request, limit=self.max_datagram)

        self._pending = PendingExchange(request, self.timeout)
        try:
            self._discard_stale()
            try:
                self._socket.sendto(data, self._address)
            except OSError as exc:
                msg = f"send to {self.host}:{self.port} failed: {exc}"
                raise TransportUnavailable(msg) from exc
            logger.debug("Sent %s (%d bytes)", request.command, len(data))
            return self._await_response(self._pending)
        finally:
            self._pending = None

    def _await_response(self, pending: PendingExchange) -> Response:
        """Poll for readiness until a datagram arrives or the deadline passes."""
        assert self._socket is not None and self._selector is not None

        while True:
            remaining = pending.remaining()
            if remaining <= 0:
                logger.debug(
                    "No response to %s after %.2f s", pending.request.command, pending.elapsed()
                )
                msg = f"no response from {self.host}:{self.port} within {self.timeout:g} s"
                raise ExchangeTimeout(msg)

            if not self._selector.select(min(self.poll_interval, remaining)):
                continue

            try:
                data, sender = self._socket.recvfrom(self.max_datagram)
            except BlockingIOError:
                continue
            except OSError as exc:
                msg = f"receive from {self.host}:{self.port} failed: {exc}"
                raise TransportUnavailable(msg) from exc

            logger.debug(
                "Received %d bytes from %s after %.3f s", len(data), sender, pending.elapsed()
            )
            try:
                return decode_response(data)
            except MalformedResponse:
                logger.debug("Undecodable response to %s", pending.request.command)
                raise

    def _discard_stale(self) -> None:
        """Drop datagrams left over from earlier exchanges."""
        assert self._socket is not None

        dropped = 0
        while True:
            try:
                self._socket.recvfrom(self.max_datagram)
            except OSError:
                # BlockingIOError: buffer is empty.
                break
            dropped += 1
        if dropped:
            logger.debug("Discarded %d stale datagram(s)", dropped)
