"""Shared pytest fixtures and test helpers for colctl tests."""

from __future__ import annotations

import socket
import threading
from collections.abc import Callable, Generator
from pathlib import Path

import pytest
from click.testing import CliRunner

from colctl.domain.messages import Request, Response
from colctl.transport.codec import decode_request, encode_response
from colctl.transport.udp import DatagramTransport

Reply = Callable[[Request], Response | bytes | None]


class LoopbackResponder:
    """A UDP service on 127.0.0.1 answering from a background thread.

    ``reply`` maps each decoded Request to a Response, raw bytes, or None
    (stay silent).  Every received Request is appended to ``requests``.
    """

    def __init__(self) -> None:
        self.requests: list[Request] = []
        self.reply: Reply = lambda request: Response(message="OK")
        self._sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
        self._sock.bind(("127.0.0.1", 0))
        self._sock.settimeout(0.05)
        self.port: int = self._sock.getsockname()[1]
        self._stop = threading.Event()
        self._thread = threading.Thread(target=self._run, daemon=True)
        self._thread.start()

    def _run(self) -> None:
        while not self._stop.is_set():
            try:
                data, address = self._sock.recvfrom(65535)
            except TimeoutError:
                continue
            except OSError:
                break
            request = decode_request(data)
            self.requests.append(request)
            answer = self.reply(request)
            if answer is None:
                continue
            if isinstance(answer, Response):
                answer = encode_response(answer)
            self._sock.sendto(answer, address)

    def close(self) -> None:
        self._stop.set()
        self._thread.join(timeout=1)
        self._sock.close()


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def responder() -> Generator[LoopbackResponder]:
    """A live loopback service answering ``OK`` unless told otherwise."""
    server = LoopbackResponder()
    try:
        yield server
    finally:
        server.close()


@pytest.fixture
def silent_port() -> Generator[int]:
    """A bound UDP port that never answers."""
    sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
    sock.bind(("127.0.0.1", 0))
    try:
        yield sock.getsockname()[1]
    finally:
        sock.close()


@pytest.fixture
def transport(responder: LoopbackResponder) -> Generator[DatagramTransport]:
    """An open transport pointed at the loopback responder, short deadline."""
    t = DatagramTransport("127.0.0.1", responder.port, timeout=1.0, poll_interval=0.02)
    t.open()
    try:
        yield t
    finally:
        t.close()


@pytest.fixture
def write_script(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Callable[..., Path]:
    """Return a factory writing script files under a temp working directory.

    The working directory is switched to ``tmp_path`` so scripts can refer
    to each other by relative path.
    """
    monkeypatch.chdir(tmp_path)

    def _write(name: str, *lines: str) -> Path:
        path = tmp_path / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text("".join(f"{line}\n" for line in lines), encoding="utf-8")
        return path

    return _write
