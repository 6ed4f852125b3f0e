"""Tests for configuration section models."""

import pytest
from pydantic import ValidationError

from colctl.config.models import ConsoleConfig, ServerConfig, TransportConfig


class TestDefaults:
    def test_server_defaults(self) -> None:
        server = ServerConfig()
        assert server.host == "localhost"
        assert server.port == 8080

    def test_transport_defaults(self) -> None:
        transport = TransportConfig()
        assert transport.timeout == 10.0
        assert transport.poll_interval == 0.1
        assert transport.max_datagram == 65535

    def test_console_defaults(self) -> None:
        console = ConsoleConfig()
        assert console.prompt == "> "
        assert console.echo_script is True


class TestValidation:
    def test_port_out_of_range(self) -> None:
        with pytest.raises(ValidationError):
            ServerConfig(port=70000)

    def test_datagram_cannot_exceed_udp_limit(self) -> None:
        with pytest.raises(ValidationError):
            TransportConfig(max_datagram=65536)

    def test_timeout_must_be_positive(self) -> None:
        with pytest.raises(ValidationError):
            TransportConfig(timeout=0)

    def test_frozen(self) -> None:
        server = ServerConfig()
        with pytest.raises(ValidationError):
            server.port = 9000  # type: ignore[misc]
