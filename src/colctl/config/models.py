"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, colctl.toml only contains overrides.
A fresh install needs nothing; pointing at a remote service needs only
[server] host and port.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

# --- colctl.toml sections ---


class ServerConfig(BaseModel):
    """[server] section."""

    model_config = {"frozen": True}

    host: str = "localhost"
    port: int = Field(default=8080, ge=1, le=65535)


class TransportConfig(BaseModel):
    """[transport] section.

    ``max_datagram`` bounds both the encoded request size and the receive
    buffer; a UDP payload can never exceed 65535 bytes.
    """

    model_config = {"frozen": True}

    timeout: float = Field(default=10.0, gt=0)
    poll_interval: float = Field(default=0.1, gt=0)
    max_datagram: int = Field(default=65535, ge=1, le=65535)


class ConsoleConfig(BaseModel):
    """[console] section."""

    model_config = {"frozen": True}

    prompt: str = "> "
    echo_script: bool = True
