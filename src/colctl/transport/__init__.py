"""Transport layer — datagram codec and the single-flight UDP exchange.

This layer depends on the domain layer and stdlib sockets.
It must never import from console, commands, services, or output.
"""

from colctl.transport.udp import DatagramTransport, PendingExchange

__all__ = ["DatagramTransport", "PendingExchange"]
