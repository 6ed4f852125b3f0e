"""Service layer — the session loop returning LineResult per input line.

Services may import from domain, transport, console, and commands.
They must never import from output or cli.
"""
