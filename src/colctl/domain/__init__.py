"""Domain layer — wire messages and record schemas.

This layer depends only on stdlib, pydantic, and click parameter types.
It must never import from transport, console, services, or cli.
"""
