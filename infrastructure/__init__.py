"""Infrastructure helpers (socket fan-out, etc.)

Expose a small public surface for the connection manager used by the
WebSocket route and the relay.
"""
from .connections import (
    Transport,
    ConnectionManager,
    get_default_connections,
    reset_default_connections,
)

__all__ = [
    "Transport",
    "ConnectionManager",
    "get_default_connections",
    "reset_default_connections",
]
