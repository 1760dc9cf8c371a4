"""Services package: the relay and the game rules it applies.

Import submodules to make them available as `services.relay`, etc. The
process-wide RelayHub is created lazily by `get_hub()`.
"""
from typing import Optional

from infrastructure import get_default_connections
from .relay import RelayHub
from . import game_modes, room_lifecycle, scoring, spawner

hub: Optional[RelayHub] = None


def init_hub(transport=None, **kwargs) -> RelayHub:
	"""Create the process-wide hub. Safe to call more than once; the first call wins."""
	global hub
	if hub is None:
		hub = RelayHub(transport or get_default_connections(), **kwargs)
	return hub


def get_hub() -> RelayHub:
	"""Get the hub, initializing it on first use (FastAPI dependency)."""
	if hub is None:
		init_hub()
	if hub is None:
		raise RuntimeError("Failed to initialize relay hub")
	return hub


def reset_hub() -> None:
	global hub
	hub = None


__all__ = [
	"RelayHub",
	"init_hub",
	"get_hub",
	"reset_hub",
	"game_modes",
	"room_lifecycle",
	"scoring",
	"spawner",
]
