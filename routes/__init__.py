"""HTTP and WebSocket route modules (FastAPI routers) for the application.

This file explicitly exports the router objects provided by each
submodule so callers can do:

	from routes import realtime_router
	app.include_router(realtime_router)

Submodules should expose an `APIRouter` named `router`.
"""

from .realtime import router as realtime_router
from .leaderboard import router as leaderboard_router

__all__ = [
	"realtime_router",
	"leaderboard_router",
]
