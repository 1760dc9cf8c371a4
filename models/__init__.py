"""Data models used by the application.

Split into:
- `api_models`: Pydantic models for relay messages and HTTP bodies
- `domain_models`: enums and typed dicts for the state mirrored to clients

Import submodules to make them available as `models.api_models`.
"""

from . import api_models, domain_models

# Re-export selected API models (Pydantic models used for validation)
from .api_models import (
	InboundMessage,
	parse_inbound,
	ScoreSubmission,
	ScoreSubmissionResponse,
	ModeLeaderboardEntry,
	ModeLeaderboardResponse,
	WindowLeaderboardEntry,
	WindowLeaderboardResponse,
)

# Re-export domain models (enums and TypedDicts)
from .domain_models import (
	GameMode,
	RoomStatus,
	PlayerState,
	BallState,
	Obstacle,
	PowerUp,
	RoomSettings,
	GameStateSnapshot,
	ScoreEntry,
)

__all__ = [
	# submodules
	"api_models",
	"domain_models",
	# api models
	"InboundMessage",
	"parse_inbound",
	"ScoreSubmission",
	"ScoreSubmissionResponse",
	"ModeLeaderboardEntry",
	"ModeLeaderboardResponse",
	"WindowLeaderboardEntry",
	"WindowLeaderboardResponse",
	# domain models
	"GameMode",
	"RoomStatus",
	"PlayerState",
	"BallState",
	"Obstacle",
	"PowerUp",
	"RoomSettings",
	"GameStateSnapshot",
	"ScoreEntry",
]
