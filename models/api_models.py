"""Pydantic models for relay messages and the HTTP endpoints.

Inbound WebSocket envelopes carry a `type` discriminator; `parse_inbound`
turns a decoded JSON object into one of the message models below. Keep
transport concerns (validation, docs) here and keep the shapes mirrored to
clients in `models.domain_models`.
"""
from __future__ import annotations

from pydantic import BaseModel, Field, TypeAdapter, field_validator
from typing import Annotated, Any, Literal, Union

from .domain_models import GameMode


class _ModeField(BaseModel):
	mode: GameMode = GameMode.CLASSIC

	@field_validator("mode", mode="before")
	@classmethod
	def _normalize_mode(cls, v):
		return GameMode.parse(v)


# --- Inbound relay messages (client -> server) ---
class CreateRoomMessage(_ModeField):
	type: Literal["create_room"]
	name: str | None = None


class JoinRoomMessage(BaseModel):
	type: Literal["join_room"]
	roomId: str = Field(min_length=1, max_length=64)
	name: str | None = None


class LeaveRoomMessage(BaseModel):
	type: Literal["leave_room"]


class GameUpdateMessage(BaseModel):
	type: Literal["game_update"]
	playerState: dict[str, Any] | None = None
	ballState: dict[str, Any] | None = None


class ShotTakenMessage(BaseModel):
	type: Literal["shot_taken"]
	shotData: dict[str, Any] = Field(default_factory=dict)


class ScoreUpdateMessage(BaseModel):
	type: Literal["score_update"]
	score: int = Field(ge=0)
	isBasket: bool = False
	combo: int = 0
	bounces: int = 0


class PowerupCollectedMessage(BaseModel):
	type: Literal["powerup_collected"]
	powerupId: str
	powerupType: str | None = None


class ChatMessage(BaseModel):
	type: Literal["chat_message"]
	message: str = Field(max_length=200)

	@field_validator("message")
	@classmethod
	def _not_blank(cls, v: str) -> str:
		v = v.strip()
		if not v:
			raise ValueError("empty chat message")
		return v


class EmoteMessage(BaseModel):
	type: Literal["emote"]
	emote: str = Field(min_length=1, max_length=16)


class GameEndMessage(BaseModel):
	type: Literal["game_end"]
	score: int = Field(ge=0)


InboundMessage = Annotated[
	Union[
		CreateRoomMessage,
		JoinRoomMessage,
		LeaveRoomMessage,
		GameUpdateMessage,
		ShotTakenMessage,
		ScoreUpdateMessage,
		PowerupCollectedMessage,
		ChatMessage,
		EmoteMessage,
		GameEndMessage,
	],
	Field(discriminator="type"),
]

_inbound_adapter = TypeAdapter(InboundMessage)


def parse_inbound(data: Any) -> InboundMessage:
	"""Validate a decoded JSON envelope. Raises pydantic.ValidationError."""
	return _inbound_adapter.validate_python(data)


# --- HTTP request/response bodies ---
class ScoreSubmission(_ModeField):
	name: str = Field(min_length=1, max_length=64)
	score: int = Field(ge=0)
	stats: dict[str, Any] = Field(default_factory=dict)


class ScoreSubmissionResponse(BaseModel):
	rank: int
	totalEntries: int


class ModeLeaderboardEntry(BaseModel):
	rank: int
	name: str
	score: int
	timestamp: float


class ModeLeaderboardResponse(BaseModel):
	mode: GameMode
	entries: list[ModeLeaderboardEntry]


class WindowLeaderboardEntry(BaseModel):
	player: str
	score: int


class WindowLeaderboardResponse(BaseModel):
	window: str
	topScores: list[WindowLeaderboardEntry]


__all__ = [
	"CreateRoomMessage",
	"JoinRoomMessage",
	"LeaveRoomMessage",
	"GameUpdateMessage",
	"ShotTakenMessage",
	"ScoreUpdateMessage",
	"PowerupCollectedMessage",
	"ChatMessage",
	"EmoteMessage",
	"GameEndMessage",
	"InboundMessage",
	"parse_inbound",
	"ScoreSubmission",
	"ScoreSubmissionResponse",
	"ModeLeaderboardEntry",
	"ModeLeaderboardResponse",
	"WindowLeaderboardEntry",
	"WindowLeaderboardResponse",
]
