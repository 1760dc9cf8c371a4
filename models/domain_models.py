"""Domain-level typed models used by services and stores.

Prefer `TypedDict` for lightweight structural typing that maps directly to
the JSON-like dicts mirrored to every client in a room. These are minimal
and can be extended as the game grows.
"""
from __future__ import annotations

from typing import TypedDict, Any
from enum import Enum


class GameMode(str, Enum):
	CLASSIC = "classic"
	BATTLE_ROYALE = "battle_royale"
	TIME_ATTACK = "time_attack"
	TRICK_SHOT = "trick_shot"
	TOURNAMENT = "tournament"
	SURVIVAL = "survival"

	@classmethod
	def parse(cls, value: Any) -> "GameMode":
		"""Accept 'battle-royale', 'Battle_Royale', etc."""
		if isinstance(value, cls):
			return value
		if not isinstance(value, str):
			raise ValueError(f"Unknown game mode: {value!r}")
		return cls(value.strip().lower().replace("-", "_"))


class RoomStatus(str, Enum):
	WAITING = "waiting"
	PLAYING = "playing"
	ENDED = "ended"


class Position(TypedDict):
	x: float
	y: float


class PlayerState(TypedDict, total=False):
	x: float
	y: float
	name: str
	score: int
	streak: int
	last_shot_at: float | None
	eliminated: bool


class BallState(TypedDict, total=False):
	x: float
	y: float
	velocityX: float
	velocityY: float
	rotation: float


class ObstacleMotion(TypedDict):
	axis: str  # 'x' | 'y'
	min: float
	max: float
	speed: float
	direction: int  # +1 | -1


class Obstacle(TypedDict, total=False):
	id: str
	x: float
	y: float
	width: float
	height: float
	motion: ObstacleMotion | None


class PowerUp(TypedDict, total=False):
	id: str
	type: str
	x: float
	y: float
	color: str
	duration: int
	spawned_at: float
	expires_at: float
	remaining: float


class RoomSettings(TypedDict, total=False):
	mode: str
	gravity: float
	bounce: float
	air_resistance: float
	power_up_frequency: float
	max_players: int
	duration: int
	start_threshold: int
	elimination_score: int
	bonus_time_per_basket: int
	min_bounces: int
	rounds: int
	miss_limit: int


class GameStateSnapshot(TypedDict, total=False):
	roomId: str
	mode: str
	status: str  # 'waiting' | 'playing' | 'ended'
	players: dict[str, PlayerState]
	balls: dict[str, BallState]
	scores: dict[str, int]
	powerups: list[PowerUp]
	obstacles: list[Obstacle]
	timeRemaining: float | None
	settings: RoomSettings


class ScoreEntry(TypedDict, total=False):
	player: str
	score: int
	timestamp: float


class ModeScoreEntry(TypedDict, total=False):
	name: str
	score: int
	stats: dict[str, Any]
	timestamp: float


__all__ = [
	"GameMode",
	"RoomStatus",
	"Position",
	"PlayerState",
	"BallState",
	"ObstacleMotion",
	"Obstacle",
	"PowerUp",
	"RoomSettings",
	"GameStateSnapshot",
	"ScoreEntry",
	"ModeScoreEntry",
]
