from typing import Optional, Iterable
from abc import ABC, abstractmethod

from models.domain_models import (
    GameMode,
    RoomStatus,
    PlayerState,
    BallState,
    Obstacle,
    PowerUp,
    RoomSettings,
    GameStateSnapshot,
)


class Room:
    """One multiplayer session.

    Balls, power-ups and obstacles belong to the room and go away with it.
    """

    def __init__(
        self,
        room_id: str,
        mode: GameMode,
        settings: RoomSettings,
        *,
        obstacles: list[Obstacle] | None = None,
        created_at: float = 0.0,
    ):
        self.id = room_id
        self.mode = mode
        self.settings = settings
        self.status = RoomStatus.WAITING
        self.members: list[str] = []  # join order
        self.players: dict[str, PlayerState] = {}
        self.balls: dict[str, BallState] = {}
        self.obstacles: list[Obstacle] = obstacles or []
        self.powerups: list[PowerUp] = []
        self.created_at = created_at
        self.last_spawn_at = created_at
        self.ends_at: Optional[float] = None
        self.time_remaining: float = float(settings.get("duration", 0))

    @property
    def max_players(self) -> int:
        return self.settings["max_players"]

    def is_full(self) -> bool:
        return len(self.members) >= self.max_players

    def is_empty(self) -> bool:
        return not self.members

    def has_member(self, player_id: str) -> bool:
        return player_id in self.players

    def scores(self) -> dict[str, int]:
        return {pid: state.get("score", 0) for pid, state in self.players.items()}

    def snapshot(self) -> GameStateSnapshot:
        """Everything a client needs to rebuild its local mirror of the room."""
        return {
            "roomId": self.id,
            "mode": self.mode.value,
            "status": self.status.value,
            "players": self.players,
            "balls": self.balls,
            "scores": self.scores(),
            "powerups": self.powerups,
            "obstacles": self.obstacles,
            "timeRemaining": round(self.time_remaining, 2),
            "settings": self.settings,
        }

    def __repr__(self) -> str:
        return f"Room(id={self.id!r}, mode={self.mode.value}, status={self.status.value}, members={len(self.members)})"


# =========================
# RoomStore Interface
# =========================

class RoomStore(ABC):
    """
    The RoomStore holds every live Room keyed by its short code.

    Invariants:
    - Room ids are unique among live rooms
    - An empty room is never kept (callers delete it the moment it empties)
    """

    @abstractmethod
    def new_room_id(self) -> str:
        """Return a short code not used by any live room."""

    @abstractmethod
    def add(self, room: Room) -> None:
        """Register a room.

        Raises:
            RoomAlreadyExists: If a live room already has this id.
        """

    @abstractmethod
    def get(self, room_id: str) -> Room:
        """Return a live room.

        Raises:
            RoomNotFound: If no live room has this id.
        """

    @abstractmethod
    def find(self, room_id: str | None) -> Optional[Room]:
        """Return a live room or None."""

    @abstractmethod
    def delete(self, room_id: str) -> None:
        """Forget a room. Deleting an unknown id is a no-op."""

    @abstractmethod
    def rooms(self) -> Iterable[Room]:
        """Iterate over live rooms (a snapshot; safe to mutate the store while iterating)."""

    @abstractmethod
    def __len__(self) -> int:
        """Number of live rooms."""
