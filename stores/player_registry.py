from typing import Callable, Optional
import logging

logger = logging.getLogger(__name__)


class Player:
    """A connected client.

    `room_id` is a weak reference by id; the room store owns the Room.
    """

    def __init__(self, player_id: str, name: str | None = None, *, connected_at: float = 0.0):
        self.id = player_id
        self.name = name or f"Player-{player_id[:4]}"
        self.room_id: Optional[str] = None
        self.score = 0
        self.powerups: set[str] = set()
        self.consecutive_baskets = 0
        self.quick_baskets = 0
        self.basket_times: list[float] = []
        self.misses = 0
        self.achievements: set[str] = set()
        self.last_chat_at: Optional[float] = None
        self.last_emote_at: Optional[float] = None
        self.connected_at = connected_at

    def reset_stats(self) -> None:
        """Clear per-game counters when moving to a new room."""
        self.score = 0
        self.consecutive_baskets = 0
        self.quick_baskets = 0
        self.basket_times = []
        self.misses = 0

    def stats(self) -> dict:
        return {
            "score": self.score,
            "consecutiveBaskets": self.consecutive_baskets,
            "quickBaskets": self.quick_baskets,
            "misses": self.misses,
            "powerups": sorted(self.powerups),
            "achievements": sorted(self.achievements),
        }

    def __repr__(self) -> str:
        return f"Player(id={self.id!r}, name={self.name!r}, room={self.room_id!r})"


class PlayerRegistry:
    """Connection id -> Player.

    `on_remove` is called with the departing Player while it is still in
    its room, so the caller can evict it before the record disappears.
    """

    def __init__(self, on_remove: Callable[[Player], None] | None = None):
        self._players: dict[str, Player] = {}
        self._on_remove = on_remove

    def register(self, player_id: str, name: str | None = None, *, connected_at: float = 0.0) -> Player:
        existing = self._players.get(player_id)
        if existing is not None:
            logger.warning(f"[STORE] Duplicate registration for {player_id}; replacing record")
            if existing.room_id is not None and self._on_remove is not None:
                self._on_remove(existing)
        player = Player(player_id, name, connected_at=connected_at)
        self._players[player_id] = player
        return player

    def lookup(self, player_id: str) -> Optional[Player]:
        return self._players.get(player_id)

    def remove(self, player_id: str) -> Optional[Player]:
        player = self._players.get(player_id)
        if player is None:
            return None
        if player.room_id is not None and self._on_remove is not None:
            self._on_remove(player)
        self._players.pop(player_id, None)
        return player

    def __contains__(self, player_id: str) -> bool:
        return player_id in self._players

    def __len__(self) -> int:
        return len(self._players)
