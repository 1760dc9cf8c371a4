# Abstractions
from .room_store import Room, RoomStore

# Concrete in-memory implementations
from .memory_room_store import MemoryRoomStore
from .player_registry import Player, PlayerRegistry
from .leaderboard_store import LeaderboardStore, DAILY, WEEKLY, ALL_TIME, WINDOWS

# Exceptions
from .exceptions import (
    StoreError,
    RoomStoreError,
    RoomNotFound,
    RoomFull,
    RoomAlreadyExists,
    InvalidRoomState,
    RelayError,
    RateLimited,
    MalformedMessage,
)

__all__ = [
    # Abstractions
    "Room",
    "RoomStore",
    # Implementations
    "MemoryRoomStore",
    "Player",
    "PlayerRegistry",
    "LeaderboardStore",
    "DAILY",
    "WEEKLY",
    "ALL_TIME",
    "WINDOWS",
    # Exceptions
    "StoreError",
    "RoomStoreError",
    "RoomNotFound",
    "RoomFull",
    "RoomAlreadyExists",
    "InvalidRoomState",
    "RelayError",
    "RateLimited",
    "MalformedMessage",
]
