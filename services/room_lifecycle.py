"""
Room lifecycle helpers.

These functions create rooms, admit and evict players and drive the
waiting -> playing -> ended state machine. They operate on store instances
and a transport, never on sockets, and are called from `services.relay`.

Every membership change is broadcast to the whole room (joiner included)
so each client's mirror stays consistent.
"""

import logging

from models.domain_models import GameMode, RoomStatus, PlayerState
from stores import Room, RoomStore, Player, LeaderboardStore, RoomFull, InvalidRoomState
from . import game_modes
from .fanout import broadcast

logger = logging.getLogger(__name__)


def create_room(store: RoomStore, mode: GameMode, *, now: float) -> Room:
    """
    Register a new, empty room for `mode`.

    Settings, obstacle layout and countdown all come from the mode. Modes
    without a start threshold begin playing immediately.
    """
    room = Room(
        store.new_room_id(),
        mode,
        game_modes.settings_for(mode),
        obstacles=game_modes.obstacles_for(mode),
        created_at=now,
    )
    if not room.settings.get("start_threshold"):
        start_playing(room, now=now)
    store.add(room)
    logger.info(f"Room {room.id} created (mode={mode.value})")
    return room


def join_room(store: RoomStore, transport, player: Player, room_id: str, *, now: float) -> Room:
    """
    Add a player to an existing room.

    Raises:
        RoomNotFound: if no live room has this id
        RoomFull: if the room already holds max_players members
    """
    room = store.get(room_id)

    if room.has_member(player.id):
        broadcast(transport, room, {"type": "player_joined", "playerId": player.id, "gameState": room.snapshot()})
        return room

    if room.is_full():
        raise RoomFull(f"Room {room_id} is full")

    # A player belongs to at most one room
    if player.room_id is not None:
        leave_room(store, transport, player)

    position = game_modes.start_position(len(room.members))
    state: PlayerState = {
        "x": position["x"],
        "y": position["y"],
        "name": player.name,
        "score": 0,
        "streak": 0,
        "last_shot_at": None,
        "eliminated": False,
    }
    room.members.append(player.id)
    room.players[player.id] = state
    player.room_id = room.id
    player.reset_stats()
    logger.info(f"Player {player.id} joined room {room.id} ({len(room.members)}/{room.max_players})")

    broadcast(transport, room, {"type": "player_joined", "playerId": player.id, "gameState": room.snapshot()})

    threshold = room.settings.get("start_threshold", 0)
    if room.status == RoomStatus.WAITING and threshold and len(room.members) >= threshold:
        start_playing(room, now=now)
        broadcast(transport, room, {"type": "game_started", "gameState": room.snapshot()})

    return room


def leave_room(store: RoomStore, transport, player: Player) -> None:
    """
    Remove a player from its room; the room is deleted when it empties.

    A player whose room already vanished is simply detached.
    """
    room = store.find(player.room_id)
    player.room_id = None
    if room is None:
        return

    if player.id in room.members:
        room.members.remove(player.id)
    room.players.pop(player.id, None)
    room.balls.pop(player.id, None)
    logger.info(f"Player {player.id} left room {room.id}")

    if room.is_empty():
        store.delete(room.id)
        return

    broadcast(transport, room, {"type": "player_left", "playerId": player.id, "gameState": room.snapshot()})


def start_playing(room: Room, *, now: float) -> None:
    if room.status != RoomStatus.WAITING:
        raise InvalidRoomState(f"Room {room.id} is already {room.status.value}")
    room.status = RoomStatus.PLAYING
    room.ends_at = now + room.settings["duration"]
    room.time_remaining = float(room.settings["duration"])


def extend_countdown(room: Room, seconds: float, *, now: float) -> None:
    if room.status != RoomStatus.PLAYING or room.ends_at is None:
        return
    room.ends_at += seconds
    room.time_remaining = max(0.0, room.ends_at - now)


def advance_countdown(room: Room, *, now: float) -> bool:
    """Recompute remaining time. Returns True when a playing room has run out."""
    if room.status != RoomStatus.PLAYING or room.ends_at is None:
        return False
    room.time_remaining = max(0.0, room.ends_at - now)
    return room.time_remaining <= 0


def end_game(room: Room, leaderboard: LeaderboardStore, transport) -> None:
    """
    Close out a playing room: fold every member's score into the leaderboard
    and broadcast the final standings. Irreversible for this room.
    """
    if room.status != RoomStatus.PLAYING:
        raise InvalidRoomState(f"Room {room.id} is not playing")
    room.status = RoomStatus.ENDED
    room.time_remaining = 0.0
    room.ends_at = None

    scores = room.scores()
    for player_id, score in scores.items():
        leaderboard.record_score(player_id, score)
    logger.info(f"Room {room.id} ended: {scores}")

    broadcast(transport, room, {"type": "game_over", "scores": scores, "gameState": room.snapshot()})
