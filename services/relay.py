"""
The relay: one coordinating service object that owns every piece of shared
state (players, rooms, leaderboards) and exposes it only through the
operations below.

All mutation happens synchronously inside these methods. Outbound messages
go to a Transport whose `send` never awaits, so on a single event loop each
inbound message is handled to completion before the next one starts.
"""

import json
import logging
import random
import uuid
from typing import Optional

from pydantic import ValidationError

import config
from models.api_models import (
    parse_inbound,
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
)
from models.domain_models import GameMode, RoomStatus
from stores import (
    Room,
    Player,
    PlayerRegistry,
    MemoryRoomStore,
    RoomStore,
    LeaderboardStore,
    ALL_TIME,
    RoomNotFound,
    RoomFull,
    RateLimited,
    MalformedMessage,
    StoreError,
)
from utils import Clock, now_ts, elapsed_ms, is_valid_name, sanitize_json
from . import game_modes, room_lifecycle, spawner, scoring
from .fanout import broadcast, reply, error_message

logger = logging.getLogger(__name__)

# Errors the requesting client is told about; everything else is logged only
REPORTED_ERRORS = (RoomNotFound, RoomFull, RateLimited)


class RelayHub:

    def __init__(
        self,
        transport,
        *,
        clock: Clock = now_ts,
        rng: random.Random | None = None,
        room_store: RoomStore | None = None,
        leaderboard: LeaderboardStore | None = None,
        chat_cooldown_ms: int = config.CHAT_COOLDOWN_MS,
        emote_cooldown_ms: int = config.EMOTE_COOLDOWN_MS,
        leaderboard_limit: int = config.LEADERBOARD_LIMIT,
    ):
        self.transport = transport
        self.clock = clock
        self.rng = rng or random.Random()
        self.rooms = room_store or MemoryRoomStore()
        self.leaderboard = leaderboard or LeaderboardStore(clock, mode_table_cap=config.MODE_TABLE_CAP)
        self.players = PlayerRegistry(on_remove=self._evict)
        self.chat_cooldown_ms = chat_cooldown_ms
        self.emote_cooldown_ms = emote_cooldown_ms
        self.leaderboard_limit = leaderboard_limit

        self._handlers = {
            "create_room": self._on_create_room,
            "join_room": self._on_join_room,
            "leave_room": self._on_leave_room,
            "game_update": self._on_game_update,
            "shot_taken": self._on_shot_taken,
            "score_update": self._on_score_update,
            "powerup_collected": self._on_powerup_collected,
            "chat_message": self._on_chat_message,
            "emote": self._on_emote,
            "game_end": self._on_game_end,
        }

    # -------------------------------------------------
    # Connections
    # -------------------------------------------------

    def connect(self, player_id: str | None = None, name: str | None = None) -> Player:
        """Register a new connection and send it the `init` envelope."""
        player_id = player_id or str(uuid.uuid4())
        player = self.players.register(player_id, name if is_valid_name(name) else None, connected_at=self.clock())
        logger.info(f"Player {player_id} connected")
        reply(self.transport, player_id, {
            "type": "init",
            "playerId": player_id,
            "name": player.name,
            **game_modes.catalog(),
        })
        return player

    def disconnect(self, player_id: str) -> None:
        """Forget a connection; evicts it from its room first. Unknown ids are ignored."""
        if self.players.remove(player_id) is not None:
            logger.info(f"Player {player_id} disconnected")

    def _evict(self, player: Player) -> None:
        room_lifecycle.leave_room(self.rooms, self.transport, player)

    # -------------------------------------------------
    # Inbound dispatch
    # -------------------------------------------------

    def handle_raw(self, player_id: str, raw: str | bytes) -> None:
        """Decode, validate and dispatch one inbound frame.

        Malformed frames are logged and dropped; the connection stays open.
        """
        try:
            message = self._decode(raw)
        except MalformedMessage as exc:
            logger.warning(f"Dropping malformed message from {player_id}: {exc}")
            return
        self.handle(player_id, message)

    @staticmethod
    def _decode(raw: str | bytes):
        try:
            data = json.loads(raw)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise MalformedMessage(f"invalid JSON: {e}") from e
        if not isinstance(data, dict) or "type" not in data:
            raise MalformedMessage("envelope must be an object with a 'type'")
        try:
            return parse_inbound(data)
        except ValidationError as e:
            raise MalformedMessage(f"{data.get('type')!r}: {e.error_count()} validation error(s)") from e

    def handle(self, player_id: str, message) -> None:
        player = self.players.lookup(player_id)
        if player is None:
            # Arrived after disconnect
            logger.debug(f"Ignoring {message.type} from unknown player {player_id}")
            return
        try:
            self._handlers[message.type](player, message)
        except REPORTED_ERRORS as exc:
            logger.info(f"{message.type} from {player_id} rejected: {exc}")
            reply(self.transport, player_id, error_message(exc))
        except MalformedMessage as exc:
            logger.warning(f"Dropping malformed {message.type} from {player_id}: {exc}")

    # -------------------------------------------------
    # Room lifecycle
    # -------------------------------------------------

    def create_room(self, mode: GameMode | str = GameMode.CLASSIC) -> Room:
        return room_lifecycle.create_room(self.rooms, GameMode.parse(mode), now=self.clock())

    def join_room(self, player: Player, room_id: str) -> Room:
        """Raises RoomNotFound or RoomFull."""
        return room_lifecycle.join_room(
            self.rooms, self.transport, player, room_id.strip().upper(), now=self.clock()
        )

    def leave_room(self, player: Player) -> None:
        room_lifecycle.leave_room(self.rooms, self.transport, player)

    def room_of(self, player: Player) -> Optional[Room]:
        room = self.rooms.find(player.room_id)
        if room is None or not room.has_member(player.id):
            return None
        return room

    def _rename(self, player: Player, name: str | None) -> None:
        if name is not None and is_valid_name(name):
            player.name = name.strip()

    def _on_create_room(self, player: Player, msg: CreateRoomMessage) -> None:
        self._rename(player, msg.name)
        room = self.create_room(msg.mode)
        reply(self.transport, player.id, {"type": "room_created", "roomId": room.id, "mode": room.mode.value})
        self.join_room(player, room.id)

    def _on_join_room(self, player: Player, msg: JoinRoomMessage) -> None:
        self._rename(player, msg.name)
        self.join_room(player, msg.roomId)

    def _on_leave_room(self, player: Player, msg: LeaveRoomMessage) -> None:
        self.leave_room(player)

    # -------------------------------------------------
    # State relay
    # -------------------------------------------------

    def apply_update(self, player: Player, player_state: dict | None = None, ball_state: dict | None = None) -> None:
        """
        Merge a player's reported state into its room and fan the room out.

        `player_state` is merged field by field; `ball_state` replaces the
        player's ball wholesale. Nothing here checks physical plausibility.
        Stale updates (player no longer in a room) are ignored.
        """
        room = self.room_of(player)
        if room is None:
            return
        try:
            player_state = sanitize_json(player_state) if player_state is not None else None
            ball_state = sanitize_json(ball_state) if ball_state is not None else None
        except ValueError as e:
            raise MalformedMessage(str(e)) from e

        if player_state is not None:
            room.players[player.id].update(player_state)
        if ball_state is not None:
            room.balls[player.id] = ball_state

        now = self.clock()
        spawned = None
        finished = False
        if room.status != RoomStatus.ENDED:
            spawned = spawner.maybe_spawn(room, self.rng, now=now)
            spawner.advance_obstacles(room)
            finished = room_lifecycle.advance_countdown(room, now=now)

        if spawned is not None:
            broadcast(self.transport, room, {"type": "powerup_spawned", "powerup": spawned})
        broadcast(self.transport, room, {"type": "game_update", "gameState": room.snapshot()})
        if finished:
            room_lifecycle.end_game(room, self.leaderboard, self.transport)

    def _on_game_update(self, player: Player, msg: GameUpdateMessage) -> None:
        self.apply_update(player, msg.playerState, msg.ballState)

    def _on_shot_taken(self, player: Player, msg: ShotTakenMessage) -> None:
        room = self.room_of(player)
        if room is None:
            return
        try:
            shot = sanitize_json(msg.shotData)
        except ValueError as e:
            raise MalformedMessage(str(e)) from e
        room.players[player.id]["last_shot_at"] = self.clock()
        broadcast(self.transport, room, {"type": "shot_taken", "playerId": player.id, "shotData": shot})

    # -------------------------------------------------
    # Scores
    # -------------------------------------------------

    def record_score(self, player: Player, score: int) -> None:
        self.leaderboard.record_score(player.id, score)

    def top_scores(self, window: str = ALL_TIME, limit: int | None = None) -> list[dict]:
        return self.leaderboard.top_scores(window, self.leaderboard_limit if limit is None else limit)

    def _broadcast_score(self, room: Room, player: Player, score: int) -> None:
        broadcast(self.transport, room, {
            "type": "score_update",
            "playerId": player.id,
            "score": score,
            "stats": player.stats(),
            "globalRanking": self.leaderboard.ranking(player.id, self.leaderboard_limit),
        })

    def _on_score_update(self, player: Player, msg: ScoreUpdateMessage) -> None:
        room = self.room_of(player)
        if room is None:
            return
        now = self.clock()
        outcome = scoring.apply_score(room, player, msg.model_dump(), now=now)
        self.record_score(player, msg.score)
        self._broadcast_score(room, player, msg.score)
        for achievement in outcome.unlocked:
            broadcast(self.transport, room, {
                "type": "achievement_unlocked",
                "playerId": player.id,
                "achievement": achievement,
            })
        if outcome.room_finished and room.status == RoomStatus.PLAYING:
            room_lifecycle.end_game(room, self.leaderboard, self.transport)

    def _on_game_end(self, player: Player, msg: GameEndMessage) -> None:
        self.record_score(player, msg.score)
        player.score = msg.score
        room = self.room_of(player)
        if room is None:
            return
        room.players[player.id]["score"] = msg.score
        self._broadcast_score(room, player, msg.score)

    # -------------------------------------------------
    # Power-ups
    # -------------------------------------------------

    def _on_powerup_collected(self, player: Player, msg: PowerupCollectedMessage) -> None:
        room = self.room_of(player)
        if room is None:
            return
        powerup = spawner.collect_powerup(room, msg.powerupId)
        if powerup is None:
            return
        player.powerups.add(powerup["type"])
        broadcast(self.transport, room, {
            "type": "powerup_collected",
            "powerupId": powerup["id"],
            "powerupType": powerup["type"],
            "playerId": player.id,
        })
        report = {"score": player.score, "isBasket": False, "combo": 0, "bounces": 0}
        for achievement in scoring.check_achievements(player, report):
            broadcast(self.transport, room, {
                "type": "achievement_unlocked",
                "playerId": player.id,
                "achievement": achievement,
            })

    # -------------------------------------------------
    # Chat / emotes
    # -------------------------------------------------

    def _on_chat_message(self, player: Player, msg: ChatMessage) -> None:
        room = self.room_of(player)
        if room is None:
            return
        now = self.clock()
        if elapsed_ms(player.last_chat_at, now) < self.chat_cooldown_ms:
            raise RateLimited("You're sending messages too quickly")
        player.last_chat_at = now
        broadcast(self.transport, room, {
            "type": "chat_message",
            "player": player.name,
            "playerId": player.id,
            "message": msg.message,
        })

    def _on_emote(self, player: Player, msg: EmoteMessage) -> None:
        if msg.emote not in game_modes.EMOTES:
            raise MalformedMessage(f"unknown emote {msg.emote!r}")
        room = self.room_of(player)
        if room is None:
            return
        now = self.clock()
        if elapsed_ms(player.last_emote_at, now) < self.emote_cooldown_ms:
            raise RateLimited("Emote cooldown")
        player.last_emote_at = now
        broadcast(self.transport, room, {"type": "emote", "playerId": player.id, "emote": msg.emote})

    # -------------------------------------------------
    # Periodic work
    # -------------------------------------------------

    def tick(self) -> int:
        """Advance every room's countdown; ends rooms that ran out. Returns how many ended."""
        now = self.clock()
        ended = 0
        for room in self.rooms.rooms():
            if room_lifecycle.advance_countdown(room, now=now):
                try:
                    room_lifecycle.end_game(room, self.leaderboard, self.transport)
                    ended += 1
                except StoreError:
                    logger.exception(f"Failed to end room {room.id}")
        return ended

    def stats(self) -> dict:
        return {"rooms": len(self.rooms), "players": len(self.players)}
