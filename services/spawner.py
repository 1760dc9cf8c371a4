"""Transient entities: power-up spawning/expiry and obstacle motion.

Evaluated once per relayed update for the owning room.
"""
import random
import uuid
import logging
from typing import Optional

from models.domain_models import PowerUp, RoomStatus
from stores import Room
from .game_modes import POWERUP_TYPES

logger = logging.getLogger(__name__)

# Seconds a spawned power-up stays collectible
POWERUP_LIFETIME = 10.0

# (x0, y0, x1, y1) rectangles inside the court
SPAWN_AREAS = [
    (150, 100, 650, 300),
    (250, 320, 550, 450),
]


def prune_powerups(room: Room, *, now: float) -> list[PowerUp]:
    """Drop expired power-ups and refresh `remaining` on the rest. Returns the expired ones."""
    alive, expired = [], []
    for p in room.powerups:
        if p["expires_at"] <= now:
            expired.append(p)
        else:
            p["remaining"] = round(p["expires_at"] - now, 2)
            alive.append(p)
    room.powerups = alive
    return expired


def make_powerup(rng: random.Random, *, now: float) -> PowerUp:
    kind = rng.choice(sorted(POWERUP_TYPES))
    x0, y0, x1, y1 = rng.choice(SPAWN_AREAS)
    info = POWERUP_TYPES[kind]
    return {
        "id": uuid.uuid4().hex[:8],
        "type": kind,
        "x": round(rng.uniform(x0, x1), 1),
        "y": round(rng.uniform(y0, y1), 1),
        "color": info["color"],
        "duration": info["duration"],
        "spawned_at": now,
        "expires_at": now + POWERUP_LIFETIME,
        "remaining": POWERUP_LIFETIME,
    }


def maybe_spawn(room: Room, rng: random.Random, *, now: float) -> Optional[PowerUp]:
    """Spawn a power-up if the room's spawn interval has elapsed."""
    prune_powerups(room, now=now)
    if room.status == RoomStatus.ENDED:
        return None
    if now - room.last_spawn_at <= room.settings["power_up_frequency"]:
        return None
    powerup = make_powerup(rng, now=now)
    room.powerups.append(powerup)
    room.last_spawn_at = now
    logger.debug(f"Spawned {powerup['type']} ({powerup['id']}) in room {room.id}")
    return powerup


def advance_obstacles(room: Room) -> None:
    """Move each obstacle one step along its axis, bouncing off its range bounds."""
    for obstacle in room.obstacles:
        motion = obstacle.get("motion")
        if not motion or not motion.get("speed"):
            continue
        axis = motion["axis"]
        pos = obstacle[axis] + motion["speed"] * motion["direction"]
        if pos >= motion["max"]:
            pos = motion["max"]
            motion["direction"] = -1
        elif pos <= motion["min"]:
            pos = motion["min"]
            motion["direction"] = 1
        obstacle[axis] = pos


def collect_powerup(room: Room, powerup_id: str) -> Optional[PowerUp]:
    """Stop tracking a collected power-up. None if it is already gone."""
    for i, p in enumerate(room.powerups):
        if p["id"] == powerup_id:
            return room.powerups.pop(i)
    return None
