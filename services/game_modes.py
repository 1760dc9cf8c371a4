# game_modes.py
"""Fixed per-mode parameters: settings, obstacle layouts, start slots, catalogs."""
import copy
from typing import Any

from models.domain_models import GameMode, RoomSettings, Obstacle, Position

DEFAULT_GRAVITY = 0.5
DEFAULT_BOUNCE = 0.7
DEFAULT_AIR_RESISTANCE = 0.99

_BASE_SETTINGS: RoomSettings = {
    "gravity": DEFAULT_GRAVITY,
    "bounce": DEFAULT_BOUNCE,
    "air_resistance": DEFAULT_AIR_RESISTANCE,
    "power_up_frequency": 10,
    "max_players": 4,
    "duration": 60,
    "start_threshold": 0,
}

MODE_SETTINGS: dict[GameMode, dict[str, Any]] = {
    GameMode.CLASSIC: {},
    GameMode.BATTLE_ROYALE: {
        "max_players": 8,
        "duration": 180,
        "power_up_frequency": 8,
        "elimination_score": 50,
    },
    GameMode.TIME_ATTACK: {
        "duration": 30,
        "power_up_frequency": 6,
        "bonus_time_per_basket": 3,
    },
    GameMode.TRICK_SHOT: {
        "duration": 90,
        "power_up_frequency": 12,
        "bounce": 0.85,
        "min_bounces": 2,
    },
    GameMode.TOURNAMENT: {
        "duration": 120,
        "start_threshold": 2,
        "rounds": 3,
    },
    GameMode.SURVIVAL: {
        "duration": 300,
        "power_up_frequency": 15,
        "gravity": 0.6,
        "miss_limit": 3,
    },
}

# Index = member count at join time; overflow falls back to the first slot
START_POSITIONS: list[Position] = [
    {"x": 100, "y": 500},
    {"x": 200, "y": 500},
    {"x": 300, "y": 500},
    {"x": 400, "y": 500},
]


def _obstacle(oid, x, y, width, height, motion=None) -> Obstacle:
    return {"id": oid, "x": x, "y": y, "width": width, "height": height, "motion": motion}


def _motion(axis, lo, hi, speed) -> dict:
    return {"axis": axis, "min": lo, "max": hi, "speed": speed, "direction": 1}


OBSTACLE_LAYOUTS: dict[GameMode, list[Obstacle]] = {
    GameMode.CLASSIC: [],
    GameMode.BATTLE_ROYALE: [
        _obstacle("wall-1", 400, 250, 20, 120, _motion("y", 150, 350, 2)),
    ],
    GameMode.TIME_ATTACK: [],
    GameMode.TRICK_SHOT: [
        _obstacle("wall-1", 350, 200, 20, 150),
        _obstacle("bar-1", 500, 150, 100, 15, _motion("x", 450, 600, 1.5)),
        _obstacle("wall-2", 600, 350, 20, 100, _motion("y", 300, 420, 1)),
    ],
    GameMode.TOURNAMENT: [
        _obstacle("bar-1", 450, 200, 80, 15, _motion("x", 380, 560, 1)),
    ],
    GameMode.SURVIVAL: [
        _obstacle("wall-1", 300, 220, 20, 140, _motion("y", 180, 320, 2.5)),
        _obstacle("wall-2", 550, 260, 20, 140, _motion("y", 200, 360, 2)),
    ],
}

# Power-up kind -> (duration seconds, display color)
POWERUP_TYPES: dict[str, dict[str, Any]] = {
    "double_points": {"duration": 10, "color": "#ffd700"},
    "bigger_ball": {"duration": 15, "color": "#4CAF50"},
    "slower_basket": {"duration": 8, "color": "#2196F3"},
    "perfect_shot": {"duration": 5, "color": "#9C27B0"},
    "multi_ball": {"duration": 10, "color": "#FF5722"},
}

EMOTES = ["👍", "😄", "🎯", "🔥", "👏", "🏀"]


def settings_for(mode: GameMode) -> RoomSettings:
    """Derive the settings bundle for a new room. Always a fresh dict."""
    settings: RoomSettings = {**_BASE_SETTINGS, **MODE_SETTINGS[mode]}
    settings["mode"] = mode.value
    return settings


def obstacles_for(mode: GameMode) -> list[Obstacle]:
    return copy.deepcopy(OBSTACLE_LAYOUTS[mode])


def start_position(member_count: int) -> Position:
    if member_count < len(START_POSITIONS):
        return dict(START_POSITIONS[member_count])
    return dict(START_POSITIONS[0])


def catalog() -> dict:
    """Static data sent to a client on connect."""
    return {
        "modes": {mode.value: settings_for(mode) for mode in GameMode},
        "powerupTypes": copy.deepcopy(POWERUP_TYPES),
        "emotes": list(EMOTES),
    }
