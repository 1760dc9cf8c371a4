# scoring.py
"""Per-player score bookkeeping: streaks, quick baskets, misses, achievements
and the mode rules that react to them."""
import logging
from typing import Callable

from models.domain_models import GameMode, RoomStatus
from stores import Room, Player
from .game_modes import POWERUP_TYPES
from .room_lifecycle import extend_countdown

logger = logging.getLogger(__name__)

# Baskets closer together than this count as "quick"
QUICK_BASKET_WINDOW = 30.0


class ScoreOutcome:
    """What a single score report changed."""

    def __init__(self):
        self.unlocked: list[str] = []
        self.eliminated = False
        self.room_finished = False


# name -> predicate(player, report); checked after the player's counters are updated
ACHIEVEMENTS: dict[str, Callable[[Player, dict], bool]] = {
    "first_basket": lambda p, r: r["isBasket"],
    "hot_streak": lambda p, r: p.consecutive_baskets >= 3,
    "on_fire": lambda p, r: p.consecutive_baskets >= 5,
    "quick_shooter": lambda p, r: p.quick_baskets >= 3,
    "trick_shot": lambda p, r: r["isBasket"] and r["bounces"] >= 2,
    "combo_master": lambda p, r: r["combo"] >= 5,
    "collector": lambda p, r: set(POWERUP_TYPES) <= p.powerups,
}


def check_achievements(player: Player, report: dict) -> list[str]:
    unlocked = []
    for name, predicate in ACHIEVEMENTS.items():
        if name in player.achievements:
            continue
        if predicate(player, report):
            player.achievements.add(name)
            unlocked.append(name)
    return unlocked


def apply_score(room: Room, player: Player, report: dict, *, now: float) -> ScoreOutcome:
    """Fold a client's score report into the player and the room.

    `report` carries `score`, `isBasket`, `combo` and `bounces`.
    """
    outcome = ScoreOutcome()
    state = room.players.setdefault(player.id, {})

    player.score = report["score"]
    state["score"] = report["score"]

    if report["isBasket"]:
        player.consecutive_baskets += 1
        player.basket_times.append(now)
        player.basket_times = [t for t in player.basket_times if now - t <= QUICK_BASKET_WINDOW]
        player.quick_baskets = len(player.basket_times)
    else:
        player.consecutive_baskets = 0
        player.misses += 1
    state["streak"] = player.consecutive_baskets

    outcome.unlocked = check_achievements(player, report)
    if room.status != RoomStatus.PLAYING:
        return outcome

    settings = room.settings
    if room.mode == GameMode.TIME_ATTACK and report["isBasket"]:
        extend_countdown(room, settings.get("bonus_time_per_basket", 0), now=now)

    elif room.mode == GameMode.SURVIVAL and not report["isBasket"]:
        if player.misses >= settings.get("miss_limit", 3) and not state.get("eliminated"):
            state["eliminated"] = True
            outcome.eliminated = True
            logger.info(f"Player {player.id} eliminated in room {room.id}")
            if all(s.get("eliminated") for s in room.players.values()):
                outcome.room_finished = True

    elif room.mode == GameMode.BATTLE_ROYALE:
        target = settings.get("elimination_score")
        if target and report["score"] >= target:
            outcome.room_finished = True

    return outcome
