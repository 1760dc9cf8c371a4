from typing import Any
import logging

from models.domain_models import GameMode, ScoreEntry, ModeScoreEntry
from utils.time import Clock, now_ts

logger = logging.getLogger(__name__)

DAILY = "daily"
WEEKLY = "weekly"
ALL_TIME = "all_time"
WINDOWS = (DAILY, WEEKLY, ALL_TIME)

# Seconds a window lives before its whole table is cleared
WINDOW_LIFETIME = {
    DAILY: 24 * 60 * 60,
    WEEKLY: 7 * 24 * 60 * 60,
    ALL_TIME: None,
}

LABEL_LENGTH = 4


def _rank_key(entry: dict) -> tuple:
    # Highest score first; ties go to whoever got there first
    return (-entry["score"], entry["timestamp"])


class LeaderboardStore:
    """In-memory score tables.

    Two independent families live here:

    - rolling windows (daily / weekly / all-time) keyed by player id, fed by
      the relay; each keeps only the best score a player ever reported and is
      cleared wholesale once it outlives its lifetime.
    - per-mode tables fed by the HTTP API, capped and kept sorted.
    """

    def __init__(self, clock: Clock = now_ts, *, mode_table_cap: int = 100):
        self._clock = clock
        self._mode_table_cap = mode_table_cap
        now = clock()
        self._windows: dict[str, dict[str, dict[str, Any]]] = {w: {} for w in WINDOWS}
        self._window_started: dict[str, float] = {w: now for w in WINDOWS}
        self._mode_tables: dict[GameMode, list[ModeScoreEntry]] = {m: [] for m in GameMode}

    # -------------------------------------------------
    # Windows
    # -------------------------------------------------

    def _expire_windows(self) -> None:
        now = self._clock()
        for window, lifetime in WINDOW_LIFETIME.items():
            if lifetime is None:
                continue
            if now - self._window_started[window] > lifetime:
                logger.info(f"[STORE] Resetting {window} leaderboard ({len(self._windows[window])} entries)")
                self._windows[window].clear()
                self._window_started[window] = now

    def record_score(self, player_id: str, score: int) -> None:
        """Keep max(existing, score) for the player in every window."""
        self._expire_windows()
        now = self._clock()
        for table in self._windows.values():
            existing = table.get(player_id)
            if existing is None or score > existing["score"]:
                table[player_id] = {"score": score, "timestamp": now}

    def best_score(self, window: str, player_id: str) -> int | None:
        self._check_window(window)
        self._expire_windows()
        entry = self._windows[window].get(player_id)
        return entry["score"] if entry else None

    def _ranked(self, window: str) -> list[tuple[str, dict]]:
        return sorted(self._windows[window].items(), key=lambda item: _rank_key(item[1]))

    def top_scores(self, window: str, limit: int = 10) -> list[ScoreEntry]:
        """Return a fresh, sorted, anonymized snapshot of the top `limit` entries."""
        self._check_window(window)
        self._expire_windows()
        return [
            {"player": pid[:LABEL_LENGTH], "score": entry["score"], "timestamp": entry["timestamp"]}
            for pid, entry in self._ranked(window)[:max(limit, 0)]
        ]

    def ranking(self, player_id: str, limit: int = 10, window: str = ALL_TIME) -> dict:
        """Rank of `player_id` (0 when absent) plus the window's top entries."""
        self._check_window(window)
        self._expire_windows()
        ranked = self._ranked(window)
        rank = next((i + 1 for i, (pid, _) in enumerate(ranked) if pid == player_id), 0)
        return {
            "rank": rank,
            "totalPlayers": len(ranked),
            "topScores": self.top_scores(window, limit),
        }

    @staticmethod
    def _check_window(window: str) -> None:
        if window not in WINDOW_LIFETIME:
            raise ValueError(f"Unknown leaderboard window: {window}")

    # -------------------------------------------------
    # Per-mode tables (HTTP)
    # -------------------------------------------------

    def submit_mode_score(self, mode: GameMode, name: str, score: int, stats: dict | None = None) -> tuple[int, int]:
        """Insert a score into the mode's table. Returns (rank, total entries kept)."""
        table = self._mode_tables[mode]
        entry: ModeScoreEntry = {
            "name": name,
            "score": score,
            "stats": stats or {},
            "timestamp": self._clock(),
        }
        table.append(entry)
        table.sort(key=_rank_key)
        rank = next(i + 1 for i, e in enumerate(table) if e is entry)
        del table[self._mode_table_cap:]
        return rank, len(table)

    def mode_top(self, mode: GameMode, limit: int = 10) -> list[ModeScoreEntry]:
        return [dict(e) for e in self._mode_tables[mode][:max(limit, 0)]]
