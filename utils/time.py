"""Clock helpers.

Everything that keeps time in the relay (cooldowns, power-up lifetimes,
countdowns, leaderboard windows) takes a `Clock` so tests can substitute a
manual one.
"""
from datetime import datetime, timezone
from typing import Callable
import time

Clock = Callable[[], float]


def now_ts() -> float:
	"""Return current wall-clock time as epoch seconds."""
	return time.time()


def elapsed_ms(since: float | None, now: float) -> float:
	"""Milliseconds between `since` and `now`; infinite when `since` is unset."""
	if since is None:
		return float("inf")
	return (now - since) * 1000.0


def to_iso(ts: float) -> str:
	"""Serialize epoch seconds to an ISO8601 UTC string."""
	return datetime.fromtimestamp(ts, tz=timezone.utc).isoformat()
