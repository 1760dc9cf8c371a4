import os
from pathlib import Path

# Network binding for `python main.py`. Overridable via environment.
HOST = os.environ.get("TOSS_HOST", "0.0.0.0")
PORT = int(os.environ.get("TOSS_PORT", os.environ.get("PORT", "3000")))

ALLOWED_ORIGINS = [
    o.strip() for o in os.environ.get("TOSS_ALLOWED_ORIGINS", "*").split(",") if o.strip()
]

LOG_LEVEL = os.environ.get("TOSS_LOG_LEVEL", "INFO").upper()

# Per-player cooldowns for chatter, in milliseconds
CHAT_COOLDOWN_MS = int(os.environ.get("TOSS_CHAT_COOLDOWN_MS", "1000"))
EMOTE_COOLDOWN_MS = int(os.environ.get("TOSS_EMOTE_COOLDOWN_MS", "1000"))

# How often the scheduler re-evaluates room countdowns
TICK_SECONDS = float(os.environ.get("TOSS_TICK_SECONDS", "1.0"))

LEADERBOARD_LIMIT = int(os.environ.get("TOSS_LEADERBOARD_LIMIT", "10"))
MODE_TABLE_CAP = int(os.environ.get("TOSS_MODE_TABLE_CAP", "100"))

STATIC_DIR = os.environ.get("TOSS_STATIC_DIR", str(Path(__file__).parent / "static"))
