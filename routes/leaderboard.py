from fastapi import APIRouter, HTTPException, Depends, Query
import logging

from models import (
	GameMode,
	ScoreSubmission,
	ScoreSubmissionResponse,
	ModeLeaderboardResponse,
	WindowLeaderboardResponse,
)
from services import get_hub
from stores import WINDOWS
from utils import is_valid_name, now_ts, to_iso
import config

logger = logging.getLogger(__name__)

router = APIRouter()


def _parse_mode(mode: str) -> GameMode:
	try:
		return GameMode.parse(mode)
	except ValueError:
		raise HTTPException(status_code=404, detail=f"Unknown game mode: {mode}")


@router.get("/api/leaderboard/windows/{window}", response_model=WindowLeaderboardResponse)
async def get_window_leaderboard(window: str, limit: int = Query(config.LEADERBOARD_LIMIT, ge=1, le=100), hub = Depends(get_hub)):
	if window not in WINDOWS:
		raise HTTPException(status_code=404, detail=f"Unknown leaderboard window: {window}")
	return {"window": window, "topScores": hub.top_scores(window, limit)}


@router.get("/api/leaderboard/{mode}", response_model=ModeLeaderboardResponse)
async def get_mode_leaderboard(mode: str, limit: int = Query(config.LEADERBOARD_LIMIT, ge=1, le=100), hub = Depends(get_hub)):
	game_mode = _parse_mode(mode)
	entries = hub.leaderboard.mode_top(game_mode, limit)
	return {
		"mode": game_mode,
		"entries": [
			{"rank": i + 1, "name": e["name"], "score": e["score"], "timestamp": e["timestamp"]}
			for i, e in enumerate(entries)
		],
	}


@router.post("/api/score", response_model=ScoreSubmissionResponse)
async def submit_score(req: ScoreSubmission, hub = Depends(get_hub)):
	if not is_valid_name(req.name):
		raise HTTPException(status_code=400, detail="Invalid name. (Use only letters, numbers, spaces, and .'-_`’· characters.)")

	rank, total = hub.leaderboard.submit_mode_score(req.mode, req.name.strip(), req.score, req.stats)
	logger.info(f"Score {req.score} by {req.name!r} in {req.mode.value}: rank {rank}/{total}")
	return {"rank": rank, "totalEntries": total}


@router.get("/api/health")
async def health(hub = Depends(get_hub)):
	return {"status": "ok", "serverTime": to_iso(now_ts()), **hub.stats()}
