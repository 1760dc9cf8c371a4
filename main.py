import logging
import os

from fastapi import FastAPI
from fastapi.responses import RedirectResponse
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from pytz import utc

import config
from routes import realtime_router, leaderboard_router
from services import get_hub

logging.basicConfig(
    level=config.LOG_LEVEL,
    format="%(asctime)s - %(levelname)s - [%(name)s] - %(message)s",
)
logger = logging.getLogger(__name__)

# --- FastAPI setup ---
app = FastAPI(title="Basket Toss relay")

# --- Middleware ---
app.add_middleware(
    CORSMiddleware,
    allow_origins=config.ALLOWED_ORIGINS,
    allow_methods=["POST", "GET"],
    allow_headers=["*"],
)

if os.path.isdir(config.STATIC_DIR):
    app.mount("/static", StaticFiles(directory=config.STATIC_DIR, html=True), name="static")

    @app.get("/", include_in_schema=False)
    def root():
        return RedirectResponse(url="/static/index.html")


# --- Register routes ---
app.include_router(realtime_router)
app.include_router(leaderboard_router)

# --- Scheduler setup ---
# Runs on the event loop, so countdown ticks never interleave with a message handler
scheduler = AsyncIOScheduler(timezone=utc)


def tick_rooms():
    ended = get_hub().tick()
    if ended:
        logger.info(f"Countdown tick ended {ended} room(s)")


@app.on_event("startup")
async def startup_event():
    scheduler.add_job(
        tick_rooms,
        trigger="interval",
        seconds=config.TICK_SECONDS,
        id="room-countdown",
        coalesce=True,
        max_instances=1,
        replace_existing=True,
    )
    scheduler.start()
    logger.info(f"Countdown scheduler started (every {config.TICK_SECONDS}s)")


@app.on_event("shutdown")
def shutdown_event():
    if scheduler.running:
        scheduler.shutdown(wait=False)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host=config.HOST, port=config.PORT)
