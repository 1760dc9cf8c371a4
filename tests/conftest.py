import copy
import random

import pytest
from fastapi.testclient import TestClient

from infrastructure import ConnectionManager, get_default_connections
from services import RelayHub, get_hub
from stores import LeaderboardStore


class ManualClock:
    """Epoch-seconds clock that only moves when told to."""

    def __init__(self, start: float = 1_700_000_000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class RecordingTransport:
    """Collects outbound messages per player instead of writing to sockets."""

    def __init__(self):
        self.sent: dict[str, list[dict]] = {}
        self.closed: set[str] = set()

    def send(self, player_id: str, message: dict) -> bool:
        if player_id in self.closed:
            return False
        self.sent.setdefault(player_id, []).append(copy.deepcopy(message))
        return True

    def messages(self, player_id: str, type_: str | None = None) -> list[dict]:
        msgs = self.sent.get(player_id, [])
        if type_ is None:
            return list(msgs)
        return [m for m in msgs if m["type"] == type_]

    def last(self, player_id: str, type_: str) -> dict:
        found = self.messages(player_id, type_)
        assert found, f"no {type_!r} sent to {player_id}"
        return found[-1]

    def clear(self) -> None:
        self.sent.clear()


@pytest.fixture
def clock():
    return ManualClock()


@pytest.fixture
def transport():
    return RecordingTransport()


@pytest.fixture
def hub(transport, clock):
    return RelayHub(
        transport,
        clock=clock,
        rng=random.Random(1234),
        leaderboard=LeaderboardStore(clock, mode_table_cap=100),
        chat_cooldown_ms=1000,
        emote_cooldown_ms=1000,
        leaderboard_limit=10,
    )


@pytest.fixture
def client():
    from main import app

    connections = ConnectionManager()
    live_hub = RelayHub(connections)
    app.dependency_overrides[get_hub] = lambda: live_hub
    app.dependency_overrides[get_default_connections] = lambda: connections
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
