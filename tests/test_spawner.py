import random

from models import RoomStatus
from services import spawner
from services.game_modes import POWERUP_TYPES
from helpers import send, connect_many


def _in_spawn_area(p):
    return any(x0 <= p["x"] <= x1 and y0 <= p["y"] <= y1 for x0, y0, x1, y1 in spawner.SPAWN_AREAS)


def test_no_spawn_until_interval_elapses(hub, transport, clock):
    room = hub.create_room("classic")
    a = hub.connect("a")
    hub.join_room(a, room.id)

    clock.advance(room.settings["power_up_frequency"])
    hub.apply_update(a, {"x": 1})
    assert room.powerups == []

    clock.advance(0.5)
    hub.apply_update(a, {"x": 2})
    assert len(room.powerups) == 1

    spawned = transport.last(a.id, "powerup_spawned")["powerup"]
    assert spawned["type"] in POWERUP_TYPES
    assert spawned["color"] == POWERUP_TYPES[spawned["type"]]["color"]
    assert _in_spawn_area(spawned)
    # also part of the regular snapshot
    assert transport.last(a.id, "game_update")["gameState"]["powerups"][0]["id"] == spawned["id"]


def test_spawn_resets_interval(hub, clock):
    room = hub.create_room("classic")
    a = hub.connect("a")
    hub.join_room(a, room.id)

    clock.advance(11)
    hub.apply_update(a, {})
    clock.advance(5)
    hub.apply_update(a, {})
    assert len(room.powerups) == 1


def test_expired_powerups_are_pruned(hub, clock):
    room = hub.create_room("classic")
    a = hub.connect("a")
    hub.join_room(a, room.id)
    clock.advance(11)
    hub.apply_update(a, {})
    first = room.powerups[0]["id"]

    clock.advance(spawner.POWERUP_LIFETIME + 0.1)
    hub.apply_update(a, {})

    assert first not in [p["id"] for p in room.powerups]


def test_remaining_lifetime_counts_down(hub, clock):
    room = hub.create_room("classic")
    p = spawner.make_powerup(random.Random(3), now=clock())
    room.powerups.append(p)

    clock.advance(4)
    spawner.prune_powerups(room, now=clock())

    assert room.powerups[0]["remaining"] == spawner.POWERUP_LIFETIME - 4


def test_spawn_positions_stay_in_bounds():
    rng = random.Random(99)
    for i in range(200):
        p = spawner.make_powerup(rng, now=float(i))
        assert _in_spawn_area(p)
        assert p["type"] in POWERUP_TYPES


def test_ended_room_does_not_spawn(hub, clock):
    room = hub.create_room("classic")
    room.status = RoomStatus.ENDED
    clock.advance(100)
    assert spawner.maybe_spawn(room, random.Random(1), now=clock()) is None


def test_obstacle_oscillates_between_bounds(hub):
    room = hub.create_room("classic")
    room.obstacles = [{
        "id": "o", "x": 1, "y": 0, "width": 1, "height": 1,
        "motion": {"axis": "x", "min": 0, "max": 3, "speed": 2, "direction": 1},
    }]

    xs = []
    for _ in range(5):
        spawner.advance_obstacles(room)
        xs.append(room.obstacles[0]["x"])

    assert xs == [3, 1, 0, 2, 3]


def test_static_obstacles_do_not_move(hub):
    room = hub.create_room("trick_shot")
    static = [o for o in room.obstacles if not o.get("motion")]
    before = [(o["x"], o["y"]) for o in static]
    spawner.advance_obstacles(room)
    assert [(o["x"], o["y"]) for o in static] == before


def test_obstacles_advance_on_each_update(hub, transport):
    room = hub.create_room("survival")
    a = hub.connect("a")
    hub.join_room(a, room.id)
    start = [o["y"] for o in room.obstacles]

    hub.apply_update(a, {})

    moved = [o["y"] for o in transport.last(a.id, "game_update")["gameState"]["obstacles"]]
    assert moved != start


def test_obstacle_layouts_are_per_room(hub):
    first = hub.create_room("survival")
    second = hub.create_room("survival")
    spawner.advance_obstacles(first)
    assert first.obstacles[0]["y"] != second.obstacles[0]["y"]


def test_collected_powerup_stops_being_broadcast(hub, transport, clock):
    room = hub.create_room("classic")
    a, b = connect_many(hub, 2)
    hub.join_room(a, room.id)
    hub.join_room(b, room.id)
    clock.advance(11)
    hub.apply_update(a, {})
    powerup = room.powerups[0]

    send(hub, b.id, type="powerup_collected", powerupId=powerup["id"], powerupType=powerup["type"])

    assert room.powerups == []
    assert powerup["type"] in b.powerups
    msg = transport.last(a.id, "powerup_collected")
    assert msg["powerupId"] == powerup["id"]
    assert msg["playerId"] == b.id

    transport.clear()
    send(hub, a.id, type="powerup_collected", powerupId=powerup["id"])
    assert transport.sent == {}
    assert powerup["type"] not in a.powerups
