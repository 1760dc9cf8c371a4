import pytest

from models import GameMode, RoomStatus
from services.game_modes import START_POSITIONS
from stores import RoomFull, RoomNotFound
from helpers import send, connect_many


def test_create_room_derives_settings_from_mode(hub):
    room = hub.create_room("classic")

    assert room.settings["max_players"] == 4
    assert room.settings["mode"] == "classic"
    assert room.status == RoomStatus.PLAYING
    assert room.time_remaining == 60
    assert room.is_empty()
    assert hub.rooms.find(room.id) is room


def test_create_room_accepts_hyphenated_mode(hub):
    room = hub.create_room("battle-royale")
    assert room.mode == GameMode.BATTLE_ROYALE
    assert room.settings["max_players"] == 8
    assert room.obstacles


def test_room_ids_are_unique(hub):
    ids = {hub.create_room().id for _ in range(50)}
    assert len(ids) == 50


def test_fifth_player_cannot_join_classic_room(hub, transport):
    room = hub.create_room("classic")
    players = connect_many(hub, 5)
    for p in players[:4]:
        hub.join_room(p, room.id)

    with pytest.raises(RoomFull):
        hub.join_room(players[4], room.id)
    assert len(room.members) == 4
    assert players[4].room_id is None


def test_room_full_is_reported_to_requester_only(hub, transport):
    room = hub.create_room("classic")
    players = connect_many(hub, 5)
    for p in players[:4]:
        send(hub, p.id, type="join_room", roomId=room.id)
    transport.clear()

    send(hub, players[4].id, type="join_room", roomId=room.id)

    error = transport.last(players[4].id, "error")
    assert error["code"] == "RoomFull"
    for p in players[:4]:
        assert transport.messages(p.id) == []


def test_member_count_never_exceeds_capacity(hub):
    for mode in GameMode:
        room = hub.create_room(mode)
        for p in connect_many(hub, room.max_players + 3, prefix=mode.value):
            try:
                hub.join_room(p, room.id)
            except RoomFull:
                pass
            assert len(room.members) <= room.max_players


def test_join_unknown_room(hub, transport):
    player = hub.connect("lonely")
    with pytest.raises(RoomNotFound):
        hub.join_room(player, "NOPE42")

    send(hub, player.id, type="join_room", roomId="NOPE42")
    assert transport.last(player.id, "error")["code"] == "RoomNotFound"


def test_join_is_case_insensitive(hub):
    room = hub.create_room()
    player = hub.connect("p")
    hub.join_room(player, room.id.lower())
    assert player.room_id == room.id


def test_join_broadcasts_full_snapshot_to_everyone(hub, transport):
    room = hub.create_room()
    a, b = connect_many(hub, 2)
    hub.join_room(a, room.id)
    transport.clear()

    hub.join_room(b, room.id)

    for p in (a, b):
        msg = transport.last(p.id, "player_joined")
        assert msg["playerId"] == b.id
        assert set(msg["gameState"]["players"]) == {a.id, b.id}
        assert msg["gameState"]["roomId"] == room.id


def test_start_positions_follow_join_order_and_overflow_to_first_slot(hub):
    room = hub.create_room("battle_royale")
    players = connect_many(hub, 6)
    for p in players:
        hub.join_room(p, room.id)

    positions = [(room.players[p.id]["x"], room.players[p.id]["y"]) for p in players]
    expected = [(s["x"], s["y"]) for s in START_POSITIONS]
    assert positions[:4] == expected
    assert positions[4] == expected[0]
    assert positions[5] == expected[0]


def test_last_member_leaving_destroys_room(hub):
    room = hub.create_room()
    a, b = connect_many(hub, 2)
    hub.join_room(a, room.id)
    hub.join_room(b, room.id)

    hub.leave_room(a)
    assert hub.rooms.find(room.id) is room
    hub.leave_room(b)

    assert hub.rooms.find(room.id) is None
    with pytest.raises(RoomNotFound):
        hub.join_room(a, room.id)


def test_leave_notifies_remaining_members(hub, transport):
    room = hub.create_room()
    a, b = connect_many(hub, 2)
    hub.join_room(a, room.id)
    hub.join_room(b, room.id)
    transport.clear()

    send(hub, a.id, type="leave_room")

    msg = transport.last(b.id, "player_left")
    assert msg["playerId"] == a.id
    assert a.id not in msg["gameState"]["players"]
    assert transport.messages(a.id) == []
    assert a.room_id is None


def test_disconnect_evicts_player(hub, transport):
    room = hub.create_room()
    a, b = connect_many(hub, 2)
    hub.join_room(a, room.id)
    hub.join_room(b, room.id)
    hub.apply_update(a, {"x": 1}, {"x": 2, "y": 3})

    hub.disconnect(a.id)

    assert a.id not in room.players
    assert a.id not in room.balls
    assert transport.last(b.id, "player_left")["playerId"] == a.id
    assert hub.players.lookup(a.id) is None


def test_disconnect_of_sole_member_destroys_room(hub):
    room = hub.create_room()
    a = hub.connect("solo")
    hub.join_room(a, room.id)
    hub.disconnect(a.id)
    assert len(hub.rooms) == 0
    assert hub.rooms.find(room.id) is None


def test_joining_another_room_leaves_the_first(hub):
    first = hub.create_room()
    second = hub.create_room()
    p = hub.connect("mover")
    hub.join_room(p, first.id)

    hub.join_room(p, second.id)

    assert p.room_id == second.id
    assert hub.rooms.find(first.id) is None
    assert p.id in second.players


def test_reconnect_with_same_id_leaves_no_ghost_member(hub, transport):
    first_room = hub.create_room()
    other = hub.connect("watcher")
    hub.join_room(other, first_room.id)
    old = hub.connect("dup-id")
    hub.join_room(old, first_room.id)

    new = hub.connect("dup-id")

    assert new is not old
    assert "dup-id" not in first_room.members
    assert "dup-id" not in first_room.players
    assert transport.last(other.id, "player_left")["playerId"] == "dup-id"

    second_room = hub.create_room()
    hub.join_room(new, second_room.id)
    hub.disconnect(new.id)

    assert hub.rooms.find(second_room.id) is None
    assert list(first_room.members) == [other.id]


def test_create_room_message_replies_and_auto_joins(hub, transport):
    p = hub.connect("creator")
    send(hub, p.id, type="create_room", mode="trick_shot", name="Ace")

    created = transport.last(p.id, "room_created")
    room = hub.rooms.get(created["roomId"])
    assert room.mode == GameMode.TRICK_SHOT
    assert p.room_id == room.id
    assert room.players[p.id]["name"] == "Ace"
    assert transport.last(p.id, "player_joined")["playerId"] == p.id


def test_tournament_waits_for_second_player(hub, transport):
    room = hub.create_room("tournament")
    a, b = connect_many(hub, 2)

    hub.join_room(a, room.id)
    assert room.status == RoomStatus.WAITING
    assert transport.messages(a.id, "game_started") == []

    hub.join_room(b, room.id)
    assert room.status == RoomStatus.PLAYING
    for p in (a, b):
        assert transport.last(p.id, "game_started")["gameState"]["status"] == "playing"
