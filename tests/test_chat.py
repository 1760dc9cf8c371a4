from helpers import send, connect_many


def _pair(hub):
    room = hub.create_room()
    a, b = connect_many(hub, 2)
    hub.join_room(a, room.id)
    hub.join_room(b, room.id)
    return room, a, b


def test_chat_is_broadcast_with_sender_name(hub, transport):
    room, a, b = _pair(hub)
    send(hub, a.id, type="chat_message", message="  nice shot!  ")

    for p in (a, b):
        msg = transport.last(p.id, "chat_message")
        assert msg["message"] == "nice shot!"
        assert msg["player"] == a.name
        assert msg["playerId"] == a.id


def test_second_chat_within_cooldown_is_rate_limited(hub, transport, clock):
    room, a, b = _pair(hub)
    send(hub, a.id, type="chat_message", message="one")
    clock.advance(0.5)
    send(hub, a.id, type="chat_message", message="two")

    assert [m["message"] for m in transport.messages(b.id, "chat_message")] == ["one"]
    error = transport.last(a.id, "error")
    assert error["code"] == "RateLimited"
    assert error["retryable"] is True
    assert transport.messages(b.id, "error") == []


def test_chat_allowed_again_after_cooldown(hub, transport, clock):
    room, a, b = _pair(hub)
    send(hub, a.id, type="chat_message", message="one")
    clock.advance(1.0)
    send(hub, a.id, type="chat_message", message="two")

    assert [m["message"] for m in transport.messages(b.id, "chat_message")] == ["one", "two"]


def test_cooldown_is_per_player(hub, transport):
    room, a, b = _pair(hub)
    send(hub, a.id, type="chat_message", message="from a")
    send(hub, b.id, type="chat_message", message="from b")

    assert len(transport.messages(a.id, "chat_message")) == 2
    assert transport.messages(a.id, "error") == []


def test_blank_or_oversized_chat_is_dropped(hub, transport):
    room, a, b = _pair(hub)
    transport.clear()
    send(hub, a.id, type="chat_message", message="   ")
    send(hub, a.id, type="chat_message", message="x" * 500)
    assert transport.sent == {}


def test_emote_broadcast_and_cooldown(hub, transport, clock):
    room, a, b = _pair(hub)
    send(hub, a.id, type="emote", emote="🔥")
    send(hub, a.id, type="emote", emote="👏")

    assert [m["emote"] for m in transport.messages(b.id, "emote")] == ["🔥"]
    assert transport.last(a.id, "error")["code"] == "RateLimited"


def test_unknown_emote_is_dropped(hub, transport):
    room, a, b = _pair(hub)
    transport.clear()
    send(hub, a.id, type="emote", emote="💩")
    assert transport.sent == {}
