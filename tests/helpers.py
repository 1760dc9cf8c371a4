import json


def send(hub, player_id, **message):
    """Push one inbound frame through the hub the way the socket route does."""
    hub.handle_raw(player_id, json.dumps(message))


def connect_many(hub, count, prefix="player"):
    return [hub.connect(f"{prefix}-{i:02d}-id") for i in range(count)]
