"""Room-scoped message fan-out over a Transport."""
from stores import Room


def broadcast(transport, room: Room, message: dict) -> int:
    """Send `message` to every member of `room`. Returns the number queued."""
    sent = 0
    for player_id in list(room.members):
        if transport.send(player_id, message):
            sent += 1
    return sent


def reply(transport, player_id: str, message: dict) -> bool:
    return transport.send(player_id, message)


def error_message(exc: Exception) -> dict:
    return {
        "type": "error",
        "code": exc.__class__.__name__,
        "message": str(exc),
        "retryable": getattr(exc, "retryable", False),
    }
