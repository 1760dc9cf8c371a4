from typing import Optional, Protocol
import asyncio
import json
import logging

from fastapi import WebSocket, WebSocketDisconnect

logger = logging.getLogger(__name__)

OUTBOX_SIZE = 256


class Transport(Protocol):
    """What the relay needs from the socket layer: non-blocking, fire-and-forget sends."""

    def send(self, player_id: str, message: dict) -> bool:
        ...


class ConnectionManager:
    """Per-connection outbound queues drained by one writer task each.

    `send` serializes immediately and never awaits, so relay handlers run to
    completion without yielding to the event loop. A full outbox drops the
    message for that connection only.

    Usage:
        manager = ConnectionManager()
        manager.open(player_id)
        writer = asyncio.create_task(manager.pump(player_id, websocket))
        manager.send(player_id, {"type": "init"})
        manager.close(player_id)
    """

    def __init__(self, *, outbox_size: int = OUTBOX_SIZE):
        self.outbox_size = outbox_size
        self._outboxes: dict[str, asyncio.Queue] = {}

    def open(self, player_id: str) -> asyncio.Queue:
        queue: asyncio.Queue = asyncio.Queue(maxsize=self.outbox_size)
        self._outboxes[player_id] = queue
        return queue

    def close(self, player_id: str) -> None:
        self._outboxes.pop(player_id, None)

    def send(self, player_id: str, message: dict) -> bool:
        queue = self._outboxes.get(player_id)
        if queue is None:
            return False
        try:
            queue.put_nowait(json.dumps(message))
        except asyncio.QueueFull:
            logger.warning(f"Outbox full for {player_id}; dropping {message.get('type')}")
            return False
        return True

    async def pump(self, player_id: str, websocket: WebSocket) -> None:
        """Forward queued messages to the socket until it closes."""
        queue = self._outboxes.get(player_id)
        if queue is None:
            return
        while True:
            text = await queue.get()
            try:
                await websocket.send_text(text)
            except (WebSocketDisconnect, RuntimeError) as exc:
                logger.debug(f"Writer for {player_id} stopped: {exc}")
                return

    def __contains__(self, player_id: str) -> bool:
        return player_id in self._outboxes

    def __len__(self) -> int:
        return len(self._outboxes)


# Module-level convenience: a single default manager
_default_manager: Optional[ConnectionManager] = None


def get_default_connections() -> ConnectionManager:
    global _default_manager
    if _default_manager is None:
        _default_manager = ConnectionManager()
    return _default_manager


def reset_default_connections() -> None:
    global _default_manager
    _default_manager = None
