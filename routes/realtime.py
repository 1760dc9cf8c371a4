from fastapi import APIRouter, WebSocket, WebSocketDisconnect, Depends
import asyncio
import logging
import uuid

from infrastructure import ConnectionManager, get_default_connections
from services import RelayHub, get_hub

logger = logging.getLogger(__name__)

router = APIRouter()


@router.websocket("/ws")
async def relay_socket(
	websocket: WebSocket,
	hub: RelayHub = Depends(get_hub),
	connections: ConnectionManager = Depends(get_default_connections),
):
	"""One persistent connection per player.

	Inbound frames are handed to the hub one at a time; outbound frames are
	written by a separate task draining the player's outbox.
	"""
	await websocket.accept()
	player_id = str(uuid.uuid4())
	connections.open(player_id)
	writer = asyncio.create_task(connections.pump(player_id, websocket))
	hub.connect(player_id)

	try:
		while True:
			message = await websocket.receive()
			if message["type"] == "websocket.disconnect":
				break
			# Text and binary frames carry the same JSON envelope
			raw = message.get("text")
			if raw is None:
				raw = message.get("bytes")
			if raw is None:
				continue
			try:
				hub.handle_raw(player_id, raw)
			except Exception:
				# One bad message must not take the connection (or anyone else's) down
				logger.exception(f"Unhandled error processing message from {player_id}")
	except WebSocketDisconnect:
		pass
	finally:
		hub.disconnect(player_id)
		connections.close(player_id)
		writer.cancel()
