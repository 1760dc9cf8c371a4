from typing import Iterable, Optional
import logging
import secrets

from .exceptions import RoomNotFound, RoomAlreadyExists, RoomStoreError
from .room_store import Room, RoomStore

logger = logging.getLogger(__name__)

# No 0/O or 1/I so codes survive being read aloud
ROOM_ID_ALPHABET = "ABCDEFGHJKLMNPQRSTUVWXYZ23456789"
ROOM_ID_LENGTH = 6
MAX_ID_ATTEMPTS = 100


class MemoryRoomStore(RoomStore):

    def __init__(self):
        self._rooms: dict[str, Room] = {}
        logger.info("[STORE] MemoryRoomStore initialized")

    def new_room_id(self) -> str:
        for _ in range(MAX_ID_ATTEMPTS):
            room_id = "".join(secrets.choice(ROOM_ID_ALPHABET) for _ in range(ROOM_ID_LENGTH))
            if room_id not in self._rooms:
                return room_id
        raise RoomStoreError("Could not allocate a free room id")

    def add(self, room: Room) -> None:
        if room.id in self._rooms:
            raise RoomAlreadyExists(f"Room {room.id} already exists")
        self._rooms[room.id] = room
        logger.info(f"[STORE] Room {room.id} added ({len(self._rooms)} live)")

    def get(self, room_id: str) -> Room:
        room = self._rooms.get(room_id)
        if room is None:
            raise RoomNotFound(f"Room {room_id} not found")
        return room

    def find(self, room_id: str | None) -> Optional[Room]:
        if room_id is None:
            return None
        return self._rooms.get(room_id)

    def delete(self, room_id: str) -> None:
        if self._rooms.pop(room_id, None) is not None:
            logger.info(f"[STORE] Room {room_id} deleted ({len(self._rooms)} live)")

    def rooms(self) -> Iterable[Room]:
        return list(self._rooms.values())

    def __len__(self) -> int:
        return len(self._rooms)
