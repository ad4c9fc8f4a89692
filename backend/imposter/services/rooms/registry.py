import random
from typing import Dict, Optional, Tuple

from imposter.models import Room
from .errors import InvalidName, RoomNotFound

# No 0/O or 1/I, so codes can be read aloud
ROOM_CODE_ALPHABET = 'ABCDEFGHJKLMNPQRSTUVWXYZ23456789'


def generate_room_code(length: int = 6, rng=None) -> str:
    rng = rng or random.SystemRandom()
    return ''.join(rng.choice(ROOM_CODE_ALPHABET) for _ in range(length))


def normalize_room_code(code) -> str:
    return code.strip().upper() if isinstance(code, str) else ''


class RoomRegistry:
    """In-memory owner of every live room, keyed by room code."""

    def __init__(self, code_length: int = 6, rng=None):
        self.code_length = code_length
        self._rng = rng or random.SystemRandom()
        self._rooms: Dict[str, Room] = {}

    def __len__(self) -> int:
        return len(self._rooms)

    def __contains__(self, code) -> bool:
        return normalize_room_code(code) in self._rooms

    def codes(self):
        return list(self._rooms)

    def _unused_code(self) -> str:
        while True:
            code = generate_room_code(self.code_length, self._rng)
            if code not in self._rooms:
                return code

    def create_room(self, host_id: str, host_name) -> Tuple[str, Room]:
        name = host_name.strip() if isinstance(host_name, str) else ''
        if not name:
            raise InvalidName()
        code = self._unused_code()
        room = Room(code, host_id, name)
        self._rooms[code] = room
        return code, room

    def get_room(self, code) -> Optional[Room]:
        return self._rooms.get(normalize_room_code(code))

    def require_room(self, code, message: Optional[str] = None) -> Room:
        room = self.get_room(code)
        if room is None:
            raise RoomNotFound(message)
        return room

    def delete_room(self, code) -> Optional[Room]:
        return self._rooms.pop(normalize_room_code(code), None)

    def clear(self) -> None:
        self._rooms.clear()
