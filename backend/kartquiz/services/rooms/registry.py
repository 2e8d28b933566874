import threading
import time
from typing import Dict, List, Optional

from .errors import RoomExists, RoomNotFound
from .room import Host, Room


class RoomRegistry:
    """In-memory rooms keyed by their shareable code.

    ``lock`` serializes room mutation; callers hold it for the whole intent,
    emits included, so events from one intent go out before the next starts.
    """

    def __init__(self):
        self.rooms: Dict[str, Room] = {}
        self.lock = threading.RLock()

    def __len__(self):
        return len(self.rooms)

    def __iter__(self):
        return iter(list(self.rooms.values()))

    def __contains__(self, code):
        return code in self.rooms

    def create(self, code: str, title: str, host_id: str, host_name: str, replace: bool = False) -> Room:
        if code in self.rooms and not replace:
            raise RoomExists(f'Room {code} already exists')
        room = Room(code=code, title=title, host=Host(id=host_id, name=host_name))
        self.rooms[code] = room
        return room

    def get(self, code) -> Optional[Room]:
        return self.rooms.get(code)

    def require(self, code) -> Room:
        room = self.rooms.get(code)
        if room is None:
            raise RoomNotFound()
        return room

    def delete(self, code) -> Optional[Room]:
        return self.rooms.pop(code, None)

    def all(self) -> List[Room]:
        return list(self.rooms.values())

    def touch(self, room: Room, now: Optional[float] = None) -> None:
        room.last_activity = time.time() if now is None else now

    def reap_idle(self, ttl: float, now: Optional[float] = None) -> List[Room]:
        """Delete and return rooms with no activity for more than ``ttl`` seconds."""
        if ttl <= 0:
            return []
        now = time.time() if now is None else now
        expired = [room for room in self.rooms.values() if now - room.last_activity > ttl]
        for room in expired:
            self.rooms.pop(room.code, None)
        return expired
