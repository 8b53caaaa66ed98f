# rooms.py
from typing import Dict, FrozenSet, List, Set

from logging_config import get_logger

logger = get_logger(__name__)


class ConnectionRegistry:
    """Room membership for one relay instance.

    A room exists only while it has at least one member; it is created by the
    first join and dropped as soon as its last member leaves or disconnects.
    """

    def __init__(self):
        # { room_id: {peer_id, ...} }
        self._rooms: Dict[str, Set[str]] = {}

    def join(self, room_id: str, peer_id: str) -> bool:
        members = self._rooms.setdefault(room_id, set())
        if peer_id in members:
            return False
        members.add(peer_id)
        logger.debug(f"Room {room_id} now has members: {sorted(members)}")
        return True

    def leave(self, room_id: str, peer_id: str) -> bool:
        members = self._rooms.get(room_id)
        if members is None or peer_id not in members:
            return False
        members.discard(peer_id)
        if not members:
            del self._rooms[room_id]
            logger.debug(f"Room {room_id} is empty, removed")
        return True

    def leave_all(self, peer_id: str) -> List[str]:
        """Remove ``peer_id`` from every room; returns the rooms it was in."""
        left = [room_id for room_id in list(self._rooms) if self.leave(room_id, peer_id)]
        return left

    def members_of(self, room_id: str) -> FrozenSet[str]:
        return frozenset(self._rooms.get(room_id, ()))

    def rooms(self) -> List[str]:
        return list(self._rooms)

    def rooms_of(self, peer_id: str) -> List[str]:
        return [room_id for room_id, members in self._rooms.items() if peer_id in members]

    def snapshot(self) -> Dict[str, List[str]]:
        return {room_id: sorted(members) for room_id, members in self._rooms.items()}

    def __contains__(self, room_id) -> bool:
        return room_id in self._rooms

    def __len__(self) -> int:
        return len(self._rooms)
