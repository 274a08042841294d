"""
Room Directory

This module manages the in-memory set of rooms on this relay.
A room exists only while it has at least one member: it is created by the
first join and removed as soon as its last member leaves.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Tuple, Union

logger = logging.getLogger(__name__)

# Returned by RoomDirectory.leave() when the last member left
ROOM_DELETED = "ROOM_DELETED"


@dataclass
class Room:
    """
    A named group of connections.

    Attributes:
        room_id: Caller-supplied room identifier
        members: Connection ids in join order, without duplicates
    """

    room_id: str
    members: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        """Convert room to dictionary for serialization."""
        return {
            "roomId": self.room_id,
            "userCount": len(self.members),
            "users": list(self.members),
        }


class RoomDirectory:
    """
    Maps room ids to their members.

    The directory performs no locking of its own; RelayState serializes
    access to it.
    """

    def __init__(self):
        """Initialize an empty directory."""
        self._rooms: Dict[str, Room] = {}

    def join(self, room_id: str, connection_id: str) -> int:
        """
        Add a connection to a room, creating the room if needed.

        Joining a room the connection is already in does not add a
        second entry.

        Args:
            room_id: The room to join
            connection_id: The joining connection

        Returns:
            The member count after the join
        """
        room = self._rooms.get(room_id)
        if room is None:
            room = Room(room_id=room_id)
            self._rooms[room_id] = room
            logger.info(f"Created room {room_id}")

        if connection_id not in room.members:
            room.members.append(connection_id)

        return len(room.members)

    def leave(self, room_id: str, connection_id: str) -> Union[int, str]:
        """
        Remove a connection from a room.

        Args:
            room_id: The room to leave
            connection_id: The leaving connection

        Returns:
            The member count after the leave, or ROOM_DELETED if the room
            became empty and was removed. Leaving a room that does not
            exist returns 0.
        """
        room = self._rooms.get(room_id)
        if room is None:
            return 0

        if connection_id in room.members:
            room.members.remove(connection_id)

        if not room.members:
            del self._rooms[room_id]
            logger.info(f"Deleted empty room {room_id}")
            return ROOM_DELETED

        return len(room.members)

    def member_ids(self, room_id: str) -> List[str]:
        """
        Get the members of a room.

        Args:
            room_id: The room to look up

        Returns:
            A copy of the member list, empty if the room does not exist
        """
        room = self._rooms.get(room_id)
        return list(room.members) if room else []

    def has_room(self, room_id: str) -> bool:
        """Return True if the room currently exists."""
        return room_id in self._rooms

    def room_count(self) -> int:
        """Return the number of existing rooms."""
        return len(self._rooms)

    def snapshot(self) -> List[Tuple[str, List[str]]]:
        """
        Get a point-in-time copy of every room and its members.

        Returns:
            List of (room_id, member_ids) tuples in creation order
        """
        return [
            (room_id, list(room.members))
            for room_id, room in self._rooms.items()
        ]

    def list_rooms(self) -> List[Dict[str, Any]]:
        """List all rooms as dictionaries for introspection."""
        return [room.to_dict() for room in self._rooms.values()]
