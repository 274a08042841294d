"""
Shared relay state.

RelayState owns the connection registry and the room directory and applies
every compound membership change under a single lock, so the two maps never
disagree and no reader observes a half-finished leave/join.
"""

import threading
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from .connection_registry import ConnectionRegistry
from .room_directory import ROOM_DELETED, RoomDirectory


@dataclass
class LeaveResult:
    """
    Outcome of removing a connection from a room.

    Attributes:
        room_id: The room that was left
        remaining: Members still in the room, empty if it was deleted
        room_deleted: True if the room was removed from the directory
    """

    room_id: str
    remaining: List[str] = field(default_factory=list)
    room_deleted: bool = False


@dataclass
class JoinResult:
    """
    Outcome of entering a room.

    Attributes:
        room_id: The room that was entered
        members: Members after the join, joiner included
        left: Result of leaving the previous room, if there was one
    """

    room_id: str
    members: List[str]
    left: Optional[LeaveResult] = None

    @property
    def user_count(self) -> int:
        return len(self.members)


class RelayState:
    """
    Holds all in-memory state for the relay.

    Responsibilities:
    - Track the current room of every live connection
    - Track the members of every room
    - Keep both consistent under concurrent access
    """

    def __init__(self):
        self.registry = ConnectionRegistry()
        self.directory = RoomDirectory()
        self._lock = threading.Lock()

    def connect(self, connection_id: str):
        """Register a new connection with no room."""
        with self._lock:
            self.registry.add(connection_id)

    def current_room(self, connection_id: str) -> Optional[str]:
        """Return the connection's current room, or None."""
        with self._lock:
            return self.registry.get_room(connection_id)

    def is_connected(self, connection_id: str) -> bool:
        with self._lock:
            return self.registry.is_connected(connection_id)

    def room_members(self, room_id: str) -> List[str]:
        with self._lock:
            return self.directory.member_ids(room_id)

    def enter_room(self, connection_id: str, room_id: str) -> JoinResult:
        """
        Move a connection into a room.

        If the connection is already in a room (the same one included) it
        leaves that room first, then joins the new one.

        Args:
            connection_id: The joining connection
            room_id: The room to enter

        Returns:
            JoinResult describing both halves of the move
        """
        with self._lock:
            left = None
            previous = self.registry.get_room(connection_id)
            if previous is not None:
                left = self._leave_locked(connection_id, previous)

            self.directory.join(room_id, connection_id)
            self.registry.set_room(connection_id, room_id)
            members = self.directory.member_ids(room_id)

        return JoinResult(room_id=room_id, members=members, left=left)

    def leave_room(self, connection_id: str) -> Optional[LeaveResult]:
        """
        Take a connection out of its current room.

        Returns:
            LeaveResult, or None if the connection was not in a room
        """
        with self._lock:
            room_id = self.registry.get_room(connection_id)
            if room_id is None:
                return None
            result = self._leave_locked(connection_id, room_id)
            self.registry.set_room(connection_id, None)
        return result

    def disconnect(self, connection_id: str) -> Optional[LeaveResult]:
        """
        Remove a connection entirely, leaving its room first.

        Returns:
            LeaveResult, or None if the connection was not in a room
        """
        with self._lock:
            room_id = self.registry.remove(connection_id)
            if room_id is None:
                return None
            return self._leave_locked(connection_id, room_id)

    def _leave_locked(self, connection_id: str, room_id: str) -> LeaveResult:
        outcome = self.directory.leave(room_id, connection_id)
        if outcome == ROOM_DELETED:
            return LeaveResult(room_id=room_id, room_deleted=True)
        return LeaveResult(
            room_id=room_id, remaining=self.directory.member_ids(room_id)
        )

    def room_count(self) -> int:
        with self._lock:
            return self.directory.room_count()

    def connection_count(self) -> int:
        with self._lock:
            return self.registry.connection_count()

    def snapshot(self) -> List[Tuple[str, List[str]]]:
        """Return a consistent copy of every room and its members."""
        with self._lock:
            return self.directory.snapshot()

    def list_rooms(self) -> List[Dict[str, Any]]:
        with self._lock:
            return self.directory.list_rooms()
