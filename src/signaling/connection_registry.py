"""
Connection Registry

Tracks the live connections of this relay and the room each one is in.
"""

import logging
from typing import Dict, Optional

logger = logging.getLogger(__name__)


class ConnectionRegistry:
    """
    Maps each live connection to its current room.

    The registry is a plain reference store: it does not check that a room
    exists. Keeping it consistent with the room directory is the job of
    RelayState, which mutates both under one lock.
    """

    def __init__(self):
        """Initialize an empty registry."""
        self._rooms: Dict[str, Optional[str]] = {}  # connection_id -> room_id

    def add(self, connection_id: str):
        """
        Register a newly established connection with no room.

        Args:
            connection_id: Identifier assigned by the transport
        """
        self._rooms.setdefault(connection_id, None)
        logger.debug(f"Registered connection {connection_id}")

    def set_room(
        self, connection_id: str, room_id: Optional[str]
    ) -> Optional[str]:
        """
        Record the connection's current room.

        Args:
            connection_id: The connection to update
            room_id: The new room, or None to clear it

        Returns:
            The room the connection was in before, or None
        """
        previous = self._rooms.get(connection_id)
        self._rooms[connection_id] = room_id
        return previous

    def get_room(self, connection_id: str) -> Optional[str]:
        """
        Get the room a connection is currently in.

        Args:
            connection_id: The connection to look up

        Returns:
            The room id, or None if unjoined or unknown
        """
        return self._rooms.get(connection_id)

    def remove(self, connection_id: str) -> Optional[str]:
        """
        Forget a connection. Unknown ids are ignored.

        Args:
            connection_id: The connection to remove

        Returns:
            The room the connection was in, or None
        """
        return self._rooms.pop(connection_id, None)

    def is_connected(self, connection_id: str) -> bool:
        """Return True if the connection is registered."""
        return connection_id in self._rooms

    def connection_count(self) -> int:
        """Return the number of registered connections."""
        return len(self._rooms)
