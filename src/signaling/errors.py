"""
Relay Errors

Errors raised while handling a client event. All of them are reported back
to the requesting connection only and never change relay state.
"""

from typing import Optional


class RelayError(Exception):
    """Base class for errors reported to the requesting client."""

    default_message = "Request rejected"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class InvalidRoomId(RelayError):
    """Raised when join-room is given an empty or non-string room id."""

    default_message = "Invalid room ID"


class NotInRoom(RelayError):
    """Raised when a room-scoped event arrives before joining a room."""

    default_message = "Please join a room first"


class InvalidMessage(RelayError):
    """Raised when a frame cannot be decoded into a known event."""

    default_message = "Invalid message format"
