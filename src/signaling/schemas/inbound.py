"""
Inbound Event Definitions

Client frames are JSON objects of the form {"type": ..., "data": ...}.
parse_event() turns one frame into one of the event dataclasses below.
Negotiation payloads and chat text are kept as-is and never inspected.
"""

import json
from dataclasses import dataclass
from typing import Any, Optional, Union

from ..errors import InvalidMessage

# Relay event type -> key holding the opaque payload
RELAY_KINDS = {
    "offer": "offer",
    "answer": "answer",
    "ice-candidate": "candidate",
}


@dataclass
class JoinRoom:
    """Request to enter a room. room_id is validated by the router."""

    room_id: Any


@dataclass
class LeaveRoom:
    """Request to leave the current room."""


@dataclass
class Relay:
    """
    A negotiation message for exactly one other connection.

    Attributes:
        kind: One of the RELAY_KINDS event types
        to: Target connection id as supplied by the client
        payload: Opaque negotiation data
    """

    kind: str
    to: Any
    payload: Any

    @property
    def payload_key(self) -> str:
        return RELAY_KINDS[self.kind]


@dataclass
class SendMessage:
    """Chat text for every member of the sender's room."""

    message: Any


@dataclass
class Disconnect:
    """The transport closed the connection."""

    reason: Optional[str] = None


InboundEvent = Union[JoinRoom, LeaveRoom, Relay, SendMessage, Disconnect]


def parse_event(frame: Union[str, bytes]) -> InboundEvent:
    """
    Decode a client frame into an inbound event.

    Args:
        frame: The raw WebSocket message

    Returns:
        The decoded event

    Raises:
        InvalidMessage: If the frame is not a JSON object of a known type
    """
    try:
        message = json.loads(frame)
    except (json.JSONDecodeError, UnicodeDecodeError):
        raise InvalidMessage("Invalid JSON format")

    if not isinstance(message, dict):
        raise InvalidMessage("Message must be a JSON object")

    msg_type = message.get("type")
    data = message.get("data")

    if not isinstance(msg_type, str):
        raise InvalidMessage(f"Unknown message type: {msg_type!r}")

    if msg_type == "join-room":
        return JoinRoom(room_id=data)
    if msg_type == "leave-room":
        return LeaveRoom()
    if msg_type in RELAY_KINDS:
        fields = data if isinstance(data, dict) else {}
        return Relay(
            kind=msg_type,
            to=fields.get("to"),
            payload=fields.get(RELAY_KINDS[msg_type]),
        )
    if msg_type == "send-message":
        fields = data if isinstance(data, dict) else {}
        return SendMessage(message=fields.get("message"))

    raise InvalidMessage(f"Unknown message type: {msg_type}")
