"""
Event Schema Definitions

Contains functions for creating the outbound frames the relay sends to
clients: room membership notifications, relayed negotiation messages and
chat messages.
"""

from typing import Any, Dict

WELCOME_MESSAGE = "Connected to signaling server"


def create_welcome_event(connection_id: str) -> Dict[str, Any]:
    """
    Create the welcome frame sent to a newly accepted connection.

    Args:
        connection_id: The id assigned to the connection

    Returns:
        dict: Event frame
    """
    return {
        "type": "welcome",
        "data": {"message": WELCOME_MESSAGE, "yourId": connection_id},
    }


def create_room_joined_event(room_id: str, user_count: int) -> Dict[str, Any]:
    """
    Create the room-joined confirmation for the joining connection.

    Args:
        room_id: The room that was joined
        user_count: Member count after the join

    Returns:
        dict: Event frame
    """
    return {
        "type": "room-joined",
        "data": {"roomId": room_id, "userCount": user_count},
    }


def create_room_left_event(room_id: str) -> Dict[str, Any]:
    """Create the room-left confirmation for the leaving connection."""
    return {"type": "room-left", "data": {"roomId": room_id}}


def create_user_joined_event(connection_id: str) -> Dict[str, Any]:
    return {"type": "user-joined", "data": connection_id}


def create_user_left_event(connection_id: str) -> Dict[str, Any]:
    return {"type": "user-left", "data": connection_id}


def create_user_count_event(user_count: int) -> Dict[str, Any]:
    return {"type": "user-count", "data": user_count}


def create_relay_event(
    kind: str,
    payload_key: str,
    payload: Any,
    sender_id: str,
) -> Dict[str, Any]:
    """
    Create a relayed offer, answer or ice-candidate frame.

    Args:
        kind: Event type (offer, answer, ice-candidate)
        payload_key: Key the payload is stored under
        payload: Opaque negotiation data, forwarded unchanged
        sender_id: Connection id of the sender

    Returns:
        dict: Event frame
    """
    return {
        "type": kind,
        "data": {payload_key: payload, "from": sender_id},
    }


def create_new_message_event(
    sender_id: str,
    message: Any,
    timestamp: str,
) -> Dict[str, Any]:
    """
    Create a new-message broadcast.

    Args:
        sender_id: Connection id of the sender
        message: Chat text as sent by the client
        timestamp: ISO 8601 timestamp

    Returns:
        dict: Broadcast frame
    """
    return {
        "type": "new-message",
        "data": {
            "from": sender_id,
            "message": message,
            "timestamp": timestamp,
        },
    }
