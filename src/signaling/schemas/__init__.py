"""
Schemas for the Signaling Relay

This module contains the inbound event types decoded from client frames and
the builders for every outbound frame the relay sends.
"""

from .inbound import (
    InboundEvent,
    JoinRoom,
    LeaveRoom,
    Relay,
    SendMessage,
    Disconnect,
    RELAY_KINDS,
    parse_event,
)
from .events import (
    create_welcome_event,
    create_room_joined_event,
    create_room_left_event,
    create_user_joined_event,
    create_user_left_event,
    create_user_count_event,
    create_relay_event,
    create_new_message_event,
)
from .responses import (
    create_error_response,
    create_status_response,
    create_health_response,
    create_rooms_response,
)

__all__ = [
    "InboundEvent",
    "JoinRoom",
    "LeaveRoom",
    "Relay",
    "SendMessage",
    "Disconnect",
    "RELAY_KINDS",
    "parse_event",
    "create_welcome_event",
    "create_room_joined_event",
    "create_room_left_event",
    "create_user_joined_event",
    "create_user_left_event",
    "create_user_count_event",
    "create_relay_event",
    "create_new_message_event",
    "create_error_response",
    "create_status_response",
    "create_health_response",
    "create_rooms_response",
]
