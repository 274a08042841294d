"""
Signaling Relay Package

This package provides a WebRTC signaling relay: clients join named rooms
and exchange offers, answers, ICE candidates and chat messages through a
WebSocket server.
"""

__version__ = "1.0.0"

from .connection_registry import ConnectionRegistry
from .room_directory import ROOM_DELETED, Room, RoomDirectory
from .state import JoinResult, LeaveResult, RelayState
from .errors import InvalidMessage, InvalidRoomId, NotInRoom, RelayError
from .router import Delivery, MessageRouter
from .websocket_server import WebSocketServer
from .xmlrpc_server import XMLRPCServer

__all__ = [
    "__version__",
    "ConnectionRegistry",
    "ROOM_DELETED",
    "Room",
    "RoomDirectory",
    "JoinResult",
    "LeaveResult",
    "RelayState",
    "InvalidMessage",
    "InvalidRoomId",
    "NotInRoom",
    "RelayError",
    "Delivery",
    "MessageRouter",
    "WebSocketServer",
    "XMLRPCServer",
]
