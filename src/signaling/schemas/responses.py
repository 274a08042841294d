"""
Response Schema Definitions

Contains functions for creating error frames and the payloads returned by
the introspection server.
"""

from typing import Any, Dict, List


def create_error_response(error_message: str) -> Dict[str, Any]:
    """
    Create an error frame for the requesting connection.

    Args:
        error_message: Error message text

    Returns:
        dict: Error frame
    """
    return {"type": "error", "data": {"message": error_message}}


def create_status_response(
    message: str, version: str, uptime: float, timestamp: str
) -> Dict[str, Any]:
    """
    Create the status payload.

    Args:
        message: Human readable server description
        version: Package version
        uptime: Seconds since the server started
        timestamp: ISO 8601 timestamp

    Returns:
        dict: Status payload
    """
    return {
        "message": message,
        "version": version,
        "uptime": uptime,
        "timestamp": timestamp,
    }


def create_health_response(
    room_count: int, connection_count: int, timestamp: str
) -> Dict[str, Any]:
    return {
        "status": "OK",
        "rooms": room_count,
        "connections": connection_count,
        "timestamp": timestamp,
    }


def create_rooms_response(rooms: List[Dict[str, Any]]) -> Dict[str, Any]:
    """
    Create the room listing payload.

    Args:
        rooms: Room dictionaries from RoomDirectory.list_rooms()

    Returns:
        dict: Listing with the total room count
    """
    return {"totalRooms": len(rooms), "rooms": rooms}
