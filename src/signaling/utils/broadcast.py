"""
Delivery Utilities

Contains utility functions for sending router output to live connections.
"""

import json
import logging
from typing import Any, Dict, Iterable, Mapping

import websockets

logger = logging.getLogger(__name__)


async def send_json(websocket, message: Dict[str, Any]) -> bool:
    """
    Send one frame to one connection.

    Args:
        websocket: The WebSocket connection
        message: The frame to serialize and send

    Returns:
        bool: True if sent, False if the connection was already closed
    """
    try:
        await websocket.send(json.dumps(message))
        return True
    except websockets.exceptions.ConnectionClosed:
        return False


async def deliver(connections: Mapping[str, Any], deliveries: Iterable) -> int:
    """
    Send router deliveries to their recipients in order.

    Recipients that are no longer connected are skipped.

    Args:
        connections: Map of connection_id -> WebSocket connection
        deliveries: Delivery objects from the router

    Returns:
        int: Number of frames actually sent
    """
    sent = 0
    for delivery in deliveries:
        websocket = connections.get(delivery.connection_id)
        if websocket is None:
            logger.debug(
                f"Dropping {delivery.message.get('type')} for "
                f"unknown connection {delivery.connection_id}"
            )
            continue
        if await send_json(websocket, delivery.message):
            sent += 1
        else:
            logger.debug(
                f"Connection {delivery.connection_id} closed before "
                f"{delivery.message.get('type')} could be sent"
            )
    return sent
