"""
WebSocket Server for the Signaling Relay

Accepts client connections, decodes their frames into events for the
message router, and delivers the router's output.
"""

import asyncio
import logging
import uuid
from typing import Dict, List, Optional

import websockets
from websockets.asyncio.server import ServerConnection, serve

from .errors import InvalidMessage
from .router import Delivery, MessageRouter
from .schemas import Disconnect, parse_event
from .utils import deliver

logger = logging.getLogger(__name__)


class WebSocketServer:
    """
    WebSocket server for handling client connections.

    Each connection gets an opaque id on accept. Frames from one connection
    are handled strictly one after another; different connections are
    handled concurrently by the event loop.
    """

    def __init__(self, router: MessageRouter, host: str, port: int):
        """
        Initialize the WebSocket server.

        Args:
            router: The message router
            host: Host address to bind to
            port: Port to listen on
        """
        self.router = router
        self.host = host
        self.port = port
        self.server = None
        # Maps connection_id -> live WebSocket connection
        self.connections: Dict[str, ServerConnection] = {}
        # Batches are sent whole and in the order the state changed
        self._send_lock = asyncio.Lock()

    async def start(self):
        """Start the WebSocket server."""
        self.server = await serve(self.handle_client, self.host, self.port)
        logger.info(f"WebSocket server started on ws://{self.host}:{self.port}")

    async def stop(self):
        """Stop the WebSocket server."""
        if self.server:
            self.server.close()
            await self.server.wait_closed()
            logger.info("WebSocket server stopped")

    async def handle_client(self, websocket: ServerConnection):
        """
        Handle a client connection from accept to close.

        Args:
            websocket: The WebSocket connection
        """
        connection_id = uuid.uuid4().hex
        self.connections[connection_id] = websocket
        greeting = self.router.handle_connect(connection_id)

        try:
            await self.send(greeting)
            async for message in websocket:
                await self.process_message(connection_id, message)
        except websockets.exceptions.ConnectionClosed:
            logger.info(f"Connection {connection_id} closed abnormally")
        except Exception as e:
            logger.error(f"Error handling connection {connection_id}: {e}")
        finally:
            await self.handle_disconnect(
                connection_id, self._close_reason(websocket)
            )

    async def process_message(self, connection_id: str, message):
        """
        Process one frame from a client.

        Args:
            connection_id: The sending connection
            message: The raw frame (JSON)
        """
        try:
            event = parse_event(message)
        except InvalidMessage as e:
            logger.warning(f"Invalid frame from {connection_id}: {e.message}")
            await self.send([self.router.error(connection_id, e.message)])
            return
        except Exception as e:
            logger.error(f"Error decoding frame from {connection_id}: {e!r}")
            await self.send(
                [self.router.error(connection_id, "Internal server error")]
            )
            return

        try:
            deliveries = self.router.dispatch(connection_id, event)
        except Exception as e:
            logger.error(f"Error processing {type(event).__name__}: {e}")
            deliveries = [
                self.router.error(connection_id, "Internal server error")
            ]

        await self.send(deliveries)

    async def handle_disconnect(
        self, connection_id: str, reason: Optional[str] = None
    ):
        """
        Clean up after a closed connection and notify its room.

        Args:
            connection_id: The closed connection
            reason: Close reason reported by the transport
        """
        deliveries = self.router.dispatch(connection_id, Disconnect(reason))
        self.connections.pop(connection_id, None)
        await self.send(deliveries)

    async def send(self, deliveries: List[Delivery]) -> int:
        """Deliver router output to the live connections."""
        async with self._send_lock:
            return await deliver(self.connections, deliveries)

    @staticmethod
    def _close_reason(websocket) -> str:
        code = getattr(websocket, "close_code", None)
        reason = getattr(websocket, "close_reason", None)
        if reason:
            return reason
        if code is None or code == 1006:
            return "transport close"
        return f"close code {code}"
