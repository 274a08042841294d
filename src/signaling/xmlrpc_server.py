"""
XML-RPC Introspection Server

Exposes read-only snapshots of relay state (status, health, room listing)
to operators and monitoring tools.
"""

import logging
import time
from datetime import datetime, timezone
from threading import Thread
from typing import Dict
from xmlrpc.server import SimpleXMLRPCServer

from . import __version__
from .schemas import (
    create_health_response,
    create_rooms_response,
    create_status_response,
)
from .state import RelayState

logger = logging.getLogger(__name__)

STATUS_MESSAGE = "Signaling server is running"


class XMLRPCServer:
    """
    XML-RPC server for introspection queries.

    Runs in a background thread and only reads relay state through
    RelayState's locked snapshot methods.
    """

    def __init__(self, state: RelayState, host: str, port: int):
        """
        Initialize the XML-RPC server.

        Args:
            state: The shared relay state
            host: Host address to bind to
            port: Port to listen on
        """
        self.state = state
        self.host = host
        self.port = port
        self.started_at = time.monotonic()
        self.server = None
        self.server_thread = None

    def start(self):
        """Start the XML-RPC server in a background thread."""
        self.server = SimpleXMLRPCServer(
            (self.host, self.port),
            allow_none=True,
            logRequests=False,
        )

        self.server.register_function(self.status, "status")
        self.server.register_function(self.health, "health")
        self.server.register_function(self.list_rooms, "list_rooms")

        logger.info(f"XML-RPC server starting on {self.host}:{self.port}")

        self.server_thread = Thread(target=self._run_server, daemon=True)
        self.server_thread.start()

    def _run_server(self):
        """Run the XML-RPC server (called in background thread)."""
        self.server.serve_forever()

    def stop(self):
        """Stop the XML-RPC server."""
        if self.server:
            logger.info("Stopping XML-RPC server")
            self.server.shutdown()
            self.server.server_close()
            if self.server_thread:
                self.server_thread.join(timeout=2)
            logger.info("XML-RPC server stopped")

    def status(self) -> Dict:
        """
        Report that the relay is running.

        Returns:
            dict: {'message', 'version', 'uptime', 'timestamp'}
        """
        return create_status_response(
            STATUS_MESSAGE,
            __version__,
            round(time.monotonic() - self.started_at, 3),
            datetime.now(timezone.utc).isoformat(),
        )

    def health(self) -> Dict:
        """
        Report relay health.

        Returns:
            dict: {'status': 'OK', 'rooms', 'connections', 'timestamp'}
        """
        return create_health_response(
            self.state.room_count(),
            self.state.connection_count(),
            datetime.now(timezone.utc).isoformat(),
        )

    def list_rooms(self) -> Dict:
        """
        List every room with its members.

        Returns:
            dict: {'totalRooms': int, 'rooms': [{'roomId', 'userCount',
            'users'}, ...]}
        """
        rooms = self.state.list_rooms()
        logger.debug(f"XML-RPC: Returning {len(rooms)} rooms")
        return create_rooms_response(rooms)
