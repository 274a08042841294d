#!/usr/bin/env python3
"""
Signaling Relay Server

WebRTC signaling relay: room membership plus offer/answer/candidate and
chat message routing over WebSockets.
"""

import asyncio
import logging
import os
import sys

from .router import MessageRouter
from .state import RelayState
from .websocket_server import WebSocketServer
from .xmlrpc_server import XMLRPCServer

logger = logging.getLogger(__name__)


def configure_logging(level: str = "INFO"):
    """Configure root logging for the relay process."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


async def run_server(
    ws_host: str,
    ws_port: int,
    xmlrpc_host: str,
    xmlrpc_port: int,
):
    """
    Run the relay with its WebSocket and optional XML-RPC servers.

    Args:
        ws_host: WebSocket host address to bind to
        ws_port: WebSocket port to listen on
        xmlrpc_host: XML-RPC host address to bind to
        xmlrpc_port: XML-RPC port to listen on, 0 to disable introspection
    """
    state = RelayState()
    router = MessageRouter(state)

    xmlrpc_server = None
    if xmlrpc_port:
        xmlrpc_server = XMLRPCServer(state, xmlrpc_host, xmlrpc_port)
        xmlrpc_server.start()

    ws_server = WebSocketServer(router, ws_host, ws_port)
    await ws_server.start()

    logger.info(f"Signaling server listening on ws://{ws_host}:{ws_port}")
    if xmlrpc_server:
        logger.info(
            f"Introspection available at http://{xmlrpc_host}:{xmlrpc_port}"
        )

    try:
        await asyncio.Event().wait()
    except asyncio.CancelledError:
        logger.info("Server shutdown requested")
    finally:
        await ws_server.stop()
        if xmlrpc_server:
            xmlrpc_server.stop()
        logger.info("Signaling server stopped")


def main():
    """Main entry point for the signaling relay."""
    configure_logging(os.environ.get("LOG_LEVEL", "INFO"))

    ws_host = os.environ.get("WEBSOCKET_HOST", "0.0.0.0")
    ws_port = int(os.environ.get("PORT", "3000"))

    xmlrpc_host = os.environ.get("XMLRPC_HOST", "0.0.0.0")
    xmlrpc_port = int(os.environ.get("XMLRPC_PORT", "3001"))

    logger.info("Starting signaling relay...")
    logger.info(f"Environment: {os.environ.get('ENVIRONMENT', 'development')}")

    try:
        asyncio.run(run_server(ws_host, ws_port, xmlrpc_host, xmlrpc_port))
    except KeyboardInterrupt:
        logger.info("Shutting down signaling relay...")
        sys.exit(0)


if __name__ == "__main__":
    main()
