"""WebSocket connection manager."""

from __future__ import annotations

import asyncio
import logging
from typing import List, Optional

from fastapi import WebSocket

from .events import WebSocketEvent

logger = logging.getLogger(__name__)


class ConnectionManager:
    """Manages WebSocket connections and broadcasts events."""

    def __init__(self) -> None:
        """Initialize connection manager."""
        self.active_connections: List[WebSocket] = []
        self._lock = asyncio.Lock()
        self._loop: Optional[asyncio.AbstractEventLoop] = None

    def attach_loop(self, loop: Optional[asyncio.AbstractEventLoop]) -> None:
        """Set the event loop that broadcasts from other threads are sent to.

        Args:
            loop: Running server loop, or None to detach on shutdown
        """
        self._loop = loop

    async def connect(self, websocket: WebSocket) -> None:
        """Accept and register a new WebSocket connection.

        Args:
            websocket: WebSocket connection to register
        """
        await websocket.accept()
        async with self._lock:
            self.active_connections.append(websocket)
        logger.info(
            "WebSocket client connected. Total connections: %d", len(self.active_connections)
        )

    async def disconnect(self, websocket: WebSocket) -> None:
        """Remove a WebSocket connection.

        Args:
            websocket: WebSocket connection to remove
        """
        async with self._lock:
            if websocket in self.active_connections:
                self.active_connections.remove(websocket)
        logger.info(
            "WebSocket client disconnected. Total connections: %d", len(self.active_connections)
        )

    async def send_event(self, event: WebSocketEvent, websocket: WebSocket) -> None:
        """Send an event to a specific connection.

        Args:
            event: Event to send
            websocket: Target WebSocket connection
        """
        try:
            await websocket.send_text(event.model_dump_json())
        except Exception as e:  # pylint: disable=broad-exception-caught
            logger.warning("Failed to send event: %s", e)
            await self.disconnect(websocket)

    async def broadcast(self, event: WebSocketEvent) -> None:
        """Broadcast an event to all connected clients.

        Args:
            event: Event to broadcast
        """
        if not self.active_connections:
            return

        message = event.model_dump_json()
        logger.debug(
            "Broadcasting event: %s to %d clients", event.type, len(self.active_connections)
        )

        # Create a copy of connections to iterate over
        async with self._lock:
            connections = self.active_connections.copy()

        # Send to all connections, removing any that fail
        disconnected = []
        for connection in connections:
            try:
                await connection.send_text(message)
            except Exception as e:  # pylint: disable=broad-exception-caught
                logger.warning("Failed to send to WebSocket client: %s", e)
                disconnected.append(connection)

        # Remove disconnected clients
        if disconnected:
            async with self._lock:
                for connection in disconnected:
                    if connection in self.active_connections:
                        self.active_connections.remove(connection)
            logger.info("Removed %d disconnected clients", len(disconnected))

    def broadcast_threadsafe(self, event: WebSocketEvent) -> None:
        """Broadcast an event from any thread (e.g. a monitor callback).

        The broadcast is scheduled on the attached server loop and this call
        returns without waiting for it.

        Args:
            event: Event to broadcast
        """
        loop = self._loop
        if loop is None or loop.is_closed():
            logger.debug("Cannot broadcast %s: no event loop attached", event.type)
            return

        try:
            asyncio.run_coroutine_threadsafe(self.broadcast(event), loop)
        except RuntimeError as e:
            # Loop shut down between the check and the call
            logger.warning("Cannot broadcast event: %s", e)

    @property
    def connection_count(self) -> int:
        """Get the number of active connections.

        Returns:
            Number of active WebSocket connections
        """
        return len(self.active_connections)
