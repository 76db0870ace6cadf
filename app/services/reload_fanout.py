"""
Reload Fanout - pushes "reload" signals to every open display connection.

This service keeps the set of live push connections for display clients:
- register() when a client opens the event stream
- unregister() when the transport reports the client is gone
- broadcast() sends one JSON message to everyone and prunes dead clients

A connection is anything with an async send_json(message) method, so the
Server-Sent Events connection below and a Starlette WebSocket both work.

Broadcast iterates a snapshot of the set and removes failed connections only
after the pass, so the set is never mutated while it is being iterated.
Everything runs on the event loop thread; a multi-threaded host would need
a lock around register/unregister/broadcast.
"""

import asyncio
import logging
from datetime import datetime, timezone
from typing import Any, Optional, Protocol

logger = logging.getLogger("wallcal.services.reload_fanout")


class ConnectionClosedError(Exception):
    """Raised when writing to a push connection that can no longer accept data."""
    pass


class PushConnection(Protocol):
    async def send_json(self, message: dict[str, Any]) -> None:
        ...


class SSEConnection:
    """
    Server side of one Server-Sent Events client.

    Messages are queued here and drained by the streaming response. The
    queue is bounded: a client that stops reading fills it up, and the next
    write fails so the fanout drops it.
    """

    def __init__(self, max_pending: int = 16):
        self._queue: asyncio.Queue = asyncio.Queue(maxsize=max_pending)
        self._closed = False
        self.connected_at = datetime.now(timezone.utc)

    @property
    def closed(self) -> bool:
        return self._closed

    async def send_json(self, message: dict[str, Any]) -> None:
        if self._closed:
            raise ConnectionClosedError("Connection already closed")
        try:
            self._queue.put_nowait(message)
        except asyncio.QueueFull:
            raise ConnectionClosedError("Client is not draining its stream")

    async def next_message(self, timeout: Optional[float] = None) -> Optional[dict[str, Any]]:
        """
        Wait for the next queued message.

        Returns None when `timeout` seconds pass without one, which the stream
        turns into a keep-alive comment.
        """
        try:
            return await asyncio.wait_for(self._queue.get(), timeout=timeout)
        except asyncio.TimeoutError:
            return None

    def close(self) -> None:
        self._closed = True


class ReloadFanout:
    """
    Owns the set of open push connections.

    Example:
        fanout = ReloadFanout()
        fanout.register(connection)
        reached = await fanout.broadcast({"type": "reload"})
    """

    def __init__(self):
        self._connections: set[PushConnection] = set()

    def register(self, connection: PushConnection) -> None:
        self._connections.add(connection)
        logger.info(f"Display client connected. Total clients: {len(self._connections)}")

    def unregister(self, connection: PushConnection) -> None:
        """Remove a connection; unknown connections are ignored."""
        if connection in self._connections:
            self._connections.discard(connection)
            logger.info(f"Display client disconnected. Total clients: {len(self._connections)}")

    async def broadcast(self, message: dict[str, Any]) -> int:
        """
        Send `message` to every registered connection.

        Args:
            message: JSON-serialisable envelope with a "type" key

        Returns:
            Number of connections the message was written to
        """
        failed = []
        delivered = 0

        for connection in list(self._connections):
            try:
                await connection.send_json(message)
                delivered += 1
            except Exception as e:
                logger.warning(f"Dropping display client after failed write: {e}")
                failed.append(connection)

        for connection in failed:
            self._connections.discard(connection)

        logger.info(
            f"Broadcast {message.get('type', 'unknown')!r} to {delivered} clients "
            f"({len(failed)} pruned)"
        )
        return delivered

    async def broadcast_reload(self) -> int:
        return await self.broadcast({
            "type": "reload",
            "timestamp": datetime.now(timezone.utc).isoformat(),
        })

    @property
    def connection_count(self) -> int:
        return len(self._connections)


# ---------------------------------------------------------------------------
# SINGLETON INSTANCE
# ---------------------------------------------------------------------------
# Usage: from app.services.reload_fanout import reload_fanout
reload_fanout = ReloadFanout()
