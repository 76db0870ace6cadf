"""
Tests for the live-reload fanout.

These tests verify:
- Connection registration and removal
- Broadcast counts and pruning of failed connections
- The queue-backed SSE connection
"""

import pytest
from unittest.mock import AsyncMock

from app.services.reload_fanout import (
    ConnectionClosedError,
    ReloadFanout,
    SSEConnection,
)


def _failing_connection():
    connection = AsyncMock()
    connection.send_json.side_effect = ConnectionClosedError("gone")
    return connection


class TestRegistration:
    """Tests for register/unregister."""

    def test_register_counts_connection(self):
        fanout = ReloadFanout()
        fanout.register(AsyncMock())
        fanout.register(AsyncMock())

        assert fanout.connection_count == 2

    def test_register_same_connection_twice(self):
        fanout = ReloadFanout()
        connection = AsyncMock()
        fanout.register(connection)
        fanout.register(connection)

        assert fanout.connection_count == 1

    def test_unregister_removes_connection(self):
        fanout = ReloadFanout()
        connection = AsyncMock()
        fanout.register(connection)

        fanout.unregister(connection)

        assert fanout.connection_count == 0

    def test_unregister_unknown_connection(self):
        """Should handle removing a connection that was never registered."""
        fanout = ReloadFanout()

        fanout.unregister(AsyncMock())

        assert fanout.connection_count == 0


class TestBroadcast:
    """Tests for broadcast delivery."""

    @pytest.mark.asyncio
    async def test_broadcast_to_all(self):
        fanout = ReloadFanout()
        connections = [AsyncMock() for _ in range(3)]
        for connection in connections:
            fanout.register(connection)

        delivered = await fanout.broadcast({"type": "reload"})

        assert delivered == 3
        for connection in connections:
            connection.send_json.assert_awaited_once_with({"type": "reload"})

    @pytest.mark.asyncio
    async def test_failed_connection_is_pruned(self):
        """One failing write out of three: two delivered, failing one dropped."""
        fanout = ReloadFanout()
        healthy = [AsyncMock(), AsyncMock()]
        broken = _failing_connection()
        for connection in healthy + [broken]:
            fanout.register(connection)

        delivered = await fanout.broadcast_reload()

        assert delivered == 2
        assert fanout.connection_count == 2

        await fanout.broadcast_reload()

        assert broken.send_json.await_count == 1
        for connection in healthy:
            assert connection.send_json.await_count == 2

    @pytest.mark.asyncio
    async def test_broadcast_with_no_connections(self):
        assert await ReloadFanout().broadcast({"type": "reload"}) == 0

    @pytest.mark.asyncio
    async def test_reload_message_shape(self):
        fanout = ReloadFanout()
        connection = AsyncMock()
        fanout.register(connection)

        await fanout.broadcast_reload()

        message = connection.send_json.await_args.args[0]
        assert message["type"] == "reload"
        assert "timestamp" in message

    @pytest.mark.asyncio
    async def test_unregister_during_broadcast_is_safe(self):
        """A connection that unregisters another mid-broadcast does not break iteration."""
        fanout = ReloadFanout()
        second = AsyncMock()
        first = AsyncMock()
        first.send_json.side_effect = lambda message: fanout.unregister(second)
        fanout.register(first)
        fanout.register(second)

        await fanout.broadcast({"type": "reload"})

        assert fanout.connection_count == 1


class TestSSEConnection:
    """Tests for the queue-backed connection."""

    @pytest.mark.asyncio
    async def test_send_then_receive(self):
        connection = SSEConnection()

        await connection.send_json({"type": "reload"})

        assert await connection.next_message(timeout=1) == {"type": "reload"}

    @pytest.mark.asyncio
    async def test_timeout_returns_none(self):
        assert await SSEConnection().next_message(timeout=0.01) is None

    @pytest.mark.asyncio
    async def test_closed_connection_rejects_writes(self):
        connection = SSEConnection()
        connection.close()

        with pytest.raises(ConnectionClosedError):
            await connection.send_json({"type": "reload"})

    @pytest.mark.asyncio
    async def test_full_queue_rejects_writes(self):
        connection = SSEConnection(max_pending=1)
        await connection.send_json({"type": "reload"})

        with pytest.raises(ConnectionClosedError):
            await connection.send_json({"type": "reload"})

    @pytest.mark.asyncio
    async def test_stalled_client_is_pruned(self):
        fanout = ReloadFanout()
        connection = SSEConnection(max_pending=1)
        fanout.register(connection)

        assert await fanout.broadcast_reload() == 1
        assert await fanout.broadcast_reload() == 0
        assert fanout.connection_count == 0
