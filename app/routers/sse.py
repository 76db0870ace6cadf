"""
SSE router - live-reload channel for display clients.

Each display keeps GET /api/sse/events open. The stream carries:
- a first frame with the browser's reconnect delay and {"type": "connected"}
- {"type": "reload", "timestamp": ...} whenever the server asks displays
  to reload
- ": keep-alive" comment lines while idle, so proxies keep the connection

Message format (one JSON object per "data:" line):
    retry: 5000
    data: {"type": "connected"}

    data: {"type": "reload", "timestamp": "2024-06-10T00:00:00+00:00"}
"""

import json
from typing import Any, AsyncIterator, Awaitable, Callable, Dict

from fastapi import APIRouter, Depends, Request
from fastapi.responses import StreamingResponse

from app.core.config import settings
from app.deps import get_fanout
from app.services.reload_fanout import ReloadFanout, SSEConnection


# ---------------------------------------------------------------------------
# ROUTER SETUP
# ---------------------------------------------------------------------------
router = APIRouter(prefix="/api/sse", tags=["sse"])

KEEP_ALIVE_FRAME = ": keep-alive\n\n"


def format_event(message: Dict[str, Any]) -> str:
    return f"data: {json.dumps(message, ensure_ascii=False)}\n\n"


async def event_stream(
    connection: SSEConnection,
    fanout: ReloadFanout,
    is_disconnected: Callable[[], Awaitable[bool]],
    keepalive_seconds: float,
    retry_ms: int,
) -> AsyncIterator[str]:
    """
    Yield SSE frames for one client until it disconnects.

    The connection is registered before the first frame and always
    unregistered on exit, including when the response task is cancelled.
    """
    fanout.register(connection)
    try:
        yield f"retry: {retry_ms}\n" + format_event({"type": "connected"})

        while not await is_disconnected():
            message = await connection.next_message(timeout=keepalive_seconds)
            if message is None:
                yield KEEP_ALIVE_FRAME
                continue
            yield format_event(message)
    finally:
        connection.close()
        fanout.unregister(connection)


@router.get("/events")
async def sse_events(
    request: Request,
    fanout: ReloadFanout = Depends(get_fanout),
):
    """Open the live-reload event stream."""
    connection = SSEConnection()

    return StreamingResponse(
        event_stream(
            connection,
            fanout,
            request.is_disconnected,
            keepalive_seconds=settings.SSE_KEEPALIVE_SECONDS,
            retry_ms=settings.SSE_RECONNECT_MS,
        ),
        media_type="text/event-stream",
        headers={
            "Cache-Control": "no-cache",
            "Connection": "keep-alive",
            "X-Accel-Buffering": "no",
        },
    )
