"""Server-Sent Events feed of task changes.

The handler is a coroutine that awaits the broker, so an open stream holds
no worker thread. A heartbeat goes out whenever nothing has happened for
STREAM_HEARTBEAT_SECONDS.
"""
import json
import time
from typing import AsyncIterator, Callable, Optional

from fastapi import APIRouter, Request
from fastapi.responses import StreamingResponse

from taskboard import config
from taskboard.services.events import Subscription, broker

router = APIRouter(prefix="/stream", tags=["stream"])


def sse(message: dict) -> str:
    return f"data: {json.dumps(message)}\n\n"


async def event_stream(
    subscription: Subscription,
    heartbeat: float,
    is_disconnected: Optional[Callable] = None,
) -> AsyncIterator[str]:
    try:
        yield sse({"type": "connected", "timestamp": int(time.time())})
        while not subscription.closed:
            if is_disconnected is not None and await is_disconnected():
                break
            message = await subscription.get(timeout=heartbeat)
            if message is None:
                yield sse({"type": "heartbeat", "timestamp": int(time.time())})
            else:
                yield sse(message)
    finally:
        subscription.cancel()


@router.get("/updates")
async def stream_updates(request: Request, task_id: Optional[int] = None):
    subscription = broker.subscribe(task_id)
    return StreamingResponse(
        event_stream(subscription, config.STREAM_HEARTBEAT_SECONDS, request.is_disconnected),
        media_type="text/event-stream",
        headers={"Cache-Control": "no-cache", "Connection": "keep-alive"},
    )
