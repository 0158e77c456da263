"""In-process publish/subscribe for task change notifications.

Route handlers that mutate data are plain ``def`` functions and run in
FastAPI's threadpool, while stream consumers are coroutines on the event
loop. A subscription therefore remembers the loop it was created on and
``publish`` hands messages over with ``call_soon_threadsafe``, which is
safe from either side.
"""
import asyncio
import threading
import time
from typing import Dict, Optional, Set

import structlog

from taskboard.config import STREAM_QUEUE_SIZE

logger = structlog.get_logger(__name__)

TASK_CREATED = "task.created"
TASK_UPDATED = "task.updated"
TASK_DELETED = "task.deleted"
TASK_MOVED = "task.moved"
SUBTASK_UPDATED = "subtask.updated"
SUBTASK_DELETED = "subtask.deleted"
COMMENT_ADDED = "comment.added"


class Subscription:
    """A cancellable feed of events, either global or for one task."""

    def __init__(self, broker: "EventBroker", task_id: Optional[int], maxsize: int):
        self.task_id = task_id
        self.dropped = 0
        self._broker = broker
        self._loop = asyncio.get_running_loop()
        self._queue: asyncio.Queue = asyncio.Queue(maxsize=maxsize)
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    async def get(self, timeout: Optional[float] = None) -> Optional[dict]:
        """Next event, or None if nothing arrived within ``timeout`` seconds."""
        try:
            return await asyncio.wait_for(self._queue.get(), timeout)
        except asyncio.TimeoutError:
            return None

    def cancel(self) -> None:
        if not self._closed:
            self._closed = True
            self._broker.unsubscribe(self)

    def _offer(self, message: dict) -> None:
        if self._closed:
            return
        try:
            self._loop.call_soon_threadsafe(self._put, message)
        except RuntimeError:
            # loop already closed; the consumer is gone
            self.cancel()

    def _put(self, message: dict) -> None:
        try:
            self._queue.put_nowait(message)
        except asyncio.QueueFull:
            self.dropped += 1
            logger.warning("stream_event_dropped", task_id=self.task_id, event=message.get("type"))


class EventBroker:
    def __init__(self, maxsize: int = STREAM_QUEUE_SIZE):
        self._maxsize = maxsize
        self._lock = threading.Lock()
        self._global: Set[Subscription] = set()
        self._by_task: Dict[int, Set[Subscription]] = {}

    def subscribe(self, task_id: Optional[int] = None) -> Subscription:
        """Must be called from inside a running event loop."""
        sub = Subscription(self, task_id, self._maxsize)
        with self._lock:
            if task_id is None:
                self._global.add(sub)
            else:
                self._by_task.setdefault(task_id, set()).add(sub)
        logger.debug("stream_subscribed", task_id=task_id)
        return sub

    def unsubscribe(self, sub: Subscription) -> None:
        with self._lock:
            if sub.task_id is None:
                self._global.discard(sub)
            elif sub.task_id in self._by_task:
                self._by_task[sub.task_id].discard(sub)
                if not self._by_task[sub.task_id]:
                    del self._by_task[sub.task_id]
        logger.debug("stream_unsubscribed", task_id=sub.task_id)

    def subscriber_count(self, task_id: Optional[int] = None) -> int:
        with self._lock:
            if task_id is None:
                return len(self._global)
            return len(self._by_task.get(task_id, ()))

    def publish(self, event_type: str, task_id: Optional[int] = None, **data) -> int:
        """Deliver an event to global subscribers and to watchers of ``task_id``.

        Returns the number of subscriptions the event was handed to.
        """
        message = {"type": event_type, "task_id": task_id, "timestamp": int(time.time()), "data": data}
        with self._lock:
            targets = list(self._global)
            if task_id is not None:
                targets.extend(self._by_task.get(task_id, ()))
        for sub in targets:
            sub._offer(message)
        return len(targets)


broker = EventBroker()
