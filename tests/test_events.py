import asyncio
import json
import threading

from taskboard.routers.stream import event_stream
from taskboard.services import events
from taskboard.services.events import EventBroker


def test_publish_reaches_global_and_task_subscribers():
    async def scenario():
        broker = EventBroker()
        everything = broker.subscribe()
        task_7 = broker.subscribe(task_id=7)
        task_8 = broker.subscribe(task_id=8)

        assert broker.publish(events.TASK_MOVED, 7, status="done") == 2
        first = await everything.get(timeout=1)
        assert first["type"] == "task.moved"
        assert first["task_id"] == 7
        assert first["data"] == {"status": "done"}
        assert (await task_7.get(timeout=1))["type"] == "task.moved"
        assert await task_8.get(timeout=0.05) is None

    asyncio.run(scenario())


def test_cancel_unsubscribes():
    async def scenario():
        broker = EventBroker()
        sub = broker.subscribe(task_id=3)
        assert broker.subscriber_count(3) == 1
        sub.cancel()
        sub.cancel()
        assert sub.closed
        assert broker.subscriber_count(3) == 0
        assert broker.publish(events.TASK_UPDATED, 3) == 0

    asyncio.run(scenario())


def test_publish_from_worker_thread():
    async def scenario():
        broker = EventBroker()
        sub = broker.subscribe()
        worker = threading.Thread(target=broker.publish, args=(events.TASK_CREATED, 1), kwargs={"title": "X"})
        worker.start()
        worker.join()
        message = await sub.get(timeout=1)
        assert message["data"] == {"title": "X"}

    asyncio.run(scenario())


def test_full_queue_drops_events():
    async def scenario():
        broker = EventBroker(maxsize=2)
        sub = broker.subscribe()
        for i in range(4):
            broker.publish(events.TASK_UPDATED, i)
        await asyncio.sleep(0)
        assert sub.dropped == 2
        assert (await sub.get(timeout=1))["task_id"] == 0
        assert (await sub.get(timeout=1))["task_id"] == 1

    asyncio.run(scenario())


def test_event_stream_sends_connected_heartbeat_and_events():
    async def scenario():
        broker = EventBroker()
        sub = broker.subscribe()
        stream = event_stream(sub, heartbeat=0.01)

        connected = await stream.__anext__()
        assert connected.startswith("data: ") and connected.endswith("\n\n")
        assert json.loads(connected[6:])["type"] == "connected"

        assert json.loads((await stream.__anext__())[6:])["type"] == "heartbeat"

        broker.publish(events.COMMENT_ADDED, 5, author="Dana")
        message = json.loads((await stream.__anext__())[6:])
        assert message["type"] == "comment.added"
        assert message["data"]["author"] == "Dana"

        await stream.aclose()
        assert sub.closed
        assert broker.subscriber_count() == 0

    asyncio.run(scenario())


def test_event_stream_stops_on_disconnect():
    async def scenario():
        broker = EventBroker()
        sub = broker.subscribe()

        async def gone():
            return True

        chunks = [chunk async for chunk in event_stream(sub, heartbeat=1, is_disconnected=gone)]
        assert len(chunks) == 1
        assert sub.closed

    asyncio.run(scenario())


def test_mutations_publish_events(client, make_task):
    async def scenario():
        sub = events.broker.subscribe()
        try:
            task = await asyncio.to_thread(make_task, title="Watched")
            await asyncio.to_thread(client.post, f"/tasks/{task['id']}/move", json={"status": "done"})
            await asyncio.to_thread(client.delete, f"/tasks/{task['id']}")
            received = [await sub.get(timeout=1) for _ in range(3)]
        finally:
            sub.cancel()
        assert [m["type"] for m in received] == ["task.created", "task.moved", "task.deleted"]
        assert all(m["task_id"] == task["id"] for m in received)

    asyncio.run(scenario())
