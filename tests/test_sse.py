# tests/test_sse.py
import json

import pytest

from core.broadcast import BroadcastHub
from core.errors import DeliveryFailure
from network.sse import SseConnection, format_event


class FakeRequest:
    def __init__(self, disconnected=False):
        self.disconnected = disconnected

    async def is_disconnected(self):
        return self.disconnected


async def drain(connection, request=None):
    return [event async for event in connection.events(request or FakeRequest())]


def test_format_event():
    payload = {"nodes": [{"id": 0, "label": "0"}], "edges": [], "numbers": {}}
    event = format_event(payload)
    assert event.startswith("data: ") and event.endswith("\n\n")
    assert json.loads(event[len("data: "):]) == payload


@pytest.mark.asyncio
async def test_stream_yields_setup_then_snapshots_until_closed():
    conn = SseConnection(maxsize=8)
    conn.setup()
    conn.send({"nodes": [], "edges": [], "numbers": {"n": 1}})
    conn.send({"nodes": [], "edges": [], "numbers": {"n": 2}})
    conn.close()

    events = await drain(conn)

    assert events[0] == ": connected\n\n"
    assert [json.loads(e[6:])["numbers"]["n"] for e in events[1:]] == [1, 2]
    assert conn.closed is True


@pytest.mark.asyncio
async def test_slow_observer_is_closed():
    conn = SseConnection(maxsize=2)
    conn.setup()
    conn.send({"n": 1})
    with pytest.raises(DeliveryFailure):
        conn.send({"n": 2})
    assert conn.closed is True
    with pytest.raises(DeliveryFailure):
        conn.send({"n": 3})
    assert await drain(conn) == []


@pytest.mark.asyncio
async def test_disconnected_client_ends_stream():
    conn = SseConnection()
    conn.setup()
    assert await drain(conn, FakeRequest(disconnected=True)) == []
    assert conn.closed is True


@pytest.mark.asyncio
async def test_hub_drops_overflowing_connection():
    hub = BroadcastHub(lambda: {"nodes": [], "edges": [], "numbers": {}})
    slow, fast = SseConnection(maxsize=2), SseConnection(maxsize=16)
    hub.subscribe(slow)
    hub.subscribe(fast)

    assert hub.publish_update() == 2
    assert hub.publish_update() == 1
    assert hub.subscribers == [fast]
