# network/sse.py
"""
Server-sent events transport for graph observers.

Each browser that opens /topn/updates gets one SseConnection. The hub
pushes snapshots into the connection's queue without blocking; the
streaming response drains the queue at whatever pace the client reads.
"""
from __future__ import annotations

import asyncio
import json
import logging
from typing import Any, AsyncIterator, Dict

from fastapi import Request

from config import SUBSCRIBER_QUEUE_SIZE
from core.errors import DeliveryFailure

logger = logging.getLogger(__name__)

# how often the stream checks for a client that went away silently
DISCONNECT_POLL_INTERVAL = 1.0

_CLOSED = object()


def format_event(payload: Dict[str, Any]) -> str:
    return f"data: {json.dumps(payload)}\n\n"


class SseConnection:
    """
    A Subscriber backed by a bounded asyncio.Queue.

    send() never waits: when the client has fallen `maxsize` events behind,
    the connection closes itself and raises DeliveryFailure so the hub
    drops it.
    """

    def __init__(self, maxsize: int = SUBSCRIBER_QUEUE_SIZE) -> None:
        self._queue: asyncio.Queue = asyncio.Queue(maxsize=maxsize)
        self.closed = False

    def setup(self) -> None:
        # an SSE comment line, opens the stream on the client side
        self._queue.put_nowait(": connected\n\n")

    def send(self, payload: Dict[str, Any]) -> None:
        if self.closed:
            raise DeliveryFailure("connection closed")
        try:
            self._queue.put_nowait(format_event(payload))
        except asyncio.QueueFull:
            self.close()
            raise DeliveryFailure("observer is too slow, queue full")

    def close(self) -> None:
        if self.closed:
            return
        self.closed = True
        if self._queue.full():
            # the client is not reading, what is queued will never be seen
            while not self._queue.empty():
                self._queue.get_nowait()
        self._queue.put_nowait(_CLOSED)

    async def events(self, request: Request) -> AsyncIterator[str]:
        """
        Yield encoded events until the client disconnects or the
        connection is closed.
        """
        while True:
            if await request.is_disconnected():
                break
            try:
                message = await asyncio.wait_for(
                    self._queue.get(), timeout=DISCONNECT_POLL_INTERVAL
                )
            except asyncio.TimeoutError:
                continue
            if message is _CLOSED:
                break
            yield message
        self.closed = True
