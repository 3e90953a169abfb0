# core/broadcast.py
from __future__ import annotations

import asyncio
import logging
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Protocol

from config import HEARTBEAT_INTERVAL

logger = logging.getLogger(__name__)

Snapshot = Dict[str, Any]


class SubscriberState(str, Enum):
    CONNECTING = "connecting"
    ACTIVE = "active"
    CLOSED = "closed"


class Subscriber(Protocol):
    """
    Anything that can receive pushed snapshots.
    """

    def setup(self) -> None:
        ...

    def send(self, payload: Snapshot) -> None:
        ...


class BroadcastHub:
    """
    Fans the current graph snapshot out to every connected observer.

    - snapshot: called on every publish to build the payload, so the hub
      never holds on to node or transaction data itself.
    - Observers are sent to in the order they subscribed.
    - An observer whose send() raises is closed and dropped; the others
      still get the snapshot.
    """

    def __init__(self, snapshot: Callable[[], Snapshot]) -> None:
        self._snapshot = snapshot
        # keyed by id() so equal-comparing or unhashable observers stay distinct
        self._subscribers: Dict[int, Subscriber] = {}
        self._states: Dict[int, SubscriberState] = {}
        self._heartbeat: Optional[asyncio.Task] = None

    def __len__(self) -> int:
        return len(self._subscribers)

    @property
    def subscribers(self) -> List[Subscriber]:
        return list(self._subscribers.values())

    def state_of(self, subscriber: Subscriber) -> SubscriberState:
        return self._states.get(id(subscriber), SubscriberState.CLOSED)

    # subscriber lifecycle

    def subscribe(self, subscriber: Subscriber) -> None:
        """
        Register an observer and run its one-time setup.
        If setup raises, the observer is dropped and the error propagates.
        """
        key = id(subscriber)
        self._subscribers[key] = subscriber
        self._states[key] = SubscriberState.CONNECTING
        try:
            subscriber.setup()
        except Exception:
            self._subscribers.pop(key, None)
            self._states.pop(key, None)
            raise
        self._states[key] = SubscriberState.ACTIVE
        logger.info("Observer subscribed (%d connected)", len(self._subscribers))

    def unsubscribe(self, subscriber: Subscriber) -> None:
        key = id(subscriber)
        self._states.pop(key, None)
        if self._subscribers.pop(key, None) is not None:
            logger.info("Observer unsubscribed (%d connected)", len(self._subscribers))

    # fan-out

    def publish_update(self) -> int:
        """
        Send the current snapshot to every active observer.
        Returns the number of successful deliveries.
        """
        payload = self._snapshot()
        delivered = 0
        for key, subscriber in list(self._subscribers.items()):
            # a send earlier in this loop may have closed it
            if self._states.get(key) is not SubscriberState.ACTIVE:
                continue
            try:
                subscriber.send(payload)
            except Exception as e:
                logger.warning("Dropping observer after failed delivery: %s", e)
                self.unsubscribe(subscriber)
                continue
            delivered += 1
        return delivered

    # heartbeat

    @property
    def heartbeat_running(self) -> bool:
        return self._heartbeat is not None and not self._heartbeat.done()

    def start_heartbeat(self, interval: Optional[float] = None) -> bool:
        """
        Re-publish the snapshot every `interval` seconds on the running loop.
        Returns False if a heartbeat is already running.
        Raises ValueError for a non-positive interval.
        """
        if interval is None:
            interval = HEARTBEAT_INTERVAL
        if interval <= 0:
            raise ValueError(f"heartbeat interval must be positive, got {interval}")
        if self.heartbeat_running:
            logger.warning("Heartbeat already running, ignoring second start")
            return False
        self._heartbeat = asyncio.get_running_loop().create_task(self._beat(interval))
        logger.info("Heartbeat started (every %ss)", interval)
        return True

    def stop_heartbeat(self) -> None:
        if self._heartbeat is not None:
            self._heartbeat.cancel()
            self._heartbeat = None
            logger.info("Heartbeat stopped")

    async def _beat(self, interval: float) -> None:
        while True:
            await asyncio.sleep(interval)
            delivered = self.publish_update()
            logger.debug("Heartbeat delivered to %d observers", delivered)
