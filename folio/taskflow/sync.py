# folio/taskflow/sync.py
"""Publish/subscribe channel for TaskFlow changes.

Mutations publish a :class:`SyncEvent` to ``taskflow:<user_id>``; the sync
WebSocket subscribes to the same channel. :class:`InMemoryBroker` serves a
single process, :class:`RedisBroker` fans out across replicas.

    async with broker.subscribe(channel) as subscription:
        async for event in subscription:
            ...
"""
import asyncio
import logging
from abc import ABC, abstractmethod
from typing import AsyncIterator, Dict, Optional, Set

import redis.asyncio as redis

from folio.config import REDIS_URL, SYNC_BACKEND
from folio.taskflow.models import SyncEvent

logger = logging.getLogger(__name__)


def channel_for(user_id: str) -> str:
    return f"taskflow:{user_id}"


class Subscription(ABC):
    """Async context manager and async iterator over the events of one channel."""

    def __init__(self, channel: str):
        self.channel = channel

    async def __aenter__(self) -> 'Subscription':
        await self.open()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    def __aiter__(self) -> AsyncIterator[SyncEvent]:
        return self

    async def __anext__(self) -> SyncEvent:
        return await self.get()

    @abstractmethod
    async def open(self) -> None: ...

    @abstractmethod
    async def get(self) -> SyncEvent:
        """Wait for the next event."""

    @abstractmethod
    async def close(self) -> None: ...


class SyncBroker(ABC):
    @abstractmethod
    async def publish(self, channel: str, event: SyncEvent) -> int:
        """Publish an event; returns the number of subscribers reached (where known)."""

    @abstractmethod
    def subscribe(self, channel: str) -> Subscription:
        """Return a subscription; events are received once it is entered."""

    async def initialize(self) -> None:
        pass

    async def close(self) -> None:
        pass


class _MemorySubscription(Subscription):
    def __init__(self, broker: 'InMemoryBroker', channel: str):
        super().__init__(channel)
        self._broker = broker
        self._queue: asyncio.Queue = asyncio.Queue()

    async def open(self) -> None:
        self._broker._subscribers.setdefault(self.channel, set()).add(self._queue)

    async def get(self) -> SyncEvent:
        return await self._queue.get()

    async def close(self) -> None:
        queues = self._broker._subscribers.get(self.channel)
        if queues is not None:
            queues.discard(self._queue)
            if not queues:
                del self._broker._subscribers[self.channel]


class InMemoryBroker(SyncBroker):
    def __init__(self):
        self._subscribers: Dict[str, Set[asyncio.Queue]] = {}

    async def publish(self, channel: str, event: SyncEvent) -> int:
        queues = list(self._subscribers.get(channel, ()))
        for queue in queues:
            queue.put_nowait(event)
        logger.debug(f"Published {event.type} update to {channel} ({len(queues)} subscribers)")
        return len(queues)

    def subscribe(self, channel: str) -> Subscription:
        return _MemorySubscription(self, channel)

    def subscriber_count(self, channel: str) -> int:
        return len(self._subscribers.get(channel, ()))


class _RedisSubscription(Subscription):
    def __init__(self, client: redis.Redis, channel: str):
        super().__init__(channel)
        self._pubsub = client.pubsub()

    async def open(self) -> None:
        await self._pubsub.subscribe(self.channel)

    async def get(self) -> SyncEvent:
        while True:
            message = await self._pubsub.get_message(ignore_subscribe_messages=True, timeout=1.0)
            if message is None or message.get("type") != "message":
                continue
            try:
                return SyncEvent.model_validate_json(message["data"])
            except ValueError as e:
                logger.warning(f"Dropping malformed sync message on {self.channel}: {e}")

    async def close(self) -> None:
        await self._pubsub.unsubscribe(self.channel)
        await self._pubsub.aclose()


class RedisBroker(SyncBroker):
    def __init__(self, url: str = REDIS_URL, client: Optional[redis.Redis] = None):
        self.url = url
        self.redis_client = client or redis.from_url(url, decode_responses=True)

    async def initialize(self) -> None:
        """Verify Redis connection on startup."""
        try:
            if await self.redis_client.ping():
                logger.info(f"Redis sync broker connected at {self.url}")
        except redis.RedisError as e:
            logger.warning(f"Redis ping failed: {e}")

    async def publish(self, channel: str, event: SyncEvent) -> int:
        try:
            return await self.redis_client.publish(channel, event.model_dump_json())
        except redis.RedisError as e:
            logger.error(f"Redis PUBLISH error for {channel}: {e}")
            return 0

    def subscribe(self, channel: str) -> Subscription:
        return _RedisSubscription(self.redis_client, channel)

    async def close(self) -> None:
        await self.redis_client.aclose()
        logger.info("Redis connection closed")


def create_broker() -> SyncBroker:
    """Build the broker selected by SYNC_BACKEND."""
    if SYNC_BACKEND == 'redis':
        logger.info("🔄 TaskFlow sync uses Redis pub/sub")
        return RedisBroker()
    logger.info("🔄 TaskFlow sync uses the in-memory broker")
    return InMemoryBroker()
