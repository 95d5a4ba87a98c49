"""RelayCore: ingestion, broadcast and subscription orchestration."""

import time
from typing import Any, Iterable, Protocol

from ..buffer import KeyedRingBuffer
from ..errors import DeliveryFailure
from ..formatting import format_payload
from ..logging_config import get_logger
from ..models import (
    Event,
    Level,
    cleared_message,
    log_message,
    registered_message,
)
from ..registry import Subscriber, SubscriberRegistry
from .locks import KeyedLocks

logger = get_logger(__name__)


class IRelayCore(Protocol):
    """Orchestrates the keyed buffer and the subscriber registry."""

    async def ingest(
        self, key: str, level: Level, data: Iterable[Any], timestamp: int | None = None
    ) -> Event:
        """Store an event and fan it out to the key's subscribers."""
        ...

    async def register(self, subscriber: Subscriber, key: str) -> bool:
        """Register subscriber for key and send it the replay."""
        ...

    async def clear(self, key: str) -> None:
        """Empty key's history and notify its subscribers."""
        ...

    def unsubscribe(self, subscriber: Subscriber) -> None:
        """Remove subscriber from the registry and close it."""
        ...


class RelayCore:
    """Relay between producers and live subscribers.

    Every operation touching a key (append + broadcast, clear + broadcast,
    add + snapshot + replay) runs under that key's lock, so a subscriber
    never sees an event both in its replay and live, and never misses one
    ingested after its registration.
    """

    def __init__(
        self,
        buffer: KeyedRingBuffer,
        registry: SubscriberRegistry,
        subscriber_queue_size: int | None = None,
    ):
        self._buffer = buffer
        self._registry = registry
        self._locks = KeyedLocks()
        self._subscriber_queue_size = subscriber_queue_size

    @property
    def buffer(self) -> KeyedRingBuffer:
        return self._buffer

    @property
    def registry(self) -> SubscriberRegistry:
        return self._registry

    def connect(self) -> Subscriber:
        """Issue a new, unregistered subscriber handle."""
        if self._subscriber_queue_size is None:
            subscriber = Subscriber()
        else:
            subscriber = Subscriber(queue_size=self._subscriber_queue_size)
        logger.info(
            "Subscriber connected",
            extra={"context": {"connection_id": subscriber.id}},
        )
        return subscriber

    async def ingest(
        self,
        key: str,
        level: Level,
        data: Iterable[Any],
        timestamp: int | None = None,
    ) -> Event:
        """Store an event and fan it out to the key's subscribers."""
        event_data = tuple(data)
        event = Event(
            level=Level(level),
            data=event_data,
            timestamp=int(time.time()) if timestamp is None else timestamp,
            formatted=format_payload(event_data),
        )
        message = log_message(event)

        async with self._locks.hold(key):
            self._buffer.append(key, event)
            self._registry.broadcast(key, message)

        return event

    async def register(self, subscriber: Subscriber, key: str) -> bool:
        """Register subscriber for key and send it the replay.

        Returns False if the replay could not be delivered; the subscriber
        is then unsubscribed.
        """
        async with self._locks.hold(key):
            self._registry.add(key, subscriber)
            replay = registered_message(key, self._buffer.snapshot(key))
            try:
                subscriber.deliver(replay)
            except DeliveryFailure as e:
                logger.warning(
                    "Replay failed: %s",
                    e.reason,
                    extra={"context": {"connection_id": subscriber.id, "key": key}},
                )
                self.unsubscribe(subscriber)
                return False

        logger.info(
            "Subscriber registered",
            extra={
                "context": {
                    "connection_id": subscriber.id,
                    "key": key,
                    "buffered": len(replay["bufferedLogs"]),
                }
            },
        )
        return True

    async def clear(self, key: str) -> None:
        """Empty key's history and notify its subscribers."""
        async with self._locks.hold(key):
            self._buffer.clear(key)
            self._registry.broadcast(key, cleared_message())
        logger.info("Console cleared", extra={"context": {"key": key}})

    async def remove_key(self, key: str) -> None:
        """Drop key's history entirely and notify its subscribers."""
        async with self._locks.hold(key):
            self._buffer.remove(key)
            self._registry.broadcast(key, cleared_message())
        logger.info("Key removed", extra={"context": {"key": key}})

    def unsubscribe(self, subscriber: Subscriber) -> None:
        """Remove subscriber from the registry and close it. Idempotent."""
        key = self._registry.key_of(subscriber)
        self._registry.remove(subscriber)
        if not subscriber.closed:
            subscriber.close()
            logger.info(
                "Subscriber disconnected",
                extra={"context": {"connection_id": subscriber.id, "key": key}},
            )

    def snapshot(self, key: str) -> list[Event]:
        return self._buffer.snapshot(key)

    def count_for(self, key: str) -> int:
        return self._registry.count_for(key)

    def keys(self) -> set[str]:
        """Keys with buffered history or live subscribers."""
        return self._buffer.keys() | self._registry.keys()

    def stats(self) -> list[dict[str, Any]]:
        """Per-key buffered and subscriber counts, sorted by key."""
        return [
            {
                "key": key,
                "buffered": self._buffer.count(key),
                "subscribers": self._registry.count_for(key),
            }
            for key in sorted(self.keys())
        ]

    def close(self) -> None:
        """Disconnect every registered subscriber."""
        for subscriber in self._registry.subscribers():
            self.unsubscribe(subscriber)
