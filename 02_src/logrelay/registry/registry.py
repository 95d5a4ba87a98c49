"""SubscriberRegistry implementation."""

from typing import Any, Protocol

from ..errors import DeliveryFailure
from ..logging_config import get_logger
from .subscriber import Subscriber

logger = get_logger(__name__)


class ISubscriberRegistry(Protocol):
    """Tracks which live connections watch which session key."""

    def add(self, key: str, subscriber: Subscriber) -> None:
        """Associate subscriber with key (moving it off any previous key)."""
        ...

    def remove(self, subscriber: Subscriber) -> None:
        """Forget subscriber. No-op if unassociated."""
        ...

    def broadcast(self, key: str, message: dict[str, Any]) -> int:
        """Best-effort delivery to every subscriber of key."""
        ...

    def count_for(self, key: str) -> int:
        """Number of subscribers registered for key."""
        ...


class SubscriberRegistry:
    """Registry keyed by connection id.

    ``_connections`` is the live-connections table, ``_by_key`` maps a key to
    the ids watching it and ``_key_of`` is the reverse index. A key entry is
    dropped as soon as its last id leaves.
    """

    def __init__(self):
        self._connections: dict[int, Subscriber] = {}
        self._by_key: dict[str, set[int]] = {}
        self._key_of: dict[int, str] = {}

    def add(self, key: str, subscriber: Subscriber) -> None:
        """Associate subscriber with key (moving it off any previous key)."""
        previous = self._key_of.get(subscriber.id)
        if previous == key:
            return
        if previous is not None:
            self._detach(subscriber.id, previous)

        self._connections[subscriber.id] = subscriber
        self._by_key.setdefault(key, set()).add(subscriber.id)
        self._key_of[subscriber.id] = key

    def remove(self, subscriber: Subscriber) -> None:
        """Forget subscriber. No-op if unassociated."""
        key = self._key_of.get(subscriber.id)
        if key is not None:
            self._detach(subscriber.id, key)

    def _detach(self, connection_id: int, key: str) -> None:
        ids = self._by_key.get(key)
        if ids is not None:
            ids.discard(connection_id)
            if not ids:
                del self._by_key[key]
        self._key_of.pop(connection_id, None)
        self._connections.pop(connection_id, None)

    def broadcast(self, key: str, message: dict[str, Any]) -> int:
        """Deliver message to every subscriber of key.

        A subscriber that fails delivery is closed and removed; the others
        still receive the message. Returns the number of successful
        deliveries.
        """
        ids = self._by_key.get(key)
        if not ids:
            return 0

        delivered = 0
        failed: list[Subscriber] = []
        for connection_id in list(ids):
            subscriber = self._connections[connection_id]
            try:
                subscriber.deliver(message)
                delivered += 1
            except DeliveryFailure as e:
                logger.warning(
                    "Dropping subscriber: %s",
                    e.reason,
                    extra={"context": {"connection_id": connection_id, "key": key}},
                )
                failed.append(subscriber)

        for subscriber in failed:
            self.remove(subscriber)
            subscriber.close()

        return delivered

    def count_for(self, key: str) -> int:
        """Number of subscribers registered for key."""
        return len(self._by_key.get(key, ()))

    def key_of(self, subscriber: Subscriber) -> str | None:
        """Key the subscriber is registered for, if any."""
        return self._key_of.get(subscriber.id)

    def keys(self) -> set[str]:
        return set(self._by_key)

    def subscribers(self) -> list[Subscriber]:
        """All registered subscribers."""
        return list(self._connections.values())

    def __len__(self) -> int:
        return len(self._connections)
