"""KeyedRingBuffer implementation."""

from collections import deque
from typing import Protocol

from ..config import DEFAULT_BUFFER_SIZE
from ..errors import InvalidConfig
from ..models import Event


class IRingBuffer(Protocol):
    """Bounded recent history of events per session key."""

    def append(self, key: str, event: Event) -> None:
        """Append an event, evicting the oldest one on overflow."""
        ...

    def snapshot(self, key: str) -> list[Event]:
        """Copy of the key's events, oldest first."""
        ...

    def clear(self, key: str) -> None:
        """Empty the key's history, keeping the key."""
        ...

    def remove(self, key: str) -> None:
        """Drop the key entirely."""
        ...


class KeyedRingBuffer:
    """In-memory FIFO history per key with a shared capacity."""

    def __init__(self, capacity: int = DEFAULT_BUFFER_SIZE):
        if capacity < 1:
            raise InvalidConfig(f"Buffer capacity must be >= 1, got {capacity}")
        self._capacity = capacity
        self._buffers: dict[str, deque[Event]] = {}

    @property
    def capacity(self) -> int:
        return self._capacity

    def append(self, key: str, event: Event) -> None:
        """Append an event, evicting the oldest one on overflow."""
        buf = self._buffers.get(key)
        if buf is None:
            buf = self._buffers[key] = deque(maxlen=self._capacity)
        buf.append(event)

    def snapshot(self, key: str) -> list[Event]:
        """Copy of the key's events, oldest first. Empty for unknown keys."""
        buf = self._buffers.get(key)
        if buf is None:
            return []
        return list(buf)

    def clear(self, key: str) -> None:
        """Empty the key's history, keeping the key."""
        buf = self._buffers.get(key)
        if buf is not None:
            buf.clear()

    def remove(self, key: str) -> None:
        """Drop the key entirely."""
        self._buffers.pop(key, None)

    def has(self, key: str) -> bool:
        return key in self._buffers

    def count(self, key: str) -> int:
        buf = self._buffers.get(key)
        return len(buf) if buf is not None else 0

    def keys(self) -> set[str]:
        return set(self._buffers)
