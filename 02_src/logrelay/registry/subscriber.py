"""Subscriber connection handle."""

import asyncio
import itertools
from typing import Any

from ..config import DEFAULT_SUBSCRIBER_QUEUE_SIZE
from ..errors import DeliveryFailure

_connection_ids = itertools.count(1)


def next_connection_id() -> int:
    """Issue a process-unique, monotonically increasing connection id."""
    return next(_connection_ids)


class Subscriber:
    """Live connection handle with a bounded outbound queue.

    ``deliver`` never blocks: a closed handle or a saturated queue raises
    DeliveryFailure. A sender task on the transport side drains the queue
    through ``next_message``.
    """

    def __init__(
        self,
        connection_id: int | None = None,
        queue_size: int = DEFAULT_SUBSCRIBER_QUEUE_SIZE,
    ):
        self.id = connection_id if connection_id is not None else next_connection_id()
        self._queue: asyncio.Queue[dict[str, Any]] = asyncio.Queue(maxsize=queue_size)
        self._closed = asyncio.Event()

    @property
    def closed(self) -> bool:
        return self._closed.is_set()

    @property
    def pending(self) -> int:
        """Number of queued, not yet sent messages."""
        return self._queue.qsize()

    def deliver(self, message: dict[str, Any]) -> None:
        """Queue a message for sending."""
        if self._closed.is_set():
            raise DeliveryFailure(self.id, "connection closed")
        try:
            self._queue.put_nowait(message)
        except asyncio.QueueFull:
            raise DeliveryFailure(self.id, "outbound queue full")

    async def next_message(self) -> dict[str, Any] | None:
        """Wait for the next queued message. Returns None once closed."""
        if self._closed.is_set():
            return None
        if not self._queue.empty():
            return self._queue.get_nowait()

        get_task = asyncio.ensure_future(self._queue.get())
        closed_task = asyncio.ensure_future(self._closed.wait())
        try:
            done, _ = await asyncio.wait(
                {get_task, closed_task}, return_when=asyncio.FIRST_COMPLETED
            )
        finally:
            get_task.cancel()
            closed_task.cancel()

        if get_task in done and not self._closed.is_set():
            return get_task.result()
        return None

    def close(self) -> None:
        """Mark the handle closed. Idempotent."""
        self._closed.set()

    def __repr__(self) -> str:
        state = "closed" if self.closed else "open"
        return f"Subscriber(id={self.id}, {state})"
