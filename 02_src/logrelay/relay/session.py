"""Per-connection subscriber protocol state machine."""

import json
from dataclasses import dataclass

from ..errors import DeliveryFailure, UnknownSubscriberAction
from ..logging_config import get_logger
from ..models import ClearCommand, RegisterCommand, error_message, parse_command
from ..registry import Subscriber
from .core import RelayCore

logger = get_logger(__name__)


@dataclass(frozen=True)
class Unregistered:
    """Connected, not watching any key yet."""


@dataclass(frozen=True)
class Registered:
    """Watching one key."""

    key: str


@dataclass(frozen=True)
class Closed:
    """Disconnected. Terminal."""


SessionState = Unregistered | Registered | Closed


class SubscriberSession:
    """Drives one subscriber connection through the relay protocol."""

    def __init__(self, relay: RelayCore, subscriber: Subscriber | None = None):
        self._relay = relay
        self._subscriber = subscriber if subscriber is not None else relay.connect()
        self._state: SessionState = Unregistered()

    @property
    def subscriber(self) -> Subscriber:
        return self._subscriber

    @property
    def state(self) -> SessionState:
        return self._state

    async def handle_text(self, raw: str | bytes) -> None:
        """Decode and handle one inbound frame, text or UTF-8 bytes."""
        try:
            if isinstance(raw, bytes):
                raw = raw.decode("utf-8")
            data = json.loads(raw)
        except ValueError:
            self._reject("Invalid message format")
            return
        await self.handle(data)

    async def handle(self, data: object) -> None:
        """Handle one decoded inbound message."""
        if isinstance(self._state, Closed):
            return

        try:
            command = parse_command(data)
        except UnknownSubscriberAction as e:
            self._reject(str(e))
            return

        if isinstance(command, RegisterCommand):
            if await self._relay.register(self._subscriber, command.key):
                self._state = Registered(command.key)
            else:
                self._state = Closed()
        elif isinstance(command, ClearCommand):
            await self._relay.clear(command.key)

    def close(self) -> None:
        """Leave the registry. Idempotent."""
        self._relay.unsubscribe(self._subscriber)
        self._state = Closed()

    def _reject(self, error: str) -> None:
        logger.warning(
            "Rejected subscriber message: %s",
            error,
            extra={"context": {"connection_id": self._subscriber.id}},
        )
        try:
            self._subscriber.deliver(error_message(error))
        except DeliveryFailure:
            self.close()
