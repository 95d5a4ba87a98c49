"""Application bootstrap and lifecycle management."""

from typing import Protocol

from .buffer import KeyedRingBuffer
from .config import Settings
from .logging_config import get_logger
from .registry import SubscriberRegistry
from .relay import RelayCore

logger = get_logger(__name__)


class IApplication(Protocol):
    """Bootstrap and lifecycle."""

    settings: Settings

    async def start(self) -> None:
        """Initialize components in dependency order."""
        ...

    async def stop(self) -> None:
        """Shutdown in reverse order."""
        ...

    @property
    def relay(self) -> RelayCore:
        """Running relay instance."""
        ...


class Application:
    """Owns the relay components for one server process."""

    def __init__(self, settings: Settings | None = None):
        self.settings = settings if settings is not None else Settings.from_env()

        # Components (will be initialized in start())
        self._buffer: KeyedRingBuffer | None = None
        self._registry: SubscriberRegistry | None = None
        self._relay: RelayCore | None = None

    async def start(self) -> None:
        """Initialize components in dependency order."""
        logger.info("Starting relay")

        # 1. Buffer and registry (no dependencies)
        self._buffer = KeyedRingBuffer(self.settings.buffer_size)
        self._registry = SubscriberRegistry()
        logger.info("Buffer initialized with capacity %d", self._buffer.capacity)

        # 2. RelayCore (depends on both)
        self._relay = RelayCore(
            self._buffer,
            self._registry,
            subscriber_queue_size=self.settings.subscriber_queue_size,
        )
        logger.info("Relay started")

    async def stop(self) -> None:
        """Shutdown in reverse order."""
        if self._relay:
            self._relay.close()
            logger.info("All subscribers disconnected")
        self._relay = None
        self._registry = None
        self._buffer = None

    @property
    def relay(self) -> RelayCore:
        """Get relay instance."""
        if not self._relay:
            raise RuntimeError("Application not started")
        return self._relay
