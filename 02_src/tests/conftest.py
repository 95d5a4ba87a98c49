"""Pytest configuration and fixtures."""

import sys
from pathlib import Path

import pytest
import pytest_asyncio

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))


@pytest.fixture
def ring_buffer():
    """Create a small KeyedRingBuffer."""
    from logrelay.buffer import KeyedRingBuffer

    return KeyedRingBuffer(capacity=3)


@pytest.fixture
def registry():
    """Create an empty SubscriberRegistry."""
    from logrelay.registry import SubscriberRegistry

    return SubscriberRegistry()


@pytest.fixture
def relay(ring_buffer, registry):
    """Create RelayCore over the buffer and registry fixtures."""
    from logrelay.relay import RelayCore

    return RelayCore(ring_buffer, registry)


@pytest.fixture
def settings(tmp_path):
    """Settings with logging pointed at a temp dir."""
    from logrelay.config import Settings

    return Settings(buffer_size=3, log_file=str(tmp_path / "relay.log"))


@pytest_asyncio.fixture
async def application(settings):
    """Started Application."""
    from logrelay.app import Application

    app = Application(settings)
    await app.start()
    yield app
    await app.stop()


@pytest.fixture
def make_event():
    """Factory for Events with a plain text payload."""
    from logrelay.models import Event, Level

    def _make(text: str, level: Level = Level.INFO, timestamp: int = 1700000000):
        return Event(level=level, data=(text,), timestamp=timestamp, formatted=text)

    return _make


@pytest.fixture
def drain():
    """Pop every queued message of a subscriber without waiting."""

    def _drain(subscriber) -> list[dict]:
        messages = []
        while not subscriber._queue.empty():
            messages.append(subscriber._queue.get_nowait())
        return messages

    return _drain
