"""Real-time log relay: keyed bounded history with live fan-out to subscribers."""

from .app import Application, IApplication
from .buffer import IRingBuffer, KeyedRingBuffer
from .config import Settings
from .errors import (
    DeliveryFailure,
    InvalidConfig,
    InvalidPayload,
    RelayError,
    UnknownSubscriberAction,
)
from .formatting import format_payload, format_value
from .models import Event, Level
from .registry import ISubscriberRegistry, Subscriber, SubscriberRegistry
from .relay import IRelayCore, RelayCore, SubscriberSession

__all__ = [
    # Application
    "Application",
    "IApplication",
    "Settings",
    # Models
    "Event",
    "Level",
    "format_value",
    "format_payload",
    # Components
    "IRingBuffer",
    "KeyedRingBuffer",
    "ISubscriberRegistry",
    "SubscriberRegistry",
    "Subscriber",
    "IRelayCore",
    "RelayCore",
    "SubscriberSession",
    # Errors
    "RelayError",
    "InvalidPayload",
    "UnknownSubscriberAction",
    "DeliveryFailure",
    "InvalidConfig",
]
