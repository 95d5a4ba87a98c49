"""Relay orchestration."""

from .core import IRelayCore, RelayCore
from .locks import KeyedLocks
from .session import Closed, Registered, SessionState, SubscriberSession, Unregistered

__all__ = [
    "IRelayCore",
    "RelayCore",
    "KeyedLocks",
    "SubscriberSession",
    "SessionState",
    "Unregistered",
    "Registered",
    "Closed",
]
