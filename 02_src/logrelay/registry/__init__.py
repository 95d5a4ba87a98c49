"""Subscriber registry module."""

from .registry import ISubscriberRegistry, SubscriberRegistry
from .subscriber import Subscriber, next_connection_id

__all__ = ["ISubscriberRegistry", "SubscriberRegistry", "Subscriber", "next_connection_id"]
