"""Event history buffer."""

from .ring_buffer import IRingBuffer, KeyedRingBuffer

__all__ = ["IRingBuffer", "KeyedRingBuffer"]
