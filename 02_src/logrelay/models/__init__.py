"""Core data models for the log relay."""

from .events import Event, Level
from .protocol import (
    ClearCommand,
    Command,
    RegisterCommand,
    cleared_message,
    error_message,
    log_message,
    parse_command,
    registered_message,
)

__all__ = [
    # Events
    "Event",
    "Level",
    # Protocol
    "Command",
    "RegisterCommand",
    "ClearCommand",
    "parse_command",
    "log_message",
    "registered_message",
    "cleared_message",
    "error_message",
]
