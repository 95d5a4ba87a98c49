"""Producer library for sending events to a relay."""

from .logger import Disabled, Enabled, LoggerState, RelayHandler, RelayLogger, level_for
from .serialize import prepare_data, prepare_item

__all__ = [
    "RelayLogger",
    "RelayHandler",
    "LoggerState",
    "Enabled",
    "Disabled",
    "level_for",
    "prepare_data",
    "prepare_item",
]
