"""Log event data models."""

import copy
from dataclasses import dataclass
from enum import Enum
from typing import Any


class Level(str, Enum):
    """Log levels accepted from producers."""

    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


@dataclass(frozen=True)
class Event:
    """One structured log record stored per session key.

    ``data`` is deep-copied on construction and again by ``to_dict``, so
    neither the producer's objects nor any outbound message share nested
    dicts or lists with the stored event.
    """

    level: Level
    data: tuple[Any, ...]  # payload Values, JSON-decoded
    timestamp: int  # unix seconds
    formatted: str

    def __post_init__(self) -> None:
        object.__setattr__(self, "data", tuple(copy.deepcopy(list(self.data))))

    def to_dict(self) -> dict[str, Any]:
        """Wire form of the event."""
        return {
            "level": self.level.value,
            "data": copy.deepcopy(list(self.data)),
            "timestamp": self.timestamp,
            "formatted": self.formatted,
        }
