"""Producer-side logger posting events to a relay server."""

import logging
import time
from dataclasses import dataclass
from typing import Any

import httpx

from ..logging_config import get_logger
from ..models import Level
from .serialize import prepare_data

logger = get_logger(__name__)


@dataclass(frozen=True)
class Enabled:
    """Events are sent."""


@dataclass(frozen=True)
class Disabled:
    """Events are dropped until enable() is called."""

    reason: str


LoggerState = Enabled | Disabled


class RelayLogger:
    """Sends log events for one session key to a relay's /logger endpoint.

    Sending never raises into the caller. After ``disable_on_errors``
    consecutive failed posts the logger switches itself to Disabled; a
    successful post resets the counter. ``disable_on_errors=0`` never
    disables.
    """

    def __init__(
        self,
        server_url: str,
        key: str,
        timeout: float = 1.0,
        disable_on_errors: int = 5,
        client: httpx.Client | None = None,
    ):
        self._server_url = server_url.rstrip("/")
        self._key = key
        self._disable_on_errors = disable_on_errors
        self._errors_count = 0
        self._state: LoggerState = Enabled()
        self._owns_client = client is None
        self._client = client if client is not None else httpx.Client(timeout=timeout)

    @property
    def key(self) -> str:
        return self._key

    @property
    def state(self) -> LoggerState:
        return self._state

    @property
    def errors_count(self) -> int:
        return self._errors_count

    def debug(self, *data: Any) -> None:
        self.send(Level.DEBUG, data)

    def info(self, *data: Any) -> None:
        self.send(Level.INFO, data)

    def log(self, *data: Any) -> None:
        """Alias for info()."""
        self.info(*data)

    def warning(self, *data: Any) -> None:
        self.send(Level.WARNING, data)

    def error(self, *data: Any) -> None:
        self.send(Level.ERROR, data)

    def enable(self) -> None:
        self._state = Enabled()

    def disable(self, reason: str = "disabled by caller") -> None:
        self._state = Disabled(reason)

    def is_enabled(self) -> bool:
        return isinstance(self._state, Enabled)

    def clear_errors_count(self) -> None:
        self._errors_count = 0

    def set_disable_on_errors_count(self, count: int) -> None:
        self._disable_on_errors = count

    def send(self, level: Level, data: tuple[Any, ...] | list[Any]) -> bool:
        """Post one event. Returns True if the relay accepted it."""
        if not self.is_enabled():
            return False

        payload = {
            "key": self._key,
            "level": Level(level).value,
            "data": prepare_data(data),
            "timestamp": int(time.time()),
        }

        try:
            response = self._client.post(self._server_url, json=payload)
        except httpx.HTTPError as e:
            self._record_failure(f"{type(e).__name__}: {e}")
            return False

        if not response.is_success:
            self._record_failure(f"HTTP {response.status_code}")
            return False

        self._errors_count = 0
        return True

    def _record_failure(self, error: str) -> None:
        self._errors_count += 1
        logger.debug("Failed to send log to %s: %s", self._server_url, error)
        if 0 < self._disable_on_errors <= self._errors_count:
            reason = f"{self._errors_count} consecutive errors, last: {error}"
            self._state = Disabled(reason)
            logger.warning("Relay logger disabled: %s", reason)

    def close(self) -> None:
        if self._owns_client:
            self._client.close()

    def __enter__(self) -> "RelayLogger":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()


_LEVELS = (
    (logging.ERROR, Level.ERROR),
    (logging.WARNING, Level.WARNING),
    (logging.INFO, Level.INFO),
)


def level_for(levelno: int) -> Level:
    """Map a stdlib logging level onto the relay's four levels."""
    for threshold, level in _LEVELS:
        if levelno >= threshold:
            return level
    return Level.DEBUG


class RelayHandler(logging.Handler):
    """logging.Handler forwarding records through a RelayLogger."""

    def __init__(self, relay_logger: RelayLogger, level: int = logging.NOTSET):
        super().__init__(level)
        self.relay_logger = relay_logger

    def emit(self, record: logging.LogRecord) -> None:
        # records about the relay logger itself would loop back here
        if record.name == __name__:
            return
        try:
            data: list[Any] = [record.getMessage()]
            if record.exc_info and record.exc_info[1] is not None:
                data.append(record.exc_info[1])
            self.relay_logger.send(level_for(record.levelno), data)
        except Exception:
            self.handleError(record)
