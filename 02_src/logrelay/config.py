"""Project-level configuration and path helpers."""

import os
from dataclasses import dataclass, field
from pathlib import Path

from .errors import InvalidConfig

PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent
LOGS_DIR = PROJECT_ROOT / "04_logs"
DEFAULT_LOG_PATH = LOGS_DIR / "relay.log"

DEFAULT_BUFFER_SIZE = 100
DEFAULT_SUBSCRIBER_QUEUE_SIZE = 256


def _int_env(name: str, default: int, minimum: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = int(raw)
    except ValueError:
        raise InvalidConfig(f"{name} must be an integer, got {raw!r}")
    if value < minimum:
        raise InvalidConfig(f"{name} must be >= {minimum}, got {value}")
    return value


@dataclass
class Settings:
    """Runtime settings for the relay server."""

    host: str = "0.0.0.0"
    port: int = 8080
    buffer_size: int = DEFAULT_BUFFER_SIZE
    subscriber_queue_size: int = DEFAULT_SUBSCRIBER_QUEUE_SIZE
    cors_origins: list[str] = field(default_factory=lambda: ["*"])
    log_level: str = "INFO"
    log_file: str = str(DEFAULT_LOG_PATH)

    def __post_init__(self) -> None:
        if self.buffer_size < 1:
            raise InvalidConfig(f"buffer_size must be >= 1, got {self.buffer_size}")
        if self.subscriber_queue_size < 1:
            raise InvalidConfig(
                f"subscriber_queue_size must be >= 1, got {self.subscriber_queue_size}"
            )
        if not 0 < self.port < 65536:
            raise InvalidConfig(f"port out of range: {self.port}")

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from RELAY_* environment variables."""
        origins = os.getenv("RELAY_CORS_ORIGINS", "*")
        return cls(
            host=os.getenv("RELAY_HOST", "0.0.0.0"),
            port=_int_env("RELAY_PORT", 8080, 1),
            buffer_size=_int_env("RELAY_BUFFER_SIZE", DEFAULT_BUFFER_SIZE, 1),
            subscriber_queue_size=_int_env(
                "RELAY_SUBSCRIBER_QUEUE_SIZE", DEFAULT_SUBSCRIBER_QUEUE_SIZE, 1
            ),
            cors_origins=[o.strip() for o in origins.split(",") if o.strip()],
            log_level=os.getenv("LOG_LEVEL", "INFO"),
            log_file=os.getenv("LOG_FILE") or str(DEFAULT_LOG_PATH),
        )
