"""Structured logging configuration for the log relay."""

import json
import logging
import logging.config
import logging.handlers
import os
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from .config import DEFAULT_LOG_PATH

# Server loggers routed through the relay's handlers instead of their own.
SERVER_LOGGERS = ("uvicorn", "uvicorn.error", "uvicorn.access")


class JSONFormatter(logging.Formatter):
    """One JSON object per record."""

    def format(self, record: logging.LogRecord) -> str:
        log_data: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        # connection id / key passed as extra={"context": {...}}
        context = getattr(record, "context", None)
        if context is not None:
            log_data["context"] = context

        return json.dumps(log_data, default=str)


def build_logging_config(log_level: str, log_file: str, console: bool = True) -> dict:
    """dictConfig mapping: rotating JSON file, optional JSON stdout."""
    handlers: dict[str, dict[str, Any]] = {
        "file": {
            "class": "logging.handlers.RotatingFileHandler",
            "filename": log_file,
            "maxBytes": 10 * 1024 * 1024,  # 10 MB
            "backupCount": 5,
            "formatter": "json",
            "encoding": "utf-8",
        },
    }
    if console:
        handlers["console"] = {
            "class": "logging.StreamHandler",
            "formatter": "json",
            "stream": "ext://sys.stdout",
        }

    handler_names = list(handlers)
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "json": {"()": "logrelay.logging_config.JSONFormatter"},
        },
        "handlers": handlers,
        "loggers": {
            name: {"handlers": handler_names, "level": log_level, "propagate": False}
            for name in SERVER_LOGGERS
        },
        "root": {"level": log_level, "handlers": handler_names},
    }


def setup_logging(
    log_level: str | None = None,
    log_file: str | None = None,
    console: bool = True,
) -> None:
    """
    Configure logging for the relay process.

    Args:
        log_level: DEBUG, INFO, WARNING, ERROR or CRITICAL.
                   Defaults to LOG_LEVEL env var or INFO.
        log_file: Rotating log file. Defaults to 04_logs/relay.log.
        console: Also write to stdout.
    """
    level = (log_level or os.getenv("LOG_LEVEL", "INFO")).upper()
    path = Path(log_file) if log_file else DEFAULT_LOG_PATH
    path.parent.mkdir(parents=True, exist_ok=True)

    logging.config.dictConfig(build_logging_config(level, str(path), console))


def get_logger(name: str) -> logging.Logger:
    """Logger for a module, usually get_logger(__name__)."""
    return logging.getLogger(name)
