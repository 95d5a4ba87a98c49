"""Main entry point for the log relay server."""

import os
import sys
from pathlib import Path

import uvicorn
from dotenv import load_dotenv

from logrelay.api import create_fastapi_app
from logrelay.app import Application
from logrelay.config import Settings
from logrelay.logging_config import get_logger, setup_logging

logger = get_logger(__name__)


def main(argv: list[str] | None = None):
    """Run the relay. Optional positional args: port, host."""
    project_root = Path(__file__).resolve().parent.parent
    load_dotenv(project_root / ".env")

    args = sys.argv[1:] if argv is None else argv
    if len(args) > 0:
        os.environ["RELAY_PORT"] = args[0]
    if len(args) > 1:
        os.environ["RELAY_HOST"] = args[1]

    settings = Settings.from_env()
    setup_logging(settings.log_level, settings.log_file)

    app = create_fastapi_app(Application(settings))

    logger.info(
        "Relay listening on %s:%d (viewer: /viewer/<key>, ingest: POST /logger)",
        settings.host,
        settings.port,
    )
    uvicorn.run(
        app,
        host=settings.host,
        port=settings.port,
        log_config=None,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
