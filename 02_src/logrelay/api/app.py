"""FastAPI application setup."""

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from ..app import Application
from ..errors import InvalidPayload
from ..logging_config import get_logger
from .routes import ingest, observability, subscribe, viewer

logger = get_logger(__name__)


def create_fastapi_app(application: Application | None = None) -> FastAPI:
    """Create and configure FastAPI application around one relay Application."""
    if application is None:
        application = Application()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Manage application lifespan."""
        await application.start()
        yield
        await application.stop()

    fastapi_app = FastAPI(
        title="Log Relay",
        description="Real-time log relay: keyed history plus live fan-out",
        version="0.1.0",
        lifespan=lifespan,
    )
    fastapi_app.state.application = application

    fastapi_app.add_middleware(
        CORSMiddleware,
        allow_origins=application.settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @fastapi_app.exception_handler(InvalidPayload)
    async def invalid_payload_handler(request: Request, exc: InvalidPayload):
        logger.warning("Rejected payload: %s", exc)
        return JSONResponse(status_code=400, content={"success": False, "error": str(exc)})

    fastapi_app.include_router(ingest.create_ingest_router(application))
    fastapi_app.include_router(subscribe.create_subscribe_router(application))
    fastapi_app.include_router(viewer.create_viewer_router(application))
    fastapi_app.include_router(observability.create_observability_router(application))

    return fastapi_app
