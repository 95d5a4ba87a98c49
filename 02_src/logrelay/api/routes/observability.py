"""Observability and key management routes."""

from typing import Any

from fastapi import APIRouter
from pydantic import BaseModel

from ...app import IApplication
from ...models import log_message


class KeyStatsResponse(BaseModel):
    """Response model for one session key."""

    key: str
    buffered: int
    subscribers: int


class LogResponse(BaseModel):
    """Response model for a buffered event."""

    type: str
    level: str
    data: list[Any]
    timestamp: int
    formatted: str


class StatusResponse(BaseModel):
    """Response model for status."""

    status: str


def create_observability_router(app: IApplication) -> APIRouter:
    """Create observability router."""
    router = APIRouter(tags=["observability"])

    @router.get("/health", response_model=StatusResponse)
    async def health() -> dict:
        return {"status": "ok"}

    @router.get("/api/keys", response_model=list[KeyStatsResponse])
    async def list_keys() -> list[dict]:
        """Known keys with buffered and subscriber counts."""
        return app.relay.stats()

    @router.get("/api/keys/{key:path}/logs", response_model=list[LogResponse])
    async def get_logs(key: str) -> list[dict]:
        """Current buffered history for a key, oldest first."""
        return [log_message(event) for event in app.relay.snapshot(key)]

    @router.post("/api/keys/{key:path}/clear", response_model=StatusResponse)
    async def clear_key(key: str) -> dict:
        """Clear a key's history and notify its viewers."""
        await app.relay.clear(key)
        return {"status": "ok"}

    @router.delete("/api/keys/{key:path}", response_model=StatusResponse)
    async def remove_key(key: str) -> dict:
        """Forget a key's history entirely."""
        await app.relay.remove_key(key)
        return {"status": "ok"}

    return router
