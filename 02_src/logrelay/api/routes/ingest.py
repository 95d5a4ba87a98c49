"""Ingestion route for producers."""

from typing import Any

from fastapi import APIRouter, Request
from pydantic import BaseModel, Field, ValidationError

from ...app import IApplication
from ...errors import InvalidPayload
from ...models import Level


class IngestRequest(BaseModel):
    """Log event posted by a producer."""

    key: str = Field(min_length=1)
    level: Level
    data: list[Any]
    timestamp: int | None = None


class IngestResponse(BaseModel):
    """Response model for ingestion."""

    success: bool


def _describe(error: ValidationError) -> str:
    first = error.errors()[0]
    if first["type"] == "json_invalid":
        return "Malformed JSON"
    field = ".".join(str(part) for part in first["loc"]) or "payload"
    return f"Invalid payload: {field}: {first['msg']}"


def create_ingest_router(app: IApplication) -> APIRouter:
    """Create ingestion router."""
    router = APIRouter(tags=["ingest"])

    @router.post("/logger", response_model=IngestResponse)
    async def ingest_log(request: Request) -> dict:
        """Store a log event and push it to live viewers."""
        body = await request.body()
        try:
            payload = IngestRequest.model_validate_json(body)
        except ValidationError as e:
            raise InvalidPayload(_describe(e))

        await app.relay.ingest(
            payload.key, payload.level, payload.data, payload.timestamp
        )
        return {"success": True}

    return router
