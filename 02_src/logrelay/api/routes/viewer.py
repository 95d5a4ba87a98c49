"""Viewer page route."""

import html
from pathlib import Path

from fastapi import APIRouter, Request
from fastapi.responses import HTMLResponse

from ...app import IApplication

TEMPLATE_PATH = Path(__file__).resolve().parent.parent / "templates" / "viewer.html"


def websocket_url(request: Request) -> str:
    """WebSocket endpoint URL as seen by the requesting browser."""
    scheme = "wss" if request.url.scheme == "https" else "ws"
    return f"{scheme}://{request.url.netloc}/ws"


def render_viewer(key: str, ws_url: str, template_path: Path = TEMPLATE_PATH) -> str:
    safe_key = html.escape(key, quote=True)
    if not template_path.exists():
        return (
            f"<!DOCTYPE html><html><head><title>Log Relay Viewer - {safe_key}</title></head>"
            f"<body><h1>Viewer for key: {safe_key}</h1>"
            "<p>Viewer template not found.</p></body></html>"
        )
    page = template_path.read_text(encoding="utf-8")
    return page.replace("{{KEY}}", safe_key).replace(
        "{{WS_URL}}", html.escape(ws_url, quote=True)
    )


def create_viewer_router(app: IApplication) -> APIRouter:
    """Create viewer router."""
    router = APIRouter(tags=["viewer"])

    @router.get("/viewer/{key:path}", response_class=HTMLResponse)
    async def viewer_page(key: str, request: Request) -> HTMLResponse:
        """Browser console for one session key."""
        return HTMLResponse(render_viewer(key, websocket_url(request)))

    return router
