"""WebSocket subscription route for viewers."""

import asyncio

from fastapi import APIRouter, WebSocket, WebSocketDisconnect
from fastapi.websockets import WebSocketState

from ...app import IApplication
from ...logging_config import get_logger
from ...relay import SubscriberSession

logger = get_logger(__name__)


async def _receive_loop(websocket: WebSocket, session: SubscriberSession) -> None:
    while True:
        message = await websocket.receive()
        if message["type"] == "websocket.disconnect":
            raise WebSocketDisconnect(message.get("code", 1000))
        raw = message.get("text")
        if raw is None:
            raw = message.get("bytes") or b""
        await session.handle_text(raw)


async def _send_loop(websocket: WebSocket, session: SubscriberSession) -> None:
    while True:
        message = await session.subscriber.next_message()
        if message is None:
            return
        await websocket.send_json(message)


def create_subscribe_router(app: IApplication) -> APIRouter:
    """Create subscription router."""
    router = APIRouter(tags=["subscribe"])

    @router.websocket("/ws")
    async def subscribe(websocket: WebSocket) -> None:
        """Register/clear protocol plus the live event stream."""
        await websocket.accept()
        session = SubscriberSession(app.relay)

        receiver = asyncio.create_task(_receive_loop(websocket, session))
        sender = asyncio.create_task(_send_loop(websocket, session))
        try:
            done, _ = await asyncio.wait(
                {receiver, sender}, return_when=asyncio.FIRST_COMPLETED
            )
            for task in done:
                error = task.exception()
                if error is not None and not isinstance(error, WebSocketDisconnect):
                    logger.warning(
                        "Subscriber connection error: %s",
                        error,
                        extra={"context": {"connection_id": session.subscriber.id}},
                    )
        finally:
            session.close()
            for task in (receiver, sender):
                task.cancel()
            await asyncio.gather(receiver, sender, return_exceptions=True)
            if websocket.client_state == WebSocketState.CONNECTED:
                await websocket.close()

    return router
