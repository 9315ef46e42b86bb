"""Bridge API routes.

POST /v1/bridge/requests - Answer one editor request
WS   /v1/bridge/ws       - Answer editor requests over a websocket, one
                           JSON request per message, answered concurrently
"""

from __future__ import annotations

import asyncio
import json

from fastapi import APIRouter, Depends, Request, WebSocket, WebSocketDisconnect
from pydantic import ValidationError

from src.api.handler import BridgeRequestHandler
from src.core.constants import BRIDGE_PREFIX
from src.core.logging import get_logger
from src.schemas.bridge import BridgeRequest, BridgeResponse


logger = get_logger(__name__)

router = APIRouter(
    prefix=BRIDGE_PREFIX,
    tags=["Bridge"],
)

_UNKNOWN_REQUEST_ID = "unknown"


def get_request_handler(request: Request) -> BridgeRequestHandler:
    """Dependency returning the application's request handler."""
    return request.app.state.request_handler


@router.post(
    "/requests",
    response_model=BridgeResponse,
    response_model_by_alias=True,
    response_model_exclude_none=True,
    summary="Reconcile an editor request",
)
async def post_request(
    bridge_request: BridgeRequest,
    handler: BridgeRequestHandler = Depends(get_request_handler),
) -> BridgeResponse:
    """Fan the request out to the participants and return reconciled edits."""
    return await handler.handle(bridge_request)


@router.websocket("/ws")
async def bridge_websocket(websocket: WebSocket) -> None:
    """Serve editor requests over a websocket until the client disconnects.

    Each message is answered in its own task, so a slow reconciliation does
    not hold back later requests. Replies can arrive out of order; the
    echoed ``id`` pairs them with their requests.
    """
    handler: BridgeRequestHandler = websocket.app.state.request_handler
    send_lock = asyncio.Lock()
    in_flight: set[asyncio.Task[None]] = set()

    async def respond(raw: str) -> None:
        response = await _answer(handler, raw)
        async with send_lock:
            await websocket.send_text(response.model_dump_json(by_alias=True, exclude_none=True))

    await websocket.accept()
    logger.info("Editor connected")
    try:
        while True:
            raw = await websocket.receive_text()
            task = asyncio.create_task(respond(raw))
            in_flight.add(task)
            task.add_done_callback(in_flight.discard)
    except WebSocketDisconnect:
        logger.info("Editor disconnected", pending=len(in_flight))
    finally:
        pending = list(in_flight)
        for task in pending:
            task.cancel()
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)


async def _answer(handler: BridgeRequestHandler, raw: str) -> BridgeResponse:
    try:
        payload = json.loads(raw)
    except json.JSONDecodeError as e:
        return BridgeResponse(id=_UNKNOWN_REQUEST_ID, success=False, error=f"Invalid JSON: {e}")

    request_id = _UNKNOWN_REQUEST_ID
    if isinstance(payload, dict) and payload.get("id"):
        request_id = str(payload["id"])
    try:
        request = BridgeRequest.model_validate(payload)
    except ValidationError as e:
        logger.warning(
            "Rejected malformed request",
            request_id=request_id,
            errors=e.error_count(),
        )
        return BridgeResponse(id=request_id, success=False, error=f"Invalid request: {e}")

    return await handler.handle(request)
