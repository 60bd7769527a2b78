import json
import logging
from typing import Any, Dict, List

from fastapi import APIRouter, WebSocket, WebSocketDisconnect
from starlette.concurrency import run_in_threadpool

from schemas.validation import EntityValidationError, validate_chat_message

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Chat"])


class ConnectionManager:
    """Every open chat socket, server-wide. Clients filter broadcasts by projectId."""

    def __init__(self):
        self.connections: List[WebSocket] = []

    async def connect(self, websocket: WebSocket):
        await websocket.accept()
        self.connections.append(websocket)
        logger.debug(f"Chat socket connected ({len(self.connections)} open)")

    def disconnect(self, websocket: WebSocket):
        if websocket in self.connections:
            self.connections.remove(websocket)
        logger.debug(f"Chat socket disconnected ({len(self.connections)} open)")

    async def broadcast(self, message: Dict[str, Any]):
        for ws in list(self.connections):
            try:
                await ws.send_json(message)
            except Exception as e:
                logger.warning(f"Dropping chat socket after failed send: {e}")
                self.disconnect(ws)


async def handle_frame(raw: str, storage, manager: ConnectionManager) -> None:
    try:
        data = json.loads(raw)
    except json.JSONDecodeError:
        logger.warning("Ignoring malformed chat frame")
        return
    if not isinstance(data, dict) or data.get("type") != "chat_message":
        logger.warning(f"Ignoring chat frame of unknown type: {data.get('type') if isinstance(data, dict) else data!r}")
        return
    try:
        payload = validate_chat_message(data)
    except EntityValidationError as e:
        logger.warning(f"Ignoring invalid chat message: {e}")
        return
    if not await run_in_threadpool(storage.get_project_by_id, payload.project_id):
        logger.warning(f"Ignoring chat message for unknown project {payload.project_id}")
        return
    if not await run_in_threadpool(storage.user_exists, payload.user_id):
        logger.warning(f"Ignoring chat message from unknown user {payload.user_id}")
        return

    # Persist first; the broadcast carries the stored row, author attached.
    await run_in_threadpool(storage.create_chat_message, payload)
    messages = await run_in_threadpool(storage.get_chat_messages, payload.project_id)
    latest = messages[-1]
    await manager.broadcast({
        "type": "new_message",
        "projectId": payload.project_id,
        "message": latest.model_dump(mode="json", by_alias=True),
    })


@router.websocket("/ws")
async def chat_socket(websocket: WebSocket):
    manager: ConnectionManager = websocket.app.state.connections
    storage = websocket.app.state.storage
    await manager.connect(websocket)
    try:
        while True:
            raw = await websocket.receive_text()
            try:
                await handle_frame(raw, storage, manager)
            except Exception:
                logger.exception("Failed to handle chat frame")
    except WebSocketDisconnect:
        logger.debug("Chat socket closed by client")
    finally:
        manager.disconnect(websocket)
