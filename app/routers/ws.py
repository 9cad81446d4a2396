# app/routers/ws.py

import json
from typing import Optional
from fastapi import APIRouter, WebSocket, WebSocketDisconnect
from app.core.jwt import decode_jwt_token
from app.core.logger import logger
from app.services.realtime import registry

router = APIRouter(tags=["realtime"])


@router.websocket("/ws")
async def realtime_ws(websocket: WebSocket, token: Optional[str] = None):
    """
    Broadcast room channel. Frames are JSON objects ``{"event": ..., "data": ...}``.
    A ``send_message`` frame is echoed to every client as ``new_message``.
    Connections opened with a valid ``token`` also receive ``dm:new`` events.
    """
    user_id = decode_jwt_token(token) if token else None
    await websocket.accept()
    registry.register(websocket, user_id)

    try:
        while True:
            message = await websocket.receive()
            if message["type"] == "websocket.disconnect":
                raise WebSocketDisconnect(message.get("code", 1000))

            raw = message.get("text")
            if raw is None:
                await websocket.send_json({"event": "error", "data": "Frames must be JSON text"})
                continue
            try:
                frame = json.loads(raw)
            except ValueError:
                await websocket.send_json({"event": "error", "data": "Frames must be JSON"})
                continue

            if not isinstance(frame, dict):
                await websocket.send_json({"event": "error", "data": "Frames must be JSON objects"})
                continue

            if frame.get("event") == "send_message":
                logger.info("Realtime message received, rebroadcasting")
                await registry.broadcast("new_message", frame.get("data"))
            else:
                logger.debug(f"Ignoring realtime event {frame.get('event')!r}")
    except WebSocketDisconnect:
        pass
    finally:
        registry.unregister(websocket)
