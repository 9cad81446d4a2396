# app/services/realtime.py

from typing import Any, Dict, Iterable, Optional

from fastapi import WebSocket

from app.core.logger import logger


class ConnectionRegistry:
    """Live WebSocket connections, optionally bound to the user that opened them."""

    def __init__(self):
        self._connections: Dict[WebSocket, Optional[str]] = {}

    def __len__(self):
        return len(self._connections)

    def register(self, websocket: WebSocket, user_id: Optional[str] = None):
        self._connections[websocket] = user_id
        logger.info(f"Realtime client connected (user={user_id}, total={len(self._connections)})")

    def unregister(self, websocket: WebSocket):
        if websocket in self._connections:
            del self._connections[websocket]
            logger.info(f"Realtime client disconnected (total={len(self._connections)})")

    async def _send(self, websocket: WebSocket, event: str, data: Any):
        try:
            await websocket.send_json({"event": event, "data": data})
        except Exception as e:
            logger.warning(f"Dropping realtime client after failed send: {e}")
            self.unregister(websocket)

    async def broadcast(self, event: str, data: Any):
        # snapshot, a failed send mutates the registry
        for websocket in list(self._connections):
            await self._send(websocket, event, data)

    async def send_to_users(self, user_ids: Iterable[str], event: str, data: Any):
        targets = {str(u) for u in user_ids}
        for websocket, user_id in list(self._connections.items()):
            if user_id is not None and user_id in targets:
                await self._send(websocket, event, data)


registry = ConnectionRegistry()
