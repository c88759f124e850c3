"""
WebSocket-хаб: живые уведомления в открытые вкладки пользователя.
"""
import logging
from collections import defaultdict
from typing import Any

from fastapi import WebSocket

from taskhub.realtime.base import LiveChannel

logger = logging.getLogger(__name__)


class ConnectionManager(LiveChannel):
    """Держит открытые сокеты по пользователям."""

    def __init__(self):
        self._connections: dict[int, set[WebSocket]] = defaultdict(set)

    async def connect(self, user_id: int, websocket: WebSocket) -> None:
        # Сокет должен быть виден push уже к моменту рукопожатия
        self._connections[user_id].add(websocket)
        await websocket.accept()
        logger.info("User %s connected via websocket", user_id)

    def disconnect(self, user_id: int, websocket: WebSocket) -> None:
        sockets = self._connections.get(user_id)
        if not sockets:
            return
        sockets.discard(websocket)
        if not sockets:
            del self._connections[user_id]
        logger.info("User %s disconnected", user_id)

    def connection_count(self, user_id: int) -> int:
        return len(self._connections.get(user_id, ()))

    async def push(self, user_id: int, event: str, payload: dict[str, Any]) -> None:
        """Отправляет событие во все сокеты пользователя, отвалившиеся выбрасывает."""
        for websocket in list(self._connections.get(user_id, ())):
            try:
                await websocket.send_json({"event": event, "data": payload})
            except Exception as e:
                logger.warning(f"Dropping websocket of user {user_id}: {e}")
                self.disconnect(user_id, websocket)
