"""
WebSocket endpoint живых уведомлений.
"""
import logging

from fastapi import APIRouter, WebSocket, WebSocketDisconnect, status

from taskhub.core.security import is_websocket_authorized

logger = logging.getLogger(__name__)
router = APIRouter(tags=["realtime"])


@router.websocket("/ws/notifications/{user_id}")
async def notifications_socket(websocket: WebSocket, user_id: int):
    """Держит соединение открытым; сервер только пишет в него."""
    if not is_websocket_authorized(websocket):
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
        return

    manager = websocket.app.state.connection_manager
    try:
        await manager.connect(user_id, websocket)
        while True:
            await websocket.receive_text()
    except WebSocketDisconnect:
        pass
    finally:
        manager.disconnect(user_id, websocket)
