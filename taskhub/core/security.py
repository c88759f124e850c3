"""
Безопасность и аутентификация.
"""
import logging

from fastapi import Security, HTTPException, WebSocket, status
from fastapi.security import APIKeyHeader

from taskhub.core.config import settings

logger = logging.getLogger(__name__)

api_key_header = APIKeyHeader(name="X-API-Key", auto_error=False)


async def verify_api_key(api_key: str | None = Security(api_key_header)) -> str:
    if not api_key or api_key != settings.API_KEY:
        logger.warning("Invalid API key attempt")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or missing API key",
        )
    return api_key


def is_websocket_authorized(websocket: WebSocket) -> bool:
    """Ключ из query-параметра api_key или заголовка X-API-Key."""
    api_key = websocket.query_params.get("api_key") or websocket.headers.get("x-api-key")
    if not api_key or api_key != settings.API_KEY:
        logger.warning("Invalid API key attempt on websocket")
        return False
    return True
