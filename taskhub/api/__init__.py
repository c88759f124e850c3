"""
API endpoints.
"""
from fastapi import APIRouter

from taskhub.api import analytics, notifications

# Главный роутер API
api_router = APIRouter(prefix="/api/v1")

# Подключаем все модули
api_router.include_router(notifications.router)
api_router.include_router(analytics.router)

__all__ = ["api_router"]
