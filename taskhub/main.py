"""
Главный файл FastAPI приложения.
"""
import logging
from typing import Optional

from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware

from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.orm import Session

from taskhub.core.config import settings
from taskhub.core.database import SessionLocal, get_db
from taskhub.core.exceptions import AppException
from taskhub.api import api_router
from taskhub.api.realtime import router as realtime_router
from taskhub.realtime import CompositeChannel, ConnectionManager
from taskhub.services.notification_scheduler import SmartNotificationScheduler
from taskhub.services.user_service import UserService
from telegram_notifier.config import bot_config

# Настройка логирования
logging.basicConfig(
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    level=logging.INFO,
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title=settings.APP_TITLE,
    description="API совместного менеджера задач с умными уведомлениями о дедлайнах",
    version="1.0.0",
)


@app.exception_handler(AppException)
async def app_exception_handler(request, exc: AppException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail, "error_code": exc.error_code},
    )


# CORS middleware — разрешённые домены из переменной окружения
origins = [o.strip() for o in settings.ALLOWED_ORIGINS.split(",") if o.strip()]
app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Health check endpoint
@app.get("/health")
def health(db: Session = Depends(get_db)):
    """Health check endpoint with database verification."""
    try:
        db.execute(text("SELECT 1"))
        return {"status": "healthy", "database": "connected"}
    except Exception as e:
        return JSONResponse(
            status_code=503,
            content={"status": "unhealthy", "database": str(e)},
        )

# WebSocket живых уведомлений (без префикса /api/v1)
app.include_router(realtime_router)

# Подключаем API роутер
app.include_router(api_router)


def _resolve_telegram_chat(user_id: int) -> Optional[int]:
    db = SessionLocal()
    try:
        return UserService(db).get_telegram_id(user_id)
    finally:
        db.close()


def build_live_channel(manager: ConnectionManager) -> CompositeChannel:
    """WebSocket всегда, Telegram — если задан токен бота."""
    channel = CompositeChannel([manager])
    if bot_config.is_enabled():
        from telegram_notifier.bot import get_bot
        from telegram_notifier.channel import TelegramChannel

        channel.add(TelegramChannel(get_bot(), _resolve_telegram_chat))
        logger.info("Telegram delivery channel enabled")
    return channel


@app.on_event("startup")
async def startup_event():
    """Действия при старте приложения."""
    logger.info("Application startup")
    manager = ConnectionManager()
    app.state.connection_manager = manager
    app.state.notification_scheduler = SmartNotificationScheduler(
        session_factory=SessionLocal,
        channel=build_live_channel(manager),
        interval_seconds=settings.NOTIFICATION_CHECK_INTERVAL_SECONDS,
        default_estimated_minutes=settings.NOMINAL_ESTIMATED_MINUTES,
        push_timeout=settings.PUSH_TIMEOUT_SECONDS,
    )
    if settings.SCHEDULER_ENABLED:
        app.state.notification_scheduler.start()
    else:
        logger.warning("SCHEDULER_ENABLED is false, smart notifications are not scheduled")


@app.on_event("shutdown")
async def shutdown_event():
    """Действия при остановке приложения."""
    scheduler = getattr(app.state, "notification_scheduler", None)
    if scheduler is not None:
        await scheduler.stop()
    if bot_config.is_enabled():
        from telegram_notifier.bot import close_bot
        await close_bot()
    logger.info("Application shutdown")


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
