"""
Канал живой доставки через Telegram: уведомление уходит в личный чат пользователя.
"""
import asyncio
import html
import logging
from typing import Any, Callable, Optional

from aiogram import Bot

from taskhub.realtime.base import LiveChannel, NEW_NOTIFICATION_EVENT

logger = logging.getLogger(__name__)


def format_notification(payload: dict[str, Any]) -> str:
    """Текст сообщения: заголовок жирным, затем текст уведомления."""
    title = html.escape(payload.get("title") or "")
    message = html.escape(payload.get("message") or "")
    return f"<b>{title}</b>\n{message}"


class TelegramChannel(LiveChannel):
    """
    Отправляет новые уведомления в Telegram.
    resolve_chat_id возвращает chat id пользователя или None, если Telegram не привязан.
    """

    def __init__(self, bot: Bot, resolve_chat_id: Callable[[int], Optional[int]]):
        self.bot = bot
        self.resolve_chat_id = resolve_chat_id

    async def push(self, user_id: int, event: str, payload: dict[str, Any]) -> None:
        if event != NEW_NOTIFICATION_EVENT:
            return
        # Запрос к БД выполняется вне event loop
        chat_id = await asyncio.to_thread(self.resolve_chat_id, user_id)
        if chat_id is None:
            logger.debug("User %s has no linked Telegram chat", user_id)
            return
        await self.bot.send_message(chat_id=chat_id, text=format_notification(payload))
        logger.info(f"Notification {payload.get('id')} sent to Telegram chat of user {user_id}")
