"""
Telegram бот на aiogram 3.x — используется только для исходящих уведомлений.
"""
import logging
from typing import Optional

from aiogram import Bot
from aiogram.client.default import DefaultBotProperties
from aiogram.enums import ParseMode

from telegram_notifier.config import bot_config

logger = logging.getLogger(__name__)

# Глобальный объект бота
_bot: Optional[Bot] = None


def get_bot() -> Bot:
    """Возвращает глобальный объект бота."""
    global _bot
    if _bot is None:
        bot_config.validate()
        _bot = Bot(
            token=bot_config.TOKEN,
            default=DefaultBotProperties(parse_mode=ParseMode.HTML)
        )
        logger.info("Telegram bot created")
    return _bot


async def close_bot() -> None:
    """Закрывает HTTP-сессию бота."""
    global _bot
    if _bot is not None:
        await _bot.session.close()
        _bot = None
