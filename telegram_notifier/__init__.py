"""
Доставка уведомлений TaskHub в Telegram.
"""
from telegram_notifier.channel import TelegramChannel

__all__ = ["TelegramChannel"]
