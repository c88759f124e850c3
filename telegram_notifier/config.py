"""
Конфигурация Telegram-канала уведомлений.
"""
import os
from dotenv import load_dotenv

load_dotenv()


class BotConfig:
    """Конфигурация бота."""

    # Telegram Bot Token - никогда не коммитить в репозиторий!
    TOKEN: str = os.getenv("TELEGRAM_BOT_TOKEN", "")

    @classmethod
    def is_enabled(cls) -> bool:
        """Канал включается, только если задан токен."""
        return bool(cls.TOKEN)

    @classmethod
    def validate(cls) -> bool:
        """Проверяет, что все необходимые переменные окружения установлены."""
        if not cls.TOKEN:
            raise ValueError(
                "TELEGRAM_BOT_TOKEN не установлен! "
                "Пожалуйста, создайте .env файл на основе .env.example"
            )
        return True


bot_config = BotConfig()
