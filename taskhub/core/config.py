"""
Конфигурация приложения.
"""
import os
from dotenv import load_dotenv

load_dotenv()


def _env_bool(name: str, default: bool) -> bool:
    """Читает булеву переменную окружения (true/1/yes)."""
    value = os.getenv(name)
    if value is None or value == "":
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


class Settings:
    """Настройки приложения."""

    # Database — без дефолта, приложение не запустится без БД
    DATABASE_URL: str = os.getenv("DATABASE_URL", "")

    # FastAPI
    APP_TITLE: str = "TaskHub"

    # API Security — без дефолтов
    API_KEY: str = os.getenv("API_KEY", "")

    # CORS — по умолчанию пустой (ничего не разрешено)
    ALLOWED_ORIGINS: str = os.getenv("ALLOWED_ORIGINS", "")

    # Smart Notification Engine
    SCHEDULER_ENABLED: bool = _env_bool("SCHEDULER_ENABLED", True)
    NOTIFICATION_CHECK_INTERVAL_SECONDS: int = int(
        os.getenv("NOTIFICATION_CHECK_INTERVAL_SECONDS", 300)
    )
    # Номинальная оценка задачи, пока у проекта нет своей оценки
    NOMINAL_ESTIMATED_MINUTES: int = int(os.getenv("NOMINAL_ESTIMATED_MINUTES", 240))
    PUSH_TIMEOUT_SECONDS: float = float(os.getenv("PUSH_TIMEOUT_SECONDS", 5.0))


settings = Settings()
