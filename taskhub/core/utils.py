"""
Утилиты приложения.
"""
import math
from datetime import datetime, timezone


def utc_now() -> datetime:
    """Текущее время в UTC без tzinfo — так время хранится в БД."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def as_naive_utc(dt: datetime) -> datetime:
    """Приводит datetime с таймзоной к naive UTC, naive возвращает как есть."""
    if dt.tzinfo is None:
        return dt
    return dt.astimezone(timezone.utc).replace(tzinfo=None)


def round_half_up(value: float) -> int:
    """Округление половины вверх: 2.5 -> 3, -2.5 -> -2."""
    return math.floor(value + 0.5)


def format_datetime(dt: datetime | None) -> str:
    """Форматирует datetime (ДД.ММ.ГГГГ ЧЧ:ММ UTC)."""
    if dt is None:
        return "—"
    return as_naive_utc(dt).strftime("%d.%m.%Y %H:%M UTC")


def isoformat_utc(dt: datetime) -> str:
    """ISO 8601 в UTC с суффиксом Z: 2026-03-10T12:00:00.000Z."""
    return as_naive_utc(dt).isoformat(timespec="milliseconds") + "Z"
