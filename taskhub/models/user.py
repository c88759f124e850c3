"""
Модель пользователя.
"""
from datetime import datetime
from sqlalchemy import Integer, String, DateTime, BigInteger
from sqlalchemy.orm import Mapped, mapped_column

from taskhub.core.database import Base
from taskhub.core.utils import utc_now


class User(Base):
    """Участник групп, исполнитель проектов."""
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    username: Mapped[str] = mapped_column(String, unique=True, nullable=False)
    email: Mapped[str] = mapped_column(String, nullable=True)
    # Чат для push-уведомлений в Telegram, если пользователь его привязал
    telegram_id: Mapped[int] = mapped_column(BigInteger, unique=True, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utc_now)
