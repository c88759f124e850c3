"""
Сервис для работы с пользователями.
"""
from typing import Optional

from sqlalchemy.orm import Session

from taskhub.models.user import User


class UserService:
    """Сервис чтения пользователей."""

    def __init__(self, db: Session):
        self.db = db

    def get_by_id(self, user_id: int) -> Optional[User]:
        """Получить пользователя по ID."""
        return self.db.query(User).filter(User.id == user_id).first()

    def get_telegram_id(self, user_id: int) -> Optional[int]:
        """Telegram chat id пользователя, если он привязан."""
        return self.db.query(User.telegram_id).filter(User.id == user_id).scalar()
