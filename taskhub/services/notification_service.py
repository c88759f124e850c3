"""
Сервис для работы с уведомлениями.
"""
import logging
from typing import Optional

from sqlalchemy.orm import Session
from sqlalchemy import and_, desc, func, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from taskhub.core.exceptions import DuplicateError, NotFoundException
from taskhub.models.notification import Notification
from taskhub.schemas.notification import NotificationCreate

logger = logging.getLogger(__name__)


class NotificationService:
    """Сервис для управления уведомлениями."""

    def __init__(self, db: Session):
        self.db = db

    def exists(self, project_id: int, alert_type: str) -> bool:
        """Есть ли уже уведомление данного вида по проекту."""
        query = select(Notification.id).where(
            and_(
                Notification.project_id == project_id,
                Notification.alert_type == alert_type,
            )
        )
        return self.db.execute(query.limit(1)).first() is not None

    def create(self, data: NotificationCreate) -> Notification:
        """Сохраняет уведомление."""
        notification = Notification(
            user_id=data.user_id,
            type=data.type,
            title=data.title,
            message=data.message,
            project_id=data.project_id,
            group_id=data.group_id,
            alert_type=data.alert_type,
            meta=data.metadata,
        )
        self.db.add(notification)
        try:
            self.db.flush()
        except IntegrityError:
            self.db.rollback()
            logger.warning(
                "Duplicate notification: project_id=%s, alert_type=%s",
                data.project_id, data.alert_type,
            )
            raise DuplicateError(
                f"Уведомление {data.alert_type} для проекта {data.project_id} уже существует"
            )
        self.db.refresh(notification)
        return notification

    def get_by_id(self, notification_id: int) -> Optional[Notification]:
        """Получить уведомление по ID."""
        return self.db.query(Notification).filter(Notification.id == notification_id).first()

    def get_for_user(self, user_id: int, limit: int = 50) -> list[Notification]:
        """Последние уведомления пользователя."""
        return (
            self.db.query(Notification)
            .filter(Notification.user_id == user_id)
            .order_by(desc(Notification.created_at), desc(Notification.id))
            .limit(limit)
            .all()
        )

    def count_unread(self, user_id: int) -> int:
        """Количество непрочитанных уведомлений пользователя."""
        return (
            self.db.query(func.count(Notification.id))
            .filter(Notification.user_id == user_id, Notification.is_read == False)  # noqa: E712
            .scalar()
        )

    def mark_read(self, notification_id: int) -> Notification:
        """Отмечает уведомление прочитанным."""
        notification = self.get_by_id(notification_id)
        if notification is None:
            raise NotFoundException("Уведомление", notification_id)
        notification.is_read = True
        self.db.flush()
        return notification

    def mark_all_read(self, user_id: int) -> int:
        """Отмечает все уведомления пользователя прочитанными."""
        count = (
            self.db.query(Notification)
            .filter(Notification.user_id == user_id, Notification.is_read == False)  # noqa: E712
            .update({"is_read": True})
        )
        self.db.flush()
        return count

    def delete(self, notification_id: int) -> None:
        """Удаляет уведомление."""
        notification = self.get_by_id(notification_id)
        if notification is None:
            raise NotFoundException("Уведомление", notification_id)
        self.db.delete(notification)
        self.db.flush()

    def delete_all_for_user(self, user_id: int) -> int:
        """Удаляет все уведомления пользователя, возвращает их количество."""
        count = (
            self.db.query(Notification)
            .filter(Notification.user_id == user_id)
            .delete()
        )
        self.db.flush()
        logger.info("Deleted %s notifications of user %s", count, user_id)
        return count


class NotificationDeduplicationGate:
    """
    Проверка «этот алерт по проекту уже отправлялся».

    При ошибке БД считаем, что алерт не отправлялся.
    Дубли дополнительно отсекает уникальный индекс (project_id, alert_type).
    """

    def __init__(self, service: NotificationService):
        self.service = service

    def already_sent(self, project_id: int, alert_type: str) -> bool:
        try:
            return self.service.exists(project_id, alert_type)
        except SQLAlchemyError:
            logger.exception(
                "Error checking existing notifications for project %s (%s)",
                project_id, alert_type,
            )
            # Сессия после ошибки непригодна для вставки алерта
            self.service.db.rollback()
            return False
