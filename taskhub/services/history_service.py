"""
Сервис для работы с историей событий по проектам.
"""
import logging

from sqlalchemy.orm import Session
from sqlalchemy import desc

from taskhub.models.history import TaskHistory
from taskhub.schemas.history import TaskHistoryCreate

logger = logging.getLogger(__name__)

COMPLETED_EVENT = "completed"


class TaskHistoryService:
    """Сервис для управления историей событий."""

    def __init__(self, db: Session):
        self.db = db

    def list_completed_events_for_user(self, user_id: int, limit: int = 50) -> list[TaskHistory]:
        """Последние события завершения с известным фактическим временем."""
        return (
            self.db.query(TaskHistory)
            .filter(
                TaskHistory.user_id == user_id,
                TaskHistory.event_type == COMPLETED_EVENT,
                TaskHistory.actual_time_minutes.isnot(None),
                TaskHistory.actual_time_minutes > 0,
            )
            .order_by(desc(TaskHistory.created_at))
            .limit(limit)
            .all()
        )

    def create(self, data: TaskHistoryCreate) -> TaskHistory:
        """Создать новое событие истории."""
        logger.info(
            "Creating history event: project_id=%s, user_id=%s, type=%s",
            data.project_id, data.user_id, data.event_type,
        )
        event = TaskHistory(
            project_id=data.project_id,
            user_id=data.user_id,
            event_type=data.event_type,
            actual_time_minutes=data.actual_time_minutes,
            payload=data.payload,
        )
        if data.created_at is not None:
            event.created_at = data.created_at
        self.db.add(event)
        self.db.flush()
        self.db.refresh(event)
        return event
