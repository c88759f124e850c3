"""
Сервис чтения проектов для планировщика уведомлений.
"""
import logging
from datetime import datetime
from typing import Optional

from sqlalchemy.orm import Session, joinedload
from sqlalchemy import desc

from taskhub.models.project import Project, ProjectStatus, ACTIVE_STATUSES

logger = logging.getLogger(__name__)


class ProjectService:
    """Сервис для выборок по проектам."""

    def __init__(self, db: Session):
        self.db = db

    def get_by_id(self, project_id: int) -> Optional[Project]:
        """Получить проект по ID."""
        return self.db.query(Project).filter(Project.id == project_id).first()

    def list_active_with_future_due_date(self, now: datetime) -> list[Project]:
        """
        Активные проекты (PLANNING / IN_PROGRESS) с дедлайном в будущем.
        Исполнитель и группа подгружаются сразу.
        """
        return (
            self.db.query(Project)
            .options(joinedload(Project.assigned_user), joinedload(Project.group))
            .filter(
                Project.status.in_(ACTIVE_STATUSES),
                Project.due_date.isnot(None),
                Project.due_date > now,
            )
            .order_by(Project.due_date)
            .all()
        )

    def list_completed_for_user(
        self,
        user_id: int,
        limit: int = 30,
        require_due_date: bool = True,
    ) -> list[Project]:
        """Последние завершённые проекты пользователя, свежие первыми."""
        query = self.db.query(Project).filter(
            Project.assigned_to == user_id,
            Project.status == ProjectStatus.DONE.value,
        )
        if require_due_date:
            query = query.filter(Project.due_date.isnot(None))
        return query.order_by(desc(Project.updated_at)).limit(limit).all()
