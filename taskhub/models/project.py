"""
Модель проекта (задачи группы).
"""
import enum
from datetime import datetime
from sqlalchemy import Integer, String, DateTime, Text, ForeignKey, Index
from sqlalchemy.orm import Mapped, mapped_column, relationship

from taskhub.core.database import Base
from taskhub.core.utils import utc_now


class ProjectStatus(str, enum.Enum):
    PLANNING = "PLANNING"
    IN_PROGRESS = "IN_PROGRESS"
    DONE = "DONE"


ACTIVE_STATUSES = (ProjectStatus.PLANNING.value, ProjectStatus.IN_PROGRESS.value)


class Project(Base):
    """Проект — единица работы, за дедлайном которой следит планировщик."""
    __tablename__ = "projects"
    __table_args__ = (
        Index("ix_projects_status_due_date", "status", "due_date"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    title: Mapped[str] = mapped_column(String, nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=True)
    status: Mapped[str] = mapped_column(String, nullable=False, default=ProjectStatus.PLANNING.value)
    due_date: Mapped[datetime] = mapped_column(DateTime, nullable=True)
    estimated_minutes: Mapped[int] = mapped_column(Integer, nullable=True)
    assigned_to: Mapped[int] = mapped_column(ForeignKey("users.id"), nullable=True, index=True)
    group_id: Mapped[int] = mapped_column(ForeignKey("groups.id"), nullable=False, index=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utc_now)
    # Для DONE-проектов это момент завершения
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=utc_now, onupdate=utc_now)

    assigned_user = relationship("User", lazy="select")
    group = relationship("Group", lazy="select")
