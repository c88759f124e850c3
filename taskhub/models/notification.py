"""
Модель уведомлений пользователя.
"""
import enum
from datetime import datetime
from sqlalchemy import Integer, String, DateTime, Boolean, Text, ForeignKey, JSON, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from taskhub.core.database import Base
from taskhub.core.utils import utc_now


class NotificationType(str, enum.Enum):
    TASK_ASSIGNED = "TASK_ASSIGNED"
    DEADLINE_APPROACHING = "DEADLINE_APPROACHING"
    STATUS_CHANGED = "STATUS_CHANGED"
    GROUP_INVITE = "GROUP_INVITE"


class Notification(Base):
    """Сохранённое уведомление."""
    __tablename__ = "notifications"
    # Не больше одного алерта планировщика каждого вида на проект.
    # NULL не конфликтуют, поэтому обычные уведомления не затронуты.
    __table_args__ = (
        UniqueConstraint("project_id", "alert_type", name="uq_notifications_project_alert_type"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id"), nullable=False, index=True)
    type: Mapped[str] = mapped_column(String, nullable=False)
    title: Mapped[str] = mapped_column(String, nullable=False)
    message: Mapped[str] = mapped_column(Text, nullable=False)
    is_read: Mapped[bool] = mapped_column(Boolean, default=False)
    project_id: Mapped[int] = mapped_column(ForeignKey("projects.id"), nullable=True, index=True)
    group_id: Mapped[int] = mapped_column(ForeignKey("groups.id"), nullable=True)
    alert_type: Mapped[str] = mapped_column(String, nullable=True)  # smart_start_reminder, deadline_critical, deadline_urgent
    # "metadata" зарезервировано в DeclarativeBase
    meta: Mapped[dict] = mapped_column("metadata", JSON, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utc_now)
