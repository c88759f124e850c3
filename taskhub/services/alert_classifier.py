"""
Классификатор алертов по дедлайну проекта.

Чистая функция от дедлайна, профиля пользователя и текущего времени.
Уже отправленные алерты здесь не учитываются, их отсекает NotificationDeduplicationGate.
"""
import enum
from datetime import datetime, timedelta
from typing import Optional

from taskhub.core.utils import as_naive_utc
from taskhub.models.project import Project, ACTIVE_STATUSES
from taskhub.services.user_analytics import UserBehaviorProfile

DEFAULT_ESTIMATED_MINUTES = 240

CRITICAL_WINDOW = timedelta(hours=24)
URGENT_WINDOW = timedelta(hours=2)


class AlertType(str, enum.Enum):
    SMART_START_REMINDER = "smart_start_reminder"
    DEADLINE_CRITICAL = "deadline_critical"
    DEADLINE_URGENT = "deadline_urgent"


# Порядок отправки внутри одного прогона
ALERT_ORDER = (
    AlertType.SMART_START_REMINDER,
    AlertType.DEADLINE_CRITICAL,
    AlertType.DEADLINE_URGENT,
)


def nominal_estimated_minutes(
    project: Project, default_minutes: int = DEFAULT_ESTIMATED_MINUTES
) -> int:
    """Собственная оценка проекта, если она задана, иначе дефолт из настроек."""
    if project.estimated_minutes and project.estimated_minutes > 0:
        return project.estimated_minutes
    return default_minutes


def realistic_start_time(
    due_date: datetime, estimated_minutes: int, procrastination_coefficient: float
) -> datetime:
    """Момент, когда с учётом привычек пользователя пора начинать."""
    return due_date - timedelta(minutes=estimated_minutes * procrastination_coefficient)


def is_eligible(project: Project, now: datetime) -> bool:
    """Проект активен и его дедлайн ещё не наступил."""
    if project.status not in ACTIVE_STATUSES or project.due_date is None:
        return False
    return as_naive_utc(project.due_date) > as_naive_utc(now)


def classify(
    project: Project,
    profile: UserBehaviorProfile,
    now: datetime,
    default_estimated_minutes: Optional[int] = None,
) -> set[AlertType]:
    """Набор алертов, условие которых выполнено на момент now."""
    if not is_eligible(project, now):
        return set()

    now = as_naive_utc(now)
    due_date = as_naive_utc(project.due_date)
    estimated = nominal_estimated_minutes(
        project, default_estimated_minutes or DEFAULT_ESTIMATED_MINUTES
    )

    alerts = set()
    if now >= realistic_start_time(due_date, estimated, profile.procrastination_coefficient):
        alerts.add(AlertType.SMART_START_REMINDER)
    if now >= due_date - CRITICAL_WINDOW:
        alerts.add(AlertType.DEADLINE_CRITICAL)
    if now >= due_date - URGENT_WINDOW:
        alerts.add(AlertType.DEADLINE_URGENT)
    return alerts
