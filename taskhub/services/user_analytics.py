"""
Поведенческая аналитика пользователя для умных уведомлений.

Профиль считается по истории завершённых проектов:
- коэффициент прокрастинации — во сколько раз пользователю нужно больше
  времени до дедлайна, чем номинальная оценка задачи;
- доля проектов, сданных в срок;
- среднее фактическое время выполнения.

Профиль нигде не сохраняется и пересчитывается на каждый прогон планировщика.
"""
import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Iterable, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from taskhub.services.history_service import TaskHistoryService
from taskhub.services.project_service import ProjectService

logger = logging.getLogger(__name__)

COMPLETED_PROJECTS_SAMPLE = 30
COMPLETION_EVENTS_SAMPLE = 50

MIN_COEFFICIENT = 1.0
MAX_COEFFICIENT = 3.0


@dataclass(frozen=True)
class UserBehaviorProfile:
    procrastination_coefficient: float
    on_time_delivery_rate: float
    average_completion_time_minutes: int


# Профиль по умолчанию: нет истории или расчёт упал
DEFAULT_PROFILE = UserBehaviorProfile(
    procrastination_coefficient=1.5,
    on_time_delivery_rate=0.7,
    average_completion_time_minutes=120,
)


def _delivery_samples(
    completed: Iterable[tuple[Optional[datetime], Optional[datetime]]],
) -> list[tuple[datetime, datetime]]:
    """Оставляет только пары (completed_at, due_date), где известны оба момента."""
    return [
        (completed_at, due_date)
        for completed_at, due_date in completed
        if completed_at is not None and due_date is not None
    ]


def calculate_procrastination_coefficient(
    completed: Iterable[tuple[Optional[datetime], Optional[datetime]]],
) -> float:
    """
    Средний вклад по завершённым проектам, зажатый в [1.0, 3.0].
    Сданный в срок проект даёт 1, опоздавший — 1 + дни_опоздания / 7.
    """
    samples = _delivery_samples(completed)
    if not samples:
        return DEFAULT_PROFILE.procrastination_coefficient

    total = 0.0
    for completed_at, due_date in samples:
        days_late = (completed_at - due_date) / timedelta(days=1)
        total += 1 + days_late / 7 if days_late > 0 else 1
    return max(MIN_COEFFICIENT, min(MAX_COEFFICIENT, total / len(samples)))


def calculate_on_time_delivery_rate(
    completed: Iterable[tuple[Optional[datetime], Optional[datetime]]],
) -> float:
    """Доля проектов, завершённых не позже дедлайна."""
    samples = _delivery_samples(completed)
    if not samples:
        return DEFAULT_PROFILE.on_time_delivery_rate

    on_time = sum(1 for completed_at, due_date in samples if completed_at <= due_date)
    return on_time / len(samples)


def calculate_average_completion_time(durations: Iterable[Optional[int]]) -> int:
    """Среднее фактическое время выполнения в минутах."""
    valid = [d for d in durations if d is not None and d > 0]
    if not valid:
        return DEFAULT_PROFILE.average_completion_time_minutes
    return round(sum(valid) / len(valid))


class UserAnalyticsService:
    """Сервис расчёта поведенческого профиля пользователя."""

    def __init__(self, db: Session):
        self.db = db
        self.projects = ProjectService(db)
        self.history = TaskHistoryService(db)

    def compute_profile(self, user_id: int) -> UserBehaviorProfile:
        """
        Профиль пользователя. Никогда не падает: любая ошибка логируется
        и заменяется на DEFAULT_PROFILE.
        """
        try:
            return self._compute(user_id)
        except SQLAlchemyError:
            logger.exception("Error calculating analytics for user %s, using defaults", user_id)
            # Транзакция после ошибки запроса непригодна для следующих проверок
            self.db.rollback()
            return DEFAULT_PROFILE
        except Exception:
            logger.exception("Error calculating analytics for user %s, using defaults", user_id)
            return DEFAULT_PROFILE

    def _compute(self, user_id: int) -> UserBehaviorProfile:
        completed_projects = self.projects.list_completed_for_user(
            user_id, limit=COMPLETED_PROJECTS_SAMPLE, require_due_date=True,
        )
        completed = [(p.updated_at, p.due_date) for p in completed_projects]

        events = self.history.list_completed_events_for_user(
            user_id, limit=COMPLETION_EVENTS_SAMPLE,
        )

        return UserBehaviorProfile(
            procrastination_coefficient=calculate_procrastination_coefficient(completed),
            on_time_delivery_rate=calculate_on_time_delivery_rate(completed),
            average_completion_time_minutes=calculate_average_completion_time(
                e.actual_time_minutes for e in events
            ),
        )
