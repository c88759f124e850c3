"""
Фоновый планировщик умных уведомлений о дедлайнах.

Раз в NOTIFICATION_CHECK_INTERVAL_SECONDS проходит по активным проектам и для
каждого исполнителя решает, какие алерты пора отправить:
- smart_start_reminder — с учётом коэффициента прокрастинации пользователя;
- deadline_critical — меньше 24 часов до дедлайна;
- deadline_urgent — меньше 2 часов до дедлайна.

Каждый алерт отправляется по проекту не больше одного раза.
Если предыдущий прогон ещё идёт, очередной тик пропускается (не ставится в очередь).
"""
import asyncio
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional

from sqlalchemy.orm import Session, sessionmaker
from starlette.concurrency import run_in_threadpool

from taskhub.core.exceptions import DuplicateError
from taskhub.core.utils import utc_now
from taskhub.models.project import Project
from taskhub.realtime.base import LiveChannel
from taskhub.services.alert_classifier import (
    ALERT_ORDER,
    AlertType,
    DEFAULT_ESTIMATED_MINUTES,
    classify,
    realistic_start_time,
    nominal_estimated_minutes,
)
from taskhub.services.notification_emitter import DEFAULT_PUSH_TIMEOUT, NotificationEmitter
from taskhub.services.notification_service import NotificationDeduplicationGate, NotificationService
from taskhub.services.project_service import ProjectService
from taskhub.services.user_analytics import UserAnalyticsService, UserBehaviorProfile

logger = logging.getLogger(__name__)

# Интервал проверки в секундах
CHECK_INTERVAL = 300


@dataclass
class SchedulerRunResult:
    """Итог одного прогона."""
    skipped: bool = False
    projects_checked: int = 0
    alerts_sent: int = 0
    failures: int = 0
    error: Optional[str] = None


class SmartNotificationScheduler:
    """Планировщик: состояния Idle -> Running -> Idle."""

    def __init__(
        self,
        session_factory: sessionmaker,
        channel: Optional[LiveChannel] = None,
        clock: Callable[[], datetime] = utc_now,
        interval_seconds: float = CHECK_INTERVAL,
        default_estimated_minutes: int = DEFAULT_ESTIMATED_MINUTES,
        push_timeout: float = DEFAULT_PUSH_TIMEOUT,
    ):
        self.session_factory = session_factory
        self.channel = channel
        self.clock = clock
        self.interval_seconds = interval_seconds
        self.default_estimated_minutes = default_estimated_minutes
        self.push_timeout = push_timeout

        self._is_running = False
        self._loop_task: Optional[asyncio.Task] = None
        self._runs: set[asyncio.Task] = set()

    @property
    def is_running(self) -> bool:
        return self._is_running

    @property
    def is_started(self) -> bool:
        return self._loop_task is not None and not self._loop_task.done()

    # ---- жизненный цикл ----

    def start(self) -> None:
        """Запускает периодический цикл в текущем event loop."""
        if self.is_started:
            logger.info("Smart notification scheduler already started, skipping")
            return
        self._loop_task = asyncio.create_task(self._cadence())
        logger.info(
            "Smart notification scheduler started - checking every %s seconds",
            self.interval_seconds,
        )

    async def stop(self) -> None:
        """Останавливает цикл и незавершённые прогоны."""
        logger.info("Stopping smart notification scheduler...")
        tasks = list(self._runs)
        if self._loop_task is not None:
            tasks.append(self._loop_task)
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        self._loop_task = None
        self._runs.clear()

    async def _cadence(self) -> None:
        # Тик не ждёт завершения прогона, перекрытие отсекает run_once
        while True:
            run = asyncio.create_task(self.run_once())
            self._runs.add(run)
            run.add_done_callback(self._runs.discard)
            await asyncio.sleep(self.interval_seconds)

    async def trigger_manual_check(self) -> SchedulerRunResult:
        """Ручной запуск проверки. Во время идущего прогона тоже пропускается."""
        logger.info("Manual notification check triggered")
        return await self.run_once()

    # ---- прогон ----

    async def run_once(self) -> SchedulerRunResult:
        """Один прогон анализа; при уже идущем прогоне ничего не делает."""
        if self._is_running:
            logger.info("Previous notification job still running, skipping")
            return SchedulerRunResult(skipped=True)

        self._is_running = True
        result = SchedulerRunResult()
        logger.info("Running smart notification analysis...")
        try:
            await self._process(result)
            logger.info(
                "Smart notification analysis completed: %s projects, %s alerts, %s failures",
                result.projects_checked, result.alerts_sent, result.failures,
            )
        except Exception as e:
            logger.exception("Error in notification scheduler")
            result.error = str(e)
        finally:
            self._is_running = False
        return result

    async def _process(self, result: SchedulerRunResult) -> None:
        db = self.session_factory()
        try:
            candidates = await run_in_threadpool(self._load_projects, db)
            for project_id, project in candidates:
                result.projects_checked += 1
                try:
                    result.alerts_sent += await self._analyze_project(db, project)
                except Exception:
                    logger.exception("Error analyzing project %s", project_id)
                    await run_in_threadpool(db.rollback)
                    result.failures += 1
        finally:
            db.close()

    def _load_projects(self, db: Session) -> list[tuple[int, Project]]:
        """Проекты с исполнителем, которые пора проверить, вместе с их id."""
        now = self.clock()
        projects = ProjectService(db).list_active_with_future_due_date(now)
        logger.info("Found %s active projects to analyze", len(projects))
        return [(p.id, p) for p in projects if p.assigned_to is not None]

    def _plan_alerts(
        self, db: Session, project: Project
    ) -> tuple[UserBehaviorProfile, datetime, list[AlertType]]:
        """Профиль, момент оценки и ещё не отправленные созревшие алерты по проекту."""
        profile = UserAnalyticsService(db).compute_profile(project.assigned_to)
        # Время берём заново: аналитика и отправки предыдущих проектов занимают время
        now = self.clock()
        alerts = classify(project, profile, now, self.default_estimated_minutes)

        if logger.isEnabledFor(logging.DEBUG) and project.due_date is not None:
            logger.debug(
                "Project %s: due %s, realistic start %s, coefficient %s",
                project.id,
                project.due_date.isoformat(),
                realistic_start_time(
                    project.due_date,
                    nominal_estimated_minutes(project, self.default_estimated_minutes),
                    profile.procrastination_coefficient,
                ).isoformat(),
                profile.procrastination_coefficient,
            )

        gate = NotificationDeduplicationGate(NotificationService(db))
        pending = [
            alert_type for alert_type in ALERT_ORDER
            if alert_type in alerts and not gate.already_sent(project.id, alert_type.value)
        ]
        return profile, now, pending

    async def _analyze_project(self, db: Session, project: Project) -> int:
        """Отправляет созревшие алерты по проекту, возвращает их количество."""
        profile, now, pending = await run_in_threadpool(self._plan_alerts, db, project)
        emitter = NotificationEmitter(db, self.channel, push_timeout=self.push_timeout)

        sent = 0
        for alert_type in pending:
            try:
                await emitter.emit_alert(project, alert_type, profile, now)
            except DuplicateError:
                # Проверка дублей не сработала, а алерт уже сохранён ранее
                logger.info("%s already sent, skipping", alert_type.value)
                continue
            sent += 1
        return sent
