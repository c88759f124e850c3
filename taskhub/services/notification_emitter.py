"""
Отправка уведомлений: запись в БД и push в канал живой доставки.

Сохранённая запись — источник истины. Push best-effort: его ошибка или таймаут
логируются и не отменяют уведомление.
"""
import asyncio
import logging
from datetime import datetime
from typing import Any, Optional

from sqlalchemy.orm import Session
from starlette.concurrency import run_in_threadpool

from taskhub.core.utils import as_naive_utc, format_datetime, isoformat_utc, round_half_up
from taskhub.models.notification import Notification, NotificationType
from taskhub.models.project import Project
from taskhub.realtime.base import LiveChannel, NEW_NOTIFICATION_EVENT
from taskhub.schemas.notification import NotificationCreate, NotificationResponse
from taskhub.services.alert_classifier import AlertType
from taskhub.services.notification_service import NotificationService
from taskhub.services.user_analytics import UserBehaviorProfile

logger = logging.getLogger(__name__)

DEFAULT_PUSH_TIMEOUT = 5.0

SMART_START_TITLE = "Smart Start Reminder"
DEADLINE_CRITICAL_TITLE = "24-Hour Deadline Alert"
DEADLINE_URGENT_TITLE = "Final Deadline Warning"
TASK_ASSIGNED_TITLE = "New Task Assigned"
DEADLINE_APPROACHING_TITLE = "Deadline Approaching"

# Тексты уведомлений
NOTIFICATION_MESSAGES = {
    AlertType.SMART_START_REMINDER: (
        '⚡ Perfect timing! Based on your work patterns, now is the ideal time to start "{title}". '
        "You have {hours} hours until the deadline. "
        "Your success rate when starting at this time: {success_rate}%"
    ),
    AlertType.DEADLINE_CRITICAL: (
        '⚠️ Heads up! "{title}" is due in less than 24 hours. '
        "Time to focus and get it done! 🚀"
    ),
    AlertType.DEADLINE_URGENT: (
        '🚨 URGENT: "{title}" is due in 2 hours! '
        "This is your final reminder. Drop everything and complete this task now! ⏰"
    ),
}


def hours_until_due(due_date: datetime, now: datetime) -> int:
    """Часы до дедлайна, округлённые до целого."""
    seconds = (as_naive_utc(due_date) - as_naive_utc(now)).total_seconds()
    return round_half_up(seconds / 3600)


def build_smart_start_message(title: str, hours: int, on_time_delivery_rate: float) -> str:
    return NOTIFICATION_MESSAGES[AlertType.SMART_START_REMINDER].format(
        title=title,
        hours=hours,
        success_rate=round_half_up(on_time_delivery_rate * 100),
    )


def build_deadline_critical_message(title: str) -> str:
    return NOTIFICATION_MESSAGES[AlertType.DEADLINE_CRITICAL].format(title=title)


def build_deadline_urgent_message(title: str) -> str:
    return NOTIFICATION_MESSAGES[AlertType.DEADLINE_URGENT].format(title=title)


def _group_name(project: Project) -> Optional[str]:
    return project.group.name if project.group else None


def smart_start_reminder_data(
    project: Project, profile: UserBehaviorProfile, now: datetime
) -> NotificationCreate:
    hours = hours_until_due(project.due_date, now)
    return NotificationCreate(
        user_id=project.assigned_to,
        type=NotificationType.TASK_ASSIGNED.value,
        title=SMART_START_TITLE,
        message=build_smart_start_message(project.title, hours, profile.on_time_delivery_rate),
        project_id=project.id,
        group_id=project.group_id,
        alert_type=AlertType.SMART_START_REMINDER.value,
        metadata={
            "taskTitle": project.title,
            "groupName": _group_name(project),
            "procrastinationCoefficient": profile.procrastination_coefficient,
            "onTimeDeliveryRate": profile.on_time_delivery_rate,
            "hoursUntilDue": hours,
            "notificationType": AlertType.SMART_START_REMINDER.value,
        },
    )


def deadline_critical_data(project: Project) -> NotificationCreate:
    return NotificationCreate(
        user_id=project.assigned_to,
        type=NotificationType.DEADLINE_APPROACHING.value,
        title=DEADLINE_CRITICAL_TITLE,
        message=build_deadline_critical_message(project.title),
        project_id=project.id,
        group_id=project.group_id,
        alert_type=AlertType.DEADLINE_CRITICAL.value,
        metadata={
            "taskTitle": project.title,
            "groupName": _group_name(project),
            "dueDate": isoformat_utc(project.due_date),
            "notificationType": AlertType.DEADLINE_CRITICAL.value,
        },
    )


def deadline_urgent_data(project: Project) -> NotificationCreate:
    return NotificationCreate(
        user_id=project.assigned_to,
        type=NotificationType.DEADLINE_APPROACHING.value,
        title=DEADLINE_URGENT_TITLE,
        message=build_deadline_urgent_message(project.title),
        project_id=project.id,
        group_id=project.group_id,
        alert_type=AlertType.DEADLINE_URGENT.value,
        metadata={
            "taskTitle": project.title,
            "groupName": _group_name(project),
            "dueDate": isoformat_utc(project.due_date),
            "notificationType": AlertType.DEADLINE_URGENT.value,
            "urgencyLevel": "CRITICAL",
        },
    )


def build_alert_data(
    project: Project,
    alert_type: AlertType,
    profile: Optional[UserBehaviorProfile] = None,
    now: Optional[datetime] = None,
) -> NotificationCreate:
    """Данные алерта планировщика нужного вида."""
    if alert_type == AlertType.SMART_START_REMINDER:
        return smart_start_reminder_data(project, profile, now)
    if alert_type == AlertType.DEADLINE_CRITICAL:
        return deadline_critical_data(project)
    if alert_type == AlertType.DEADLINE_URGENT:
        return deadline_urgent_data(project)
    raise ValueError(f"Unknown alert type: {alert_type}")


class NotificationEmitter:
    """
    Создаёт уведомления и доставляет их пользователю.

    Запросы к БД выполняются в пуле потоков, в event loop остаётся только push.
    """

    def __init__(
        self,
        db: Session,
        channel: Optional[LiveChannel] = None,
        push_timeout: float = DEFAULT_PUSH_TIMEOUT,
    ):
        self.db = db
        self.channel = channel
        self.push_timeout = push_timeout
        self.notifications = NotificationService(db)

    async def emit(
        self,
        user_id: int,
        type: str,
        title: str,
        message: str,
        project_id: Optional[int] = None,
        group_id: Optional[int] = None,
        alert_type: Optional[str] = None,
        metadata: Optional[dict[str, Any]] = None,
    ) -> Notification:
        """
        Сохраняет уведомление и отправляет его в живой канал.
        Ошибка сохранения пробрасывается, ошибка доставки — нет.
        """
        return await self._emit(NotificationCreate(
            user_id=user_id,
            type=type,
            title=title,
            message=message,
            project_id=project_id,
            group_id=group_id,
            alert_type=alert_type,
            metadata=metadata,
        ))

    async def _emit(self, data: NotificationCreate) -> Notification:
        notification = await run_in_threadpool(self._save, data)
        await self._push(notification)
        return notification

    def _save(self, data: NotificationCreate) -> Notification:
        notification = self.notifications.create(data)
        self.db.commit()
        # Атрибуты загружены заново: дальше объект читается без обращений к БД
        self.db.refresh(notification)
        return notification

    async def _push(self, notification: Notification) -> None:
        if self.channel is None:
            return
        payload = NotificationResponse.model_validate(notification).model_dump(mode="json")
        try:
            await asyncio.wait_for(
                self.channel.push(notification.user_id, NEW_NOTIFICATION_EVENT, payload),
                timeout=self.push_timeout,
            )
        except asyncio.TimeoutError:
            logger.warning(
                "Live push of notification %s to user %s timed out",
                notification.id, notification.user_id,
            )
        except Exception as e:
            logger.error(f"Live push of notification {notification.id} failed: {e}")

    # ---- алерты планировщика ----

    async def emit_alert(
        self,
        project: Project,
        alert_type: AlertType,
        profile: Optional[UserBehaviorProfile] = None,
        now: Optional[datetime] = None,
    ) -> Notification:
        """Отправляет алерт планировщика нужного вида."""
        data = await run_in_threadpool(build_alert_data, project, alert_type, profile, now)
        notification = await self._emit(data)
        logger.info(
            "Sent %s alert for project %s to user %s",
            data.alert_type, data.project_id, data.user_id,
        )
        return notification

    async def send_smart_start_reminder(
        self, project: Project, profile: UserBehaviorProfile, now: datetime
    ) -> Notification:
        return await self.emit_alert(project, AlertType.SMART_START_REMINDER, profile, now)

    async def send_deadline_critical_alert(self, project: Project) -> Notification:
        return await self.emit_alert(project, AlertType.DEADLINE_CRITICAL)

    async def send_deadline_urgent_alert(self, project: Project) -> Notification:
        return await self.emit_alert(project, AlertType.DEADLINE_URGENT)

    # ---- прочие уведомления ----

    async def notify_task_assigned(
        self,
        user_id: int,
        project_title: str,
        assigned_by: Optional[str] = None,
        project_id: Optional[int] = None,
        group_id: Optional[int] = None,
        group_name: Optional[str] = None,
    ) -> Notification:
        assigned_by_text = f" by {assigned_by}" if assigned_by else ""
        return await self.emit(
            user_id=user_id,
            type=NotificationType.TASK_ASSIGNED.value,
            title=TASK_ASSIGNED_TITLE,
            message=f'You have been assigned to: "{project_title}"{assigned_by_text}',
            project_id=project_id,
            group_id=group_id,
            metadata={
                "assignedBy": assigned_by,
                "projectTitle": project_title,
                "groupName": group_name,
            },
        )

    async def notify_deadline_approaching(
        self,
        user_id: int,
        project_title: str,
        due_date: datetime,
        project_id: Optional[int] = None,
        group_id: Optional[int] = None,
        group_name: Optional[str] = None,
    ) -> Notification:
        formatted = format_datetime(due_date)
        return await self.emit(
            user_id=user_id,
            type=NotificationType.DEADLINE_APPROACHING.value,
            title=DEADLINE_APPROACHING_TITLE,
            message=f'Task "{project_title}" is due {formatted}',
            project_id=project_id,
            group_id=group_id,
            metadata={
                "projectTitle": project_title,
                "groupName": group_name,
                "dueDate": isoformat_utc(due_date),
                "formattedDueDate": formatted,
            },
        )
