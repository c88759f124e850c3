"""
Сервисный слой для бизнес-логики.
"""
from taskhub.services.project_service import ProjectService
from taskhub.services.user_service import UserService
from taskhub.services.history_service import TaskHistoryService
from taskhub.services.notification_service import NotificationService, NotificationDeduplicationGate
from taskhub.services.user_analytics import UserAnalyticsService
from taskhub.services.notification_emitter import NotificationEmitter
from taskhub.services.notification_scheduler import SmartNotificationScheduler

__all__ = [
    "ProjectService",
    "UserService",
    "TaskHistoryService",
    "NotificationService",
    "NotificationDeduplicationGate",
    "UserAnalyticsService",
    "NotificationEmitter",
    "SmartNotificationScheduler",
]
