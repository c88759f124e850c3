"""
Модели SQLAlchemy — импортируем все для корректной регистрации relationship.
"""
from taskhub.models.user import User  # noqa: F401
from taskhub.models.group import Group  # noqa: F401
from taskhub.models.project import Project, ProjectStatus  # noqa: F401
from taskhub.models.history import TaskHistory  # noqa: F401
from taskhub.models.notification import Notification, NotificationType  # noqa: F401
