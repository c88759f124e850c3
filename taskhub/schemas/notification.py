"""
Pydantic схемы для уведомлений.
"""
from datetime import datetime
from typing import Optional, Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class NotificationCreate(BaseModel):
    """Данные для сохранения нового уведомления."""
    user_id: int
    type: str
    title: str
    message: str
    project_id: Optional[int] = None
    group_id: Optional[int] = None
    alert_type: Optional[str] = None
    metadata: Optional[dict[str, Any]] = None


class NotificationResponse(BaseModel):
    """Схема ответа с данными уведомления."""
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    type: str
    title: str
    message: str
    is_read: bool = False
    project_id: Optional[int] = None
    group_id: Optional[int] = None
    alert_type: Optional[str] = None
    metadata: Optional[dict[str, Any]] = Field(
        default=None, validation_alias=AliasChoices("meta", "metadata")
    )
    created_at: datetime


class NotificationListResponse(BaseModel):
    """Схема списка уведомлений."""
    items: list[NotificationResponse]
    total: int


class UnreadCountResponse(BaseModel):
    unread_count: int


class SchedulerRunResponse(BaseModel):
    """Итог одного прогона планировщика."""
    skipped: bool
    projects_checked: int
    alerts_sent: int
    failures: int
    error: Optional[str] = None
