"""
Pydantic схемы для истории событий.
"""
from datetime import datetime
from typing import Optional, Any

from pydantic import BaseModel


class TaskHistoryBase(BaseModel):
    """Базовая схема события истории."""
    project_id: int
    user_id: int
    event_type: str
    actual_time_minutes: Optional[int] = None
    payload: Optional[dict[str, Any]] = None


class TaskHistoryCreate(TaskHistoryBase):
    """Схема создания события истории."""
    created_at: Optional[datetime] = None
