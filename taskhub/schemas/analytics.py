"""
Pydantic схемы для аналитики пользователя.
"""
from pydantic import BaseModel


class UserBehaviorProfileResponse(BaseModel):
    """Поведенческий профиль пользователя."""
    user_id: int
    procrastination_coefficient: float
    on_time_delivery_rate: float
    average_completion_time_minutes: int
