"""
API endpoints для аналитики пользователя.
"""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from taskhub.core.database import get_db
from taskhub.core.security import verify_api_key
from taskhub.schemas.analytics import UserBehaviorProfileResponse
from taskhub.services.user_analytics import UserAnalyticsService

router = APIRouter(
    prefix="/analytics",
    tags=["analytics"],
    dependencies=[Depends(verify_api_key)],
)


@router.get("/users/{user_id}/profile", response_model=UserBehaviorProfileResponse)
def get_user_profile(user_id: int, db: Session = Depends(get_db)):
    """
    Поведенческий профиль пользователя: коэффициент прокрастинации,
    доля сданных в срок проектов и среднее время выполнения.
    """
    profile = UserAnalyticsService(db).compute_profile(user_id)
    return UserBehaviorProfileResponse(
        user_id=user_id,
        procrastination_coefficient=profile.procrastination_coefficient,
        on_time_delivery_rate=profile.on_time_delivery_rate,
        average_completion_time_minutes=profile.average_completion_time_minutes,
    )
