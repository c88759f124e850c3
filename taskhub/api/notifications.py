"""
API endpoints для уведомлений.
"""
from dataclasses import asdict

from fastapi import APIRouter, Depends, Query, Request, status
from sqlalchemy.orm import Session

from taskhub.core.database import get_db
from taskhub.core.exceptions import SchedulerUnavailableError
from taskhub.core.security import verify_api_key
from taskhub.schemas.notification import (
    NotificationResponse,
    NotificationListResponse,
    SchedulerRunResponse,
    UnreadCountResponse,
)
from taskhub.services.notification_service import NotificationService

router = APIRouter(
    prefix="/notifications",
    tags=["notifications"],
    dependencies=[Depends(verify_api_key)],
)


@router.get("", response_model=NotificationListResponse)
def get_notifications(
    user_id: int = Query(...),
    limit: int = Query(50, ge=1, le=200),
    db: Session = Depends(get_db),
):
    """Получить последние уведомления пользователя."""
    service = NotificationService(db)
    notifications = service.get_for_user(user_id, limit=limit)

    return NotificationListResponse(
        items=[NotificationResponse.model_validate(n) for n in notifications],
        total=len(notifications),
    )


@router.get("/unread-count", response_model=UnreadCountResponse)
def get_unread_count(user_id: int = Query(...), db: Session = Depends(get_db)):
    """Количество непрочитанных уведомлений пользователя."""
    return UnreadCountResponse(unread_count=NotificationService(db).count_unread(user_id))


@router.patch("/mark-all-read")
def mark_all_read(user_id: int = Query(...), db: Session = Depends(get_db)):
    """Отметить все уведомления пользователя прочитанными."""
    count = NotificationService(db).mark_all_read(user_id)
    return {"updated": count}


@router.patch("/{notification_id}/read", response_model=NotificationResponse)
def mark_notification_read(notification_id: int, db: Session = Depends(get_db)):
    """Отметить уведомление прочитанным."""
    notification = NotificationService(db).mark_read(notification_id)
    return NotificationResponse.model_validate(notification)


@router.delete("")
def delete_all_notifications(user_id: int = Query(...), db: Session = Depends(get_db)):
    """Удалить все уведомления пользователя."""
    count = NotificationService(db).delete_all_for_user(user_id)
    return {"deleted": count}


@router.delete("/{notification_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_notification(notification_id: int, db: Session = Depends(get_db)):
    """Удалить уведомление."""
    NotificationService(db).delete(notification_id)


@router.post("/check", response_model=SchedulerRunResponse)
async def trigger_notification_check(request: Request):
    """Ручной запуск проверки дедлайнов."""
    scheduler = getattr(request.app.state, "notification_scheduler", None)
    if scheduler is None:
        raise SchedulerUnavailableError()
    result = await scheduler.trigger_manual_check()
    return SchedulerRunResponse(**asdict(result))
