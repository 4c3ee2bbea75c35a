from typing import List

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.api.auth.dependencies import get_current_active_user
from app.api.notifications.schemas import NotificationItem, UnreadCount
from app.api.notifications.service import NotificationService
from app.api.profile.models import User
from app.database.database import get_db

router = APIRouter(prefix="/api/notifications", tags=["notifications"])


def get_notification_service(db: Session = Depends(get_db)) -> NotificationService:
    return NotificationService(db)


@router.get("", response_model=List[NotificationItem])
async def get_notifications(
        limit: int = Query(50, ge=1, le=200),
        current_user: User = Depends(get_current_active_user),
        service: NotificationService = Depends(get_notification_service)
):
    return service.list_for_user(current_user.id, limit)


@router.get("/unread-count", response_model=UnreadCount)
async def get_unread_count(
        current_user: User = Depends(get_current_active_user),
        service: NotificationService = Depends(get_notification_service)
):
    return {"count": service.unread_count(current_user.id)}


@router.put("/read-all")
async def mark_all_read(
        current_user: User = Depends(get_current_active_user),
        service: NotificationService = Depends(get_notification_service)
):
    service.mark_all_read(current_user.id)
    return {"message": "All notifications marked as read"}


@router.put("/{notification_id}/read")
async def mark_notification_read(
        notification_id: int,
        current_user: User = Depends(get_current_active_user),
        service: NotificationService = Depends(get_notification_service)
):
    service.mark_read(notification_id, current_user.id)
    return {"message": "Notification marked as read"}


@router.delete("/{notification_id}", status_code=status.HTTP_200_OK)
async def delete_notification(
        notification_id: int,
        current_user: User = Depends(get_current_active_user),
        service: NotificationService = Depends(get_notification_service)
):
    service.delete(notification_id, current_user.id)
    return {"message": "Notification deleted"}
