import logging
from typing import List, Optional

from sqlalchemy import func, desc
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.api.notifications.models import Notification
from app.api.notifications.schemas import NotificationItem, NotificationType, RelatedType
from app.core.exceptions import NotificationNotFound
from app.websocket.websocket_manager import send_notification_to_user

logger = logging.getLogger(__name__)


class NotificationService:
    def __init__(self, db: Session):
        self.db = db

    def create(
            self,
            user_id: str,
            type: NotificationType,
            title: str,
            message: str,
            related_id: Optional[str] = None,
            related_type: Optional[RelatedType] = None,
    ) -> Notification:
        notification = Notification(
            user_id=user_id,
            type=NotificationType(type).value,
            title=title,
            message=message,
            related_id=related_id,
            related_type=RelatedType(related_type).value if related_type else None,
        )
        self.db.add(notification)
        self.db.commit()
        self.db.refresh(notification)
        return notification

    def list_for_user(self, user_id: str, limit: int = 50) -> List[Notification]:
        return (
            self.db.query(Notification)
            .filter(Notification.user_id == user_id)
            .order_by(desc(Notification.created_at), desc(Notification.id))
            .limit(limit)
            .all()
        )

    def unread_count(self, user_id: str) -> int:
        count = (
            self.db.query(func.count(Notification.id))
            .filter(Notification.user_id == user_id, Notification.is_read.is_(False))
            .scalar()
        )
        return count or 0

    def mark_read(self, notification_id: int, user_id: str) -> Notification:
        notification = self._get_owned(notification_id, user_id)
        notification.is_read = True
        self.db.commit()
        self.db.refresh(notification)
        return notification

    def mark_all_read(self, user_id: str) -> int:
        updated = self.db.query(Notification).filter(
            Notification.user_id == user_id, Notification.is_read.is_(False)
        ).update({"is_read": True}, synchronize_session=False)
        self.db.commit()
        return updated

    def delete(self, notification_id: int, user_id: str):
        notification = self._get_owned(notification_id, user_id)
        self.db.delete(notification)
        self.db.commit()

    def _get_owned(self, notification_id: int, user_id: str) -> Notification:
        notification = (
            self.db.query(Notification)
            .filter(Notification.id == notification_id, Notification.user_id == user_id)
            .first()
        )
        if not notification:
            raise NotificationNotFound()
        return notification


async def dispatch_notification(
        db: Session,
        user_id: str,
        type: NotificationType,
        title: str,
        message: str,
        related_id: Optional[str] = None,
        related_type: Optional[RelatedType] = None,
) -> Optional[Notification]:
    """
    Best-effort notification write, called after the caller's own commit.

    A failed write is rolled back and logged, never raised, so the
    relationship change that triggered it stays committed. Live delivery
    over the socket is equally best effort.
    """
    try:
        notification = NotificationService(db).create(
            user_id, type, title, message, related_id=related_id, related_type=related_type
        )
    except SQLAlchemyError:
        db.rollback()
        logger.error("Failed to create %s notification for user %s", type, user_id, exc_info=True)
        return None

    payload = NotificationItem.model_validate(notification).model_dump(mode="json", by_alias=True)
    try:
        await send_notification_to_user(user_id, payload)
    except Exception:
        logger.warning("Live delivery of notification %s failed", notification.id, exc_info=True)
    return notification
