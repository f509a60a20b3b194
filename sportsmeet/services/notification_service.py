import logging
from typing import List, Optional

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from sportsmeet.models import notification as notification_model
from sportsmeet.schemas import notification_schemas

logger = logging.getLogger(__name__)

def create_notification(db: Session, notification_in: notification_schemas.NotificationCreate, commit: bool = True) -> notification_model.Notification:
    db_notification = notification_model.Notification(**notification_in.model_dump())
    db.add(db_notification)
    if commit:
        db.commit()
        db.refresh(db_notification)
    logger.debug("Queued %s notification for user %s", notification_in.type, notification_in.user_id)
    return db_notification

def notify(db: Session, user_id: int, type: notification_schemas.NotificationType, message: str, sports_post_id: Optional[int] = None) -> notification_model.Notification:
    """Add a notification to the current transaction; the caller commits."""
    return create_notification(
        db,
        notification_schemas.NotificationCreate(user_id=user_id, type=type, message=message, sports_post_id=sports_post_id),
        commit=False,
    )

def get_user_notifications(db: Session, user_id: int, skip: int = 0, limit: int = 100, unread_only: bool = False) -> List[notification_model.Notification]:
    query = db.query(notification_model.Notification)\
        .filter(notification_model.Notification.user_id == user_id)
    if unread_only:
        query = query.filter(notification_model.Notification.read_status == False)
    return query\
        .order_by(notification_model.Notification.created_at.desc(), notification_model.Notification.id.desc())\
        .offset(skip)\
        .limit(limit)\
        .all()

def mark_notification_as_read(db: Session, notification_id: int, current_user_id: int) -> notification_model.Notification:
    db_notification = db.query(notification_model.Notification).filter(notification_model.Notification.id == notification_id).first()

    if not db_notification:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Notification not found")

    if db_notification.user_id != current_user_id:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Not authorized to mark this notification as read")

    if not db_notification.read_status:
        db_notification.read_status = True
        db.commit()
        db.refresh(db_notification)

    return db_notification

def mark_all_user_notifications_as_read(db: Session, current_user_id: int) -> List[notification_model.Notification]:
    unread_notifications = db.query(notification_model.Notification)\
        .filter(notification_model.Notification.user_id == current_user_id, notification_model.Notification.read_status == False)\
        .all()

    if not unread_notifications:
        return []

    for notification in unread_notifications:
        notification.read_status = True

    db.commit()
    for notification in unread_notifications:
        db.refresh(notification)

    return unread_notifications
