from sqlalchemy import or_
from sqlalchemy.orm import Session
from typing import List, Optional
import logging

from mini_lms.models.notification_model import Notification
from mini_lms.models.enums import NotificationType

logger = logging.getLogger(__name__)

def create_notification(
    db: Session,
    user_id: int,
    notification_type: NotificationType,
    message: str,
    course_id: Optional[int] = None,
) -> Notification:
    db_notification = Notification(
        user_id=user_id,
        type=notification_type.value,
        message=message,
        course_id=course_id,
        is_read=False,
    )
    db.add(db_notification)
    db.flush()
    logger.debug(f"Notification {db_notification.id} ({notification_type.value}) staged for user {user_id}")
    return db_notification

def get_notification(db: Session, notification_id: int) -> Optional[Notification]:
    return db.query(Notification).filter(Notification.id == notification_id).first()

def get_notifications(db: Session, user_id: Optional[int] = None) -> List[Notification]:
    """Newest first; all users' notifications when user_id is None."""
    query = db.query(Notification)
    if user_id is not None:
        query = query.filter(Notification.user_id == user_id)
    return query.order_by(Notification.created_at.desc(), Notification.id.desc()).all()

def get_takedown_notifications(db: Session) -> List[Notification]:
    return db.query(Notification).filter(
        Notification.type == NotificationType.TAKEDOWN_REQUESTED.value
    ).order_by(Notification.created_at.desc(), Notification.id.desc()).all()

def count_takedown_notifications(db: Session) -> int:
    return db.query(Notification).filter(
        Notification.type == NotificationType.TAKEDOWN_REQUESTED.value
    ).count()

def mark_read(db: Session, db_notification: Notification) -> Notification:
    db_notification.is_read = True
    db.flush()
    return db_notification

def delete_notification(db: Session, db_notification: Notification) -> None:
    db.delete(db_notification)
    db.flush()

def delete_takedowns_for_course(db: Session, course_id: int, course_name: str) -> int:
    """
    Removes takedown requests that name the course (as "'<name>'" in the
    message) or reference it by id.
    """
    quoted_name = f"'{course_name}'"
    removed = db.query(Notification).filter(
        Notification.type == NotificationType.TAKEDOWN_REQUESTED.value,
        or_(
            Notification.message.contains(quoted_name, autoescape=True),
            Notification.course_id == course_id,
        )
    ).delete(synchronize_session=False)
    logger.debug(f"Removed {removed} takedown notifications for course {course_id}")
    return removed
