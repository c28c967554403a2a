from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import List
import logging

from mini_lms.core.database import get_db, transaction
from mini_lms.core.dependencies import get_admin_caller, get_caller
from mini_lms.core.exceptions import NotFound
from mini_lms.crud import notification_crud as crud
from mini_lms.schemas import notification_schema as schemas
from mini_lms.schemas.course_schema import MessageResponse
from mini_lms.schemas.user_schema import Caller

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/notifications", tags=["Notifications"])

@router.get("/me", response_model=List[schemas.NotificationDisplay])
def read_my_notifications(db: Session = Depends(get_db), caller: Caller = Depends(get_caller)):
    """Your notifications, newest first. Admins see everyone's."""
    return crud.get_notifications(db, user_id=None if caller.is_admin else caller.user_id)

@router.get("/takedowns", response_model=List[schemas.TakedownNotificationDisplay])
def read_takedown_requests(db: Session = Depends(get_db), caller: Caller = Depends(get_admin_caller)):
    return crud.get_takedown_notifications(db)

@router.get("/takedowns/count", response_model=schemas.TakedownCount)
def count_takedown_requests(db: Session = Depends(get_db), caller: Caller = Depends(get_admin_caller)):
    return schemas.TakedownCount(count=crud.count_takedown_notifications(db))

@router.put("/{notification_id}/read", response_model=schemas.NotificationDisplay)
def mark_notification_read(notification_id: int, db: Session = Depends(get_db), caller: Caller = Depends(get_caller)):
    notification = crud.get_notification(db, notification_id)
    # Another user's notification is reported as missing
    if not notification or notification.user_id != caller.user_id:
        raise NotFound("Notification not found.")
    with transaction(db):
        crud.mark_read(db, notification)
    return notification

@router.delete("/{notification_id}", response_model=MessageResponse)
def delete_notification(notification_id: int, db: Session = Depends(get_db), caller: Caller = Depends(get_admin_caller)):
    notification = crud.get_notification(db, notification_id)
    if not notification:
        raise NotFound("Notification not found.")
    with transaction(db):
        crud.delete_notification(db, notification)
    logger.info(f"Notification {notification_id} deleted by admin {caller.email}")
    return {"message": "Notification deleted."}
