from pydantic import BaseModel
from typing import Optional
from datetime import datetime

class NotificationDisplay(BaseModel):
    id: int
    user_id: int
    type: str
    message: str
    course_id: Optional[int] = None
    is_read: bool
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True

class TakedownNotificationDisplay(BaseModel):
    id: int
    user_id: int
    message: str
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True

class TakedownCount(BaseModel):
    count: int
