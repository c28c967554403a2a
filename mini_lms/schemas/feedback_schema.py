from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime

class FeedbackCreate(BaseModel):
    course_id: int
    message: Optional[str] = Field(None, max_length=4000)
    rating: int = Field(..., ge=1, le=5)

class FeedbackDisplay(BaseModel):
    id: int
    learner_id: int
    course_id: int
    message: Optional[str] = None
    rating: int
    submitted_at: Optional[datetime] = None

    class Config:
        from_attributes = True
