from pydantic import BaseModel
from typing import Optional
from datetime import datetime

class EnrollmentCreate(BaseModel):
    course_id: int

class EnrollmentDisplay(BaseModel):
    id: int
    learner_id: int
    course_id: int
    status: str
    enrolled_at: Optional[datetime] = None

    class Config:
        from_attributes = True

class EnrollmentDropResult(BaseModel):
    message: str
    enrollment_id: int
    course_id: int
    progress_rows_removed: int
    feedback_rows_removed: int
