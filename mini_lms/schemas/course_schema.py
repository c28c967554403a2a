from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime

from mini_lms.models.enums import CourseVisibility

# --- Course Schemas ---
class CourseBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=255, description="Course name")
    type: Optional[str] = Field(None, max_length=100, description="Free-form course category, e.g. 'Tech'")
    duration: Optional[int] = Field(None, ge=0, description="Expected duration in hours")

class CourseCreate(CourseBase):
    visibility: CourseVisibility = CourseVisibility.PUBLIC

class CourseUpdate(CourseBase):
    # Full replacement: name, type and duration are all written, so omitting
    # type or duration clears it. Only an omitted visibility keeps the stored value.
    visibility: Optional[CourseVisibility] = None

class TrainerRef(BaseModel):
    id: int
    username: str
    email: str

    class Config:
        from_attributes = True

class CourseDisplay(CourseBase):
    id: int
    trainer_id: int
    visibility: str
    is_approved: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    trainer: Optional[TrainerRef] = None

    class Config:
        from_attributes = True

class TakedownRequest(BaseModel):
    course_id: int
    reason: str = Field(..., min_length=1, max_length=2000)


# --- Module Schemas ---
class ModuleDisplay(BaseModel):
    id: int
    course_id: int
    name: str
    description: Optional[str] = None
    file_path: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True

class ModuleWithProgress(BaseModel):
    """A module merged with the calling learner's progress on it."""
    id: int
    course_id: int
    name: str
    description: Optional[str] = None
    file_path: Optional[str] = None
    progress_percentage: float = 0.0
    is_completed: bool = False

class MessageResponse(BaseModel):
    message: str
