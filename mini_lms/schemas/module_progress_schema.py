from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime

class ModuleProgressUpdate(BaseModel):
    module_id: int = Field(..., gt=0)
    # Optional; when given it must be the module's own course
    course_id: Optional[int] = Field(None, gt=0)
    # Range is enforced by the progress ledger so that direct callers get the same check
    progress_percentage: float = Field(..., description="0-100")
    is_completed: bool = False

class ModuleCompleteRequest(BaseModel):
    module_id: int = Field(..., gt=0)

class ModuleProgressDisplay(BaseModel):
    id: int
    learner_id: int
    module_id: int
    course_id: int
    progress_percentage: Optional[float] = None
    is_completed: Optional[bool] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True

class ModuleProgressSummary(BaseModel):
    module_id: int
    progress_percentage: float = 0.0
    is_completed: bool = False

class CourseProgressDisplay(BaseModel):
    course_id: int
    progress: float = Field(0.0, description="Average progress across the course's modules")
