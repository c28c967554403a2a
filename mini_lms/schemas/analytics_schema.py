from pydantic import BaseModel, Field
from typing import List

# --- Trainer Course Analytics ---
class CourseAnalytics(BaseModel):
    id: int
    name: str
    learner_count: int = Field(0, description="Number of enrollment rows for the course")
    avg_rating: float = Field(0.0, description="Mean feedback rating, 0 when the course has no feedback")
    avg_progress: float = Field(0.0, description="Mean module progress across all learners, 0 when there is none")

class TrainerAnalytics(BaseModel):
    total_courses: int = 0
    total_learners: int = Field(0, description="Sum of learner_count across the trainer's courses")
    courses: List[CourseAnalytics] = Field(default_factory=list)

# --- Learner Roster ---
class LearnerCourseProgress(BaseModel):
    course_id: int
    course_name: str
    progress: float = 0.0

class LearnerRosterEntry(BaseModel):
    learner_id: int
    learner_name: str
    learner_email: str
    courses: List[LearnerCourseProgress] = Field(default_factory=list)
