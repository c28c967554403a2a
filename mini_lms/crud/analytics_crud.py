from sqlalchemy.orm import Session
from sqlalchemy import func
from typing import Dict, List, Tuple

from mini_lms.models.user_model import User
from mini_lms.models.course_model import Course, Module
from mini_lms.models.enrollment_model import Enrollment
from mini_lms.models.feedback_model import Feedback
from mini_lms.models.module_progress_model import ModuleProgress
from mini_lms.models.enums import UserRole

from mini_lms.schemas import analytics_schema as schemas
from mini_lms.crud import module_progress_crud

import logging
logger = logging.getLogger(__name__)

# Every average below falls back to 0 when there are no rows to average.

def _course_avg_rating(db: Session, course_id: int) -> float:
    average = db.query(func.avg(Feedback.rating)).filter(Feedback.course_id == course_id).scalar()
    return float(average or 0.0)

def _course_avg_progress(db: Session, course_id: int) -> float:
    average = db.query(func.avg(func.coalesce(ModuleProgress.progress_percentage, 0.0))).join(
        Module, ModuleProgress.module_id == Module.id
    ).filter(Module.course_id == course_id).scalar()
    return float(average or 0.0)

def get_trainer_analytics(db: Session, trainer_id: int) -> schemas.TrainerAnalytics:
    logger.debug(f"Calculating course analytics for trainer {trainer_id}.")
    courses = db.query(Course).filter(Course.trainer_id == trainer_id).order_by(Course.id).all()
    course_results: List[schemas.CourseAnalytics] = []

    for course in courses:
        learner_count = db.query(func.count(Enrollment.id)).filter(
            Enrollment.course_id == course.id
        ).scalar() or 0

        course_results.append(schemas.CourseAnalytics(
            id=course.id,
            name=course.name,
            learner_count=learner_count,
            avg_rating=_course_avg_rating(db, course.id),
            avg_progress=_course_avg_progress(db, course.id),
        ))

    return schemas.TrainerAnalytics(
        total_courses=len(course_results),
        total_learners=sum(c.learner_count for c in course_results),
        courses=course_results,
    )

def get_trainer_learners(db: Session, trainer_id: int) -> List[schemas.LearnerRosterEntry]:
    """
    Every learner enrolled in one of the trainer's courses, with their average
    progress per course. Learners appear in order of their first enrollment.
    """
    logger.debug(f"Building learner roster for trainer {trainer_id}.")
    rows = db.query(
        User.id, User.username, User.email, Course.id, Course.name
    ).select_from(Enrollment).join(
        User, Enrollment.learner_id == User.id
    ).join(
        Course, Enrollment.course_id == Course.id
    ).filter(
        Course.trainer_id == trainer_id,
        User.role == UserRole.LEARNER.value
    ).order_by(Enrollment.id).all()

    roster: Dict[int, schemas.LearnerRosterEntry] = {}
    seen_pairs: set[Tuple[int, int]] = set()
    for learner_id, username, email, course_id, course_name in rows:
        # Duplicate enrollment rows for the same pair are reported once
        if (learner_id, course_id) in seen_pairs:
            continue
        seen_pairs.add((learner_id, course_id))

        entry = roster.get(learner_id)
        if entry is None:
            entry = schemas.LearnerRosterEntry(learner_id=learner_id, learner_name=username, learner_email=email)
            roster[learner_id] = entry
        entry.courses.append(schemas.LearnerCourseProgress(
            course_id=course_id,
            course_name=course_name,
            progress=module_progress_crud.average_progress_for_learner_course(db, learner_id, course_id),
        ))

    return list(roster.values())
