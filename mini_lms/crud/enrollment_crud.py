from sqlalchemy.orm import Session
from typing import List, Optional
import logging

from mini_lms.models.enrollment_model import Enrollment
from mini_lms.models.enums import EnrollmentStatus

logger = logging.getLogger(__name__)

def create_enrollment(db: Session, learner_id: int, course_id: int) -> Enrollment:
    # No duplicate check: the same learner may hold several rows for one course
    db_enrollment = Enrollment(learner_id=learner_id, course_id=course_id, status=EnrollmentStatus.ACTIVE.value)
    db.add(db_enrollment)
    db.flush()
    logger.debug(f"Enrollment {db_enrollment.id} staged for learner {learner_id} in course {course_id}")
    return db_enrollment

def get_enrollment(db: Session, enrollment_id: int) -> Optional[Enrollment]:
    return db.query(Enrollment).filter(Enrollment.id == enrollment_id).first()

def get_enrollments_for_learner(db: Session, learner_id: int) -> List[Enrollment]:
    return db.query(Enrollment).filter(Enrollment.learner_id == learner_id).order_by(Enrollment.id).all()

def get_enrolled_learner_ids(db: Session, course_id: int) -> List[int]:
    """Learner ids with at least one enrollment row in the course, first-enrolled first."""
    rows = db.query(Enrollment.learner_id).filter(Enrollment.course_id == course_id).order_by(Enrollment.id).all()
    seen = []
    for (learner_id,) in rows:
        if learner_id not in seen:
            seen.append(learner_id)
    return seen

def is_enrolled(db: Session, learner_id: int, course_id: int) -> bool:
    return db.query(Enrollment.id).filter(
        Enrollment.learner_id == learner_id,
        Enrollment.course_id == course_id
    ).first() is not None

def delete_enrollment(db: Session, db_enrollment: Enrollment) -> None:
    db.delete(db_enrollment)
    db.flush()

def delete_enrollments_for_course(db: Session, course_id: int) -> int:
    removed = db.query(Enrollment).filter(Enrollment.course_id == course_id).delete(synchronize_session=False)
    logger.debug(f"Removed {removed} enrollments for course {course_id}")
    return removed
