from sqlalchemy.orm import Session
from typing import List
import logging

from mini_lms.models.feedback_model import Feedback
from mini_lms.schemas.feedback_schema import FeedbackCreate

logger = logging.getLogger(__name__)

def create_feedback(db: Session, learner_id: int, feedback_in: FeedbackCreate) -> Feedback:
    db_feedback = Feedback(
        learner_id=learner_id,
        course_id=feedback_in.course_id,
        message=feedback_in.message,
        rating=feedback_in.rating,
    )
    db.add(db_feedback)
    db.flush()
    logger.info(f"Feedback {db_feedback.id} submitted by learner {learner_id} for course {feedback_in.course_id} (rating {feedback_in.rating}).")
    return db_feedback

def get_feedback_for_course(db: Session, course_id: int) -> List[Feedback]:
    return db.query(Feedback).filter(Feedback.course_id == course_id).order_by(Feedback.submitted_at.desc(), Feedback.id.desc()).all()

def delete_feedback_for_course(db: Session, course_id: int) -> int:
    removed = db.query(Feedback).filter(Feedback.course_id == course_id).delete(synchronize_session=False)
    logger.debug(f"Removed {removed} feedback rows for course {course_id}")
    return removed

def delete_feedback_for_learner_course(db: Session, learner_id: int, course_id: int) -> int:
    removed = db.query(Feedback).filter(
        Feedback.learner_id == learner_id,
        Feedback.course_id == course_id
    ).delete(synchronize_session=False)
    logger.debug(f"Removed {removed} feedback rows for learner {learner_id} in course {course_id}")
    return removed
