from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import List
import logging

from mini_lms.core.database import get_db, transaction
from mini_lms.core.dependencies import get_caller, get_learner_caller
from mini_lms.core.exceptions import Forbidden, NotFound
from mini_lms.crud import course_crud, enrollment_crud, feedback_crud as crud
from mini_lms.schemas import feedback_schema as schemas
from mini_lms.schemas.user_schema import Caller

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/feedback", tags=["Feedback"])

@router.post("/", response_model=schemas.FeedbackDisplay, status_code=status.HTTP_201_CREATED)
def submit_feedback(
    feedback_in: schemas.FeedbackCreate,
    db: Session = Depends(get_db),
    caller: Caller = Depends(get_learner_caller)
):
    """Rate a course you are enrolled in (1-5)."""
    if not course_crud.get_course(db, feedback_in.course_id):
        raise NotFound(f"Course with ID {feedback_in.course_id} not found.")
    if not enrollment_crud.is_enrolled(db, caller.user_id, feedback_in.course_id):
        logger.warning(f"Learner {caller.user_id} tried to rate course {feedback_in.course_id} without enrolling.")
        raise Forbidden("You must be enrolled in a course to leave feedback.")

    with transaction(db):
        feedback = crud.create_feedback(db, learner_id=caller.user_id, feedback_in=feedback_in)
    return feedback

@router.get("/course/{course_id}", response_model=List[schemas.FeedbackDisplay])
def read_course_feedback(course_id: int, db: Session = Depends(get_db), caller: Caller = Depends(get_caller)):
    return crud.get_feedback_for_course(db, course_id)
