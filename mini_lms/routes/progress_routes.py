from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import List
import logging

from mini_lms.core.database import get_db, transaction
from mini_lms.core.dependencies import get_caller, get_learner_caller
from mini_lms.core.exceptions import Forbidden, NotFound, ValidationError
from mini_lms.crud import course_crud, enrollment_crud, module_progress_crud as crud
from mini_lms.schemas import module_progress_schema as schemas
from mini_lms.schemas.user_schema import Caller

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/progress", tags=["Learning Progress"])

def _get_module_or_404(db: Session, module_id: int):
    module = course_crud.get_module(db, module_id)
    if not module:
        raise NotFound(f"Module with ID {module_id} not found.")
    return module

def _get_enrolled_module(db: Session, caller: Caller, module_id: int):
    module = _get_module_or_404(db, module_id)
    if not enrollment_crud.is_enrolled(db, caller.user_id, module.course_id):
        logger.warning(f"Learner {caller.user_id} is not enrolled in course {module.course_id} of module {module_id}.")
        raise Forbidden("You must be enrolled in the module's course to record progress.")
    return module


@router.get("/course/{course_id}", response_model=schemas.CourseProgressDisplay)
def read_course_progress(course_id: int, db: Session = Depends(get_db), caller: Caller = Depends(get_caller)):
    """The caller's average progress across the course's modules; 0 when there is none."""
    return schemas.CourseProgressDisplay(
        course_id=course_id,
        progress=crud.average_progress_for_learner_course(db, caller.user_id, course_id),
    )

@router.get("/course/{course_id}/modules", response_model=List[schemas.ModuleProgressSummary])
def read_module_progress_for_course(course_id: int, db: Session = Depends(get_db), caller: Caller = Depends(get_caller)):
    return crud.get_progress_for_learner_course(db, caller.user_id, course_id)

@router.post("/", response_model=schemas.ModuleProgressDisplay)
def update_module_progress(
    progress_in: schemas.ModuleProgressUpdate,
    db: Session = Depends(get_db),
    caller: Caller = Depends(get_learner_caller)
):
    """
    Record the caller's progress on a module. The course is always the
    module's own; a course_id that names another course is rejected.
    """
    module = _get_enrolled_module(db, caller, progress_in.module_id)
    if progress_in.course_id is not None and progress_in.course_id != module.course_id:
        raise ValidationError(f"Module {module.id} belongs to course {module.course_id}, not {progress_in.course_id}.")
    logger.info(f"Learner {caller.user_id} setting progress {progress_in.progress_percentage} on module {module.id}")

    with transaction(db):
        progress = crud.upsert(
            db,
            learner_id=caller.user_id,
            module_id=module.id,
            course_id=module.course_id,
            progress_percentage=progress_in.progress_percentage,
            is_completed=progress_in.is_completed,
        )
    return progress

@router.post("/complete", response_model=schemas.ModuleProgressDisplay)
def complete_module(
    payload: schemas.ModuleCompleteRequest,
    db: Session = Depends(get_db),
    caller: Caller = Depends(get_learner_caller)
):
    module = _get_enrolled_module(db, caller, payload.module_id)
    with transaction(db):
        progress = crud.mark_complete(db, learner_id=caller.user_id, module_id=module.id, course_id=module.course_id)
    logger.info(f"Learner {caller.user_id} completed module {module.id}")
    return progress
