from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import List
import logging

from mini_lms.core.database import get_db
from mini_lms.core.dependencies import get_caller
from mini_lms.core.exceptions import NotFound
from mini_lms.crud import course_crud as crud
from mini_lms.schemas import course_schema as schemas
from mini_lms.schemas.user_schema import Caller
from mini_lms.services import consistency_service

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/courses", tags=["Courses"])

@router.get("/", response_model=List[schemas.CourseDisplay])
def read_courses_list(db: Session = Depends(get_db), caller: Caller = Depends(get_caller)):
    return crud.get_courses(db)

@router.get("/{course_id}", response_model=schemas.CourseDisplay)
def read_single_course(course_id: int, db: Session = Depends(get_db), caller: Caller = Depends(get_caller)):
    course = crud.get_course(db, course_id)
    if not course:
        raise NotFound(f"Course with ID {course_id} not found.")
    return course

@router.post("/", response_model=schemas.CourseDisplay, status_code=status.HTTP_201_CREATED)
def create_new_course(
    course_in: schemas.CourseCreate,
    db: Session = Depends(get_db),
    caller: Caller = Depends(get_caller)
):
    """Create a course and announce it to every active learner. (Trainer only)"""
    return consistency_service.create_course(db, caller, course_in)

@router.put("/{course_id}", response_model=schemas.CourseDisplay)
def update_existing_course(
    course_id: int,
    course_in: schemas.CourseUpdate,
    db: Session = Depends(get_db),
    caller: Caller = Depends(get_caller)
):
    """Update a course. (Owning trainer only)"""
    return consistency_service.update_course(db, caller, course_id, course_in)

@router.delete("/{course_id}", response_model=schemas.MessageResponse)
def delete_existing_course(course_id: int, db: Session = Depends(get_db), caller: Caller = Depends(get_caller)):
    """
    Delete a course together with its modules, progress, enrollments,
    feedback and takedown requests. (Admin only)
    """
    consistency_service.delete_course(db, caller, course_id)
    return {"message": "Course deleted successfully."}

@router.post("/request-takedown", response_model=schemas.MessageResponse)
def request_takedown(
    payload: schemas.TakedownRequest,
    db: Session = Depends(get_db),
    caller: Caller = Depends(get_caller)
):
    """Ask an admin to take down one of your courses. (Owning trainer only)"""
    return consistency_service.request_course_takedown(db, caller, payload.course_id, payload.reason)
