from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import List

from mini_lms.core.database import get_db
from mini_lms.core.dependencies import get_caller
from mini_lms.crud import enrollment_crud as crud
from mini_lms.schemas import enrollment_schema as schemas
from mini_lms.schemas.user_schema import Caller
from mini_lms.services import consistency_service

router = APIRouter(prefix="/enrollments", tags=["Enrollments"])

@router.post("/", response_model=schemas.EnrollmentDisplay, status_code=status.HTTP_201_CREATED)
def enroll_in_course(
    enrollment_in: schemas.EnrollmentCreate,
    db: Session = Depends(get_db),
    caller: Caller = Depends(get_caller)
):
    return consistency_service.create_enrollment(db, caller, enrollment_in.course_id)

@router.delete("/{enrollment_id}", response_model=schemas.EnrollmentDropResult)
def drop_enrollment(enrollment_id: int, db: Session = Depends(get_db), caller: Caller = Depends(get_caller)):
    """Drop one of your enrollments, removing your progress and feedback for that course."""
    return consistency_service.drop_enrollment(db, caller, enrollment_id)

@router.get("/me", response_model=List[schemas.EnrollmentDisplay])
def read_my_enrollments(db: Session = Depends(get_db), caller: Caller = Depends(get_caller)):
    return crud.get_enrollments_for_learner(db, caller.user_id)
