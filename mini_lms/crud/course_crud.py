"""
Course and Module access.

Writers here only add/flush; committing is left to the caller so that a
service can group several writes into one transaction.
"""
from sqlalchemy.orm import Session, joinedload
from typing import List, Optional
import logging

from mini_lms.models.course_model import Course, Module
from mini_lms.schemas import course_schema as schemas

logger = logging.getLogger(__name__)

# --- Course ---
def create_course(db: Session, course_in: schemas.CourseCreate, trainer_id: int) -> Course:
    logger.debug(f"Creating course '{course_in.name}' for trainer_id {trainer_id}")
    db_course = Course(
        name=course_in.name,
        type=course_in.type,
        duration=course_in.duration,
        visibility=course_in.visibility.value,
        is_approved=False,
        trainer_id=trainer_id,
    )
    db.add(db_course)
    db.flush()
    return db_course

def get_course(db: Session, course_id: int) -> Optional[Course]:
    logger.debug(f"Fetching course with ID: {course_id}")
    return db.query(Course).filter(Course.id == course_id).first()

def get_courses(db: Session, trainer_id: Optional[int] = None) -> List[Course]:
    query = db.query(Course).options(joinedload(Course.trainer))
    if trainer_id is not None:
        query = query.filter(Course.trainer_id == trainer_id)
    return query.order_by(Course.id).all()

def update_course(db: Session, db_course: Course, course_in: schemas.CourseUpdate) -> Course:
    logger.debug(f"Updating course ID: {db_course.id} with data: {course_in.model_dump(exclude_unset=True)}")
    db_course.name = course_in.name
    db_course.type = course_in.type
    db_course.duration = course_in.duration
    if course_in.visibility is not None:
        db_course.visibility = course_in.visibility.value
    db.flush()
    return db_course

def delete_course(db: Session, db_course: Course) -> None:
    logger.debug(f"Deleting course ID: {db_course.id} ('{db_course.name}')")
    db.delete(db_course)
    db.flush()

# --- Module ---
def create_module(
    db: Session, course_id: int, name: str, description: Optional[str], file_path: Optional[str]
) -> Module:
    logger.debug(f"Creating module '{name}' for course_id {course_id}")
    db_module = Module(course_id=course_id, name=name, description=description, file_path=file_path)
    db.add(db_module)
    db.flush()
    return db_module

def get_module(db: Session, module_id: int) -> Optional[Module]:
    logger.debug(f"Fetching module with ID: {module_id}")
    return db.query(Module).filter(Module.id == module_id).first()

def get_modules_for_course(db: Session, course_id: int) -> List[Module]:
    return db.query(Module).filter(Module.course_id == course_id).order_by(Module.id).all()

def delete_module(db: Session, db_module: Module) -> None:
    logger.debug(f"Deleting module ID: {db_module.id} ('{db_module.name}')")
    db.delete(db_module)
    db.flush()
