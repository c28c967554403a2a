"""
Operations that touch several tables at once and must leave them consistent.

Every public function here:
  1. validates the caller and the referenced rows, raising NotFound /
     Forbidden / ValidationError before anything is written;
  2. performs all of its writes inside one transaction;
  3. after the commit, runs its post-commit hooks (emails). Hook failures are
     logged and never undo or fail the operation.

No ORM or database cascades are relied on: each deletion lists its cleanup
steps explicitly, in the order they must happen.
"""
import logging
from typing import Any, Callable, Dict, List, Optional, Tuple

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from mini_lms.core.config import settings
from mini_lms.core.database import transaction
from mini_lms.core.exceptions import Forbidden, NotFound
from mini_lms.crud import (
    course_crud,
    enrollment_crud,
    feedback_crud,
    module_progress_crud,
    notification_crud,
    user_crud,
)
from mini_lms.models.course_model import Course, Module
from mini_lms.models.enrollment_model import Enrollment
from mini_lms.models.enums import NotificationType, UserRole
from mini_lms.schemas import course_schema
from mini_lms.schemas.user_schema import Caller
from mini_lms.services import email_service
from mini_lms.services.blob_service import Attachment

logger = logging.getLogger(__name__)


class PostCommitHooks:
    """Side effects that run only once the operation's transaction has committed."""

    def __init__(self, operation: str):
        self.operation = operation
        self._hooks: List[Tuple[str, Callable[..., Any], tuple, dict]] = []
        self.failures: List[Tuple[str, Exception]] = []

    def add(self, description: str, func: Callable[..., Any], *args, **kwargs) -> None:
        self._hooks.append((description, func, args, kwargs))

    def run(self) -> None:
        for description, func, args, kwargs in self._hooks:
            try:
                result = func(*args, **kwargs)
            except Exception as e:
                logger.error(f"[{self.operation}] post-commit hook '{description}' failed: {e}", exc_info=True)
                self.failures.append((description, e))
                continue
            if result is False:
                logger.warning(f"[{self.operation}] post-commit hook '{description}' reported failure.")
        self._hooks.clear()


# --- Guards ---

def _require_role(caller: Caller, *roles: UserRole) -> None:
    if caller.role not in roles:
        allowed = ", ".join(r.value for r in roles)
        logger.warning(f"User {caller.email} (role {caller.role.value}) denied: requires {allowed}.")
        raise Forbidden(f"Operation not permitted: requires role {allowed}.")

def _get_course_or_404(db: Session, course_id: int) -> Course:
    course = course_crud.get_course(db, course_id)
    if not course:
        logger.warning(f"Course with ID {course_id} not found.")
        raise NotFound(f"Course with ID {course_id} not found.")
    return course

def _require_course_owner(caller: Caller, course: Course) -> None:
    if course.trainer_id != caller.user_id:
        logger.warning(f"User {caller.email} does not own course {course.id}.")
        raise Forbidden("You can only manage your own courses.")

def _get_owned_module(db: Session, caller: Caller, module_id: int) -> Tuple[Module, Course]:
    _require_role(caller, UserRole.TRAINER)
    module = course_crud.get_module(db, module_id)
    if not module:
        logger.warning(f"Module with ID {module_id} not found.")
        raise NotFound(f"Module with ID {module_id} not found.")
    course = _get_course_or_404(db, module.course_id)
    _require_course_owner(caller, course)
    return module, course

def _notify_trainer(db: Session, hooks: PostCommitHooks, caller: Caller, course: Course, message: str) -> None:
    notification_crud.create_notification(
        db, user_id=caller.user_id, notification_type=NotificationType.MODULE_UPDATE,
        message=message, course_id=course.id,
    )
    hooks.add(f"course update email to {caller.email}", email_service.send_course_update_email, caller.email, message)


# --- Module lifecycle ---

def create_module(
    db: Session,
    caller: Caller,
    course_id: int,
    title: str,
    content: Optional[str],
    attachment: Optional[Attachment] = None,
) -> Module:
    _require_role(caller, UserRole.TRAINER)
    course = _get_course_or_404(db, course_id)
    _require_course_owner(caller, course)

    # Upload first: a failed upload aborts before anything is written
    file_path = attachment.store() if attachment else None

    hooks = PostCommitHooks("create_module")
    with transaction(db):
        module = course_crud.create_module(db, course_id=course.id, name=title, description=content, file_path=file_path)
        learner_ids = enrollment_crud.get_enrolled_learner_ids(db, course.id)
        module_progress_crud.initialize_for_module(db, module.id, course.id, learner_ids)
        _notify_trainer(db, hooks, caller, course, f"Module '{module.name}' added to course '{course.name}'.")
    hooks.run()

    logger.info(f"Module '{module.name}' (ID: {module.id}) created in course {course.id} with {len(learner_ids)} learner(s) initialized.")
    return module

def update_module(
    db: Session,
    caller: Caller,
    module_id: int,
    title: str,
    content: Optional[str],
    attachment: Optional[Attachment] = None,
) -> Module:
    module, course = _get_owned_module(db, caller, module_id)

    file_path = attachment.store() if attachment else None

    hooks = PostCommitHooks("update_module")
    with transaction(db):
        module.name = title
        module.description = content
        if file_path:
            module.file_path = file_path
        db.flush()
        # Content changed, so every learner starts this module over
        module_progress_crud.reset_for_module(db, module.id)
        _notify_trainer(db, hooks, caller, course, f"Module '{module.name}' updated in course '{course.name}'.")
    hooks.run()

    logger.info(f"Module ID {module.id} updated; learner progress reset.")
    return module

def delete_module(db: Session, caller: Caller, module_id: int) -> None:
    module, course = _get_owned_module(db, caller, module_id)
    module_name = module.name

    hooks = PostCommitHooks("delete_module")
    with transaction(db):
        module_progress_crud.remove_by_module(db, module.id)
        course_crud.delete_module(db, module)
        _notify_trainer(db, hooks, caller, course, f"Module '{module_name}' deleted from course '{course.name}'.")
    hooks.run()

    logger.info(f"Module ID {module_id} ('{module_name}') deleted from course {course.id}.")


# --- Course lifecycle ---

def create_course(db: Session, caller: Caller, course_in: course_schema.CourseCreate) -> Course:
    """
    Creates the course and announces it to every active learner. One
    learner's notification failing does not stop the others.
    """
    _require_role(caller, UserRole.TRAINER)

    hooks = PostCommitHooks("create_course")
    with transaction(db):
        course = course_crud.create_course(db, course_in, trainer_id=caller.user_id)
        message = f"New course '{course.name}' is now available."
        for learner in user_crud.get_active_learners(db):
            try:
                with db.begin_nested():
                    notification_crud.create_notification(
                        db, user_id=learner.id, notification_type=NotificationType.COURSE_CREATED,
                        message=message, course_id=course.id,
                    )
            except SQLAlchemyError as e:
                logger.warning(f"Could not save course-created notification for learner {learner.id}; continuing. {e}")
                continue
            hooks.add(
                f"new course email to {learner.email}",
                email_service.send_new_course_available_email, learner.email, course.name,
            )
    hooks.run()

    logger.info(f"Course '{course.name}' (ID: {course.id}) created by trainer {caller.user_id}; {len(hooks.failures)} email hook failure(s).")
    return course

def update_course(db: Session, caller: Caller, course_id: int, course_in: course_schema.CourseUpdate) -> Course:
    _require_role(caller, UserRole.TRAINER)
    course = _get_course_or_404(db, course_id)
    _require_course_owner(caller, course)

    with transaction(db):
        course_crud.update_course(db, course, course_in)

    logger.info(f"Course '{course.name}' (ID: {course.id}) updated.")
    return course

def delete_course(db: Session, caller: Caller, course_id: int) -> None:
    """
    Removes the course and everything hanging off it, in order:
    progress and modules, enrollments, feedback, takedown notifications,
    then the course row itself.
    """
    _require_role(caller, UserRole.ADMIN)
    course = _get_course_or_404(db, course_id)
    course_name = course.name

    with transaction(db):
        # Modules go without per-module notifications
        for module in course_crud.get_modules_for_course(db, course.id):
            module_progress_crud.remove_by_module(db, module.id)
            course_crud.delete_module(db, module)
        enrollment_crud.delete_enrollments_for_course(db, course.id)
        feedback_removed = feedback_crud.delete_feedback_for_course(db, course.id)
        takedowns_removed = notification_crud.delete_takedowns_for_course(db, course.id, course_name)
        course_crud.delete_course(db, course)

    logger.info(
        f"Course ID {course_id} ('{course_name}') deleted by admin {caller.email}: "
        f"{feedback_removed} feedback, {takedowns_removed} takedown notification(s) removed."
    )

def request_course_takedown(db: Session, caller: Caller, course_id: int, reason: str) -> Dict[str, str]:
    _require_role(caller, UserRole.TRAINER)
    course = _get_course_or_404(db, course_id)
    _require_course_owner(caller, course)

    hooks = PostCommitHooks("request_course_takedown")
    with transaction(db):
        notification_crud.create_notification(
            db,
            user_id=caller.user_id,
            notification_type=NotificationType.TAKEDOWN_REQUESTED,
            message=f"Trainer '{caller.email}' requested takedown of '{course.name}'. Reason: {reason}",
            course_id=course.id,
        )
        hooks.add(
            "takedown email to admin",
            email_service.send_takedown_request_email,
            settings.ADMIN_NOTIFICATION_EMAIL, course.name, caller.email,
        )
    hooks.run()

    logger.info(f"Takedown of course {course.id} requested by {caller.email}.")
    return {"message": "Takedown request recorded and emailed."}


# --- Enrollment lifecycle ---

def create_enrollment(db: Session, caller: Caller, course_id: int) -> Enrollment:
    """
    Enrolls the caller. Progress rows for modules that already exist are not
    created here; they appear when a module is added or progress is recorded.
    """
    _require_role(caller, UserRole.LEARNER)
    course = _get_course_or_404(db, course_id)

    with transaction(db):
        enrollment = enrollment_crud.create_enrollment(db, learner_id=caller.user_id, course_id=course.id)

    logger.info(f"Learner {caller.user_id} enrolled in course {course.id} (enrollment {enrollment.id}).")
    return enrollment

def drop_enrollment(db: Session, caller: Caller, enrollment_id: int) -> Dict[str, Any]:
    enrollment = enrollment_crud.get_enrollment(db, enrollment_id)
    # Someone else's enrollment is reported exactly like a missing one
    if not enrollment or enrollment.learner_id != caller.user_id:
        logger.warning(f"Enrollment {enrollment_id} not found for learner {caller.user_id}.")
        raise NotFound("Enrollment not found.")

    learner_id, course_id = enrollment.learner_id, enrollment.course_id
    with transaction(db):
        enrollment_crud.delete_enrollment(db, enrollment)
        progress_removed = module_progress_crud.remove_by_learner_and_course(db, learner_id, course_id)
        feedback_removed = feedback_crud.delete_feedback_for_learner_course(db, learner_id, course_id)

    logger.info(f"Enrollment {enrollment_id} dropped: {progress_removed} progress and {feedback_removed} feedback row(s) removed.")
    return {
        "message": "Enrollment dropped.",
        "enrollment_id": enrollment_id,
        "course_id": course_id,
        "progress_rows_removed": progress_removed,
        "feedback_rows_removed": feedback_removed,
    }
