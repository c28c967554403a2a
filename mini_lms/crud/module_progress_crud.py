"""
Progress ledger: the only code that creates, changes or removes ModuleProgress rows.

None of these functions commit. They flush so that later reads inside the
same transaction see the writes; the caller decides when the transaction ends.
"""
from sqlalchemy import func, or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from typing import Iterable, List, Optional
from datetime import datetime, timezone
import logging

from mini_lms.core.exceptions import ValidationError
from mini_lms.models.course_model import Module
from mini_lms.models.module_progress_model import ModuleProgress
from mini_lms.schemas.module_progress_schema import ModuleProgressSummary

logger = logging.getLogger(__name__)

MIN_PERCENTAGE = 0.0
MAX_PERCENTAGE = 100.0


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)

def _validate_percentage(progress_percentage: Optional[float]) -> None:
    if progress_percentage is None:
        return
    # Written this way round so NaN is rejected too
    if not (MIN_PERCENTAGE <= progress_percentage <= MAX_PERCENTAGE):
        raise ValidationError(
            f"progress_percentage must be between {MIN_PERCENTAGE:g} and {MAX_PERCENTAGE:g}, got {progress_percentage}."
        )

def _module_ids_for_course(course_id: int):
    return select(Module.id).where(Module.course_id == course_id)


def get_progress(db: Session, learner_id: int, module_id: int) -> Optional[ModuleProgress]:
    return db.query(ModuleProgress).filter(
        ModuleProgress.learner_id == learner_id,
        ModuleProgress.module_id == module_id
    ).first()

def initialize_for_module(
    db: Session, module_id: int, course_id: int, learner_ids: Iterable[int]
) -> List[ModuleProgress]:
    """
    Creates a 0% / incomplete row for every learner that has none for the module.
    Existing rows are left as they are, so running this twice is harmless.
    Each insert runs in its own savepoint; a learner whose row cannot be
    written is logged and skipped without affecting the others.
    """
    existing = {
        learner_id for (learner_id,) in db.query(ModuleProgress.learner_id).filter(
            ModuleProgress.module_id == module_id
        )
    }
    created: List[ModuleProgress] = []
    for learner_id in learner_ids:
        if learner_id in existing:
            continue
        existing.add(learner_id)
        row = ModuleProgress(
            learner_id=learner_id,
            module_id=module_id,
            course_id=course_id,
            progress_percentage=0.0,
            is_completed=False,
            updated_at=_utcnow(),
        )
        try:
            with db.begin_nested():
                db.add(row)
        except SQLAlchemyError as e:
            logger.error(f"Could not initialize progress for learner {learner_id} on module {module_id}: {e}", exc_info=True)
            continue
        created.append(row)

    logger.info(f"Initialized {len(created)} progress rows for module {module_id} (course {course_id}).")
    return created

def reset_for_module(db: Session, module_id: int) -> int:
    """Sets every learner's progress on the module back to 0% / incomplete."""
    updated = db.query(ModuleProgress).filter(ModuleProgress.module_id == module_id).update(
        {
            ModuleProgress.progress_percentage: 0.0,
            ModuleProgress.is_completed: False,
            ModuleProgress.updated_at: _utcnow(),
        },
        synchronize_session="fetch",
    )
    logger.info(f"Reset {updated} progress rows for module {module_id}.")
    return updated

def upsert(
    db: Session,
    learner_id: int,
    module_id: int,
    course_id: int,
    progress_percentage: Optional[float],
    is_completed: Optional[bool],
) -> ModuleProgress:
    """
    Inserts or updates the learner's row for the module. The supplied course_id
    always overwrites the stored one. Out-of-range percentages are rejected
    before anything is written.
    """
    _validate_percentage(progress_percentage)

    progress = get_progress(db, learner_id, module_id)
    if not progress:
        logger.info(f"No existing progress for learner {learner_id} on module {module_id}. Creating new entry.")
        progress = ModuleProgress(
            learner_id=learner_id,
            module_id=module_id,
            course_id=course_id,
            progress_percentage=progress_percentage,
            is_completed=is_completed,
            updated_at=_utcnow(),
        )
        db.add(progress)
    else:
        logger.info(f"Existing progress found (ID: {progress.id}). Updating.")
        progress.progress_percentage = progress_percentage
        progress.is_completed = is_completed
        progress.course_id = course_id
        progress.updated_at = _utcnow()

    db.flush()
    return progress

def mark_complete(db: Session, learner_id: int, module_id: int, course_id: int) -> ModuleProgress:
    return upsert(db, learner_id, module_id, course_id, progress_percentage=MAX_PERCENTAGE, is_completed=True)

def remove_by_module(db: Session, module_id: int) -> int:
    removed = db.query(ModuleProgress).filter(
        ModuleProgress.module_id == module_id
    ).delete(synchronize_session=False)
    logger.debug(f"Removed {removed} progress rows for module {module_id}")
    return removed

def remove_by_learner_and_course(db: Session, learner_id: int, course_id: int) -> int:
    """
    Removes the learner's rows for every module of the course. Rows are matched
    through the module as well as the denormalized course_id, so a row whose
    course_id was overwritten by a caller is still found.
    """
    removed = db.query(ModuleProgress).filter(
        ModuleProgress.learner_id == learner_id,
        or_(
            ModuleProgress.module_id.in_(_module_ids_for_course(course_id)),
            ModuleProgress.course_id == course_id,
        )
    ).delete(synchronize_session=False)
    logger.debug(f"Removed {removed} progress rows for learner {learner_id} in course {course_id}")
    return removed

def average_progress_for_learner_course(db: Session, learner_id: int, course_id: int) -> float:
    """Mean progress over the learner's rows for the course's modules; null counts as 0, no rows gives 0."""
    average = db.query(func.avg(func.coalesce(ModuleProgress.progress_percentage, 0.0))).join(
        Module, ModuleProgress.module_id == Module.id
    ).filter(
        ModuleProgress.learner_id == learner_id,
        Module.course_id == course_id
    ).scalar()
    return float(average or 0.0)

def get_progress_for_learner_course(db: Session, learner_id: int, course_id: int) -> List[ModuleProgressSummary]:
    rows = db.query(ModuleProgress).join(Module, ModuleProgress.module_id == Module.id).filter(
        ModuleProgress.learner_id == learner_id,
        Module.course_id == course_id
    ).order_by(ModuleProgress.module_id).all()
    return [
        ModuleProgressSummary(
            module_id=row.module_id,
            progress_percentage=row.progress_percentage or 0.0,
            is_completed=bool(row.is_completed),
        )
        for row in rows
    ]
