from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import List
import logging

from mini_lms.core.database import get_db
from mini_lms.core.dependencies import get_caller
from mini_lms.core.exceptions import Forbidden
from mini_lms.crud import analytics_crud as crud
from mini_lms.schemas import analytics_schema as schemas
from mini_lms.schemas.user_schema import Caller

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/analytics", tags=["Analytics"])

def _require_self_or_admin(caller: Caller, trainer_id: int) -> None:
    if not caller.is_admin and caller.user_id != trainer_id:
        logger.warning(f"User {caller.email} denied analytics for trainer {trainer_id}.")
        raise Forbidden("You can only view your own analytics.")

@router.get("/trainer/{trainer_id}", response_model=schemas.TrainerAnalytics)
def read_trainer_analytics(trainer_id: int, db: Session = Depends(get_db), caller: Caller = Depends(get_caller)):
    """Per-course learner counts, average rating and average progress for a trainer."""
    _require_self_or_admin(caller, trainer_id)
    return crud.get_trainer_analytics(db, trainer_id)

@router.get("/trainer/{trainer_id}/learners", response_model=List[schemas.LearnerRosterEntry])
def read_trainer_learners(trainer_id: int, db: Session = Depends(get_db), caller: Caller = Depends(get_caller)):
    _require_self_or_admin(caller, trainer_id)
    return crud.get_trainer_learners(db, trainer_id)
