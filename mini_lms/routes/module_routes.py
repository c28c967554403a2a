from fastapi import APIRouter, Depends, File, Form, UploadFile, status
from sqlalchemy.orm import Session
from typing import List, Optional
import logging

from mini_lms.core.database import get_db
from mini_lms.core.dependencies import get_caller
from mini_lms.core.exceptions import NotFound
from mini_lms.crud import course_crud, module_progress_crud
from mini_lms.schemas import course_schema as schemas
from mini_lms.schemas.user_schema import Caller
from mini_lms.services import consistency_service
from mini_lms.services.blob_service import Attachment

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/modules", tags=["Modules"])

@router.post("/", response_model=schemas.ModuleDisplay, status_code=status.HTTP_201_CREATED)
async def create_new_module(
    course_id: int = Form(...),
    title: str = Form(..., min_length=1, max_length=255),
    content: Optional[str] = Form(None),
    file: Optional[UploadFile] = File(None),
    db: Session = Depends(get_db),
    caller: Caller = Depends(get_caller)
):
    """
    Add a module to a course. Every enrolled learner gets a 0% progress row
    for it. (Owning trainer only)
    """
    attachment = await Attachment.from_upload(file)
    return consistency_service.create_module(db, caller, course_id, title, content, attachment)

@router.put("/{module_id}", response_model=schemas.ModuleDisplay)
async def update_existing_module(
    module_id: int,
    title: str = Form(..., min_length=1, max_length=255),
    content: Optional[str] = Form(None),
    file: Optional[UploadFile] = File(None),
    db: Session = Depends(get_db),
    caller: Caller = Depends(get_caller)
):
    """Replace a module's content. All learners' progress on it is reset. (Owning trainer only)"""
    attachment = await Attachment.from_upload(file)
    return consistency_service.update_module(db, caller, module_id, title, content, attachment)

@router.delete("/{module_id}", response_model=schemas.MessageResponse)
def delete_existing_module(module_id: int, db: Session = Depends(get_db), caller: Caller = Depends(get_caller)):
    consistency_service.delete_module(db, caller, module_id)
    return {"message": "Module deleted successfully."}

@router.get("/course/{course_id}", response_model=List[schemas.ModuleWithProgress])
def read_modules_for_course(course_id: int, db: Session = Depends(get_db), caller: Caller = Depends(get_caller)):
    """The course's modules, each merged with the caller's own progress on it."""
    if not course_crud.get_course(db, course_id):
        raise NotFound(f"Course with ID {course_id} not found.")

    progress_by_module = {
        p.module_id: p for p in module_progress_crud.get_progress_for_learner_course(db, caller.user_id, course_id)
    }
    result = []
    for module in course_crud.get_modules_for_course(db, course_id):
        progress = progress_by_module.get(module.id)
        result.append(schemas.ModuleWithProgress(
            id=module.id,
            course_id=module.course_id,
            name=module.name,
            description=module.description,
            file_path=module.file_path,
            progress_percentage=progress.progress_percentage if progress else 0.0,
            is_completed=progress.is_completed if progress else False,
        ))
    return result

@router.get("/{module_id}", response_model=schemas.ModuleDisplay)
def read_single_module(module_id: int, db: Session = Depends(get_db), caller: Caller = Depends(get_caller)):
    module = course_crud.get_module(db, module_id)
    if not module:
        raise NotFound(f"Module with ID {module_id} not found.")
    return module
