from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import Optional
from uuid import UUID

from internship_portal.database.config.db import get_db
from internship_portal.database.models.progress import TaskProgress
from internship_portal.lifecycle import progress as progress_engine
from internship_portal.lifecycle.errors import NotFound
from internship_portal.lifecycle.guard import Action, Principal, authorize
from internship_portal.schema.mentor.task import (
    ReviewRequest,
    ReviewResponse,
    TaskProgressDetail,
)
from internship_portal.utils.auth import get_current_principal

task_router = APIRouter(
    prefix="/tasks",
    tags=["Mentor - Task Review"],
)


@task_router.get("/{task_progress_id}", response_model=TaskProgressDetail)
def get_task_progress(
    task_progress_id: UUID,
    db: Session = Depends(get_db),
    principal: Optional[Principal] = Depends(get_current_principal),
):
    """
    Get a student's submission with the task and all feedback, newest first.
    """
    authorize(db, principal, Action.VIEW_TASK_PROGRESS)

    progress = db.get(TaskProgress, task_progress_id)
    if not progress:
        raise NotFound("Task progress not found")

    authorize(db, principal, Action.VIEW_TASK_PROGRESS, progress)
    return progress


@task_router.post("/{task_progress_id}/review", response_model=ReviewResponse)
def review_task(
    task_progress_id: UUID,
    body: ReviewRequest,
    db: Session = Depends(get_db),
    principal: Optional[Principal] = Depends(get_current_principal),
):
    """
    Approve a submission or request changes, with optional feedback.
    """
    progress = progress_engine.review_task(
        db, principal, task_progress_id, body.action, feedback=body.feedback
    )
    return {"task_progress": progress}
