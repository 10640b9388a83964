from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import Optional
from uuid import UUID

from internship_portal.database.config.db import get_db
from internship_portal.database.models.internship import Task
from internship_portal.database.models.progress import TaskProgress
from internship_portal.lifecycle import progress as progress_engine
from internship_portal.lifecycle.errors import NotFound
from internship_portal.lifecycle.guard import Action, Principal, authorize
from internship_portal.schema.internship import TaskResponse
from internship_portal.schema.student.task import (
    TaskDetailResponse,
    TaskSubmitRequest,
    TaskSubmitResponse,
)
from internship_portal.utils.auth import get_current_principal

task_router = APIRouter(
    prefix="/tasks",
    tags=["Student - Tasks"],
)


@task_router.get("/{task_id}", response_model=TaskDetailResponse)
def get_task(
    task_id: UUID,
    db: Session = Depends(get_db),
    principal: Optional[Principal] = Depends(get_current_principal),
):
    """
    Get a task with the caller's own progress on it.
    """
    authorize(db, principal, Action.VIEW_TASK)

    task = db.get(Task, task_id)
    if not task:
        raise NotFound("Task not found")

    authorize(db, principal, Action.VIEW_TASK, task)

    progress = (
        db.query(TaskProgress)
        .filter(TaskProgress.task_id == task.id, TaskProgress.student_id == principal.id)
        .first()
    )
    return {
        **TaskResponse.model_validate(task).model_dump(),
        "internship_id": task.weekly_plan.micro_internship_id,
        "task_progress": progress,
    }


@task_router.post("/{task_id}/submit", response_model=TaskSubmitResponse)
def submit_task(
    task_id: UUID,
    body: TaskSubmitRequest,
    db: Session = Depends(get_db),
    principal: Optional[Principal] = Depends(get_current_principal),
):
    """
    Submit (or resubmit) work for a task.

    Requires an IN_PROGRESS or MENTOR_ASSIGNED application for the
    internship the task belongs to. The assigned mentor is notified.
    """
    progress = progress_engine.submit_task(db, principal, task_id, body.artifact_url)
    return {
        "internship_id": progress.task.weekly_plan.micro_internship_id,
        "task_progress": progress,
    }
