from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import List, Optional

from internship_portal.database.config.db import get_db
from internship_portal.database.models.application import (
    Application,
    ACTIVE_APPLICATION_STATUSES,
)
from internship_portal.database.models.progress import TaskProgress
from internship_portal.lifecycle.guard import Action, Principal, authorize
from internship_portal.schema.student.application import ActiveInternship
from internship_portal.utils.auth import get_current_principal

dashboard_router = APIRouter(
    prefix="/student",
    tags=["Student - Dashboard"],
)


@dashboard_router.get("/dashboard", response_model=List[ActiveInternship])
def get_student_dashboard(
    db: Session = Depends(get_db),
    principal: Optional[Principal] = Depends(get_current_principal),
):
    """
    Internships the student is currently working on, with their weekly
    plans and the student's progress on each task.
    """
    authorize(db, principal, Action.VIEW_OWN_APPLICATIONS)

    active = (
        db.query(Application)
        .filter(
            Application.student_id == principal.id,
            Application.status.in_(ACTIVE_APPLICATION_STATUSES),
        )
        .order_by(Application.submitted_at.desc())
        .all()
    )

    entries = []
    for application in active:
        internship = application.micro_internship
        task_ids = [task.id for plan in internship.weekly_plans for task in plan.tasks]
        progress = []
        if task_ids:
            progress = (
                db.query(TaskProgress)
                .filter(
                    TaskProgress.student_id == principal.id,
                    TaskProgress.task_id.in_(task_ids),
                )
                .all()
            )
        entries.append(
            {
                "application": application,
                "micro_internship": internship,
                "task_progress": progress,
            }
        )
    return entries
