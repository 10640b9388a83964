from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import List, Optional

from internship_portal.database.config.db import get_db
from internship_portal.database.models.application import MentorAssignment
from internship_portal.database.models.progress import TaskProgress
from internship_portal.lifecycle.guard import Action, Principal, authorize
from internship_portal.schema.mentor.task import MentorAssignmentDetail
from internship_portal.utils.auth import get_current_principal

assignment_router = APIRouter(
    prefix="/assignments",
    tags=["Mentor - Assignments"],
)


@assignment_router.get("", response_model=List[MentorAssignmentDetail])
def list_my_assignments(
    db: Session = Depends(get_db),
    principal: Optional[Principal] = Depends(get_current_principal),
):
    """
    Students assigned to the caller, with their submissions on the
    internship they were matched for.
    """
    authorize(db, principal, Action.VIEW_MENTOR_ASSIGNMENTS)

    assignments = (
        db.query(MentorAssignment)
        .filter(MentorAssignment.mentor_id == principal.id)
        .order_by(MentorAssignment.created_at.desc())
        .all()
    )

    entries = []
    for assignment in assignments:
        application = assignment.application
        task_ids = [
            task.id
            for plan in application.micro_internship.weekly_plans
            for task in plan.tasks
        ]
        progress = []
        if task_ids:
            progress = (
                db.query(TaskProgress)
                .filter(
                    TaskProgress.student_id == application.student_id,
                    TaskProgress.task_id.in_(task_ids),
                )
                .all()
            )
        entries.append(
            {
                "id": assignment.id,
                "sla_mode": assignment.sla_mode,
                "total_replies": assignment.total_replies,
                "on_time_replies": assignment.on_time_replies,
                "application": application,
                "task_progress": progress,
            }
        )
    return entries
