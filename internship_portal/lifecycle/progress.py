"""
Task progress engine.

Per (task, student): PENDING (no row) -> SUBMITTED -> APPROVED, or back to
IN_PROGRESS when the mentor requests changes, from where the student
resubmits. A mentor may also reopen APPROVED work by requesting changes.
"""
import logging
from datetime import datetime, timedelta
from enum import Enum
from typing import Optional
from uuid import UUID

from sqlalchemy.orm import Session

from internship_portal import settings
from internship_portal.database.models.application import MentorAssignment, SlaMode
from internship_portal.database.models.internship import Task
from internship_portal.database.models.progress import (
    Feedback,
    TaskProgress,
    TaskProgressStatus,
)
from internship_portal.lifecycle import notifications
from internship_portal.lifecycle.errors import (
    Conflict,
    InvalidTransition,
    NotFound,
    ValidationError,
)
from internship_portal.lifecycle.guard import (
    Action,
    Principal,
    authorize,
    find_active_application,
    find_mentor_assignment,
)
from internship_portal.lifecycle.transaction import commit_or_conflict, flush_or_conflict
from internship_portal.utils.dates import as_utc, utcnow

logger = logging.getLogger(__name__)


class ReviewAction(str, Enum):
    APPROVE = "approve"
    REQUEST_CHANGES = "request_changes"


# States a mentor review may start from, per action
REVIEWABLE_FROM = {
    ReviewAction.APPROVE: {TaskProgressStatus.SUBMITTED},
    ReviewAction.REQUEST_CHANGES: {TaskProgressStatus.SUBMITTED, TaskProgressStatus.APPROVED},
}


def sla_window(mode: SlaMode) -> timedelta:
    if mode == SlaMode.STANDARD:
        return timedelta(hours=settings.SLA_STANDARD_REPLY_HOURS)
    return timedelta(hours=settings.SLA_LIGHT_REPLY_HOURS)


def is_on_time(submitted_at: Optional[datetime], replied_at: datetime, mode: SlaMode) -> bool:
    if submitted_at is None:
        return True
    return replied_at - as_utc(submitted_at) <= sla_window(mode)


def submit_task(
    db: Session, principal: Optional[Principal], task_id: UUID, artifact_url: str
) -> TaskProgress:
    """
    Create or overwrite the acting student's submission for a task.

    Raises:
        Unauthorized: caller is not a student
        ValidationError: artifact URL is blank
        NotFound: task missing
        Forbidden: no active application for the task's internship
        InvalidTransition: the work is already approved
    """
    authorize(db, principal, Action.SUBMIT_TASK)

    if not artifact_url or not artifact_url.strip():
        raise ValidationError("Artifact URL is required")

    task = db.get(Task, task_id)
    if task is None:
        raise NotFound("Task not found")

    authorize(db, principal, Action.SUBMIT_TASK, task)

    progress = (
        db.query(TaskProgress)
        .filter(TaskProgress.task_id == task.id, TaskProgress.student_id == principal.id)
        .first()
    )
    if progress is None:
        progress = TaskProgress(task_id=task.id, student_id=principal.id)
        db.add(progress)
    elif progress.status == TaskProgressStatus.APPROVED:
        raise InvalidTransition(progress.status, TaskProgressStatus.SUBMITTED)

    progress.artifact_url = artifact_url.strip()
    progress.status = TaskProgressStatus.SUBMITTED
    progress.submitted_at = utcnow()
    # The (task, student) unique constraint settles concurrent first submissions
    flush_or_conflict(db, Conflict("Task was submitted concurrently, please retry"))

    internship_id = task.weekly_plan.micro_internship_id
    application = find_active_application(db, principal.id, internship_id)
    if application is not None and application.mentor_assignment is not None:
        notifications.task_submitted(
            db,
            application.mentor_assignment.mentor_id,
            progress,
            principal.name or "A student",
        )

    commit_or_conflict(db, Conflict("Task was submitted concurrently, please retry"))
    db.refresh(progress)

    logger.info(
        "Task %s submitted by student %s (progress %s)", task.id, principal.id, progress.id
    )
    return progress


def review_task(
    db: Session,
    principal: Optional[Principal],
    task_progress_id: UUID,
    action: str,
    feedback: Optional[str] = None,
) -> TaskProgress:
    """
    Approve a submission or send it back for changes.

    Feedback text, when given, is appended as a new record. The mentor's
    reply counters on the assignment are bumped on every review.

    Raises:
        Unauthorized: caller is not a mentor
        ValidationError: unknown action
        NotFound: task progress missing
        Forbidden: the student is not assigned to this mentor
        InvalidTransition: the progress is not awaiting review
    """
    authorize(db, principal, Action.REVIEW_TASK)

    try:
        action = ReviewAction(action)
    except ValueError:
        raise ValidationError("Invalid action")

    progress = db.get(TaskProgress, task_progress_id)
    if progress is None:
        raise NotFound("Task progress not found")

    authorize(db, principal, Action.REVIEW_TASK, progress)

    approve = action == ReviewAction.APPROVE
    target = TaskProgressStatus.APPROVED if approve else TaskProgressStatus.IN_PROGRESS
    if progress.status not in REVIEWABLE_FROM[action]:
        raise InvalidTransition(progress.status, target)

    assignment = find_mentor_assignment(
        db,
        principal.id,
        progress.student_id,
        progress.task.weekly_plan.micro_internship_id,
    )

    now = utcnow()
    on_time = is_on_time(progress.submitted_at, now, assignment.sla_mode)
    progress.status = target
    progress.approved_at = now if approve else None

    if feedback and feedback.strip():
        db.add(Feedback(task_progress_id=progress.id, author_id=principal.id, text=feedback))

    # Incremented in SQL so concurrent reviews do not lose counts
    assignment.total_replies = MentorAssignment.total_replies + 1
    if on_time:
        assignment.on_time_replies = MentorAssignment.on_time_replies + 1
    flush_or_conflict(db, Conflict("Review conflicted with another write"))

    notifications.feedback_received(
        db,
        progress,
        "Your task has been approved!" if approve else "Your mentor requested changes.",
    )

    commit_or_conflict(db, Conflict("Review conflicted with another write"))
    db.refresh(progress)

    logger.info(
        "Mentor %s reviewed progress %s: %s (on time: %s)",
        principal.id,
        progress.id,
        action.value,
        on_time,
    )
    return progress
