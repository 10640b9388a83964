"""
Application lifecycle engine.

SUBMITTED -> REVIEWED -> MENTOR_ASSIGNED -> IN_PROGRESS -> COMPLETED, with
REJECTED reachable from any non-terminal state. COMPLETED and REJECTED are
terminal. Mentor assignment is independent of the status: an admin may
attach, replace or remove a mentor on any transition call.
"""
import logging
from typing import Optional, Union
from uuid import UUID

from sqlalchemy.orm import Session

from internship_portal.database.models.application import (
    Application,
    ApplicationStatus,
    MentorAssignment,
    SlaMode,
    TERMINAL_APPLICATION_STATUSES,
)
from internship_portal.database.models.auth import User, UserRole
from internship_portal.database.models.internship import MicroInternship, InternshipStatus
from internship_portal.lifecycle import notifications
from internship_portal.lifecycle.errors import (
    Conflict,
    DuplicateApplication,
    InvalidTransition,
    NotFound,
    ValidationError,
)
from internship_portal.lifecycle.guard import Action, Principal, authorize
from internship_portal.lifecycle.transaction import commit_or_conflict, flush_or_conflict
from internship_portal.utils.dates import utcnow

logger = logging.getLogger(__name__)


class _Unset:
    def __repr__(self):
        return "UNSET"


# Marks "mentor_id not supplied", as opposed to None which clears the mentor
UNSET = _Unset()

# The single timestamp each status owns; MENTOR_ASSIGNED is stamped by assignment
STATUS_TIMESTAMPS = {
    ApplicationStatus.REVIEWED: "reviewed_at",
    ApplicationStatus.IN_PROGRESS: "started_at",
    ApplicationStatus.COMPLETED: "completed_at",
    ApplicationStatus.REJECTED: "rejected_at",
}


def submit_application(
    db: Session,
    principal: Optional[Principal],
    internship_id: UUID,
    motivation: str,
    interests: Optional[str] = None,
    city: Optional[str] = None,
    linkedin_url: Optional[str] = None,
    portfolio_url: Optional[str] = None,
) -> Application:
    """
    Create a SUBMITTED application for the acting student.

    Raises:
        Unauthorized: caller is not a student
        ValidationError: motivation is blank
        NotFound: internship missing or not published
        DuplicateApplication: the student already applied
    """
    authorize(db, principal, Action.APPLY, principal.id if principal else None)

    if not internship_id or not motivation or not motivation.strip():
        raise ValidationError("Missing required fields")

    internship = db.get(MicroInternship, internship_id)
    if internship is None or internship.status != InternshipStatus.PUBLISHED:
        raise NotFound("Internship not found or not available")

    existing = (
        db.query(Application)
        .filter(
            Application.student_id == principal.id,
            Application.micro_internship_id == internship_id,
        )
        .first()
    )
    if existing:
        raise DuplicateApplication()

    application = Application(
        student_id=principal.id,
        micro_internship_id=internship_id,
        motivation=motivation,
        interests=interests,
        city=city,
        linkedin_url=linkedin_url,
        portfolio_url=portfolio_url,
        status=ApplicationStatus.SUBMITTED,
        submitted_at=utcnow(),
    )
    db.add(application)
    # The unique constraint settles concurrent double-applies
    flush_or_conflict(db, DuplicateApplication())

    notifications.application_status_changed(
        db, application, "Your application has been submitted successfully!"
    )
    commit_or_conflict(db, DuplicateApplication())
    db.refresh(application)

    logger.info(
        "Application %s submitted by student %s for internship %s",
        application.id,
        principal.id,
        internship_id,
    )
    return application


def transition_application(
    db: Session,
    principal: Optional[Principal],
    application_id: UUID,
    new_status: Union[ApplicationStatus, str],
    mentor_id: Union[UUID, None, _Unset] = UNSET,
    notes: Optional[str] = None,
) -> Application:
    """
    Apply an admin status change, optionally attaching or removing a mentor.

    ``mentor_id`` left as UNSET keeps the current assignment, a UUID creates
    or replaces it, and None removes it.

    Raises:
        Unauthorized: caller is not an admin
        NotFound: application missing
        ValidationError: unknown status, or mentor_id is not a mentor
        InvalidTransition: the application is already terminal
    """
    authorize(db, principal, Action.TRANSITION_APPLICATION)
    if mentor_id is not UNSET:
        authorize(db, principal, Action.MANAGE_MENTOR_ASSIGNMENT)

    try:
        new_status = ApplicationStatus(new_status)
    except ValueError:
        raise ValidationError(f"Unknown application status: {new_status}")

    application = db.get(Application, application_id)
    if application is None:
        raise NotFound("Application not found")

    current = application.status
    if current in TERMINAL_APPLICATION_STATUSES and new_status != current:
        raise InvalidTransition(current, new_status)

    mentor = None
    if mentor_id is not UNSET and mentor_id is not None:
        mentor = _load_mentor(db, mentor_id)

    now = utcnow()
    application.status = new_status
    column = STATUS_TIMESTAMPS.get(new_status)
    if column and getattr(application, column) is None:
        setattr(application, column, now)

    if new_status == ApplicationStatus.REJECTED and notes:
        application.rejection_reason = notes

    if mentor is not None:
        _assign_mentor(application, mentor, now)
    elif mentor_id is None and application.mentor_assignment is not None:
        logger.info(
            "Removing mentor %s from application %s",
            application.mentor_assignment.mentor_id,
            application.id,
        )
        application.mentor_assignment = None

    flush_or_conflict(db, Conflict("Mentor assignment changed concurrently"))

    message = f"Your application status has been updated to {new_status.value}"
    if mentor is not None:
        message += f". Mentor {mentor.name} has been assigned to you."
    notifications.application_status_changed(db, application, message, mentor=mentor)

    commit_or_conflict(db, Conflict("Mentor assignment changed concurrently"))
    db.refresh(application)

    logger.info(
        "Application %s moved %s -> %s by admin %s",
        application.id,
        current.value,
        new_status.value,
        principal.id,
    )
    return application


def _load_mentor(db: Session, mentor_id: UUID) -> User:
    mentor = db.get(User, mentor_id)
    if mentor is None or mentor.role != UserRole.MENTOR:
        raise ValidationError("mentorId must reference a mentor")
    return mentor


def _assign_mentor(application: Application, mentor: User, now) -> MentorAssignment:
    assignment = application.mentor_assignment
    if assignment is None:
        assignment = MentorAssignment(
            mentor_id=mentor.id,
            sla_mode=SlaMode.LIGHT,
            total_replies=0,
            on_time_replies=0,
        )
        application.mentor_assignment = assignment
        logger.info("Assigning mentor %s to application %s", mentor.id, application.id)
    elif assignment.mentor_id != mentor.id:
        logger.info(
            "Reassigning application %s from mentor %s to %s",
            application.id,
            assignment.mentor_id,
            mentor.id,
        )
        assignment.mentor_id = mentor.id

    if application.mentor_assigned_at is None:
        application.mentor_assigned_at = now
    return assignment
