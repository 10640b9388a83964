"""
Authorization guard.

Every engine operation asks the guard whether the acting principal may
perform an action on a target. Rules are registered per action with the
``rule`` decorator. A rule called without a target checks the role only,
so callers can reject the wrong role before loading anything.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, Optional
from uuid import UUID

from sqlalchemy.orm import Session

from internship_portal.database.models.auth import UserRole
from internship_portal.database.models.application import (
    Application,
    MentorAssignment,
    ACTIVE_APPLICATION_STATUSES,
)
from internship_portal.database.models.internship import Task
from internship_portal.database.models.notification import Notification
from internship_portal.database.models.progress import TaskProgress
from internship_portal.lifecycle.errors import Forbidden, PortalError, Unauthorized


@dataclass(frozen=True)
class Principal:
    """The authenticated caller, as supplied by the identity layer."""
    id: UUID
    role: UserRole
    name: str = ""


class Action(str, Enum):
    APPLY = "apply"
    VIEW_OWN_APPLICATIONS = "view_own_applications"
    TRANSITION_APPLICATION = "transition_application"
    MANAGE_MENTOR_ASSIGNMENT = "manage_mentor_assignment"
    MANAGE_INTERNSHIPS = "manage_internships"
    VIEW_ALL_APPLICATIONS = "view_all_applications"
    VIEW_TASK = "view_task"
    SUBMIT_TASK = "submit_task"
    VIEW_TASK_PROGRESS = "view_task_progress"
    REVIEW_TASK = "review_task"
    VIEW_MENTOR_ASSIGNMENTS = "view_mentor_assignments"
    READ_NOTIFICATIONS = "read_notifications"
    MARK_NOTIFICATION_READ = "mark_notification_read"


@dataclass(frozen=True)
class Decision:
    allowed: bool
    error: Optional[PortalError] = None


ALLOW = Decision(allowed=True)


def deny(error: PortalError) -> Decision:
    return Decision(allowed=False, error=error)


Rule = Callable[[Session, Principal, object], Decision]
RULES: Dict[Action, Rule] = {}


def rule(*actions: Action):
    def _decorator(fn: Rule):
        for action in actions:
            RULES[action] = fn
        return fn

    return _decorator


def check(
    db: Session, principal: Optional[Principal], action: Action, target: object = None
) -> Decision:
    """Evaluate ``action`` for ``principal`` without raising."""
    if principal is None:
        return deny(Unauthorized("Authentication required"))
    return RULES[action](db, principal, target)


def authorize(
    db: Session, principal: Optional[Principal], action: Action, target: object = None
) -> Principal:
    """Raise the denial error unless ``principal`` may perform ``action``."""
    decision = check(db, principal, action, target)
    if not decision.allowed:
        raise decision.error
    return principal


def _wrong_role(principal: Principal, *roles: UserRole) -> Optional[Decision]:
    if principal.role not in roles:
        return deny(Unauthorized("Unauthorized"))
    return None


# ==================== RELATIONSHIP LOOKUPS ====================


def find_active_application(
    db: Session, student_id: UUID, internship_id: UUID
) -> Optional[Application]:
    return (
        db.query(Application)
        .filter(
            Application.student_id == student_id,
            Application.micro_internship_id == internship_id,
            Application.status.in_(ACTIVE_APPLICATION_STATUSES),
        )
        .first()
    )


def find_mentor_assignment(
    db: Session, mentor_id: UUID, student_id: UUID, internship_id: UUID = None
) -> Optional[MentorAssignment]:
    """
    Find an assignment binding ``mentor_id`` to any application of ``student_id``.

    When ``internship_id`` is given, the assignment for that internship wins.
    """
    assignments = (
        db.query(MentorAssignment)
        .join(Application, MentorAssignment.application_id == Application.id)
        .filter(
            MentorAssignment.mentor_id == mentor_id,
            Application.student_id == student_id,
        )
        .all()
    )
    if not assignments:
        return None
    for assignment in assignments:
        if assignment.application.micro_internship_id == internship_id:
            return assignment
    return assignments[0]


# ==================== RULES ====================


@rule(
    Action.TRANSITION_APPLICATION,
    Action.MANAGE_MENTOR_ASSIGNMENT,
    Action.MANAGE_INTERNSHIPS,
    Action.VIEW_ALL_APPLICATIONS,
)
def _admin_only(db: Session, principal: Principal, target: object) -> Decision:
    return _wrong_role(principal, UserRole.ADMIN) or ALLOW


@rule(Action.APPLY)
def _apply(db: Session, principal: Principal, student_id: object) -> Decision:
    denied = _wrong_role(principal, UserRole.STUDENT)
    if denied:
        return denied
    if student_id is not None and student_id != principal.id:
        return deny(Forbidden("Students can only apply for themselves"))
    return ALLOW


@rule(Action.VIEW_OWN_APPLICATIONS)
def _student_only(db: Session, principal: Principal, target: object) -> Decision:
    return _wrong_role(principal, UserRole.STUDENT) or ALLOW


@rule(Action.VIEW_TASK, Action.SUBMIT_TASK)
def _student_task(db: Session, principal: Principal, task: Optional[Task]) -> Decision:
    denied = _wrong_role(principal, UserRole.STUDENT)
    if denied or task is None:
        return denied or ALLOW
    internship_id = task.weekly_plan.micro_internship_id
    if find_active_application(db, principal.id, internship_id) is None:
        return deny(Forbidden("You are not enrolled in this internship"))
    return ALLOW


@rule(Action.VIEW_TASK_PROGRESS, Action.REVIEW_TASK)
def _mentor_task(
    db: Session, principal: Principal, progress: Optional[TaskProgress]
) -> Decision:
    denied = _wrong_role(principal, UserRole.MENTOR)
    if denied or progress is None:
        return denied or ALLOW
    if find_mentor_assignment(db, principal.id, progress.student_id) is None:
        return deny(Forbidden("This student is not assigned to you"))
    return ALLOW


@rule(Action.VIEW_MENTOR_ASSIGNMENTS)
def _mentor_only(db: Session, principal: Principal, target: object) -> Decision:
    return _wrong_role(principal, UserRole.MENTOR) or ALLOW


@rule(Action.READ_NOTIFICATIONS)
def _any_user(db: Session, principal: Principal, target: object) -> Decision:
    return ALLOW


@rule(Action.MARK_NOTIFICATION_READ)
def _notification_owner(
    db: Session, principal: Principal, notification: Optional[Notification]
) -> Decision:
    if notification is not None and notification.user_id != principal.id:
        return deny(Forbidden("Not your notification"))
    return ALLOW
