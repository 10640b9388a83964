"""
Notification emitter.

Records in-app notifications for the affected user. Notifications are
best effort: each one is written inside a SAVEPOINT so a failed write is
rolled back on its own, logged, and never undoes the state change that
triggered it. Delivery (e-mail, push) is handled outside this service.
"""
import logging
from typing import Any, Dict, Optional
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from internship_portal.database.models.application import Application
from internship_portal.database.models.auth import User
from internship_portal.database.models.notification import Notification, NotificationType
from internship_portal.database.models.progress import TaskProgress

logger = logging.getLogger(__name__)


def emit(
    db: Session, user_id: UUID, type: NotificationType, payload: Dict[str, Any]
) -> Optional[Notification]:
    try:
        with db.begin_nested():
            notification = Notification(user_id=user_id, type=type, payload=payload, read=False)
            db.add(notification)
    except SQLAlchemyError:
        logger.exception(
            "Failed to record %s notification for user %s", type.value, user_id
        )
        return None

    logger.info("Recorded %s notification for user %s", type.value, user_id)
    return notification


def application_status_changed(
    db: Session, application: Application, message: str, mentor: User = None
) -> Optional[Notification]:
    payload = {
        "applicationId": str(application.id),
        "newStatus": application.status.value,
        "message": message,
    }
    if mentor is not None:
        payload["mentorId"] = str(mentor.id)
        payload["mentorName"] = mentor.name
    return emit(db, application.student_id, NotificationType.APPLICATION_STATUS_CHANGED, payload)


def task_submitted(
    db: Session, mentor_id: UUID, progress: TaskProgress, student_name: str
) -> Optional[Notification]:
    return emit(
        db,
        mentor_id,
        NotificationType.TASK_SUBMITTED,
        {
            "taskId": str(progress.task_id),
            "taskProgressId": str(progress.id),
            "studentName": student_name,
            "message": f"{student_name} submitted a task for review",
        },
    )


def feedback_received(db: Session, progress: TaskProgress, message: str) -> Optional[Notification]:
    return emit(
        db,
        progress.student_id,
        NotificationType.FEEDBACK_RECEIVED,
        {
            "taskProgressId": str(progress.id),
            "taskTitle": progress.task.title,
            "status": progress.status.value,
            "message": message,
        },
    )
