from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import List, Optional
from uuid import UUID

from internship_portal.database.config.db import get_db
from internship_portal.database.models.notification import Notification
from internship_portal.lifecycle.errors import NotFound
from internship_portal.lifecycle.guard import Action, Principal, authorize
from internship_portal.schema.notification import NotificationResponse
from internship_portal.utils.auth import get_current_principal
from internship_portal.utils.dates import utcnow

notifications_router = APIRouter(
    prefix="/notifications",
    tags=["Notifications"],
)


@notifications_router.get("", response_model=List[NotificationResponse])
def list_notifications(
    unread_only: bool = False,
    skip: int = 0,
    limit: int = 50,
    db: Session = Depends(get_db),
    principal: Optional[Principal] = Depends(get_current_principal),
):
    """
    List the caller's notifications, newest first.
    """
    authorize(db, principal, Action.READ_NOTIFICATIONS)

    query = db.query(Notification).filter(Notification.user_id == principal.id)
    if unread_only:
        query = query.filter(Notification.read.is_(False))

    return query.order_by(Notification.created_at.desc()).offset(skip).limit(limit).all()


@notifications_router.post("/{notification_id}/read", response_model=NotificationResponse)
def mark_notification_read(
    notification_id: UUID,
    db: Session = Depends(get_db),
    principal: Optional[Principal] = Depends(get_current_principal),
):
    authorize(db, principal, Action.MARK_NOTIFICATION_READ)

    notification = db.get(Notification, notification_id)
    if not notification:
        raise NotFound("Notification not found")

    authorize(db, principal, Action.MARK_NOTIFICATION_READ, notification)

    if not notification.read:
        notification.read = True
        notification.read_at = utcnow()
        db.commit()
        db.refresh(notification)
    return notification
