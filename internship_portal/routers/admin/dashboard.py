from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import List, Optional

from internship_portal.database.config.db import get_db
from internship_portal.database.models.application import Application, ApplicationStatus
from internship_portal.database.models.auth import User, UserRole
from internship_portal.database.models.internship import MicroInternship, InternshipStatus
from internship_portal.lifecycle.guard import Action, Principal, authorize
from internship_portal.schema.admin.application import AdminStats
from internship_portal.schema.auth import UserSummary
from internship_portal.utils.auth import get_current_principal

dashboard_router = APIRouter(
    tags=["Admin - Dashboard"],
)


@dashboard_router.get("/mentors", response_model=List[UserSummary])
def list_mentors(
    db: Session = Depends(get_db),
    principal: Optional[Principal] = Depends(get_current_principal),
):
    """
    Mentors available for assignment.
    """
    authorize(db, principal, Action.MANAGE_MENTOR_ASSIGNMENT)
    return db.query(User).filter(User.role == UserRole.MENTOR.value).order_by(User.name).all()


@dashboard_router.get("/stats", response_model=AdminStats)
def get_stats(
    db: Session = Depends(get_db),
    principal: Optional[Principal] = Depends(get_current_principal),
):
    """
    Headline numbers for the admin dashboard.

    Completion rate is completed / (in progress + completed), as a percentage.
    """
    authorize(db, principal, Action.VIEW_ALL_APPLICATIONS)

    def count_status(*statuses):
        return db.query(Application).filter(Application.status.in_(statuses)).count()

    completed = count_status(ApplicationStatus.COMPLETED)
    started = count_status(ApplicationStatus.IN_PROGRESS, ApplicationStatus.COMPLETED)

    return AdminStats(
        total_applications=db.query(Application).count(),
        pending_applications=count_status(ApplicationStatus.SUBMITTED),
        published_internships=db.query(MicroInternship)
        .filter(MicroInternship.status == InternshipStatus.PUBLISHED)
        .count(),
        students=db.query(User).filter(User.role == UserRole.STUDENT.value).count(),
        mentors=db.query(User).filter(User.role == UserRole.MENTOR.value).count(),
        completion_rate=(completed / started * 100) if started else 0.0,
    )
