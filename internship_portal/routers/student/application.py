from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import List, Optional

from internship_portal.database.config.db import get_db
from internship_portal.database.models.application import Application
from internship_portal.lifecycle import applications
from internship_portal.lifecycle.guard import Action, Principal, authorize
from internship_portal.schema.student.application import (
    ApplicationCreate,
    ApplicationCreateResponse,
    StudentApplicationResponse,
)
from internship_portal.utils.auth import get_current_principal

application_router = APIRouter(
    prefix="/applications",
    tags=["Student - Applications"],
)


@application_router.post(
    "", response_model=ApplicationCreateResponse, status_code=status.HTTP_201_CREATED
)
def create_application(
    body: ApplicationCreate,
    db: Session = Depends(get_db),
    principal: Optional[Principal] = Depends(get_current_principal),
):
    """
    Apply to a published internship.

    One application per student and internship; a second attempt is
    rejected with 400. The student receives a confirmation notification.
    """
    application = applications.submit_application(
        db,
        principal,
        internship_id=body.micro_internship_id,
        motivation=body.motivation,
        interests=body.interests,
        city=body.city,
        linkedin_url=body.linkedin_url,
        portfolio_url=body.portfolio_url,
    )
    return ApplicationCreateResponse(application_id=application.id)


@application_router.get("", response_model=List[StudentApplicationResponse])
def list_my_applications(
    db: Session = Depends(get_db),
    principal: Optional[Principal] = Depends(get_current_principal),
):
    """
    List the caller's applications, newest first.
    """
    authorize(db, principal, Action.VIEW_OWN_APPLICATIONS)
    return (
        db.query(Application)
        .filter(Application.student_id == principal.id)
        .order_by(Application.submitted_at.desc())
        .all()
    )
