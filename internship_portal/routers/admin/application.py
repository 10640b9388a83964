from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import List, Optional
from uuid import UUID

from internship_portal.database.config.db import get_db
from internship_portal.database.models.application import Application, ApplicationStatus
from internship_portal.lifecycle import applications
from internship_portal.lifecycle.errors import NotFound, ValidationError
from internship_portal.lifecycle.guard import Action, Principal, authorize
from internship_portal.schema.admin.application import (
    AdminApplicationDetail,
    ApplicationTransitionRequest,
    ApplicationUpdateResponse,
)
from internship_portal.utils.auth import get_current_principal

application_router = APIRouter(
    prefix="/applications",
    tags=["Admin - Applications"],
)


@application_router.get("", response_model=List[AdminApplicationDetail])
def list_applications(
    status: Optional[str] = None,
    skip: int = 0,
    limit: int = 100,
    db: Session = Depends(get_db),
    principal: Optional[Principal] = Depends(get_current_principal),
):
    """
    List applications, newest first, optionally filtered by status.
    """
    authorize(db, principal, Action.VIEW_ALL_APPLICATIONS)

    query = db.query(Application)
    if status:
        try:
            query = query.filter(Application.status == ApplicationStatus(status))
        except ValueError:
            raise ValidationError(f"Unknown application status: {status}")

    return query.order_by(Application.submitted_at.desc()).offset(skip).limit(limit).all()


@application_router.get("/{application_id}", response_model=AdminApplicationDetail)
def get_application(
    application_id: UUID,
    db: Session = Depends(get_db),
    principal: Optional[Principal] = Depends(get_current_principal),
):
    """
    Get an application with its student, internship and mentor assignment.
    """
    authorize(db, principal, Action.VIEW_ALL_APPLICATIONS)

    application = db.get(Application, application_id)
    if not application:
        raise NotFound("Application not found")
    return application


@application_router.patch("/{application_id}", response_model=ApplicationUpdateResponse)
def update_application(
    application_id: UUID,
    body: ApplicationTransitionRequest,
    db: Session = Depends(get_db),
    principal: Optional[Principal] = Depends(get_current_principal),
):
    """
    Change an application's status and, optionally, its mentor.

    - ``mentorId`` omitted: mentor unchanged
    - ``mentorId`` set: mentor attached or replaced, independent of status
    - ``mentorId`` empty/null: mentor removed
    """
    mentor_id = applications.UNSET
    if "mentor_id" in body.model_fields_set:
        mentor_id = body.mentor_id

    application = applications.transition_application(
        db,
        principal,
        application_id,
        body.status,
        mentor_id=mentor_id,
        notes=body.notes,
    )
    return {"application": application}
