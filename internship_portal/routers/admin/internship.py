from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import List, Optional
from uuid import UUID

from internship_portal.database.config.db import get_db
from internship_portal.database.models.internship import ArtifactTemplate
from internship_portal.lifecycle import internships
from internship_portal.lifecycle.guard import Action, Principal, authorize
from internship_portal.schema.admin.internship import (
    ArtifactTemplateCreate,
    InternshipCreate,
    InternshipStatusUpdate,
)
from internship_portal.schema.internship import ArtifactTemplateResponse, InternshipDetail
from internship_portal.utils.auth import get_current_principal

internship_router = APIRouter(
    tags=["Admin - Internships"],
)


@internship_router.post(
    "/internships", response_model=InternshipDetail, status_code=status.HTTP_201_CREATED
)
def create_internship(
    body: InternshipCreate,
    db: Session = Depends(get_db),
    principal: Optional[Principal] = Depends(get_current_principal),
):
    """
    Create a DRAFT internship with its weekly plans and tasks.
    """
    return internships.create_internship(db, principal, body)


@internship_router.patch("/internships/{internship_id}/status", response_model=InternshipDetail)
def update_internship_status(
    internship_id: UUID,
    body: InternshipStatusUpdate,
    db: Session = Depends(get_db),
    principal: Optional[Principal] = Depends(get_current_principal),
):
    """
    Publish or close an internship. Closed internships stay closed.
    """
    return internships.change_internship_status(db, principal, internship_id, body.status)


@internship_router.get("/artifact-templates", response_model=List[ArtifactTemplateResponse])
def list_artifact_templates(
    db: Session = Depends(get_db),
    principal: Optional[Principal] = Depends(get_current_principal),
):
    authorize(db, principal, Action.MANAGE_INTERNSHIPS)
    return db.query(ArtifactTemplate).order_by(ArtifactTemplate.name).all()


@internship_router.post(
    "/artifact-templates",
    response_model=ArtifactTemplateResponse,
    status_code=status.HTTP_201_CREATED,
)
def create_artifact_template(
    body: ArtifactTemplateCreate,
    db: Session = Depends(get_db),
    principal: Optional[Principal] = Depends(get_current_principal),
):
    return internships.create_artifact_template(
        db, principal, name=body.name, body=body.body, description=body.description
    )
