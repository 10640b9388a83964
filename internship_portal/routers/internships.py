from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import List
from uuid import UUID

from internship_portal.database.config.db import get_db
from internship_portal.database.models.internship import MicroInternship, InternshipStatus
from internship_portal.lifecycle.errors import NotFound
from internship_portal.schema.internship import InternshipDetail, InternshipSummary

internships_router = APIRouter(
    prefix="/internships",
    tags=["Internships"],
)


@internships_router.get("", response_model=List[InternshipSummary])
def list_published_internships(
    skip: int = 0,
    limit: int = 100,
    db: Session = Depends(get_db),
):
    """
    Public catalogue of published internships, newest first.
    """
    return (
        db.query(MicroInternship)
        .filter(MicroInternship.status == InternshipStatus.PUBLISHED)
        .order_by(MicroInternship.created_at.desc())
        .offset(skip)
        .limit(limit)
        .all()
    )


@internships_router.get("/{internship_id}", response_model=InternshipDetail)
def get_internship(
    internship_id: UUID,
    db: Session = Depends(get_db),
):
    """
    Get an internship with its weekly plans and tasks.
    """
    internship = db.get(MicroInternship, internship_id)
    if not internship:
        raise NotFound("Internship not found")
    return internship
