"""
Internship authoring: DRAFT -> PUBLISHED -> CLOSED. CLOSED is terminal and
a published internship cannot go back to draft.
"""
import logging
from typing import Optional
from uuid import UUID

from sqlalchemy.orm import Session

from internship_portal.database.models.internship import (
    ArtifactTemplate,
    InternshipStatus,
    MicroInternship,
    Task,
    WeeklyPlan,
)
from internship_portal.lifecycle.errors import Conflict, InvalidTransition, NotFound, ValidationError
from internship_portal.lifecycle.guard import Action, Principal, authorize
from internship_portal.lifecycle.transaction import commit_or_conflict
from internship_portal.schema.admin.internship import InternshipCreate

logger = logging.getLogger(__name__)

ALLOWED_INTERNSHIP_MOVES = {
    InternshipStatus.DRAFT: {InternshipStatus.PUBLISHED, InternshipStatus.CLOSED},
    InternshipStatus.PUBLISHED: {InternshipStatus.CLOSED},
    InternshipStatus.CLOSED: set(),
}


def create_internship(
    db: Session, principal: Optional[Principal], data: InternshipCreate
) -> MicroInternship:
    authorize(db, principal, Action.MANAGE_INTERNSHIPS)

    internship = MicroInternship(
        title=data.title,
        description=data.description,
        duration_in_weeks=data.duration_in_weeks,
        tags=data.tags,
        status=InternshipStatus.DRAFT,
        owner_id=principal.id,
    )
    for plan_data in data.weekly_plans:
        plan = WeeklyPlan(
            week_number=plan_data.week_number,
            title=plan_data.title,
            description=plan_data.description,
            deadline_at=plan_data.deadline_at,
        )
        for position, task_data in enumerate(plan_data.tasks):
            if task_data.artifact_template_id and not db.get(
                ArtifactTemplate, task_data.artifact_template_id
            ):
                raise ValidationError(
                    f"Artifact template {task_data.artifact_template_id} not found"
                )
            plan.tasks.append(
                Task(
                    title=task_data.title,
                    description=task_data.description,
                    type=task_data.type,
                    position=position,
                    artifact_template_id=task_data.artifact_template_id,
                )
            )
        internship.weekly_plans.append(plan)

    db.add(internship)
    commit_or_conflict(db, Conflict("Duplicate week number"))
    db.refresh(internship)

    logger.info("Internship %s created by admin %s", internship.id, principal.id)
    return internship


def change_internship_status(
    db: Session,
    principal: Optional[Principal],
    internship_id: UUID,
    new_status: InternshipStatus,
) -> MicroInternship:
    authorize(db, principal, Action.MANAGE_INTERNSHIPS)

    internship = db.get(MicroInternship, internship_id)
    if internship is None:
        raise NotFound("Internship not found")

    current = internship.status
    if new_status != current and new_status not in ALLOWED_INTERNSHIP_MOVES[current]:
        raise InvalidTransition(current, new_status)

    internship.status = new_status
    db.commit()
    db.refresh(internship)

    logger.info(
        "Internship %s moved %s -> %s by admin %s",
        internship.id,
        current.value,
        new_status.value,
        principal.id,
    )
    return internship


def create_artifact_template(
    db: Session, principal: Optional[Principal], name: str, body: str, description: str = None
) -> ArtifactTemplate:
    authorize(db, principal, Action.MANAGE_INTERNSHIPS)

    template = ArtifactTemplate(name=name, description=description, body=body)
    db.add(template)
    db.commit()
    db.refresh(template)
    return template
