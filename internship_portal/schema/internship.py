from pydantic import Field
from typing import List, Optional
from uuid import UUID
from datetime import datetime

from internship_portal.database.models.internship import InternshipStatus, TaskType
from internship_portal.schema.common import CamelModel


class ArtifactTemplateResponse(CamelModel):
    id: UUID
    name: str
    description: Optional[str] = None
    body: str


class TaskResponse(CamelModel):
    id: UUID
    weekly_plan_id: UUID
    title: str
    description: Optional[str] = None
    type: TaskType
    position: int
    artifact_template: Optional[ArtifactTemplateResponse] = None


class WeeklyPlanResponse(CamelModel):
    id: UUID
    week_number: int
    title: str
    description: Optional[str] = None
    deadline_at: Optional[datetime] = None
    tasks: List[TaskResponse] = Field(default_factory=list)


class InternshipSummary(CamelModel):
    id: UUID
    title: str
    description: str
    duration_in_weeks: int
    tags: Optional[str] = None
    status: InternshipStatus
    created_at: Optional[datetime] = None


class InternshipDetail(InternshipSummary):
    weekly_plans: List[WeeklyPlanResponse] = Field(default_factory=list)
