from pydantic import Field, model_validator
from typing import List, Optional
from uuid import UUID
from datetime import datetime

from internship_portal.database.models.internship import InternshipStatus, TaskType
from internship_portal.schema.common import CamelModel


class TaskCreate(CamelModel):
    title: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    type: TaskType
    artifact_template_id: Optional[UUID] = None


class WeeklyPlanCreate(CamelModel):
    week_number: int = Field(..., ge=1)
    title: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    deadline_at: Optional[datetime] = None
    tasks: List[TaskCreate] = Field(default_factory=list)


class InternshipCreate(CamelModel):
    """New internship, created as DRAFT with its weekly plans and tasks."""
    title: str = Field(..., min_length=1, max_length=255)
    description: str = Field(..., min_length=1)
    duration_in_weeks: int = Field(..., ge=1, le=52)
    tags: Optional[str] = Field(None, max_length=500)
    weekly_plans: List[WeeklyPlanCreate] = Field(default_factory=list)

    @model_validator(mode="after")
    def check_weeks(self):
        weeks = [plan.week_number for plan in self.weekly_plans]
        if len(weeks) != len(set(weeks)):
            raise ValueError("Week numbers must be unique")
        if any(week > self.duration_in_weeks for week in weeks):
            raise ValueError("Week number exceeds the internship duration")
        return self


class InternshipStatusUpdate(CamelModel):
    status: InternshipStatus


class ArtifactTemplateCreate(CamelModel):
    name: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    body: str = Field(..., min_length=1)
