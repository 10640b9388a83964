from pydantic import Field
from typing import List, Optional
from uuid import UUID
from datetime import datetime

from internship_portal.database.models.application import ApplicationStatus, SlaMode
from internship_portal.database.models.progress import TaskProgressStatus
from internship_portal.schema.auth import UserSummary
from internship_portal.schema.common import CamelModel
from internship_portal.schema.internship import InternshipDetail, InternshipSummary


class ApplicationCreate(CamelModel):
    """
    Application form. Required fields are checked by the lifecycle engine
    so a missing motivation is reported as a 400, not a schema error.
    """
    micro_internship_id: Optional[UUID] = Field(None, description="Internship to apply to")
    motivation: Optional[str] = Field(None, description="Why the student wants this internship")
    interests: Optional[str] = None
    city: Optional[str] = Field(None, max_length=100)
    linkedin_url: Optional[str] = Field(None, max_length=500)
    portfolio_url: Optional[str] = Field(None, max_length=500)


class ApplicationCreateResponse(CamelModel):
    message: str = "Application submitted successfully"
    application_id: UUID


class MentorAssignmentResponse(CamelModel):
    id: UUID
    mentor_id: UUID
    application_id: UUID
    sla_mode: SlaMode
    total_replies: int
    on_time_replies: int
    mentor: Optional[UserSummary] = None


class ApplicationResponse(CamelModel):
    id: UUID
    student_id: UUID
    micro_internship_id: UUID
    motivation: str
    interests: Optional[str] = None
    city: Optional[str] = None
    linkedin_url: Optional[str] = None
    portfolio_url: Optional[str] = None
    status: ApplicationStatus
    rejection_reason: Optional[str] = None
    submitted_at: datetime
    reviewed_at: Optional[datetime] = None
    mentor_assigned_at: Optional[datetime] = None
    started_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    rejected_at: Optional[datetime] = None
    mentor_assignment: Optional[MentorAssignmentResponse] = None


class StudentApplicationResponse(ApplicationResponse):
    micro_internship: InternshipSummary


class TaskProgressResponse(CamelModel):
    id: UUID
    task_id: UUID
    student_id: UUID
    status: TaskProgressStatus
    artifact_url: Optional[str] = None
    submitted_at: Optional[datetime] = None
    approved_at: Optional[datetime] = None


class ActiveInternship(CamelModel):
    """Dashboard entry for an application the student is working on."""
    application: ApplicationResponse
    micro_internship: InternshipDetail
    task_progress: List[TaskProgressResponse] = Field(default_factory=list)
