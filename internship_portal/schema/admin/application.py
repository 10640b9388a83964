from pydantic import Field, field_validator
from typing import Optional
from uuid import UUID

from internship_portal.schema.auth import UserSummary
from internship_portal.schema.common import CamelModel
from internship_portal.schema.internship import InternshipSummary
from internship_portal.schema.student.application import ApplicationResponse


class ApplicationTransitionRequest(CamelModel):
    """
    Admin update of an application.

    Omitting ``mentorId`` keeps the current mentor; sending it empty or
    null removes the mentor.
    """
    status: Optional[str] = Field(None, description="Target application status")
    mentor_id: Optional[UUID] = Field(None, description="Mentor to attach, empty to remove")
    notes: Optional[str] = Field(None, description="Rejection reason when status is REJECTED")

    @field_validator("mentor_id", mode="before")
    @classmethod
    def empty_mentor_is_none(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v


class ApplicationUpdateResponse(CamelModel):
    message: str = "Application updated successfully"
    application: ApplicationResponse


class AdminApplicationDetail(ApplicationResponse):
    student: UserSummary
    micro_internship: InternshipSummary


class AdminStats(CamelModel):
    total_applications: int
    pending_applications: int
    published_internships: int
    students: int
    mentors: int
    completion_rate: float
