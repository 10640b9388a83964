from pydantic import Field
from typing import List, Optional
from uuid import UUID
from datetime import datetime

from internship_portal.database.models.application import SlaMode
from internship_portal.schema.auth import UserSummary
from internship_portal.schema.common import CamelModel
from internship_portal.schema.internship import InternshipSummary, TaskResponse
from internship_portal.schema.student.application import (
    ApplicationResponse,
    TaskProgressResponse,
)


class ReviewRequest(CamelModel):
    action: Optional[str] = Field(None, description="approve or request_changes")
    feedback: Optional[str] = None


class ReviewResponse(CamelModel):
    message: str = "Review submitted successfully"
    task_progress: TaskProgressResponse


class FeedbackResponse(CamelModel):
    id: UUID
    author_id: Optional[UUID] = None
    text: str
    created_at: Optional[datetime] = None


class TaskProgressDetail(TaskProgressResponse):
    task: TaskResponse
    student: UserSummary
    feedbacks: List[FeedbackResponse] = Field(default_factory=list)


class AssignedApplication(ApplicationResponse):
    student: UserSummary
    micro_internship: InternshipSummary


class MentorAssignmentDetail(CamelModel):
    id: UUID
    sla_mode: SlaMode
    total_replies: int
    on_time_replies: int
    application: AssignedApplication
    task_progress: List[TaskProgressResponse] = Field(default_factory=list)
