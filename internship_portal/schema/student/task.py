from pydantic import Field
from typing import Optional
from uuid import UUID

from internship_portal.schema.common import CamelModel
from internship_portal.schema.internship import TaskResponse
from internship_portal.schema.student.application import TaskProgressResponse


class TaskSubmitRequest(CamelModel):
    artifact_url: Optional[str] = Field(None, description="Link to the submitted work")


class TaskSubmitResponse(CamelModel):
    message: str = "Task submitted successfully"
    internship_id: UUID
    task_progress: TaskProgressResponse


class TaskDetailResponse(TaskResponse):
    internship_id: UUID
    task_progress: Optional[TaskProgressResponse] = None
