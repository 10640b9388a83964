# Import models in dependency order
from internship_portal.database.models.auth import User, UserRole
from internship_portal.database.models.internship import (
    MicroInternship,
    InternshipStatus,
    WeeklyPlan,
    ArtifactTemplate,
    Task,
    TaskType,
)
from internship_portal.database.models.application import (
    Application,
    ApplicationStatus,
    MentorAssignment,
    SlaMode,
)
from internship_portal.database.models.progress import (
    TaskProgress,
    TaskProgressStatus,
    Feedback,
)
from internship_portal.database.models.notification import Notification, NotificationType

__all__ = [
    "User",
    "UserRole",
    "MicroInternship",
    "InternshipStatus",
    "WeeklyPlan",
    "ArtifactTemplate",
    "Task",
    "TaskType",
    "Application",
    "ApplicationStatus",
    "MentorAssignment",
    "SlaMode",
    "TaskProgress",
    "TaskProgressStatus",
    "Feedback",
    "Notification",
    "NotificationType",
]
