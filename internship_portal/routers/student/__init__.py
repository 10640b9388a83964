from fastapi import APIRouter
from internship_portal.routers.student.application import application_router
from internship_portal.routers.student.task import task_router
from internship_portal.routers.student.dashboard import dashboard_router

# Student-facing routes live at the top level of the API
student_router = APIRouter()

# Include all student routers
student_router.include_router(application_router)
student_router.include_router(task_router)
student_router.include_router(dashboard_router)

__all__ = ["student_router"]
