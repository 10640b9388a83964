from fastapi import APIRouter
from internship_portal.routers.mentor.task import task_router
from internship_portal.routers.mentor.assignment import assignment_router

# Create mentor router with prefix
mentor_router = APIRouter(prefix="/mentor")

# Include all mentor routers
mentor_router.include_router(task_router)
mentor_router.include_router(assignment_router)

__all__ = ["mentor_router"]
