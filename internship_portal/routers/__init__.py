from fastapi import APIRouter
from internship_portal.routers.auth import auth_router
from internship_portal.routers.internships import internships_router
from internship_portal.routers.notifications import notifications_router
from internship_portal.routers.student import student_router
from internship_portal.routers.admin import admin_router
from internship_portal.routers.mentor import mentor_router

# Create API router with prefix
api_router = APIRouter(prefix="/api/v1")

# Include all routers
api_router.include_router(auth_router)
api_router.include_router(internships_router)
api_router.include_router(notifications_router)
api_router.include_router(student_router)
api_router.include_router(admin_router)
api_router.include_router(mentor_router)
