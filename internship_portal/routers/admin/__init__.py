from fastapi import APIRouter
from internship_portal.routers.admin.application import application_router
from internship_portal.routers.admin.internship import internship_router
from internship_portal.routers.admin.dashboard import dashboard_router

# Create admin router with prefix
admin_router = APIRouter(prefix="/admin")

# Include all admin routers
admin_router.include_router(application_router)
admin_router.include_router(internship_router)
admin_router.include_router(dashboard_router)

__all__ = ["admin_router"]
