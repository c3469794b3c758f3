"""
API Routes - Combines all route modules into single router.
"""

from fastapi import APIRouter

from portal.api.routes.health_routes import router as health_router
from portal.api.routes.institution_routes import router as institution_router
from portal.api.routes.job_routes import router as job_router
from portal.api.routes.admin_routes import router as admin_router

# Main API router
api_router = APIRouter()

# Include all sub-routers
api_router.include_router(health_router)
api_router.include_router(institution_router)
api_router.include_router(job_router)
api_router.include_router(admin_router)
