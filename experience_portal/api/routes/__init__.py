"""
API Routes - Combines all route modules into single router.
"""

from fastapi import APIRouter

from experience_portal.api.routes.auth_routes import router as auth_router
from experience_portal.api.routes.user_routes import router as user_router
from experience_portal.api.routes.experience_routes import router as experience_router
from experience_portal.api.routes.comment_routes import router as comment_router
from experience_portal.api.routes.insight_routes import router as insight_router
from experience_portal.api.routes.announcement_routes import router as announcement_router
from experience_portal.api.routes.admin_routes import router as admin_router

# Main API router
api_router = APIRouter()

# Include all sub-routers
api_router.include_router(auth_router)
api_router.include_router(user_router)
api_router.include_router(experience_router)
api_router.include_router(comment_router)
api_router.include_router(insight_router)
api_router.include_router(announcement_router)
api_router.include_router(admin_router)
