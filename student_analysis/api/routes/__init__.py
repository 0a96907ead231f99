"""
API Routes - Combines all route modules into single router.
"""

from fastapi import APIRouter

from student_analysis.api.routes.soft_skills_routes import router as soft_skills_router
from student_analysis.api.routes.analysis_routes import router as analysis_router
from student_analysis.api.routes.student_routes import router as student_router
from student_analysis.api.routes.integration_routes import router as integration_router

# Main API router
api_router = APIRouter()

# Include all sub-routers
api_router.include_router(soft_skills_router)
api_router.include_router(analysis_router)
api_router.include_router(student_router)
api_router.include_router(integration_router)
