"""
Main API router for Interview Console

Aggregates all API routes and provides the main application router.
"""

from fastapi import APIRouter

from interview_console.api.endpoints import admin, mentor, shell, student

api_router = APIRouter()

# Include all endpoint routers
api_router.include_router(
    shell.router,
    prefix="/shell",
    tags=["Shell"]
)

api_router.include_router(
    student.router,
    prefix="/student",
    tags=["Student"]
)

api_router.include_router(
    mentor.router,
    prefix="/mentor",
    tags=["Mentor"]
)

api_router.include_router(
    admin.router,
    prefix="/admin",
    tags=["Admin"]
)
