"""
API layer for Interview Console

Contains FastAPI routers for:
- Shell state (toasts, routing)
- Student login, dashboard and interview
- Mentor registration
- Admin console
"""

from interview_console.api.router import api_router

__all__ = ["api_router"]
