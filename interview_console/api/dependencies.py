"""
API Dependencies

Provides dependency injection for API endpoints.
Manages singleton instances of the session context, API client and pages.
"""

import logging

from fastapi import HTTPException

from interview_console.config.settings import get_settings
from interview_console.core.admin_console import AdminConsole
from interview_console.core.api_client import MockInterviewAPI
from interview_console.core.app_shell import AppShell
from interview_console.core.dashboard import StudentDashboard
from interview_console.core.interview_flow import InterviewSession
from interview_console.core.mentor import MentorRegistration
from interview_console.core.session_context import SessionContext
from interview_console.core.student_login import StudentLoginPage
from interview_console.core.toasts import ToastQueue

logger = logging.getLogger(__name__)


# ============================================================================
# SINGLETON INSTANCES
# ============================================================================

_api: MockInterviewAPI | None = None
_context: SessionContext | None = None
_toasts: ToastQueue | None = None
_shell: AppShell | None = None
_admin: AdminConsole | None = None
_login_page: StudentLoginPage | None = None
_dashboard: StudentDashboard | None = None
_mentor: MentorRegistration | None = None
_interview: InterviewSession | None = None


def get_api() -> MockInterviewAPI:
    """Get the remote API client singleton."""
    global _api

    if _api is None:
        _api = MockInterviewAPI()

    return _api


def get_context() -> SessionContext:
    """
    Get the session context singleton.

    The admin token is mirrored onto the API client whenever it changes.
    """
    global _context

    if _context is None:
        _context = SessionContext(
            get_settings().storage_path,
            on_admin_token=get_api().set_admin_token,
        )

    return _context


def get_toasts() -> ToastQueue:
    global _toasts

    if _toasts is None:
        settings = get_settings()
        _toasts = ToastQueue(limit=settings.toast_limit, auto_close_ms=settings.toast_auto_close_ms)

    return _toasts


def get_shell() -> AppShell:
    global _shell

    if _shell is None:
        _shell = AppShell(get_context(), get_toasts())

    return _shell


def get_admin_console() -> AdminConsole:
    global _admin

    if _admin is None:
        _admin = AdminConsole(get_api(), get_context(), get_toasts())

    return _admin


def get_login_page() -> StudentLoginPage:
    global _login_page

    if _login_page is None:
        _login_page = StudentLoginPage(get_api(), get_shell())

    return _login_page


def get_dashboard() -> StudentDashboard:
    global _dashboard

    if _dashboard is None:
        _dashboard = StudentDashboard(get_api(), get_shell())

    return _dashboard


def get_mentor() -> MentorRegistration:
    global _mentor

    if _mentor is None:
        _mentor = MentorRegistration(get_api())

    return _mentor


def get_interview() -> InterviewSession:
    """
    Get the running interview page.

    A fresh page is built whenever the shell holds a different launch.
    """
    global _interview

    launch = get_shell().interview
    if launch is None:
        raise HTTPException(status_code=404, detail="No interview in progress")

    if _interview is None or _interview.launch is not launch:
        if _interview is not None:
            _interview.close()
        _interview = InterviewSession(get_api(), get_shell(), launch)

    return _interview


def require_student() -> AppShell:
    shell = get_shell()
    if shell.student is None:
        raise HTTPException(status_code=401, detail="Please log in to continue.")
    return shell


def require_admin() -> AdminConsole:
    admin = get_admin_console()
    if not admin.is_authenticated:
        raise HTTPException(status_code=401, detail="Admin login required.")
    return admin


# ============================================================================
# LIFECYCLE
# ============================================================================

async def startup():
    """Load durable session state and restore an admin session, if any."""
    get_context().load()
    await get_admin_console().restore()


async def cleanup():
    """Cleanup resources on shutdown."""
    global _api, _context, _toasts, _shell, _admin, _login_page, _dashboard, _mentor, _interview

    if _interview:
        _interview.close()

    if _dashboard:
        _dashboard.close()

    if _admin:
        _admin.close()

    if _context and _context.is_loaded:
        _context.close()

    if _api:
        await _api.close()

    _api = _context = _toasts = _shell = _admin = None
    _login_page = _dashboard = _mentor = _interview = None
