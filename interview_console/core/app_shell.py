"""
App shell for Interview Console

Maps URL paths to pages and gates them on the signed-in student:

    /            → /dashboard (student) | /login
    /login       → login page, or /dashboard when already signed in
    /register    → mentor CSV registration (public)
    /admin       → admin console (public; it has its own login)
    /dashboard   → student dashboard (student required)
    /interview   → interview page (student and a started interview required)
    anything else→ /dashboard (student) | /login
"""

import logging
from dataclasses import dataclass
from typing import Any

from interview_console.core.instructions import InstructionCarousel
from interview_console.core.session_context import SessionContext
from interview_console.core.toasts import ToastKind, ToastQueue
from interview_console.models.session import InterviewLaunch
from interview_console.models.student import StudentSessionInfo

logger = logging.getLogger(__name__)

PUBLIC_ROUTES = frozenset({"/", "/login", "/register", "/admin"})


@dataclass(frozen=True)
class Route:
    """Outcome of resolving a path: render ``page`` or go to ``redirect``."""

    page: str | None = None
    redirect: str | None = None

    @property
    def is_redirect(self) -> bool:
        return self.redirect is not None


class AppShell:
    """Top-level navigation and cross-page state."""

    def __init__(self, context: SessionContext, toasts: ToastQueue):
        self.context = context
        self.toasts = toasts
        self.interview: InterviewLaunch | None = None
        self.instructions: InstructionCarousel | None = None
        self.dashboard_refresh = 0

    @property
    def student(self) -> StudentSessionInfo | None:
        return self.context.student

    def _home(self) -> str:
        return "/dashboard" if self.student else "/login"

    # =========================================================================
    # ROUTING
    # =========================================================================

    def resolve(self, path: str) -> Route:
        path = "/" + path.strip("/") if path.strip("/") else "/"

        if path == "/":
            return Route(redirect=self._home())
        if path == "/login":
            return Route(redirect="/dashboard") if self.student else Route(page="login")
        if path == "/register":
            return Route(page="register")
        if path == "/admin":
            return Route(page="admin")
        if path == "/dashboard":
            return Route(page="dashboard") if self.student else Route(redirect="/login")
        if path == "/interview":
            if self.student and self.interview:
                return Route(page="interview")
            return Route(redirect=self._home())

        return Route(redirect=self._home())

    # =========================================================================
    # STUDENT SESSION
    # =========================================================================

    def handle_login(self, student_data: StudentSessionInfo | dict[str, Any]) -> Route:
        student = self.context.login_student(student_data)
        self.toasts.add(f"Welcome, {student.name}!", ToastKind.SUCCESS)
        return Route(redirect="/dashboard")

    def handle_logout(self) -> Route:
        self.context.logout_student()
        self.interview = None
        self.instructions = None
        self.toasts.add("You have been logged out.", ToastKind.INFO)
        return Route(redirect="/login")

    # =========================================================================
    # INTERVIEW HAND-OFF
    # =========================================================================

    def handle_interview_start(self, data: dict[str, Any] | None) -> InterviewLaunch | None:
        """Keep the start response and open the instruction carousel."""
        if not data:
            self.toasts.add("Unable to start interview. Please try again.", ToastKind.ERROR)
            return None

        self.interview = InterviewLaunch.from_start_response(
            data, student_email=self.student.email if self.student else ""
        )
        self.instructions = InstructionCarousel()
        logger.info(f"Interview {self.interview.session_id} ready, showing instructions")
        return self.interview

    def acknowledge_instructions(self) -> Route:
        self.instructions = None
        return Route(redirect="/interview")

    def close_instructions(self) -> None:
        self.instructions = None

    def handle_interview_end(self, session_id: str | int | None = None) -> Route:
        logger.info(f"Interview {session_id} ended")
        self.interview = None
        self.toasts.add("Interview completed! Returning to your dashboard.", ToastKind.SUCCESS)
        self.dashboard_refresh += 1
        return Route(redirect="/dashboard")
