"""
Admin Console for Interview Console

Owns everything behind the /admin page:
- login, restore from a stored token, logout
- tab navigation, with the active tab kept in session storage
- the overview/analytics data, list views, upload forms and role mapping
- the session report modal

Uploads and role mappings are not patched into the page. Once their modal
closes the console is rebuilt from scratch by reload(), except for the shared
upload options which keep any roles merged in by the mapping overlay.
"""

import asyncio
import logging
from typing import Any, Awaitable

from interview_console.config.settings import Settings, get_settings
from interview_console.core.admin_views import LeaderboardView, SessionsView, StudentsView, parse_leaderboard
from interview_console.core.analytics import build_analytics
from interview_console.core.api_client import MockInterviewAPI
from interview_console.core.errors import APIError
from interview_console.core.forms import BulkUploadForm, QuestionUploadForm
from interview_console.core.options_cache import OptionsCache
from interview_console.core.role_mapping import ProgramRoleMappingOverlay
from interview_console.core.session_context import SessionContext
from interview_console.core.toasts import ToastKind, ToastQueue
from interview_console.models.admin import AdminLoginResult, AdminProfile, DashboardStats, LeaderboardEntry

logger = logging.getLogger(__name__)

TABS: tuple[str, ...] = (
    "overview",
    "students",
    "sessions",
    "leaderboard",
    "analytics",
    "questions",
    "mapping",
)
DEFAULT_TAB = "overview"

LOGIN_REQUIRED = "Email and password are required."
LOGIN_FAILED = "Invalid credentials. Please try again."
OVERVIEW_FAILED = "Unable to load admin dashboard data. Please try again."
REPORT_FAILED = "Unable to load the session report. Please try again."


class AdminConsole:
    """State and actions of the admin page."""

    def __init__(
        self,
        api: MockInterviewAPI,
        context: SessionContext,
        toasts: ToastQueue,
        settings: Settings | None = None,
    ):
        self.api = api
        self.context = context
        self.toasts = toasts
        self.settings = settings or get_settings()

        # Survives reload()
        self.options = OptionsCache(api)

        self.login_error = ""
        self.login_submitting = False
        self.reload_count = 0

        self._reset_state()
        logger.info("AdminConsole initialized")

    def _reset_state(self) -> None:
        """Fresh views, forms and overview data, as on a page load."""
        self.students = StudentsView(self.api, self.settings)
        self.sessions = SessionsView(self.api, self.settings)
        self.leaderboard = LeaderboardView(self.api, self.settings)
        self.question_form = QuestionUploadForm(self.api, self.options, self.toasts)
        self.bulk_form = BulkUploadForm(self.api, self.options, self.toasts)
        self.role_mapping = ProgramRoleMappingOverlay(self.api, self.options, self.toasts)

        self.loading = False
        self.error = ""
        self.stats: DashboardStats | None = None
        self.analytics: dict[str, Any] | None = None
        self.top_performers: list[LeaderboardEntry] = []
        self.insights: dict[str, Any] | None = None
        self.ubp_performance: list[Any] = []
        self.retention: Any = None
        self.overview_loaded = False

        self.report_session_id: str | int | None = None
        self.report: dict[str, Any] | None = None
        self.report_error = ""

        self.student_analytics: dict[str, Any] | None = None

    def _close_views(self) -> None:
        for view in (self.students, self.sessions, self.leaderboard):
            view.close()
        self.role_mapping.cascade.close()

    # =========================================================================
    # AUTH
    # =========================================================================

    @property
    def is_authenticated(self) -> bool:
        return bool(self.context.admin_token)

    @property
    def profile(self) -> AdminProfile | None:
        return self.context.admin_profile

    async def login(self, email: str, password: str) -> bool:
        if self.login_submitting:
            return False

        email = (email or "").strip()
        if not email or not (password or "").strip():
            self.login_error = LOGIN_REQUIRED
            return False

        self.login_error = ""
        self.login_submitting = True
        try:
            result = AdminLoginResult.model_validate(await self.api.admin_login(email, password))
        except APIError as e:
            logger.warning(f"Admin login failed for {email}: {e}")
            self.login_error = e.message(LOGIN_FAILED)
            return False
        finally:
            self.login_submitting = False

        self.context.login_admin(result.access_token, result.admin or AdminProfile(email=email))
        await self.enter()
        return True

    async def restore(self) -> bool:
        """
        Re-validate a token left in session storage.

        An invalid token is cleared so the login form shows again.
        """
        if not self.is_authenticated:
            return False
        try:
            profile = AdminProfile.model_validate(await self.api.fetch_admin_profile())
        except APIError as e:
            logger.warning(f"Stored admin token rejected: {e}")
            self.context.logout_admin()
            return False
        self.context.set_admin_profile(profile)
        return True

    async def logout(self) -> None:
        if self.is_authenticated:
            try:
                await self.api.admin_logout()
            except APIError as e:
                logger.warning(f"Admin logout request failed: {e}")
        self.context.logout_admin()
        self._close_views()
        self._reset_state()

    # =========================================================================
    # NAVIGATION
    # =========================================================================

    @property
    def active_tab(self) -> str:
        tab = self.context.admin_tab
        return tab if tab in TABS else DEFAULT_TAB

    async def enter(self) -> None:
        """Load what the page shows on arrival."""
        await self.load_overview()
        await self.activate(self.active_tab)

    async def select_tab(self, tab: str) -> None:
        if tab not in TABS:
            raise ValueError(f"Unknown tab: {tab}")
        self.context.set_admin_tab(tab)
        await self.activate(tab)

    async def activate(self, tab: str) -> None:
        """Start the loads a tab needs the first time it is shown."""
        if tab in ("overview", "analytics"):
            if not self.overview_loaded:
                await self.load_overview()
        elif tab == "students":
            self.students.load_options()
            self.students.refresh()
            await self.students.wait()
        elif tab == "sessions":
            self.sessions.refresh()
            await self.sessions.wait()
        elif tab == "leaderboard":
            self.leaderboard.load_options()
            self.leaderboard.refresh()
            await self.leaderboard.wait()
        elif tab == "questions":
            await self.options.load()
            self.question_form.refresh_options()
            self.bulk_form.refresh_options()
        elif tab == "mapping":
            # The overlay itself only opens on an explicit open action
            await self.options.load()

    # =========================================================================
    # OVERVIEW & ANALYTICS
    # =========================================================================

    async def _optional(self, label: str, request: Awaitable[Any], default: Any) -> Any:
        try:
            return await request
        except APIError as e:
            logger.warning(f"Admin {label} unavailable: {e}")
            return default

    async def load_overview(self) -> None:
        """
        Stats, performance analytics and leaderboard load together; any
        failure there raises the page alert. Insights, UBP performance and
        retention are extras that fall back to empty on their own.
        """
        self.loading = True
        self.error = ""
        try:
            stats, analytics, leaderboard = await asyncio.gather(
                self.api.fetch_dashboard_stats(),
                self.api.fetch_performance_analytics(self.settings.analytics_days),
                self.api.fetch_leaderboard(),
            )
        except APIError as e:
            logger.error(f"Failed to load admin dashboard: {e}")
            self.error = e.message(OVERVIEW_FAILED)
            self.loading = False
            return

        self.stats = DashboardStats.model_validate(stats or {})
        self.analytics = analytics or None
        self.top_performers, _ = parse_leaderboard(leaderboard)

        self.insights, self.ubp_performance, self.retention = await asyncio.gather(
            self._optional("insights", self.api.fetch_insights(), None),
            self._optional("UBP performance", self.api.fetch_ubp_performance(), []),
            self._optional("retention", self.api.fetch_retention(), None),
        )
        self.overview_loaded = True
        self.loading = False

    @property
    def charts(self) -> dict[str, Any]:
        return build_analytics(self.analytics, self.insights)

    # =========================================================================
    # REPORTS
    # =========================================================================

    async def view_report(self, session_id: str | int | None) -> None:
        if not session_id:
            return
        self.report_session_id = session_id
        self.report = None
        self.report_error = ""
        try:
            self.report = await self.api.fetch_session_report(session_id)
        except APIError as e:
            logger.error(f"Failed to load report for session {session_id}: {e}")
            self.report_error = e.message(REPORT_FAILED)

    def close_report(self) -> None:
        self.report_session_id = None
        self.report = None
        self.report_error = ""

    async def view_student_analytics(self, student_id: str | int) -> dict[str, Any] | None:
        try:
            self.student_analytics = await self.api.fetch_student_analytics(student_id)
        except APIError as e:
            logger.error(f"Failed to load analytics for student {student_id}: {e}")
            self.toasts.add(e.message("Unable to load student analytics."), ToastKind.ERROR)
            self.student_analytics = None
        return self.student_analytics

    # =========================================================================
    # UPLOADS, MAPPING & RELOAD
    # =========================================================================

    async def submit_role_mapping(self) -> bool:
        if not await self.role_mapping.submit():
            return False
        await self.reload()
        return True

    async def dismiss_upload_modal(self, form: str) -> None:
        """Close an upload summary modal; the page then reloads."""
        target = {"question": self.question_form, "bulk": self.bulk_form}.get(form)
        if target is None:
            raise ValueError(f"Unknown form: {form}")
        if target.dismiss_modal():
            await self.reload()

    async def reload(self) -> None:
        """Rebuild the page the way a browser reload would."""
        logger.info("Reloading admin console")
        self._close_views()
        self._reset_state()
        self.reload_count += 1
        if self.is_authenticated:
            await self.enter()

    def close(self) -> None:
        self._close_views()

    def as_dict(self) -> dict[str, Any]:
        if not self.is_authenticated:
            return {
                "authenticated": False,
                "login": {"error": self.login_error, "submitting": self.login_submitting},
            }
        return {
            "authenticated": True,
            "profile": self.profile.model_dump() if self.profile else None,
            "active_tab": self.active_tab,
            "tabs": list(TABS),
            "loading": self.loading,
            "error": self.error,
            "stats": self.stats.model_dump() if self.stats else None,
            "top_performers": [self.leaderboard.row_dict(entry) for entry in self.top_performers],
            "charts": self.charts,
            "ubp_performance": self.ubp_performance,
            "retention": self.retention,
            "students": self.students.as_dict(),
            "sessions": self.sessions.as_dict(),
            "leaderboard": self.leaderboard.as_dict(),
            "question_form": {
                "fields": dict(self.question_form.fields),
                "dropdowns": {name: d.as_dict() for name, d in self.question_form.dropdowns.items()},
                "categories": {name: s.as_dict() for name, s in self.question_form.selects.items()},
                "errors": dict(self.question_form.errors),
                "modal": self.question_form.modal.as_dict() if self.question_form.modal else None,
            },
            "bulk_form": {
                "filename": self.bulk_form.filename,
                "categories": {name: s.as_dict() for name, s in self.bulk_form.selects.items()},
                "errors": dict(self.bulk_form.errors),
                "modal": self.bulk_form.modal.as_dict() if self.bulk_form.modal else None,
            },
            "role_mapping": self.role_mapping.as_dict(),
            "report": {
                "session_id": self.report_session_id,
                "data": self.report,
                "error": self.report_error,
            },
        }
