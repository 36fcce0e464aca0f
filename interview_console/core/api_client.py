"""
Remote API client for Interview Console

Wraps every call the pages make against the mock-interview backend:
- Student login, profile and password reset
- Interview option cascades, interview start/answer/feedback/rating
- Mentor CSV student import
- Admin auth, dashboards, analytics, listings, question uploads, role mapping
- UBP (university / program / batch) lookups

All business logic lives behind this API. The client only shapes requests
and decodes responses.
"""

import logging
from typing import Any

import httpx

from interview_console.config.settings import get_settings
from interview_console.core.errors import APIError

logger = logging.getLogger(__name__)


def _clean_params(params: dict[str, Any] | None) -> dict[str, Any] | None:
    """Drop parameters with no value, mirroring ``value || undefined``."""
    if not params:
        return None
    return {key: value for key, value in params.items() if value not in (None, "")}


class MockInterviewAPI:
    """
    Async client for the mock-interview REST API.

    Admin endpoints carry ``Authorization: Bearer <token>`` once a token
    has been set through ``set_admin_token``.
    """

    def __init__(
        self,
        base_url: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        timeout: float | None = None,
    ):
        """Initialize the client from settings unless overridden."""
        self.settings = get_settings()
        self.base_url = (base_url or self.settings.api_base_url).rstrip("/")
        self._admin_token: str | None = None

        self.client = httpx.AsyncClient(
            base_url=self.base_url,
            transport=transport,
            timeout=timeout or self.settings.request_timeout_seconds,
        )

    async def close(self):
        """Close the HTTP client."""
        await self.client.aclose()

    def set_admin_token(self, token: str | None) -> None:
        self._admin_token = token or None

    @property
    def admin_token(self) -> str | None:
        return self._admin_token

    # =========================================================================
    # TRANSPORT
    # =========================================================================

    async def _request(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        json: Any = None,
        data: dict[str, Any] | None = None,
        files: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
        admin: bool = False,
    ) -> Any:
        """
        Issue a request and decode the JSON body.

        Raises:
            APIError: on transport failure or a non-2xx response
        """
        request_headers = dict(headers or {})
        if admin and self._admin_token:
            request_headers["Authorization"] = f"Bearer {self._admin_token}"

        try:
            response = await self.client.request(
                method,
                path,
                params=_clean_params(params),
                json=json,
                data=data,
                files=files,
                headers=request_headers or None,
            )
        except httpx.HTTPError as e:
            logger.error(f"{method} {path} failed: {e}")
            raise APIError(str(e)) from e

        payload = self._decode(response)

        if response.is_error:
            logger.warning(f"{method} {path} -> {response.status_code}")
            raise APIError(
                f"{method} {path} returned {response.status_code}",
                status_code=response.status_code,
                payload=payload,
            )

        return payload

    @staticmethod
    def _decode(response: httpx.Response) -> Any:
        if not response.content:
            return None
        try:
            return response.json()
        except ValueError:
            return {"detail": response.text}

    async def _get(self, path: str, params: dict[str, Any] | None = None, admin: bool = False) -> Any:
        return await self._request("GET", path, params=params, admin=admin)

    async def _post(self, path: str, admin: bool = False, **kwargs: Any) -> Any:
        return await self._request("POST", path, admin=admin, **kwargs)

    # =========================================================================
    # STUDENT
    # =========================================================================

    async def login_student(self, email: str, password: str) -> dict[str, Any]:
        return await self._post("/students/login", json={"email": email, "password": password})

    async def request_password_reset(self, email: str) -> Any:
        return await self._post("/students/password/forgot", json={"email": email})

    async def reset_password(self, email: str, token: str, new_password: str) -> Any:
        return await self._post(
            "/students/password/reset",
            json={"email": email, "token": token, "new_password": new_password},
        )

    async def fetch_student_profile(self, email: str) -> dict[str, Any]:
        return await self._get(f"/students/profile/{email}")

    async def fetch_student_sessions(self, email: str) -> list[dict[str, Any]]:
        return await self._get(f"/students/sessions/by_email/{email}")

    async def fetch_program_job_roles(self, program_id: str | int) -> dict[str, Any]:
        return await self._get(f"/programs/{program_id}/job_roles")

    async def fetch_student_leaderboard(self) -> list[dict[str, Any]]:
        return await self._get("/admin/analytics/leaderboard")

    # Interview options cascade (industry → company → type → experience → role)

    async def fetch_interview_industries(self) -> list[str]:
        return await self._get("/interview-options/industries")

    async def fetch_interview_companies(self, industry: str) -> list[str]:
        return await self._get("/interview-options/companies", {"industry": industry})

    async def fetch_industry_interview_types(self, industry: str, company: str) -> list[str]:
        return await self._get(
            "/interview-options/interview-types",
            {"industry": industry, "company": company},
        )

    async def fetch_industry_work_experience(
        self, industry: str, company: str, interview_type: str
    ) -> list[str]:
        return await self._get(
            "/interview-options/work-experience",
            {"industry": industry, "company": company, "interview_type": interview_type},
        )

    async def fetch_industry_job_roles(
        self,
        industry: str,
        company: str,
        interview_type: str,
        work_experience: str,
        program_name: str | None = None,
    ) -> list[str]:
        return await self._get(
            "/interview-options/job-roles",
            {
                "industry": industry,
                "company": company,
                "interview_type": interview_type,
                "work_experience": work_experience,
                "program_name": program_name,
            },
        )

    # =========================================================================
    # INTERVIEW
    # =========================================================================

    async def start_interview(self, form: dict[str, str], from_company_card: bool = False) -> dict[str, Any]:
        """Start an interview. The backend expects a form-encoded body."""
        headers = {"X-Request-Source": "company-card"} if from_company_card else None
        return await self._post("/interview/start", data=form, headers=headers)

    async def submit_answer(
        self,
        session_id: str | int,
        form: dict[str, str],
        files: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Submit an answer as multipart form data."""
        # (None, value) parts are plain form fields, so the body is multipart
        # even when no file is attached
        parts: dict[str, Any] = {key: (None, value) for key, value in form.items()}
        parts.update(files or {})
        return await self._post(f"/interview/{session_id}/answer", files=parts)

    async def get_feedback_status(self, session_id: str | int) -> dict[str, Any]:
        return await self._get(f"/feedback-status/{session_id}")

    async def trigger_feedback_generation(self, session_id: str | int) -> Any:
        return await self._post(f"/interview/{session_id}/generate-feedback")

    async def fetch_session_rating(self, session_id: str | int, email: str) -> dict[str, Any]:
        return await self._get(
            f"/students/sessions/{session_id}/rating", {"student_email": email}
        )

    async def submit_session_rating(
        self, session_id: str | int, email: str, rating: int, comments: str = ""
    ) -> Any:
        return await self._post(
            f"/students/sessions/{session_id}/rating",
            params={"student_email": email},
            json={"rating": rating, "comments": comments},
        )

    # =========================================================================
    # MENTOR
    # =========================================================================

    async def import_students_csv(self, filename: str, content: bytes) -> dict[str, Any]:
        return await self._post(
            "/mentors/students/import",
            files={"file": (filename, content, "text/csv")},
        )

    # =========================================================================
    # ADMIN AUTH
    # =========================================================================

    async def admin_login(self, email: str, password: str) -> dict[str, Any]:
        return await self._post("/admin/auth/login", json={"email": email, "password": password})

    async def admin_logout(self) -> Any:
        return await self._post("/admin/auth/logout", admin=True)

    async def fetch_admin_profile(self) -> dict[str, Any]:
        return await self._get("/admin/auth/me", admin=True)

    # =========================================================================
    # ADMIN DASHBOARD & ANALYTICS
    # =========================================================================

    async def fetch_dashboard_stats(self) -> dict[str, Any]:
        return await self._get("/admin/dashboard", admin=True)

    async def fetch_students(self, params: dict[str, Any]) -> dict[str, Any]:
        return await self._get("/admin/students", params, admin=True)

    async def fetch_sessions(self, params: dict[str, Any]) -> dict[str, Any]:
        return await self._get("/admin/sessions", params, admin=True)

    async def fetch_performance_analytics(self, days: int) -> dict[str, Any]:
        return await self._get("/admin/analytics/performance", {"days": days}, admin=True)

    async def fetch_insights(self) -> dict[str, Any]:
        return await self._get("/admin/analytics/insights", admin=True)

    async def fetch_ubp_performance(self) -> Any:
        return await self._get("/admin/analytics/ubp-performance", admin=True)

    async def fetch_retention(self) -> Any:
        return await self._get("/admin/analytics/retention", admin=True)

    async def fetch_leaderboard(self, params: dict[str, Any] | None = None) -> Any:
        return await self._get("/admin/leaderboard", params, admin=True)

    async def fetch_leaderboard_filters(self) -> dict[str, Any]:
        return await self._get("/admin/filter-options", admin=True)

    async def fetch_role_filter_options(self, params: dict[str, Any] | None = None) -> list[str]:
        return await self._get("/admin/filter-options/roles", params, admin=True)

    async def fetch_session_report(self, session_id: str | int) -> dict[str, Any]:
        return await self._get(f"/admin/session/{session_id}/detailed", admin=True)

    async def fetch_student_analytics(self, student_id: str | int) -> dict[str, Any]:
        return await self._get(f"/admin/student/{student_id}/analytics", admin=True)

    # =========================================================================
    # ADMIN QUESTION BANK & ROLE MAPPING
    # =========================================================================

    async def fetch_bulk_upload_options(self) -> dict[str, Any]:
        return await self._get("/admin/bulk-upload-options", admin=True)

    async def fetch_admin_job_roles(self) -> list[str]:
        return await self._get("/admin/job-roles", admin=True)

    async def fetch_work_experience_levels(self) -> list[str]:
        return await self._get("/admin/work-experience-levels", admin=True)

    async def fetch_interview_types(self) -> list[str]:
        return await self._get("/admin/interview-types", admin=True)

    async def fetch_question_types(self) -> list[str]:
        return await self._get("/admin/question-types", admin=True)

    async def bulk_upload_questions(
        self,
        filename: str,
        content: bytes,
        categories: dict[str, str],
    ) -> dict[str, Any]:
        """
        Upload a question CSV.

        Args:
            filename: Name of the CSV part
            content: CSV bytes
            categories: JSON-encoded arrays keyed by category field
        """
        return await self._post(
            "/admin/interview-questions/bulk-upload",
            admin=True,
            data=categories,
            files={"file": (filename, content, "text/csv")},
        )

    async def map_program_roles(self, payload: dict[str, Any]) -> dict[str, Any]:
        return await self._post("/admin/programs/map-roles", admin=True, json=payload)

    # =========================================================================
    # UBP
    # =========================================================================

    async def fetch_universities(self) -> list[str]:
        return await self._get("/ubp/universities")

    async def fetch_ubp_programs(self, university_name: str) -> list[str]:
        return await self._get("/ubp/programs", {"university_name": university_name})

    async def fetch_ubp_batches(self, university_name: str, program_name: str) -> list[str]:
        return await self._get(
            "/ubp/batches",
            {"university_name": university_name, "program_name": program_name},
        )

    async def resolve_ubp(
        self, university_name: str, program_name: str, batch_label: str
    ) -> Any:
        return await self._get(
            "/ubp/resolve",
            {
                "university_name": university_name,
                "program_name": program_name,
                "batch_label": batch_label,
            },
        )
