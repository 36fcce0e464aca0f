"""
Student Dashboard for Interview Console

Handles:
- resolving the student's program and its job roles
- the interview picker: industry → company → interview type →
  work experience → job role, each level loaded from its ancestors
- completed-session history with per-combination attempt numbers
- starting an interview, including the reattempt confirmation
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

from pydantic import ValidationError

from interview_console.core.api_client import MockInterviewAPI
from interview_console.core.app_shell import AppShell
from interview_console.core.cascade import CascadingSelect
from interview_console.core.errors import APIError
from interview_console.core.formatting import format_ist_datetime, format_score_display, ordinal, score_class
from interview_console.core.toasts import ToastKind
from interview_console.models.session import InterviewLaunch, InterviewSessionRecord
from interview_console.models.student import ProgramInfo, StudentSessionInfo

logger = logging.getLogger(__name__)

PICKER_LEVELS: tuple[str, ...] = (
    "industry_type",
    "company_name",
    "interview_type",
    "work_experience",
    "job_role",
)

SELECTION_REQUIRED = "Please select a Job Role, Company, Interview Type, and Work Experience to start."
QUICK_START_REQUIRED = "Please pick a role, interview type, and work experience before launching."
START_FAILED = "Failed to start interview. Is the backend server running?"
REATTEMPT_DETECTED = "Existing attempt detected. Confirm reattempt to continue."


# =============================================================================
# SESSION HISTORY
# =============================================================================

def _normalize(value: Any) -> str:
    return str(value or "").strip().lower()


def _started(session: InterviewSessionRecord) -> float | None:
    if session.started_at is None:
        return None
    moment = session.started_at
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment.timestamp()


def _oldest_first(session: InterviewSessionRecord) -> tuple[int, float]:
    # Undated sessions sort before dated ones
    started = _started(session)
    return (0, 0.0) if started is None else (1, started)


def unique_completed(raw_sessions: Any) -> list[InterviewSessionRecord]:
    """Completed sessions, first occurrence of each session id kept."""
    if not isinstance(raw_sessions, list):
        return []
    seen: set[str] = set()
    sessions: list[InterviewSessionRecord] = []
    for raw in raw_sessions:
        if not isinstance(raw, dict) or not raw.get("session_id"):
            continue
        try:
            session = InterviewSessionRecord.model_validate(raw)
        except ValidationError as e:
            logger.warning(f"Skipping malformed session {raw.get('session_id')}: {e}")
            continue
        if not session.is_completed or str(session.session_id) in seen:
            continue
        seen.add(str(session.session_id))
        sessions.append(session)
    return sessions


def attempt_key(session: InterviewSessionRecord, student_email: str | None = None) -> tuple[str, ...]:
    """Sessions sharing this key are attempts at the same interview."""
    return (
        _normalize(session.student_email or student_email or session.student_id),
        _normalize(session.job_role),
        _normalize(session.company_name),
        _normalize(session.industry_type),
        _normalize(session.interview_type),
        _normalize(session.work_experience),
    )


def number_attempts(
    sessions: list[InterviewSessionRecord],
    student_email: str | None = None,
) -> dict[str, int]:
    """Session id -> 1-based attempt number within its combination, oldest first."""
    counters: dict[tuple[str, ...], int] = {}
    attempts: dict[str, int] = {}
    for session in sorted(sessions, key=_oldest_first):
        key = attempt_key(session, student_email)
        counters[key] = counters.get(key, 0) + 1
        attempts[str(session.session_id)] = counters[key]
    return attempts


def session_row(session: InterviewSessionRecord, attempt: int) -> dict[str, Any]:
    """A history row as the dashboard and reattempt prompt list it."""
    return {
        **session.model_dump(mode="json"),
        "attempt": attempt,
        "attempt_label": f"{ordinal(attempt)} attempt",
        "started_display": format_ist_datetime(session.started_at),
        "score_display": format_score_display(session.overall_score),
        "score_class": score_class(session.overall_score),
    }


def newest_first(sessions: list[InterviewSessionRecord]) -> list[InterviewSessionRecord]:
    # Undated sessions go last
    dated = [s for s in sessions if _started(s) is not None]
    undated = [s for s in sessions if _started(s) is None]
    return sorted(dated, key=_started, reverse=True) + undated


# =============================================================================
# REATTEMPT PROMPT
# =============================================================================

@dataclass
class ReattemptPrompt:
    """Shown when the API reports earlier attempts at the same combination."""

    sessions: list[InterviewSessionRecord] = field(default_factory=list)
    message: str = ""
    selection: dict[str, str] = field(default_factory=dict)
    attempts: dict[str, int] = field(default_factory=dict)
    from_company_card: bool = False

    @property
    def highlight_session_id(self) -> str | int | None:
        return self.sessions[-1].session_id if self.sessions else None

    def as_dict(self) -> dict[str, Any]:
        return {
            "message": self.message,
            "selection": dict(self.selection),
            "sessions": [
                session_row(session, self.attempts.get(str(session.session_id), index + 1))
                for index, session in enumerate(self.sessions)
            ],
            "highlight_session_id": self.highlight_session_id,
        }


class StudentDashboard:
    """State and actions of the student dashboard."""

    def __init__(self, api: MockInterviewAPI, shell: AppShell):
        self.api = api
        self.shell = shell
        self.toasts = shell.toasts

        self.program: ProgramInfo | None = None
        self.picker = CascadingSelect(
            "interview-picker",
            PICKER_LEVELS,
            loaders={
                "industry_type": api.fetch_interview_industries,
                "company_name": api.fetch_interview_companies,
                "interview_type": api.fetch_industry_interview_types,
                "work_experience": api.fetch_industry_work_experience,
                "job_role": lambda *selected: api.fetch_industry_job_roles(*selected, self.program_name),
            },
        )

        self.sessions: list[InterviewSessionRecord] = []
        self.attempts: dict[str, int] = {}
        self.leaderboard: list[dict[str, Any]] = []
        self.active_tab = "interview"
        self.selected_session: str | int | None = None
        self.starting = False
        self.reattempt: ReattemptPrompt | None = None
        self.loaded_refresh: int | None = None

    @property
    def student(self) -> StudentSessionInfo | None:
        return self.shell.student

    @property
    def program_name(self) -> str | None:
        if self.program and self.program.program_name:
            return self.program.program_name
        return self.student.program_name if self.student else None

    # =========================================================================
    # LOADING
    # =========================================================================

    async def load(self) -> None:
        """Load program info, picker roots, history and leaderboard."""
        await self.resolve_program()
        self.picker.load_root()
        await self.load_history()
        await self.load_leaderboard()
        await self.picker.wait()
        self.loaded_refresh = self.shell.dashboard_refresh

    async def refresh_if_needed(self) -> None:
        """Reload after an interview has ended."""
        if self.loaded_refresh != self.shell.dashboard_refresh:
            await self.load()

    async def resolve_program(self) -> ProgramInfo | None:
        """
        Work out the student's program and roles.

        Tries the stored student object first, then the profile, then the
        program's own role list. Each lookup is best effort.
        """
        student = self.student
        if student is None:
            self.program = None
            return None

        stored = student.program
        program_id = (stored.program_id if stored else None) or student.program_id
        program_name = (stored.program_name if stored else None) or student.program_name
        roles = list(stored.job_roles) if stored else []
        resolved: dict[str, Any] | None = stored.model_dump() if stored else None

        if (not program_id or not roles) and student.email:
            try:
                profile = await self.api.fetch_student_profile(student.email)
            except APIError as e:
                logger.warning(f"Unable to fetch student profile for program metadata: {e}")
                profile = None
            if isinstance(profile, dict):
                program_id = profile.get("program_id") or program_id
                program_name = profile.get("program_name") or program_name
                if isinstance(profile.get("job_roles"), list) and profile["job_roles"]:
                    roles = [role for role in profile["job_roles"] if role]
                if resolved is None and (profile.get("program_id") or profile.get("program_name")):
                    resolved = {
                        "program_id": profile.get("program_id"),
                        "program_name": profile.get("program_name"),
                    }

        if program_id and (not roles or not program_name):
            try:
                data = await self.api.fetch_program_job_roles(program_id)
            except APIError as e:
                logger.warning(f"Unable to fetch roles for program {program_id}: {e}")
                data = None
            if isinstance(data, dict):
                program_name = data.get("program_name") or program_name
                if isinstance(data.get("job_roles"), list) and data["job_roles"]:
                    roles = [role for role in data["job_roles"] if role]
                resolved = data

        if resolved is not None or program_id or program_name or roles:
            resolved = dict(resolved or {})
            self.program = ProgramInfo(
                program_id=resolved.get("program_id") or program_id,
                program_name=resolved.get("program_name") or program_name,
                job_roles=roles,
            )
        else:
            self.program = None
        return self.program

    async def load_history(self) -> None:
        student = self.student
        if student is None or not student.email:
            self.sessions, self.attempts = [], {}
            return
        try:
            raw = await self.api.fetch_student_sessions(student.email)
        except APIError as e:
            logger.error(f"Failed to fetch session history: {e}")
            return
        completed = unique_completed(raw)
        self.attempts = number_attempts(completed, student.email)
        self.sessions = newest_first(completed)

    async def load_leaderboard(self) -> None:
        try:
            data = await self.api.fetch_student_leaderboard()
        except APIError as e:
            logger.error(f"Failed to fetch leaderboard: {e}")
            return
        self.leaderboard = data if isinstance(data, list) else []

    # =========================================================================
    # PICKER & TABS
    # =========================================================================

    def select(self, level: str, value: str | None):
        return self.picker.select(level, value)

    def set_tab(self, tab: str) -> None:
        if tab not in ("interview", "leaderboard"):
            raise ValueError(f"Unknown tab: {tab}")
        self.active_tab = tab

    def view_report(self, session_id: str | int) -> None:
        self.selected_session = session_id

    def close_report(self) -> None:
        self.selected_session = None

    # =========================================================================
    # STARTING AN INTERVIEW
    # =========================================================================

    def _build_form(self, selection: dict[str, str], force: bool) -> dict[str, str]:
        student = self.student
        form = {
            "student_name": student.name if student else "Anonymous User",
            "student_email": student.email if student else "anonymous@example.com",
            "job_role": selection["job_role"],
            "industry_type": selection["industry_type"],
            "company_name": selection["company_name"],
            "interview_type": selection["interview_type"],
            "work_experience": selection["work_experience"],
        }
        if force:
            form["force_reattempt"] = "true"
        return form

    async def start_interview(
        self,
        force: bool = False,
        overrides: dict[str, str] | None = None,
        from_company_card: bool = False,
    ) -> InterviewLaunch | None:
        """
        Start an interview for the picker selection (or ``overrides``).

        Returns the launch once the instruction carousel is open, or None
        when input is missing, the request failed or a reattempt needs
        confirming.
        """
        selection = {level: (overrides or {}).get(level) or self.picker.values[level] for level in PICKER_LEVELS}
        required = ("job_role", "company_name", "interview_type", "work_experience")
        if not all(selection[level] for level in required):
            self.toasts.add(SELECTION_REQUIRED, ToastKind.ERROR)
            return None

        self.starting = True
        try:
            data = await self.api.start_interview(self._build_form(selection, force), from_company_card)
        except APIError as e:
            logger.error(f"Error starting interview: {e}")
            self.toasts.add(START_FAILED, ToastKind.ERROR)
            return None
        finally:
            self.starting = False

        data = data if isinstance(data, dict) else {}
        if not force and data.get("requires_confirmation"):
            self._open_reattempt(data, selection, from_company_card)
            return None

        self.reattempt = None
        payload = {**data, **{level: data.get(level) or selection[level] for level in PICKER_LEVELS}}
        return self.shell.handle_interview_start(payload)

    def _open_reattempt(self, data: dict[str, Any], selection: dict[str, str], from_company_card: bool) -> None:
        existing = sorted(unique_completed(data.get("existing_sessions")), key=_oldest_first)
        attempts = dict(self.attempts)
        for index, session in enumerate(existing):
            attempts.setdefault(str(session.session_id), index + 1)

        self.reattempt = ReattemptPrompt(
            sessions=existing,
            message=data.get("message") or "Existing attempts found for this combination.",
            selection=selection,
            attempts=attempts,
            from_company_card=from_company_card,
        )
        self.toasts.add(REATTEMPT_DETECTED, ToastKind.INFO)

    async def confirm_reattempt(self) -> InterviewLaunch | None:
        prompt = self.reattempt
        if prompt is None:
            return None
        try:
            return await self.start_interview(
                force=True,
                overrides=prompt.selection,
                from_company_card=prompt.from_company_card,
            )
        finally:
            self.reattempt = None

    def cancel_reattempt(self) -> None:
        self.reattempt = None

    async def quick_start(
        self,
        company: str,
        role: str,
        interview_type: str,
        work_experience: str,
        industry: str | None = None,
    ) -> InterviewLaunch | None:
        """Start straight from a trending-company card."""
        if not (company and role and interview_type and work_experience):
            self.toasts.add(QUICK_START_REQUIRED, ToastKind.ERROR)
            return None
        return await self.start_interview(
            overrides={
                "industry_type": industry or self.picker.values["industry_type"],
                "company_name": company,
                "job_role": role,
                "interview_type": interview_type,
                "work_experience": work_experience,
            },
            from_company_card=True,
        )

    def close(self) -> None:
        self.picker.close()

    def as_dict(self) -> dict[str, Any]:
        return {
            "student": self.student.model_dump(mode="json") if self.student else None,
            "program": self.program.model_dump(mode="json") if self.program else None,
            "active_tab": self.active_tab,
            "picker": self.picker.as_dict(),
            "starting": self.starting,
            "sessions": [
                session_row(session, self.attempts.get(str(session.session_id), 1))
                for session in self.sessions
            ],
            "leaderboard": self.leaderboard,
            "selected_session": self.selected_session,
            "reattempt": self.reattempt.as_dict() if self.reattempt else None,
        }
