"""
Tests for the student dashboard
"""
import pytest

from conftest import form_fields
from interview_console.core.dashboard import (
    REATTEMPT_DETECTED,
    SELECTION_REQUIRED,
    StudentDashboard,
    newest_first,
    number_attempts,
    unique_completed,
)

SELECTION = {
    "industry_type": "Finance",
    "company_name": "Acme",
    "interview_type": "Technical",
    "work_experience": "0-2 years",
    "job_role": "Data Analyst",
}


def session(session_id, started_at=None, status="completed", **fields):
    return {
        "session_id": session_id,
        "status": status,
        "started_at": started_at,
        "job_role": "Data Analyst",
        "company_name": "Acme",
        "industry_type": "Finance",
        "interview_type": "Technical",
        "work_experience": "0-2 years",
        **fields,
    }


HISTORY = [
    session(1, "2025-03-01T10:00:00"),
    session(2, "2025-03-04T10:00:00"),
    session(3, "2025-03-02T10:00:00", job_role="Designer"),
    session(2, "2025-03-04T10:00:00"),
    session(4, "2025-03-05T10:00:00", status="in_progress"),
    session(5, None),
    {"status": "completed"},
]


@pytest.fixture
def picker_backend(backend):
    backend.get("/interview-options/industries", ["Finance"])
    backend.get("/interview-options/companies", ["Acme"])
    backend.get("/interview-options/interview-types", ["Technical"])
    backend.get("/interview-options/work-experience", ["0-2 years"])
    backend.get("/interview-options/job-roles", ["Data Analyst"])
    backend.get("/students/sessions/by_email/asha@example.com", HISTORY)
    backend.get("/admin/analytics/leaderboard", [{"rank": 1, "student_name": "Asha"}])
    backend.get("/students/profile/asha@example.com", {"program_id": 7, "program_name": "Data Science", "job_roles": ["Data Analyst"]})
    return backend


@pytest.fixture
def dashboard(api, signed_in_shell, picker_backend) -> StudentDashboard:
    board = StudentDashboard(api, signed_in_shell)
    yield board
    board.close()


async def pick(dashboard: StudentDashboard) -> None:
    for level, value in SELECTION.items():
        dashboard.select(level, value)
        await dashboard.picker.wait()


def test_history_keeps_unique_completed_sessions():
    sessions = unique_completed(HISTORY)
    assert [s.session_id for s in sessions] == [1, 2, 3, 5]


def test_attempts_numbered_oldest_first_per_combination():
    attempts = number_attempts(unique_completed(HISTORY), "asha@example.com")
    assert attempts == {"5": 1, "1": 2, "3": 1, "2": 3}


def test_newest_first_puts_undated_last():
    ordered = newest_first(unique_completed(HISTORY))
    assert [s.session_id for s in ordered] == [2, 3, 1, 5]


async def test_load_resolves_program_and_history(dashboard, picker_backend):
    await dashboard.load()

    assert dashboard.program.program_name == "Data Science"
    assert dashboard.picker.options["industry_type"] == ["Finance"]
    assert [s.session_id for s in dashboard.sessions] == [2, 3, 1, 5]
    assert dashboard.leaderboard[0]["student_name"] == "Asha"
    assert picker_backend.calls("/programs/7/job_roles") == []

    row = dashboard.as_dict()["sessions"][0]
    assert row["attempt_label"] == "3rd attempt"
    assert row["started_display"] == "04/03/2025, 03:30:00 pm"
    assert row["score_display"] == "N/A"


async def test_job_roles_request_carries_program(dashboard, picker_backend):
    await dashboard.load()
    await pick(dashboard)

    params = picker_backend.calls("/interview-options/job-roles")[0].url.params
    assert params["program_name"] == "Data Science"
    assert params["work_experience"] == "0-2 years"


async def test_changing_industry_resets_picker(dashboard):
    await pick(dashboard)
    dashboard.select("industry_type", "")
    assert all(value == "" for value in dashboard.picker.values.values())


async def test_start_requires_full_selection(dashboard, picker_backend, signed_in_shell):
    assert await dashboard.start_interview() is None
    assert signed_in_shell.toasts.as_list()[0]["message"] == SELECTION_REQUIRED
    assert picker_backend.calls("/interview/start") == []


async def test_start_opens_instructions(dashboard, picker_backend, signed_in_shell):
    picker_backend.post("/interview/start", {"session_id": 11, "first_question": "Why finance?"})
    await pick(dashboard)

    launch = await dashboard.start_interview()

    assert launch.session_id == 11
    assert launch.job_role == "Data Analyst"
    fields = form_fields(picker_backend.calls("/interview/start")[0])
    assert fields["student_email"] == "asha@example.com"
    assert "force_reattempt" not in fields
    assert signed_in_shell.instructions is not None


async def test_reattempt_needs_confirmation(dashboard, picker_backend, signed_in_shell):
    def start(request):
        if form_fields(request).get("force_reattempt") == "true":
            return {"session_id": 12}
        return {
            "requires_confirmation": True,
            "message": "You have attempted this interview before.",
            "existing_sessions": [session(2, "2025-03-04T10:00:00"), session(1, "2025-03-01T10:00:00")],
        }

    picker_backend.post("/interview/start", start)
    await pick(dashboard)

    assert await dashboard.start_interview() is None
    prompt = dashboard.reattempt
    assert [s.session_id for s in prompt.sessions] == [1, 2]
    assert prompt.highlight_session_id == 2
    assert signed_in_shell.toasts.as_list()[0]["message"] == REATTEMPT_DETECTED

    launch = await dashboard.confirm_reattempt()
    assert launch.session_id == 12
    assert dashboard.reattempt is None
    assert form_fields(picker_backend.calls("/interview/start")[-1])["force_reattempt"] == "true"


async def test_quick_start_marks_company_card(dashboard, picker_backend):
    picker_backend.post("/interview/start", {"session_id": 13})

    assert await dashboard.quick_start("Acme", "", "Technical", "0-2 years") is None
    launch = await dashboard.quick_start("Acme", "Data Analyst", "Technical", "0-2 years", industry="Finance")

    assert launch.company_name == "Acme"
    assert picker_backend.calls("/interview/start")[0].headers["X-Request-Source"] == "company-card"


async def test_start_failure_toasts(dashboard, picker_backend, signed_in_shell):
    picker_backend.post("/interview/start", {"detail": "down"}, status=503)
    await pick(dashboard)
    assert await dashboard.start_interview() is None
    assert signed_in_shell.toasts.as_list()[0]["kind"] == "error"
    assert dashboard.starting is False


async def test_refresh_after_interview_end(dashboard, picker_backend, signed_in_shell):
    await dashboard.load()
    await dashboard.refresh_if_needed()
    assert len(picker_backend.calls("/students/sessions/by_email/asha@example.com")) == 1

    signed_in_shell.handle_interview_end(11)
    await dashboard.refresh_if_needed()
    assert len(picker_backend.calls("/students/sessions/by_email/asha@example.com")) == 2
