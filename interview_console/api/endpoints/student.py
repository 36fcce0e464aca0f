"""
Student API endpoints

Handles the student-facing pages:
- Login, logout and password reset
- Dashboard: interview picker, history, leaderboard, starting interviews
- The running interview: answers, feedback and rating
"""

from typing import Any

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from interview_console.api.dependencies import (
    get_dashboard,
    get_interview,
    get_login_page,
    get_shell,
    require_student,
)
from interview_console.core.app_shell import AppShell, Route

router = APIRouter()


# ============================================================================
# REQUEST MODELS
# ============================================================================

class LoginRequest(BaseModel):
    """Student credentials."""
    email: str = ""
    password: str = ""


class ResetRequest(BaseModel):
    """Password reset fields; unset fields keep their current value."""
    email: str | None = None
    token: str | None = None
    new_password: str | None = None


class SelectRequest(BaseModel):
    """Pick a value at one picker level."""
    level: str
    value: str | None = None


class StartRequest(BaseModel):
    """Start an interview, optionally overriding the picker selection."""
    overrides: dict[str, str] | None = None


class QuickStartRequest(BaseModel):
    """Start from a trending-company card."""
    company: str = ""
    role: str = ""
    interview_type: str = ""
    work_experience: str = ""
    industry: str | None = None


class AnswerRequest(BaseModel):
    """An answer to the current question."""
    answer: str = ""
    auto: bool = False


class RatingRequest(BaseModel):
    """A session rating."""
    rating: int
    comments: str = ""


def _route(route: Route | None) -> dict[str, Any]:
    return {"redirect": route.redirect if route else None}


# ============================================================================
# LOGIN
# ============================================================================

@router.post("/login")
async def login(request: LoginRequest) -> dict[str, Any]:
    page = get_login_page()
    route = await page.login(request.email, request.password)
    return {**page.as_dict(), **_route(route)}


@router.post("/logout")
async def logout() -> dict[str, Any]:
    return _route(get_shell().handle_logout())


@router.post("/password/open")
async def open_password_reset(request: ResetRequest) -> dict[str, Any]:
    page = get_login_page()
    page.open_reset(request.email or "")
    return page.as_dict()


@router.post("/password/close")
async def close_password_reset() -> dict[str, Any]:
    page = get_login_page()
    page.reset.close()
    return page.as_dict()


@router.post("/password/forgot")
async def request_password_reset(request: ResetRequest) -> dict[str, Any]:
    page = get_login_page()
    if request.email is not None:
        page.reset.email = request.email
    await page.reset.request()
    return page.as_dict()


@router.post("/password/reset")
async def reset_password(request: ResetRequest) -> dict[str, Any]:
    page = get_login_page()
    reset = page.reset
    if request.email is not None:
        reset.email = request.email
    if request.token is not None:
        reset.token = request.token
    if request.new_password is not None:
        reset.new_password = request.new_password
    await reset.confirm()
    return page.as_dict()


# ============================================================================
# DASHBOARD
# ============================================================================

@router.get("/dashboard")
async def dashboard_state(shell: AppShell = Depends(require_student)) -> dict[str, Any]:
    dashboard = get_dashboard()
    await dashboard.refresh_if_needed()
    return dashboard.as_dict()


@router.post("/dashboard/select")
async def select_option(request: SelectRequest, shell: AppShell = Depends(require_student)) -> dict[str, Any]:
    dashboard = get_dashboard()
    dashboard.select(request.level, request.value)
    await dashboard.picker.wait()
    return dashboard.as_dict()


@router.post("/dashboard/tab/{tab}")
async def select_tab(tab: str, shell: AppShell = Depends(require_student)) -> dict[str, Any]:
    dashboard = get_dashboard()
    dashboard.set_tab(tab)
    return dashboard.as_dict()


@router.post("/dashboard/start")
async def start_interview(request: StartRequest, shell: AppShell = Depends(require_student)) -> dict[str, Any]:
    dashboard = get_dashboard()
    launch = await dashboard.start_interview(overrides=request.overrides)
    return {**dashboard.as_dict(), "started": launch is not None}


@router.post("/dashboard/quick-start")
async def quick_start(request: QuickStartRequest, shell: AppShell = Depends(require_student)) -> dict[str, Any]:
    dashboard = get_dashboard()
    launch = await dashboard.quick_start(
        request.company,
        request.role,
        request.interview_type,
        request.work_experience,
        industry=request.industry,
    )
    return {**dashboard.as_dict(), "started": launch is not None}


@router.post("/dashboard/reattempt/confirm")
async def confirm_reattempt(shell: AppShell = Depends(require_student)) -> dict[str, Any]:
    dashboard = get_dashboard()
    launch = await dashboard.confirm_reattempt()
    return {**dashboard.as_dict(), "started": launch is not None}


@router.post("/dashboard/reattempt/cancel")
async def cancel_reattempt(shell: AppShell = Depends(require_student)) -> dict[str, Any]:
    dashboard = get_dashboard()
    dashboard.cancel_reattempt()
    return dashboard.as_dict()


@router.post("/dashboard/report/{session_id}")
async def view_report(session_id: str, shell: AppShell = Depends(require_student)) -> dict[str, Any]:
    dashboard = get_dashboard()
    dashboard.view_report(session_id)
    return dashboard.as_dict()


@router.delete("/dashboard/report")
async def close_report(shell: AppShell = Depends(require_student)) -> dict[str, Any]:
    dashboard = get_dashboard()
    dashboard.close_report()
    return dashboard.as_dict()


# ============================================================================
# INSTRUCTIONS
# ============================================================================

def _instructions(shell: AppShell) -> dict[str, Any]:
    return {"instructions": shell.instructions.as_dict() if shell.instructions else None}


@router.get("/instructions")
async def instructions_state(shell: AppShell = Depends(require_student)) -> dict[str, Any]:
    return _instructions(shell)


@router.post("/instructions/{action}")
async def instructions_action(action: str, shell: AppShell = Depends(require_student)) -> dict[str, Any]:
    carousel = shell.instructions
    if carousel is None:
        return _instructions(shell)

    if action == "next":
        if carousel.is_last:
            return _route(shell.acknowledge_instructions())
        carousel.next()
    elif action == "previous":
        carousel.previous()
    elif action == "close":
        shell.close_instructions()
    return _instructions(shell)


# ============================================================================
# INTERVIEW
# ============================================================================

@router.get("/interview")
async def interview_state(shell: AppShell = Depends(require_student)) -> dict[str, Any]:
    return get_interview().as_dict()


@router.post("/interview/answer")
async def submit_answer(request: AnswerRequest, shell: AppShell = Depends(require_student)) -> dict[str, Any]:
    interview = get_interview()
    interview.set_answer(request.answer)
    await interview.submit_answer(auto=request.auto)
    return interview.as_dict()


@router.post("/interview/feedback/regenerate")
async def regenerate_feedback(shell: AppShell = Depends(require_student)) -> dict[str, Any]:
    interview = get_interview()
    await interview.regenerate_feedback()
    return interview.as_dict()


@router.post("/interview/feedback/view")
async def view_feedback(shell: AppShell = Depends(require_student)) -> dict[str, Any]:
    interview = get_interview()
    interview.view_feedback()
    return interview.as_dict()


@router.post("/interview/rating")
async def submit_rating(request: RatingRequest, shell: AppShell = Depends(require_student)) -> dict[str, Any]:
    interview = get_interview()
    route = await interview.submit_rating(request.rating, request.comments)
    if route is not None:
        return _route(route)
    return interview.as_dict()


@router.post("/interview/return")
async def return_to_dashboard(shell: AppShell = Depends(require_student)) -> dict[str, Any]:
    interview = get_interview()
    route = interview.return_to_dashboard()
    if route is not None:
        return _route(route)
    return interview.as_dict()
