"""
Tests for the admin console
"""
import pytest

from interview_console.core.admin_console import LOGIN_REQUIRED, OVERVIEW_FAILED, AdminConsole
from interview_console.core.summaries import BulkUploadSummaryModal


@pytest.fixture
def overview_backend(backend):
    backend.post("/admin/auth/login", {"access_token": "tok", "admin": {"email": "admin@example.com", "display_name": "Admin"}})
    backend.post("/admin/auth/logout", {"ok": True})
    backend.get("/admin/auth/me", {"email": "admin@example.com"})
    backend.get("/admin/dashboard", {"total_students": 120, "total_sessions": 480})
    backend.get("/admin/analytics/performance", {"daily_trends": [{"date": "2025-03-05", "sessions": 4, "completed": 2}]})
    backend.get("/admin/leaderboard", [{"rank": 1, "student_name": "Asha", "avg_score": 4.2}])
    backend.get("/admin/analytics/insights", {"engagement_summary": {"total_students": 120}})
    backend.get("/admin/students", {"students": []})
    backend.get("/admin/sessions", {"sessions": []})
    backend.get("/ubp/universities", ["Alpha University"])
    backend.get("/admin/bulk-upload-options", {"job_roles": ["Data Analyst"]})
    return backend


@pytest.fixture
def console(api, context, toasts, settings, overview_backend) -> AdminConsole:
    admin = AdminConsole(api, context, toasts, settings)
    yield admin
    admin.close()


async def test_login_requires_both_fields(console, overview_backend):
    assert await console.login("  ", "secret") is False
    assert console.login_error == LOGIN_REQUIRED
    assert overview_backend.calls("/admin/auth/login") == []


async def test_login_failure_shows_detail(console, overview_backend):
    overview_backend.post("/admin/auth/login", {"detail": "Account locked"}, status=403)
    assert await console.login("admin@example.com", "secret") is False
    assert console.login_error == "Account locked"
    assert console.is_authenticated is False


async def test_login_loads_overview(console, overview_backend, api):
    assert await console.login(" admin@example.com ", "secret") is True

    assert api.admin_token == "tok"
    assert console.profile.label == "Admin"
    assert console.stats.total_students == 120
    assert console.top_performers[0].student_name == "Asha"
    assert console.as_dict()["top_performers"][0]["score_class"] == "good"
    assert console.charts["daily_trends"][0]["label"] == "Mar 5"
    # Optional extras that 404 degrade on their own
    assert console.ubp_performance == []
    assert console.retention is None
    assert console.error == ""
    assert console.as_dict()["active_tab"] == "overview"


async def test_overview_failure_raises_page_alert(console, overview_backend):
    overview_backend.get("/admin/dashboard", {}, status=500)
    await console.login("admin@example.com", "secret")
    assert console.error == OVERVIEW_FAILED
    assert console.overview_loaded is False


async def test_tab_is_remembered_and_loaded(console, overview_backend, context):
    await console.login("admin@example.com", "secret")
    await console.select_tab("students")

    assert context.admin_tab == "students"
    assert len(overview_backend.calls("/admin/students")) == 1
    assert console.students.cascade.options["university_name"] == ["Alpha University"]

    with pytest.raises(ValueError):
        await console.select_tab("billing")


async def test_restore_drops_rejected_token(console, overview_backend, context):
    context.login_admin("expired")
    overview_backend.get("/admin/auth/me", {"detail": "Token expired"}, status=401)

    assert await console.restore() is False
    assert context.admin_token is None
    assert console.as_dict() == {"authenticated": False, "login": {"error": "", "submitting": False}}


async def test_dismissing_upload_summary_reloads(console, overview_backend):
    await console.login("admin@example.com", "secret")
    await console.select_tab("questions")
    console.options.merge_job_roles(["ML Engineer"])
    console.bulk_form.modal = BulkUploadSummaryModal({"inserted": 3})
    old_form = console.bulk_form

    await console.dismiss_upload_modal("bulk")

    assert console.reload_count == 1
    assert console.bulk_form is not old_form
    assert console.bulk_form.modal is None
    assert console.options.get("job_roles") == ["Data Analyst", "ML Engineer"]
    assert len(overview_backend.calls("/admin/dashboard")) == 2


async def test_report_modal(console, overview_backend):
    overview_backend.get("/admin/session/9/detailed", {"session_id": 9, "overall_score": 3.5})
    await console.view_report(9)
    assert console.report["overall_score"] == 3.5

    await console.view_report(10)
    assert console.report is None
    assert console.report_error.startswith("No route")

    console.close_report()
    assert console.report_session_id is None


async def test_student_analytics_failure_toasts(console, toasts):
    assert await console.view_student_analytics(3) is None
    assert toasts.as_list()[0]["kind"] == "error"


async def test_logout_clears_session(console, overview_backend, context, api):
    await console.login("admin@example.com", "secret")
    await console.logout()

    assert context.admin_token is None
    assert api.admin_token is None
    assert len(overview_backend.calls("/admin/auth/logout")) == 1
    assert console.stats is None


async def test_role_mapping_overlay_stays_closed_after_submit(console, overview_backend, context):
    overview_backend.get("/ubp/programs", ["DS"])
    overview_backend.get("/ubp/batches", ["2024"])
    overview_backend.get("/admin/work-experience-levels", ["0-2 years"])
    overview_backend.get("/admin/job-roles", ["Data Analyst"])
    overview_backend.get("/ubp/resolve", {"ubp_id": 31})
    overview_backend.post("/admin/programs/map-roles", {"mapped": 1})
    await console.login("admin@example.com", "secret")

    await console.select_tab("mapping")
    assert console.role_mapping.is_open is False

    await console.role_mapping.open()
    for level, value in (
        ("university_name", "Alpha University"),
        ("program_name", "DS"),
        ("batch_label", "2024"),
        ("work_experience", "0-2 years"),
    ):
        console.role_mapping.select(level, value)
        await console.role_mapping.cascade.wait()
    console.role_mapping.roles.type("New Role")
    console.role_mapping.roles.create()

    assert await console.submit_role_mapping() is True

    assert console.reload_count == 1
    assert context.admin_tab == "mapping"
    assert console.role_mapping.is_open is False
    assert "New Role" in console.options.get("job_roles")
