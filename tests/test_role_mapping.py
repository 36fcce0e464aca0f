"""
Tests for the program role mapping overlay
"""
import pytest

from conftest import json_body
from interview_console.core.errors import APIError
from interview_console.core.options_cache import OptionsCache
from interview_console.core.role_mapping import UNRESOLVED_COHORT, ProgramRoleMappingOverlay, resolved_ubp_id


@pytest.fixture
def ubp_backend(backend):
    backend.get("/ubp/universities", ["Alpha University"])
    backend.get("/ubp/programs", ["CS"])
    backend.get("/ubp/batches", ["2024"])
    backend.get("/admin/work-experience-levels", ["0-2 years"])
    backend.get("/admin/job-roles", ["Data Analyst"])
    backend.get("/ubp/resolve", {"ubp_id": 31})
    backend.post("/admin/programs/map-roles", {"mapped": 2})
    return backend


@pytest.fixture
async def overlay(api, ubp_backend, toasts) -> ProgramRoleMappingOverlay:
    options = OptionsCache(api)
    options.options.job_roles = ["Data Analyst"]
    overlay = ProgramRoleMappingOverlay(api, options, toasts)
    await overlay.open()
    return overlay


async def fill(overlay: ProgramRoleMappingOverlay) -> None:
    for level, value in (
        ("university_name", "Alpha University"),
        ("program_name", "CS"),
        ("batch_label", "2024"),
        ("work_experience", "0-2 years"),
    ):
        overlay.select(level, value)
        await overlay.cascade.wait()


async def test_open_loads_universities_and_roles(overlay):
    assert overlay.is_open
    assert overlay.cascade.options["university_name"] == ["Alpha University"]
    assert overlay.roles.options == ["Data Analyst"]


async def test_validation_lists_missing_fields(overlay, ubp_backend):
    assert await overlay.submit() is False
    assert set(overlay.errors) == {
        "university_name", "program_name", "batch_label", "work_experience", "job_roles",
    }
    assert ubp_backend.calls("/admin/programs/map-roles") == []


async def test_submit_resolves_ubp_and_merges_new_roles(overlay, ubp_backend, toasts):
    await fill(overlay)
    overlay.roles.select("Data Analyst")
    overlay.roles.type("ML Engineer")
    overlay.roles.create()

    assert await overlay.submit() is True

    payload = json_body(ubp_backend.calls("/admin/programs/map-roles")[0])
    assert payload["ubp_id"] == 31
    assert payload["job_roles"] == ["Data Analyst", "ML Engineer"]
    assert overlay.options.get("job_roles") == ["Data Analyst", "ML Engineer"]
    assert overlay.reload_requested is True
    assert overlay.is_open is False
    assert toasts.as_list()[0]["kind"] == "success"


async def test_failed_mapping_keeps_overlay_open(overlay, ubp_backend, toasts):
    ubp_backend.post("/admin/programs/map-roles", {"detail": "Batch not found"}, status=404)
    await fill(overlay)
    overlay.roles.select("Data Analyst")

    assert await overlay.submit() is False
    assert overlay.is_open is True
    assert toasts.as_list()[0]["message"] == "Batch not found"


async def test_options_cache_merge_is_case_insensitive(api):
    options = OptionsCache(api)
    options.options.job_roles = ["Data Analyst"]
    assert options.merge_job_roles(["data analyst", " ", "Designer", "designer"]) == ["Designer"]
    assert options.get("job_roles") == ["Data Analyst", "Designer"]


async def test_bare_id_resolve_response_is_used(overlay, ubp_backend):
    ubp_backend.get("/ubp/resolve", 42)
    await fill(overlay)
    overlay.roles.select("Data Analyst")

    assert await overlay.submit() is True
    assert json_body(ubp_backend.calls("/admin/programs/map-roles")[0])["ubp_id"] == 42


async def test_unresolvable_cohort_shows_error_toast(overlay, ubp_backend, toasts):
    ubp_backend.get("/ubp/resolve", {"found": False})
    await fill(overlay)
    overlay.roles.select("Data Analyst")

    assert await overlay.submit() is False
    assert overlay.is_open is True
    assert toasts.as_list()[0]["message"] == UNRESOLVED_COHORT
    assert ubp_backend.calls("/admin/programs/map-roles") == []


@pytest.mark.parametrize("resolved, expected", [
    ({"ubp_id": 31}, 31),
    ({"id": "ubp-9"}, "ubp-9"),
    (7, 7),
    ("ubp-3", "ubp-3"),
])
def test_resolved_ubp_id_shapes(resolved, expected):
    assert resolved_ubp_id(resolved) == expected


@pytest.mark.parametrize("resolved", [None, {}, "", True, [31]])
def test_resolved_ubp_id_rejects_missing_ids(resolved):
    with pytest.raises(APIError):
        resolved_ubp_id(resolved)
