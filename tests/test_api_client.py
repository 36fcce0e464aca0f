"""
Tests for the remote API client
"""
import httpx
import pytest

from conftest import BASE_URL, form_fields, json_body
from interview_console.core.api_client import MockInterviewAPI
from interview_console.core.errors import APIError


async def test_admin_requests_carry_bearer_token(api, backend):
    backend.get("/admin/dashboard", {"total_students": 3})
    backend.get("/ubp/universities", ["Alpha University"])

    api.set_admin_token("abc123")
    await api.fetch_dashboard_stats()
    await api.fetch_universities()

    assert backend.calls("/admin/dashboard")[0].headers["Authorization"] == "Bearer abc123"
    assert "Authorization" not in backend.calls("/ubp/universities")[0].headers


async def test_cleared_token_is_not_sent(api, backend):
    backend.get("/admin/dashboard", {})
    api.set_admin_token("abc123")
    api.set_admin_token("")
    await api.fetch_dashboard_stats()
    assert "Authorization" not in backend.calls("/admin/dashboard")[0].headers


async def test_empty_params_are_dropped(api, backend):
    backend.get("/admin/students", {"students": []})
    await api.fetch_students({"page": 1, "limit": 10, "name": "", "status": None, "university": "Alpha"})

    params = dict(backend.calls("/admin/students")[0].url.params)
    assert params == {"page": "1", "limit": "10", "university": "Alpha"}


async def test_error_response_raises_with_payload(api, backend):
    backend.post("/students/login", {"detail": "Invalid credentials"}, status=401)

    with pytest.raises(APIError) as exc_info:
        await api.login_student("asha@example.com", "wrong")

    assert exc_info.value.status_code == 401
    assert exc_info.value.message("fallback") == "Invalid credentials"


async def test_non_json_error_body_becomes_detail(api, backend):
    backend.get("/admin/dashboard", lambda request: httpx.Response(500, text="Internal Server Error"))
    with pytest.raises(APIError) as exc_info:
        await api.fetch_dashboard_stats()
    assert exc_info.value.message("fallback") == "Internal Server Error"


async def test_transport_failure_raises_api_error():
    def unreachable(request):
        raise httpx.ConnectError("connection refused", request=request)

    client = MockInterviewAPI(base_url=BASE_URL, transport=httpx.MockTransport(unreachable))
    try:
        with pytest.raises(APIError) as exc_info:
            await client.fetch_universities()
        assert exc_info.value.status_code is None
    finally:
        await client.close()


async def test_interview_start_is_form_encoded(api, backend):
    backend.post("/interview/start", {"session_id": 9})
    await api.start_interview({"student_email": "asha@example.com", "job_role": "Analyst"}, from_company_card=True)

    request = backend.calls("/interview/start")[0]
    assert form_fields(request) == {"student_email": "asha@example.com", "job_role": "Analyst"}
    assert request.headers["X-Request-Source"] == "company-card"


async def test_answer_is_multipart(api, backend):
    backend.post("/interview/9/answer", {"status": "ok"})
    await api.submit_answer(9, {"answer": "Because", "is_final": "false"})

    request = backend.calls("/interview/9/answer")[0]
    assert request.headers["Content-Type"].startswith("multipart/form-data")
    assert 'name="answer"' in request.content.decode()


async def test_rating_posts_email_as_query(api, backend):
    backend.post("/students/sessions/9/rating", {"ok": True})
    await api.submit_session_rating(9, "asha@example.com", 4, "Useful")

    request = backend.calls("/students/sessions/9/rating")[0]
    assert request.url.params["student_email"] == "asha@example.com"
    assert json_body(request) == {"rating": 4, "comments": "Useful"}
