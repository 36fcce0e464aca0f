"""
Tests for the interview page flow
"""
import pytest

from conftest import json_body
from interview_console.core.app_shell import Route
from interview_console.core.interview_flow import (
    ANSWER_REQUIRED,
    FEEDBACK_FAILED,
    FINAL_ANSWER_FAILED,
    RATING_THANKS,
    STATUS_UNKNOWN,
    InterviewSession,
    normalize_question,
)

ANSWER_PATH = "/interview/11/answer"
STATUS_PATH = "/feedback-status/11"
RATING_PATH = "/students/sessions/11/rating"


@pytest.fixture
def interview(api, signed_in_shell, settings) -> InterviewSession:
    launch = signed_in_shell.handle_interview_start({
        "session_id": 11,
        "first_question_meta": {"id": "q1", "question": "Walk me through a recent project.", "question_type": "Behavioral"},
        "job_role": "Data Analyst",
        "company_name": "",
        "industry_type": "n/a",
        "current_max_questions": 2,
    })
    session = InterviewSession(api, signed_in_shell, launch, settings)
    yield session
    session.close()


def multipart_fields(request) -> str:
    return request.content.decode()


def test_normalize_question_shapes():
    assert normalize_question("Why?").text == "Why?"
    assert normalize_question({"question_text": "Reverse a list", "type": "Coding-Python"}).is_coding
    assert normalize_question({"prompt": "Design a cache", "uuid": "u1"}).id == "u1"
    assert normalize_question(None) is None


def test_display_fallbacks(interview):
    assert interview.display_role == "Data Analyst"
    assert interview.display_company == "Any Company"
    assert interview.display_industry == "N/A"
    assert interview.question.id == "q1"
    assert interview.question.type == "behavioral"


async def test_empty_answer_is_rejected(interview, backend):
    interview.set_answer("   ")
    assert await interview.submit_answer() is False
    assert interview.answer_error == ANSWER_REQUIRED
    assert backend.calls(ANSWER_PATH) == []


async def test_timed_out_answer_is_submitted_empty(interview, backend):
    backend.post(ANSWER_PATH, {"next_question": "Next one", "question_number": 2})
    assert await interview.submit_answer(auto=True) is True
    assert 'name="answer"' in multipart_fields(backend.calls(ANSWER_PATH)[0])


async def test_answer_advances_and_acknowledges(interview, backend, signed_in_shell):
    backend.post(ANSWER_PATH, {
        "next_question_meta": {"question_id": "q2", "text": "What tools do you use?"},
        "question_number": 2,
        "acknowledgment": "Thanks, that was clear.",
    })
    interview.set_answer("I built a churn model.")

    assert await interview.submit_answer() is True

    body = multipart_fields(backend.calls(ANSWER_PATH)[0])
    assert "I built a churn model." in body
    assert 'name="question_id"' in body
    assert 'name="is_final"' not in body
    assert interview.question.text == "What tools do you use?"
    assert interview.question_number == 2
    assert interview.is_final_question
    assert interview.answer == ""
    assert signed_in_shell.toasts.as_list()[0]["message"] == "Thanks, that was clear."


async def test_non_final_failure_keeps_question(interview, backend):
    backend.post(ANSWER_PATH, {"detail": "timeout"}, status=504)
    interview.set_answer("An answer")
    assert await interview.submit_answer() is False
    assert interview.answer_error == "Failed to submit answer. Please try again."
    assert interview.question.id == "q1"
    assert interview.is_complete is False


async def test_final_failure_hides_status_code_details(interview, backend, signed_in_shell):
    interview.question_number = 2
    backend.post(ANSWER_PATH, {"detail": "500: Internal Server Error"}, status=500)
    interview.set_answer("Final answer")

    assert await interview.submit_answer() is False

    assert interview.feedback_status == "failed"
    assert interview.feedback_error == FINAL_ANSWER_FAILED
    assert interview.can_view_feedback is True
    assert 'name="is_final"' in multipart_fields(backend.calls(ANSWER_PATH)[0])
    assert signed_in_shell.toasts.as_list()[0]["kind"] == "error"


async def test_completion_polls_until_feedback_ready(interview, backend):
    statuses = iter([{"status": "pending"}, {"status": "pending"}, {"status": "completed"}])
    backend.post(ANSWER_PATH, {"completed": True})
    backend.get(STATUS_PATH, lambda request: next(statuses))
    backend.get(RATING_PATH, {"rating": 0})
    interview.set_answer("Done")

    await interview.submit_answer()
    assert interview.is_complete
    await interview.wait_for_feedback()

    assert len(backend.calls(STATUS_PATH)) == 3
    assert interview.feedback_status == "completed"
    assert interview.rating_loaded
    assert interview.rating_prompt_open is True
    assert interview.view_feedback() is False


async def test_existing_rating_unlocks_feedback(interview, backend):
    backend.get(STATUS_PATH, {"status": "completed"})
    backend.get(RATING_PATH, {"rating": 4, "comments": "Good"})

    assert await interview.fetch_status() is True

    assert interview.rating.rating == 4
    assert interview.rating_prompt_open is False
    assert interview.view_feedback() is True
    assert interview.show_feedback is True


async def test_failed_generation_allows_viewing(interview, backend):
    backend.get(STATUS_PATH, {"status": "failed"})
    assert await interview.fetch_status() is True
    assert interview.feedback_error == FEEDBACK_FAILED
    assert interview.can_view_feedback is True


async def test_status_error_stops_polling(interview, backend):
    backend.get(STATUS_PATH, {}, status=500)
    assert await interview.fetch_status() is True
    assert interview.feedback_error == STATUS_UNKNOWN


async def test_regenerate_restarts_polling(interview, backend):
    backend.post("/interview/11/generate-feedback", {"ok": True})
    backend.get(STATUS_PATH, {"status": "failed", "error": "Model overloaded"})

    assert await interview.regenerate_feedback() is True
    await interview.wait_for_feedback()

    assert interview.feedback_error == "Model overloaded"
    assert len(backend.calls("/interview/11/generate-feedback")) == 1


async def test_rating_required_before_leaving(interview, backend, signed_in_shell):
    backend.post(RATING_PATH, {"ok": True})

    assert interview.return_to_dashboard() is None
    assert interview.rating_prompt_open is True

    await interview.submit_rating(5, "Great practice")
    request = backend.calls(RATING_PATH, "POST")[0]
    assert json_body(request) == {"rating": 5, "comments": "Great practice"}
    assert signed_in_shell.toasts.as_list()[0]["message"] == RATING_THANKS

    assert interview.return_to_dashboard() == Route(redirect="/dashboard")
    assert signed_in_shell.interview is None


async def test_rating_failure_keeps_prompt(interview, backend, signed_in_shell):
    backend.post(RATING_PATH, {"detail": "Rating must be 1-5"}, status=422)
    interview.rating_prompt_open = True
    assert await interview.submit_rating(9) is None
    assert interview.rating_prompt_open is True
    assert signed_in_shell.toasts.as_list()[0]["message"] == "Rating must be 1-5"
