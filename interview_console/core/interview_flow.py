"""
Interview page for Interview Console

Flow:

    question ──submit answer──► next question (+ acknowledgement toast)
                    └─ completed ──► poll feedback status every few seconds
                                        ├─ completed ──► rating prompt ──► feedback
                                        └─ failed ────► regenerate

Feedback can only be opened once the session has been rated (or when
generation failed, so the student can still see what went wrong).
"""

import asyncio
import logging
import re
from dataclasses import dataclass
from typing import Any

from interview_console.config.settings import Settings, get_settings
from interview_console.core.api_client import MockInterviewAPI
from interview_console.core.app_shell import AppShell, Route
from interview_console.core.errors import APIError
from interview_console.core.toasts import ToastKind
from interview_console.models.session import FeedbackState, FeedbackStatus, InterviewLaunch, SessionRating

logger = logging.getLogger(__name__)

NOT_REQUESTED = "not_requested"

ANSWER_REQUIRED = "Answer cannot be empty"
ANSWER_FAILED = "Failed to submit answer. Please try again."
FINAL_ANSWER_FAILED = "We couldn't generate your feedback right now. Please regenerate the report."
FEEDBACK_FAILED = "We hit a snag while preparing your report. Please try regenerating."
STATUS_UNKNOWN = "We could not verify the feedback status. Please regenerate the report."
REGENERATE_FAILED = "Unable to regenerate feedback right now. Please try again later."
RATING_THANKS = "Thank you for rating your interview!"
RATING_FAILED = "Unable to submit rating. Please try again later."

# Details like "500: Internal error" are not worth showing
_STATUS_PREFIX = re.compile(r"^\d{3}")


@dataclass
class Question:
    """A question as the interview page shows it."""

    id: str | int | None
    text: str
    type: str
    raw: Any

    @property
    def is_coding(self) -> bool:
        return self.type == "coding"


def normalize_question(raw: Any) -> Question | None:
    """Accept a bare string or any of the question object shapes the API uses."""
    if not raw:
        return None
    if isinstance(raw, str):
        return Question(id=None, text=raw, type="standard", raw=raw)
    if not isinstance(raw, dict):
        return Question(id=None, text=str(raw), type="standard", raw=raw)

    text = next(
        (raw[key] for key in ("text", "question", "question_text", "prompt") if raw.get(key) is not None),
        "",
    )
    type_value = raw.get("question_type") or raw.get("type") or "standard"
    question_type = type_value.strip().lower() if isinstance(type_value, str) else "standard"
    if question_type.startswith("coding"):
        question_type = "coding"
    question_id = next(
        (raw[key] for key in ("id", "question_id", "uuid") if raw.get(key) is not None),
        None,
    )
    return Question(
        id=question_id,
        text=text if isinstance(text, str) else str(text),
        type=question_type or "standard",
        raw=raw,
    )


class InterviewSession:
    """State and actions of one running interview."""

    def __init__(
        self,
        api: MockInterviewAPI,
        shell: AppShell,
        launch: InterviewLaunch,
        settings: Settings | None = None,
    ):
        self.api = api
        self.shell = shell
        self.toasts = shell.toasts
        self.launch = launch
        self.settings = settings or get_settings()

        self.session_id = launch.session_id
        self.question = normalize_question(launch.first_question)
        self.question_number = launch.question_number or 1
        self.max_questions = launch.max_questions

        self.answer = ""
        self.answer_error = ""
        self.loading = False

        self.is_complete = False
        self.analyzing_final = False
        self.feedback_status: str = NOT_REQUESTED
        self.feedback_error: str | None = None
        self.can_view_feedback = False
        self.show_feedback = False

        self.rating = SessionRating()
        self.rating_loaded = False
        self.rating_prompt_open = False

        self._poll_task: asyncio.Task | None = None

    # =========================================================================
    # DISPLAY
    # =========================================================================

    @property
    def display_role(self) -> str:
        return self.launch.job_role.strip() or "Any Role"

    @property
    def display_company(self) -> str:
        return self.launch.company_name.strip() or "Any Company"

    @property
    def display_industry(self) -> str:
        industry = self.launch.industry_type.strip()
        return industry if industry and industry.lower() != "n/a" else "N/A"

    @property
    def is_final_question(self) -> bool:
        return isinstance(self.max_questions, int) and self.question_number >= self.max_questions

    # =========================================================================
    # ANSWERING
    # =========================================================================

    def set_answer(self, text: str) -> None:
        self.answer = text
        if self.answer_error and text.strip():
            self.answer_error = ""

    def _answer_form(self, text: str, is_final: bool) -> dict[str, str]:
        form = {"answer": text}
        if self.question and self.question.id is not None:
            form["question_id"] = str(self.question.id)
        if self.question and self.question.type:
            form["question_type"] = self.question.type
        if is_final:
            form["is_final"] = "true"
        return form

    async def submit_answer(self, auto: bool = False) -> bool:
        """
        Send the current answer.

        A timed-out question is submitted with ``auto=True``, which skips the
        empty-answer check.
        """
        text = self.answer.strip()
        if not auto and not text:
            self.answer_error = ANSWER_REQUIRED
            return False

        self.answer_error = ""
        is_final = self.is_final_question
        self.loading = True
        self.analyzing_final = is_final
        try:
            data = await self.api.submit_answer(self.session_id, self._answer_form(text, is_final))
        except APIError as e:
            logger.error(f"Error submitting answer for session {self.session_id}: {e}")
            detail = e.message("")
            if is_final:
                message = detail if detail and not _STATUS_PREFIX.match(detail) else FINAL_ANSWER_FAILED
                self.feedback_error = message
                self.feedback_status = FeedbackState.FAILED.value
                self.is_complete = True
                self.can_view_feedback = True
                self.toasts.add(message, ToastKind.ERROR)
            else:
                self.answer_error = ANSWER_FAILED
            self.analyzing_final = False
            return False
        finally:
            self.loading = False

        self._apply_answer_response(data if isinstance(data, dict) else {})
        return True

    def _apply_answer_response(self, data: dict[str, Any]) -> None:
        if isinstance(data.get("current_max_questions"), int):
            self.max_questions = data["current_max_questions"]

        if data.get("completed"):
            self.begin_feedback_polling()
            return

        meta = data.get("next_question_meta")
        next_question = normalize_question(meta) if meta else normalize_question(data.get("next_question"))
        self.question = next_question
        if next_question is not None:
            number = data.get("question_number")
            self.question_number = number if isinstance(number, int) else self.question_number + 1

        self.answer = ""
        self.answer_error = ""
        if data.get("acknowledgment"):
            self.toasts.add(data["acknowledgment"], ToastKind.INFO)
        self.analyzing_final = False

    # =========================================================================
    # FEEDBACK
    # =========================================================================

    def begin_feedback_polling(self) -> asyncio.Task:
        self.feedback_status = FeedbackState.PENDING.value
        self.feedback_error = None
        self.analyzing_final = True
        self.is_complete = True
        self.can_view_feedback = False
        self.show_feedback = False
        self.rating_prompt_open = False

        self.stop_polling()
        self._poll_task = asyncio.get_running_loop().create_task(
            self._poll(), name=f"feedback-poll:{self.session_id}"
        )
        return self._poll_task

    async def _poll(self) -> None:
        while not await self.fetch_status():
            await asyncio.sleep(self.settings.feedback_poll_interval_seconds)

    def stop_polling(self) -> None:
        if self._poll_task and not self._poll_task.done() and self._poll_task is not asyncio.current_task():
            self._poll_task.cancel()
        self._poll_task = None

    async def wait_for_feedback(self) -> None:
        if self._poll_task is not None:
            await asyncio.wait({self._poll_task})

    async def fetch_status(self) -> bool:
        """Check feedback generation once. Returns True when polling should stop."""
        try:
            status = FeedbackStatus.model_validate(await self.api.get_feedback_status(self.session_id) or {})
        except APIError as e:
            logger.error(f"Failed to fetch feedback status for {self.session_id}: {e}")
            self._finish_feedback(FeedbackState.FAILED.value, STATUS_UNKNOWN)
            return True

        self.feedback_status = status.status.value
        self.feedback_error = status.error or None

        if status.status is FeedbackState.COMPLETED:
            self._finish_feedback(FeedbackState.COMPLETED.value, None)
            await self.load_rating()
            return True
        if status.status is FeedbackState.FAILED:
            self._finish_feedback(FeedbackState.FAILED.value, status.error or FEEDBACK_FAILED)
            return True
        return False

    def _finish_feedback(self, status: str, error: str | None) -> None:
        self.feedback_status = status
        self.feedback_error = error
        self.analyzing_final = False
        self.is_complete = True
        self._apply_rating_gate()

    def _apply_rating_gate(self) -> None:
        if self.feedback_status == FeedbackState.COMPLETED.value:
            rated = self.rating.rating > 0
            self.rating_prompt_open = not rated
            self.can_view_feedback = rated
        elif self.feedback_status == FeedbackState.FAILED.value:
            self.rating_prompt_open = False
            self.can_view_feedback = True
        else:
            self.can_view_feedback = False

    async def regenerate_feedback(self) -> bool:
        self.feedback_status = FeedbackState.PENDING.value
        self.feedback_error = None
        self.can_view_feedback = False
        self.rating_prompt_open = False
        self.show_feedback = False
        try:
            await self.api.trigger_feedback_generation(self.session_id)
        except APIError as e:
            logger.error(f"Failed to regenerate feedback for {self.session_id}: {e}")
            message = e.message(REGENERATE_FAILED)
            self.feedback_status = FeedbackState.FAILED.value
            self.feedback_error = message
            self.can_view_feedback = True
            self.toasts.add(message, ToastKind.ERROR)
            return False
        self.begin_feedback_polling()
        return True

    def view_feedback(self) -> bool:
        if not self.can_view_feedback:
            if self.feedback_status == FeedbackState.COMPLETED.value:
                self.rating_prompt_open = True
            return False
        self.show_feedback = True
        return True

    # =========================================================================
    # RATING
    # =========================================================================

    @property
    def student_email(self) -> str:
        return self.launch.student_email

    async def load_rating(self) -> None:
        if not self.student_email:
            self.rating_loaded = True
            return
        try:
            data = await self.api.fetch_session_rating(self.session_id, self.student_email)
        except APIError as e:
            logger.warning(f"Unable to fetch existing session rating: {e}")
            data = None
        finally:
            self.rating_loaded = True
        if isinstance(data, dict) and data.get("rating"):
            self.rating = SessionRating(rating=data["rating"], comments=data.get("comments") or "")
        self._apply_rating_gate()

    async def submit_rating(self, rating: int, comments: str = "") -> Route | None:
        """
        Rate the session. Without a known student the prompt just closes and
        the interview ends.
        """
        if not self.student_email:
            self.rating_prompt_open = False
            return self.end()

        try:
            await self.api.submit_session_rating(self.session_id, self.student_email, rating, comments)
        except APIError as e:
            logger.error(f"Failed to submit session rating: {e}")
            self.toasts.add(e.message(RATING_FAILED), ToastKind.ERROR)
            return None

        self.toasts.add(RATING_THANKS, ToastKind.SUCCESS)
        self.rating = SessionRating(rating=rating, comments=comments or "")
        self.rating_prompt_open = False
        self.can_view_feedback = True
        return None

    def return_to_dashboard(self) -> Route | None:
        """Leaving requires a rating first."""
        if self.rating.rating > 0:
            return self.end()
        self.rating_prompt_open = True
        return None

    def end(self) -> Route:
        self.stop_polling()
        return self.shell.handle_interview_end(self.session_id)

    def close(self) -> None:
        self.stop_polling()

    def as_dict(self) -> dict[str, Any]:
        return {
            "session_id": self.session_id,
            "role": self.display_role,
            "company": self.display_company,
            "industry": self.display_industry,
            "key_skills": list(self.launch.key_skills),
            "question": (
                {"id": self.question.id, "text": self.question.text, "type": self.question.type}
                if self.question else None
            ),
            "question_number": self.question_number,
            "max_questions": self.max_questions,
            "answer_error": self.answer_error,
            "loading": self.loading,
            "complete": self.is_complete,
            "analyzing_final": self.analyzing_final,
            "feedback": {
                "status": self.feedback_status,
                "error": self.feedback_error,
                "can_view": self.can_view_feedback,
                "showing": self.show_feedback,
            },
            "rating": {
                **self.rating.model_dump(),
                "loaded": self.rating_loaded,
                "prompt_open": self.rating_prompt_open,
            },
        }
