"""
Interview session models for Interview Console
"""

from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import Field, field_validator

from interview_console.models.common import APIModel, Pagination


class FeedbackState(str, Enum):
    """Feedback generation states reported by the API."""

    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"


class InterviewSessionRecord(APIModel):
    """A past or running interview session."""

    session_id: str | int
    student_id: str | int | None = None
    student_name: str | None = None
    student_email: str | None = None

    # Interview target
    job_role: str | None = None
    company_name: str | None = None
    industry_type: str | None = None
    interview_type: str | None = None
    work_experience: str | None = None

    # Scores
    overall_score: float | None = None
    attempt_number: int | None = None

    # Timing
    started_at: datetime | None = None
    completed_at: datetime | None = None

    status: str | None = None

    @property
    def is_completed(self) -> bool:
        return isinstance(self.status, str) and self.status.lower() == "completed"


class SessionPage(APIModel):
    """Paginated sessions response."""

    sessions: list[InterviewSessionRecord] = Field(default_factory=list)
    pagination: Pagination = Field(default_factory=Pagination)


class FeedbackStatus(APIModel):
    """Feedback generation status for a session."""

    status: FeedbackState = FeedbackState.PENDING
    error: str | None = None

    @field_validator("status", mode="before")
    @classmethod
    def _default_pending(cls, value: Any) -> Any:
        return value or FeedbackState.PENDING


class SessionRating(APIModel):
    """A student's rating of a finished session."""

    rating: int = Field(default=0, ge=0, le=5)
    comments: str = ""


class InterviewLaunch(APIModel):
    """Everything the interview page needs, built from the start response."""

    session_id: str | int
    first_question: dict[str, Any] | str | None = None
    key_skills: list[str] = Field(default_factory=list)
    job_role: str = ""
    industry_type: str = ""
    company_name: str = ""
    interview_type: str = ""
    work_experience: str = ""
    question_number: int = 1
    max_questions: int | None = None
    message: str | None = None
    session_status: str | None = None
    student_email: str = ""

    @classmethod
    def from_start_response(cls, data: dict[str, Any], student_email: str = "") -> "InterviewLaunch":
        """Normalise an /interview/start response."""
        meta = data.get("first_question_meta")
        first_question = dict(meta) if isinstance(meta, dict) and meta.get("question") else data.get("first_question")
        key_skills = data.get("key_skills")
        return cls(
            session_id=data["session_id"],
            first_question=first_question,
            key_skills=key_skills if isinstance(key_skills, list) else [],
            job_role=data.get("job_role") or "",
            industry_type=data.get("industry_type") or "",
            company_name=data.get("company_name") or "",
            interview_type=data.get("interview_type") or "",
            work_experience=data.get("work_experience") or "",
            question_number=data.get("question_number") or 1,
            max_questions=data.get("current_max_questions") or None,
            message=data.get("message"),
            session_status=data.get("status"),
            student_email=student_email,
        )
