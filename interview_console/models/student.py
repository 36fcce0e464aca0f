"""
Student models for Interview Console
"""

from datetime import datetime
from typing import Any

from pydantic import Field, field_validator

from interview_console.models.common import APIModel, Pagination


class Student(APIModel):
    """A student row from the admin students listing."""

    id: str | int | None = Field(default=None, alias="student_id")
    name: str = ""
    email: str = ""

    # Cohort labels (UBP)
    university_name: str | None = None
    program_name: str | None = None
    batch_label: str | None = None

    # Activity
    total_sessions: int = 0
    completed_sessions: int = 0
    avg_score: float | None = None
    status: str = "No Sessions"
    last_session_at: datetime | None = None


class StudentPage(APIModel):
    """Paginated students response."""

    students: list[Student] = Field(default_factory=list)
    pagination: Pagination = Field(default_factory=Pagination)


class ProgramInfo(APIModel):
    """Program a student belongs to, with the job roles mapped to it."""

    program_id: str | int | None = None
    program_name: str | None = None
    job_roles: list[str] = Field(default_factory=list)

    @field_validator("job_roles", mode="before")
    @classmethod
    def _drop_blank_roles(cls, value: Any) -> list[str]:
        if not isinstance(value, list):
            return []
        seen: list[str] = []
        for role in value:
            if role and role not in seen:
                seen.append(role)
        return seen


class StudentSessionInfo(APIModel):
    """
    The logged-in student object returned by the login endpoint.

    This is what gets persisted to durable storage and read back on startup.
    """

    name: str
    email: str
    program_id: str | int | None = None
    program_name: str | None = None
    program: ProgramInfo | None = None
