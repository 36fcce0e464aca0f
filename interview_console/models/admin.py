"""
Admin console models for Interview Console

Mirrors the admin dashboard, leaderboard, import and mapping payloads.
"""

from pydantic import Field, field_validator

from interview_console.models.common import APIModel, Pagination


class AdminProfile(APIModel):
    """The signed-in admin account."""

    email: str
    display_name: str | None = None

    @property
    def label(self) -> str:
        return self.display_name or self.email


class AdminLoginResult(APIModel):
    """Admin login response: a bearer token plus the profile."""

    access_token: str = Field(..., validation_alias="token")
    admin: AdminProfile | None = None

    @field_validator("access_token", mode="before")
    @classmethod
    def _strip(cls, value: str) -> str:
        return value.strip() if isinstance(value, str) else value


class DashboardStats(APIModel):
    """Headline numbers on the admin overview tab."""

    total_students: int | None = None
    total_sessions: int | None = None
    active_sessions: int | None = None
    completed_sessions: int | None = None
    today_sessions: int | None = None
    avg_score: float | None = None


class LeaderboardEntry(APIModel):
    """One leaderboard row."""

    rank: int
    student_name: str
    avg_score: float | None = None
    total_sessions: int = 0
    university_name: str | None = None
    program_name: str | None = None
    batch_label: str | None = None


class LeaderboardPage(APIModel):
    """Paginated leaderboard response."""

    entries: list[LeaderboardEntry] = Field(default_factory=list)
    pagination: Pagination = Field(default_factory=Pagination)


class ImportRowError(APIModel):
    """A CSV row the student import rejected."""

    row: int | str
    email: str | None = None
    reason: str = ""


class StudentImportSummary(APIModel):
    """Result of a mentor CSV student import."""

    total_rows: int = 0
    imported: int = 0
    email_sent: int = 0
    errors: list[ImportRowError] = Field(default_factory=list)


class ProgramRoleMapping(APIModel):
    """Payload mapping job roles onto a cohort and work-experience level."""

    ubp_id: str | int | None = None
    university_name: str
    program_name: str
    batch_label: str
    work_experience: str
    job_roles: list[str] = Field(..., min_length=1)
