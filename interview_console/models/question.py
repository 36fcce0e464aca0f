"""
Question bank models for Interview Console
"""

from typing import Any

from pydantic import Field, field_validator

from interview_console.models.common import APIModel


# Column order of the question upload CSV
QUESTION_CSV_COLUMNS: tuple[str, ...] = (
    "question",
    "mandatory_skills",
    "predefined_answer",
    "interview_type",
    "difficulty",
    "question_type",
)

# Category arrays sent alongside the CSV part
CATEGORY_FIELDS: tuple[str, ...] = (
    "industries",
    "companies",
    "job_roles",
    "work_experiences",
)


class Question(APIModel):
    """A question-bank entry, as uploaded by admins."""

    # Content
    question: str = Field(..., description="The question text")
    mandatory_skills: str = ""
    predefined_answer: str = ""

    # Classification
    interview_type: str = ""
    difficulty: str = ""
    question_type: str = ""

    # Targeting tags
    industries: list[str] = Field(default_factory=list)
    companies: list[str] = Field(default_factory=list)
    job_roles: list[str] = Field(default_factory=list)
    work_experiences: list[str] = Field(default_factory=list)

    def csv_row(self) -> list[str]:
        """Row values in upload CSV column order."""
        return [getattr(self, column) for column in QUESTION_CSV_COLUMNS]


class BulkUploadOptions(APIModel):
    """Category options offered by the question upload forms."""

    industries: list[str] = Field(default_factory=list)
    companies: list[str] = Field(default_factory=list)
    job_roles: list[str] = Field(default_factory=list)
    work_experiences: list[str] = Field(default_factory=list)
    interview_types: list[str] = Field(default_factory=list)
    difficulties: list[str] = Field(default_factory=list)
    question_types: list[str] = Field(default_factory=list)

    @field_validator("*", mode="before")
    @classmethod
    def _list_or_empty(cls, value: Any) -> Any:
        return value if isinstance(value, list) else []


class BulkUploadSummary(APIModel):
    """Result of a bulk question upload."""

    inserted: int = 0
    skipped_rows: list[int] = Field(default_factory=list)
    errors: list[Any] = Field(default_factory=list)

    @property
    def skipped_count(self) -> int:
        return len(self.skipped_rows)
