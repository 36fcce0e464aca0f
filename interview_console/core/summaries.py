"""
Summary modals rendered from API response payloads.
"""

from typing import Any

from interview_console.models.admin import StudentImportSummary
from interview_console.models.question import BulkUploadSummary, Question


def _error_text(error: Any) -> str:
    if isinstance(error, dict):
        row = error.get("row")
        reason = error.get("reason") or error.get("error") or error.get("msg") or ""
        return f"Row {row}: {reason}" if row is not None else str(reason)
    return str(error)


class BulkUploadSummaryModal:
    """Outcome of a bulk CSV question upload."""

    title = "Bulk upload complete"

    def __init__(self, payload: dict[str, Any] | BulkUploadSummary):
        self.summary = (
            payload if isinstance(payload, BulkUploadSummary)
            else BulkUploadSummary.model_validate(payload or {})
        )

    @property
    def inserted_line(self) -> str:
        return f"Questions inserted: {self.summary.inserted}"

    @property
    def skipped_line(self) -> str | None:
        if not self.summary.skipped_rows:
            return None
        return f"Rows skipped: {self.summary.skipped_count}"

    @property
    def skipped_items(self) -> list[str]:
        return [f"Row {row}" for row in self.summary.skipped_rows]

    @property
    def error_items(self) -> list[str]:
        return [_error_text(error) for error in self.summary.errors]

    def lines(self) -> list[str]:
        lines = [self.inserted_line]
        if self.skipped_line:
            lines.append(self.skipped_line)
            lines.extend(self.skipped_items)
        lines.extend(self.error_items)
        return lines

    def as_dict(self) -> dict[str, Any]:
        return {
            "title": self.title,
            "inserted": self.inserted_line,
            "skipped": self.skipped_line,
            "skipped_rows": self.skipped_items,
            "errors": self.error_items,
        }


class QuestionSuccessModal:
    """Confirmation shown after the single-question form uploads."""

    title = "Question added"

    def __init__(self, question: Question, payload: dict[str, Any] | None = None):
        self.question = question
        self.summary = BulkUploadSummary.model_validate(payload or {})

    @property
    def message(self) -> str:
        if self.summary.inserted:
            return "Your question was added to the question bank."
        return "The question was not inserted. It may already exist in the question bank."

    def lines(self) -> list[str]:
        q = self.question
        return [
            self.message,
            f"Question: {q.question}",
            f"Interview type: {q.interview_type}",
            f"Difficulty: {q.difficulty}",
            f"Industries: {', '.join(q.industries)}",
            f"Companies: {', '.join(q.companies)}",
            f"Job roles: {', '.join(q.job_roles)}",
            f"Work experience: {', '.join(q.work_experiences)}",
        ]

    def as_dict(self) -> dict[str, Any]:
        return {"title": self.title, "lines": self.lines()}


class ImportSummaryModal:
    """Outcome of a mentor CSV student import."""

    title = "Import summary"

    def __init__(self, payload: dict[str, Any] | StudentImportSummary):
        self.summary = (
            payload if isinstance(payload, StudentImportSummary)
            else StudentImportSummary.model_validate(payload or {})
        )

    def lines(self) -> list[str]:
        return [
            f"Total rows: {self.summary.total_rows}",
            f"Students imported: {self.summary.imported}",
            f"Emails sent: {self.summary.email_sent}",
        ]

    def attention_rows(self) -> list[dict[str, str]]:
        """Rows requiring attention, as table cells."""
        return [
            {
                "row": str(error.row),
                "email": error.email or "—",
                "reason": error.reason,
            }
            for error in self.summary.errors
        ]

    def as_dict(self) -> dict[str, Any]:
        return {
            "title": self.title,
            "lines": self.lines(),
            "attention": self.attention_rows(),
        }
