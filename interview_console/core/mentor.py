"""
Mentor registration page: import students from a CSV file.
"""

import logging
from typing import Any

from interview_console.core.api_client import MockInterviewAPI
from interview_console.core.csv_samples import student_sample_csv
from interview_console.core.errors import APIError
from interview_console.core.summaries import ImportSummaryModal

logger = logging.getLogger(__name__)

SAMPLE_FILENAME = "student-upload-sample.csv"


class MentorRegistration:
    """Upload a roster and show the import summary."""

    def __init__(self, api: MockInterviewAPI):
        self.api = api
        self.filename: str | None = None
        self.content: bytes | None = None
        self.result: ImportSummaryModal | None = None
        self.error = ""
        self.submitting = False

    def select_file(self, filename: str | None, content: bytes | None) -> None:
        """Choosing a file clears the previous outcome."""
        self.filename = filename or None
        self.content = content if filename else None
        self.result = None
        self.error = ""

    async def submit(self) -> bool:
        self.error = ""
        self.result = None

        if not self.filename or self.content is None:
            self.error = "Please select a CSV file to upload."
            return False

        self.submitting = True
        try:
            payload = await self.api.import_students_csv(self.filename, self.content)
        except APIError as e:
            logger.error(f"Student import failed: {e}")
            self.error = e.message("Failed to import students. Please try again.")
            return False
        finally:
            self.submitting = False

        self.result = ImportSummaryModal(payload or {})
        logger.info(
            f"Imported {self.result.summary.imported}/{self.result.summary.total_rows} students"
        )
        return True

    @staticmethod
    def sample() -> tuple[str, bytes]:
        return SAMPLE_FILENAME, student_sample_csv()

    def as_dict(self) -> dict[str, Any]:
        return {
            "filename": self.filename,
            "submitting": self.submitting,
            "error": self.error,
            "result": self.result.as_dict() if self.result else None,
        }
