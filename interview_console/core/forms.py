"""
Question bank upload forms.

Both forms tag questions with the four category multi-selects and post a
multipart body to the bulk upload endpoint: the CSV as the ``file`` part and
each category as a JSON-encoded array. The single-question form simply
builds a one-row CSV.

Nothing is patched locally after a successful upload. Dismissing the
summary modal requests a full reload of the admin console instead.
"""

import json
import logging
from functools import partial
from typing import Any

from interview_console.core.api_client import MockInterviewAPI
from interview_console.core.csv_samples import single_question_csv
from interview_console.core.errors import APIError
from interview_console.core.multiselect import NO_SPECIFIC_INDUSTRY, CreatableMultiSelect, SingleSelectDropdown
from interview_console.core.options_cache import OptionsCache
from interview_console.core.summaries import BulkUploadSummaryModal, QuestionSuccessModal
from interview_console.core.toasts import ToastKind, ToastQueue
from interview_console.models.question import CATEGORY_FIELDS, QUESTION_CSV_COLUMNS, Question

logger = logging.getLogger(__name__)

CATEGORY_ERRORS: dict[str, str] = {
    "industries": "Select at least one industry.",
    "companies": "Select at least one company.",
    "job_roles": "Select at least one job role.",
    "work_experiences": "Select at least one work experience level.",
}

# Single-question fields picked from a fixed option list -> options cache field
DROPDOWN_FIELDS: dict[str, tuple[str, str]] = {
    "interview_type": ("Interview type", "interview_types"),
    "difficulty": ("Difficulty", "difficulties"),
    "question_type": ("Question type", "question_types"),
}

TEXT_FIELD_ERRORS: dict[str, str] = {
    "question": "Question text is required.",
    "mandatory_skills": "Mandatory skills are required.",
    "predefined_answer": "A predefined answer is required.",
    "interview_type": "Interview type is required.",
    "difficulty": "Difficulty is required.",
    "question_type": "Question type is required.",
}


class CategoryForm:
    """Category multi-selects, validation state and modal handling."""

    def __init__(self, api: MockInterviewAPI, options: OptionsCache, toasts: ToastQueue):
        self.api = api
        self.options = options
        self.toasts = toasts

        self.selects: dict[str, CreatableMultiSelect] = {
            "industries": CreatableMultiSelect(
                "Industries",
                allow_create=True,
                exclusive_option=NO_SPECIFIC_INDUSTRY,
                on_change=lambda _: self._clear_error("industries"),
            ),
            "companies": CreatableMultiSelect(
                "Companies",
                allow_create=True,
                on_change=lambda _: self._clear_error("companies"),
            ),
            "job_roles": CreatableMultiSelect(
                "Job roles",
                allow_create=True,
                on_change=lambda _: self._clear_error("job_roles"),
            ),
            "work_experiences": CreatableMultiSelect(
                "Work experience",
                on_change=lambda _: self._clear_error("work_experiences"),
            ),
        }
        self.errors: dict[str, str] = {}
        self.submitting = False
        self.modal: Any = None
        self.reload_requested = False
        self.refresh_options()

    def refresh_options(self) -> None:
        """Pull option lists from the shared cache into the selects."""
        industries = self.options.get("industries")
        if NO_SPECIFIC_INDUSTRY not in industries:
            industries.insert(0, NO_SPECIFIC_INDUSTRY)
        self.selects["industries"].set_options(industries)
        for field in ("companies", "job_roles", "work_experiences"):
            self.selects[field].set_options(self.options.get(field))

    def _clear_error(self, field: str) -> None:
        self.errors.pop(field, None)

    @property
    def categories(self) -> dict[str, list[str]]:
        return {field: list(self.selects[field].selected) for field in CATEGORY_FIELDS}

    def _validate_categories(self) -> dict[str, str]:
        return {
            field: CATEGORY_ERRORS[field]
            for field in CATEGORY_FIELDS
            if not self.selects[field].selected
        }

    def _category_payload(self) -> dict[str, str]:
        return {field: json.dumps(values) for field, values in self.categories.items()}

    def _reset_categories(self) -> None:
        for select in self.selects.values():
            select.clear()
            select.close()
        self.errors = {}

    def dismiss_modal(self) -> bool:
        """Close the summary modal. Returns True: the console must reload."""
        self.modal = None
        self.reload_requested = True
        return True


class QuestionUploadForm(CategoryForm):
    """Add one question to the bank."""

    upload_filename = "question.csv"

    def __init__(self, api: MockInterviewAPI, options: OptionsCache, toasts: ToastQueue):
        self.fields: dict[str, str] = {name: "" for name in QUESTION_CSV_COLUMNS}
        self.dropdowns: dict[str, SingleSelectDropdown] = {
            name: SingleSelectDropdown(label, on_change=partial(self.set_field, name))
            for name, (label, _) in DROPDOWN_FIELDS.items()
        }
        super().__init__(api, options, toasts)

    def refresh_options(self) -> None:
        super().refresh_options()
        for name, (_, options_field) in DROPDOWN_FIELDS.items():
            self.dropdowns[name].set_options(self.options.get(options_field))

    def set_field(self, name: str, value: str) -> None:
        if name not in self.fields:
            raise KeyError(f"Unknown field: {name}")
        self.fields[name] = value
        self._clear_error(name)
        dropdown = self.dropdowns.get(name)
        if dropdown is not None:
            dropdown.value = value

    def validate(self) -> bool:
        errors = self._validate_categories()
        for name, message in TEXT_FIELD_ERRORS.items():
            if not self.fields[name].strip():
                errors[name] = message
        self.errors = errors
        return not errors

    def build_question(self) -> Question:
        return Question(
            **{name: value.strip() for name, value in self.fields.items()},
            **self.categories,
        )

    async def submit(self) -> bool:
        """Validate, upload and open the success modal. Returns True on success."""
        if self.submitting:
            return False
        if not self.validate():
            logger.info(f"Question form blocked: {sorted(self.errors)}")
            return False

        question = self.build_question()
        self.submitting = True
        try:
            payload = await self.api.bulk_upload_questions(
                self.upload_filename,
                single_question_csv(question),
                self._category_payload(),
            )
        except APIError as e:
            logger.error(f"Question upload failed: {e}")
            self.toasts.add(e.message("Failed to upload question. Please try again."), ToastKind.ERROR)
            return False
        finally:
            self.submitting = False

        self.modal = QuestionSuccessModal(question, payload)
        self.fields = {name: "" for name in QUESTION_CSV_COLUMNS}
        for dropdown in self.dropdowns.values():
            dropdown.clear()
            dropdown.close()
        self._reset_categories()
        return True


class BulkUploadForm(CategoryForm):
    """Upload a CSV of questions sharing one set of category tags."""

    def __init__(self, api: MockInterviewAPI, options: OptionsCache, toasts: ToastQueue):
        self.filename: str | None = None
        self.content: bytes | None = None
        super().__init__(api, options, toasts)

    def set_file(self, filename: str | None, content: bytes | None) -> None:
        self.filename = filename
        self.content = content
        self._clear_error("file")

    def validate(self) -> bool:
        errors = self._validate_categories()
        if not self.filename or self.content is None:
            errors["file"] = "Please choose a CSV file to upload."
        elif not self.filename.lower().endswith(".csv"):
            errors["file"] = "Only .csv files are supported."
        elif not self.content.strip():
            errors["file"] = "The selected file is empty."
        self.errors = errors
        return not errors

    async def submit(self) -> bool:
        if self.submitting:
            return False
        if not self.validate():
            logger.info(f"Bulk upload blocked: {sorted(self.errors)}")
            return False

        self.submitting = True
        try:
            payload = await self.api.bulk_upload_questions(
                self.filename,
                self.content,
                self._category_payload(),
            )
        except APIError as e:
            logger.error(f"Bulk upload failed: {e}")
            self.toasts.add(e.message("Bulk upload failed. Please try again."), ToastKind.ERROR)
            return False
        finally:
            self.submitting = False

        self.modal = BulkUploadSummaryModal(payload or {})
        self.filename = None
        self.content = None
        self._reset_categories()
        return True
