"""
Downloadable CSV templates.

The server validates every uploaded file; these samples only show admins and
mentors the expected header row.
"""

import csv
import io
from typing import Iterable, Sequence

from interview_console.models.question import QUESTION_CSV_COLUMNS, Question

STUDENT_CSV_COLUMNS: tuple[str, ...] = ("name", "email")

QUESTION_SAMPLE_FILENAME = "question-upload-sample.csv"
STUDENT_SAMPLE_FILENAME = "student-upload-sample.csv"

QUESTION_SAMPLE_ROWS: tuple[tuple[str, ...], ...] = (
    (
        "Explain the difference between a process and a thread.",
        "Operating Systems, Concurrency",
        "A process has its own address space; threads share the address space of their process.",
        "Technical",
        "Easy",
        "Conceptual",
    ),
    (
        "Tell me about a time you resolved a conflict within your team.",
        "Communication, Collaboration",
        "Use the STAR format: situation, task, action and a measurable result.",
        "Behavioral",
        "Medium",
        "Situational",
    ),
)

STUDENT_SAMPLE_ROWS: tuple[tuple[str, ...], ...] = (
    ("Jane Doe", "jane.doe@example.com"),
    ("John Smith", "john.smith@example.com"),
)


def render_csv(header: Sequence[str], rows: Iterable[Sequence[str]]) -> bytes:
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(header)
    writer.writerows(rows)
    return buffer.getvalue().encode("utf-8")


def question_sample_csv() -> bytes:
    return render_csv(QUESTION_CSV_COLUMNS, QUESTION_SAMPLE_ROWS)


def student_sample_csv() -> bytes:
    return render_csv(STUDENT_CSV_COLUMNS, STUDENT_SAMPLE_ROWS)


def single_question_csv(question: Question) -> bytes:
    """One-row upload file for the single-question form."""
    return render_csv(QUESTION_CSV_COLUMNS, [question.csv_row()])
