"""
Tests for mentor CSV registration
"""
import csv
import io

import pytest

from interview_console.core.mentor import MentorRegistration

IMPORT_PATH = "/mentors/students/import"


@pytest.fixture
def mentor(api) -> MentorRegistration:
    return MentorRegistration(api)


async def test_file_is_required(mentor, backend):
    assert await mentor.submit() is False
    assert mentor.error == "Please select a CSV file to upload."
    assert backend.calls(IMPORT_PATH) == []


async def test_import_shows_summary(mentor, backend):
    backend.post(IMPORT_PATH, {
        "total_rows": 2,
        "imported": 1,
        "email_sent": 1,
        "errors": [{"row": 3, "email": "dup@example.com", "reason": "Already registered"}],
    })
    mentor.select_file("roster.csv", b"name,email\nAsha,asha@example.com\n")

    assert await mentor.submit() is True

    assert 'filename="roster.csv"' in backend.calls(IMPORT_PATH)[0].content.decode()
    state = mentor.as_dict()
    assert state["result"]["lines"][1] == "Students imported: 1"
    assert state["result"]["attention"][0]["reason"] == "Already registered"


async def test_failure_and_reselect_clear(mentor, backend):
    backend.post(IMPORT_PATH, {"detail": "Missing email column"}, status=400)
    mentor.select_file("roster.csv", b"name\nAsha\n")
    assert await mentor.submit() is False
    assert mentor.error == "Missing email column"

    mentor.select_file("other.csv", b"name,email\n")
    assert mentor.error == ""
    assert mentor.result is None


def test_sample_has_header_row():
    filename, content = MentorRegistration.sample()
    rows = list(csv.reader(io.StringIO(content.decode())))
    assert filename == "student-upload-sample.csv"
    assert rows[0] == ["name", "email"]
    assert len(rows) == 3
