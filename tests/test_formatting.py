"""
Tests for display formatting
"""
from datetime import datetime, timezone

import pytest

from interview_console.core.formatting import (
    format_ist_datetime,
    format_number,
    format_score,
    format_score_display,
    format_status,
    ordinal,
    score_class,
)


@pytest.mark.parametrize(
    "value,expected",
    [(0, "0"), (999, "999"), (1234, "1,234"), (1234567, "12,34,567"), (1234.5, "1,234.5"), (None, "--"), (True, "--")],
)
def test_format_number(value, expected):
    assert format_number(value) == expected


def test_scores():
    assert format_score(3.456) == "3.46"
    assert format_score(None) == "—"
    assert format_score_display(4.0) == "4"
    assert format_score_display("3.25") == "3.25"
    assert format_score_display("n/a") == "N/A"


@pytest.mark.parametrize("value,expected", [(1, "1st"), (2, "2nd"), (3, "3rd"), (11, "11th"), (22, "22nd"), (113, "113th")])
def test_ordinal(value, expected):
    assert ordinal(value) == expected


def test_score_class_buckets():
    assert score_class(4) == "good"
    assert score_class(3.5) == "average"
    assert score_class(2) == "low"
    assert score_class("abc") is None


def test_status_and_timestamps():
    assert format_status("IN_PROGRESS") == "In_progress"
    assert format_status(None) == "N/A"
    assert format_ist_datetime(datetime(2025, 3, 5, 8, 45, 9, tzinfo=timezone.utc)) == "05/03/2025, 02:15:09 pm"
    assert format_ist_datetime("2025-03-05T08:45:09") == "05/03/2025, 02:15:09 pm"
    assert format_ist_datetime(None) == "N/A"
