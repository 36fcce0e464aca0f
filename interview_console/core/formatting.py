"""
Display formatting shared by the student and admin pages.
"""

import logging
import math
from datetime import datetime
from typing import Any
from zoneinfo import ZoneInfo

logger = logging.getLogger(__name__)

IST = ZoneInfo("Asia/Kolkata")


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool) and math.isfinite(value)


def _group_indian(digits: str) -> str:
    """1234567 -> 12,34,567"""
    if len(digits) <= 3:
        return digits
    head, tail = digits[:-3], digits[-3:]
    groups = []
    while len(head) > 2:
        groups.insert(0, head[-2:])
        head = head[:-2]
    if head:
        groups.insert(0, head)
    return ",".join(groups + [tail])


def format_number(value: Any) -> str:
    """Counts in en-IN grouping; '--' for anything that is not a number."""
    if not _is_number(value):
        return "--"
    sign = "-" if value < 0 else ""
    whole, _, fraction = f"{abs(value):.3f}".partition(".")
    fraction = fraction.rstrip("0")
    grouped = _group_indian(whole)
    return f"{sign}{grouped}.{fraction}" if fraction else f"{sign}{grouped}"


def format_score(value: Any) -> str:
    """Scores with two decimals; an em dash when missing."""
    return f"{value:.2f}" if _is_number(value) else "—"


def format_score_display(value: Any, decimals: int = 2, empty_label: str = "N/A") -> str:
    """Like format_score, but whole numbers drop their decimals."""
    try:
        numeric = float(value)
    except (TypeError, ValueError):
        return empty_label
    if not math.isfinite(numeric):
        return empty_label
    rounded = round(numeric, decimals)
    if rounded.is_integer():
        return str(int(rounded))
    return f"{rounded:.{decimals}f}"


def ordinal(value: Any) -> str:
    """1 -> 1st, 2 -> 2nd, 11 -> 11th"""
    try:
        number = int(value)
    except (TypeError, ValueError):
        return f"{value}"
    remainder = number % 100
    if 11 <= remainder <= 13:
        return f"{number}th"
    suffix = {1: "st", 2: "nd", 3: "rd"}.get(number % 10, "th")
    return f"{number}{suffix}"


def score_class(score: Any) -> str | None:
    """Bucket a 0-5 score: good above 3.5, low at 2 or under, otherwise average."""
    try:
        numeric = float(score)
    except (TypeError, ValueError):
        return None
    if math.isnan(numeric):
        return None
    if numeric > 3.5:
        return "good"
    if numeric <= 2:
        return "low"
    return "average"


def format_status(status: str | None) -> str:
    if not status:
        return "N/A"
    lower = status.lower()
    return lower[:1].upper() + lower[1:]


def format_ist_datetime(value: datetime | str | None) -> str:
    """Render a timestamp in India Standard Time, e.g. 05/03/2025, 02:15:09 pm."""
    if not value:
        return "N/A"
    try:
        moment = value if isinstance(value, datetime) else datetime.fromisoformat(str(value))
    except ValueError:
        logger.warning(f"Unparseable timestamp: {value!r}")
        return str(value)
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=ZoneInfo("UTC"))
    return moment.astimezone(IST).strftime("%d/%m/%Y, %I:%M:%S %p").lower()
