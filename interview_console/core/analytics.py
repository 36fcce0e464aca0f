"""
Chart-ready data derived from the admin analytics and insights payloads.

Only the shaping lives here; drawing the charts is left to the client.
"""

import math
from collections import OrderedDict
from datetime import date, datetime
from typing import Any

from interview_console.core.formatting import format_number, format_score


def _number(value: Any) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)) or not math.isfinite(value):
        return 0
    return value


def _list(payload: Any, key: str) -> list[dict[str, Any]]:
    if not isinstance(payload, dict):
        return []
    items = payload.get(key)
    return [item for item in items if isinstance(item, dict)] if isinstance(items, list) else []


def daily_trend_series(analytics: dict[str, Any] | None) -> list[dict[str, Any]]:
    """Sessions and completions per day, labelled like 'Mar 5'."""
    series = []
    for trend in _list(analytics, "daily_trends"):
        raw = trend.get("date")
        try:
            day = raw if isinstance(raw, date) else datetime.fromisoformat(str(raw)).date()
            label = f"{day:%b} {day.day}"
        except ValueError:
            label = str(raw)
        series.append({
            "label": label,
            "sessions": _number(trend.get("sessions")),
            "completed": _number(trend.get("completed")),
        })
    return series


def engagement_cards(insights: dict[str, Any] | None) -> list[dict[str, str]]:
    summary = insights.get("engagement_summary") if isinstance(insights, dict) else None
    if not isinstance(summary, dict):
        return []

    active = _number(summary.get("active_students_30_days"))
    repeat_combos = _number(summary.get("repeat_combos"))
    return [
        {
            "key": "total-students",
            "label": "Total Students",
            "value": format_number(summary.get("total_students")),
            "hint": "Registered overall",
        },
        {
            "key": "active-students",
            "label": "Active (30 days)",
            "value": format_number(summary.get("active_students_30_days")),
            "hint": f"{format_number(max(active - repeat_combos, 0))} unique currently engaged",
        },
        {
            "key": "inactive-students",
            "label": "Inactive (30 days)",
            "value": format_number(summary.get("inactive_students_30_days")),
            "hint": "Need outreach",
        },
        {
            "key": "avg-session",
            "label": "Avg Sessions / Active",
            "value": format_score(summary.get("avg_sessions_per_active")),
            "hint": "Last 30 days",
        },
        {
            "key": "completed-total",
            "label": "Completed Sessions",
            "value": format_number(summary.get("total_completed_sessions")),
            "hint": "All time",
        },
        {
            "key": "repeat-rate",
            "label": "Reattempt Combos",
            "value": format_number(summary.get("repeat_combos")),
            "hint": f"{format_number(summary.get('repeat_attempts'))} total reattempts",
        },
    ]


def program_chart_data(insights: dict[str, Any] | None) -> list[dict[str, Any]]:
    """Program performance with avg_overall nulled out where nothing was completed."""
    data = []
    for program in _list(insights, "program_performance"):
        avg = program.get("avg_overall")
        has_avg = bool(program.get("completed_sessions")) and _number(avg) > 0
        data.append({**program, "avg_overall": avg if has_avg else None})
    return data


def completion_rates(insights: dict[str, Any] | None) -> list[dict[str, Any]]:
    rates = []
    for program in _list(insights, "program_performance"):
        completed = _number(program.get("completed_sessions"))
        total = completed + _number(program.get("remaining_sessions"))
        rate = completed / total * 100 if total > 0 else 0
        rates.append({
            "program_name": program.get("program_name"),
            # Half-up, not banker's rounding
            "completion_rate": math.floor(rate + 0.5),
        })
    return rates


def industry_volume(insights: dict[str, Any] | None) -> list[dict[str, Any]]:
    """Session totals grouped by industry, in first-seen order."""
    grouped: OrderedDict[str, float] = OrderedDict()
    for item in _list(insights, "industry_company_hotspots"):
        industry = item.get("industry") or "Unknown"
        grouped[industry] = grouped.get(industry, 0) + _number(item.get("total_sessions"))
    return [{"industry": industry, "total_sessions": total} for industry, total in grouped.items()]


def company_treemap(insights: dict[str, Any] | None) -> list[dict[str, Any]]:
    return [
        {"name": item.get("company"), "size": _number(item.get("total_sessions"))}
        for item in _list(insights, "industry_company_hotspots")
    ]


def build_analytics(analytics: dict[str, Any] | None, insights: dict[str, Any] | None) -> dict[str, Any]:
    """Everything the overview and analytics tabs chart."""
    return {
        "daily_trends": daily_trend_series(analytics),
        "engagement_cards": engagement_cards(insights),
        "program_chart": program_chart_data(insights),
        "completion_rates": completion_rates(insights),
        "experience_breakdown": _list(insights, "experience_breakdown"),
        "industry_volume": industry_volume(insights),
        "company_treemap": company_treemap(insights),
        "trending_roles": _list(insights, "trending_roles"),
        "reattempt_hotspots": _list(insights, "reattempt_hotspots"),
    }
