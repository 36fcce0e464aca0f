"""
Tests for chart data shaping
"""
from interview_console.core.analytics import (
    build_analytics,
    company_treemap,
    completion_rates,
    daily_trend_series,
    engagement_cards,
    industry_volume,
    program_chart_data,
)

INSIGHTS = {
    "engagement_summary": {
        "total_students": 1200,
        "active_students_30_days": 300,
        "inactive_students_30_days": 900,
        "avg_sessions_per_active": 2.5,
        "total_completed_sessions": 4500,
        "repeat_combos": 40,
        "repeat_attempts": 95,
    },
    "program_performance": [
        {"program_name": "CS", "completed_sessions": 1, "remaining_sessions": 7, "avg_overall": 3.2},
        {"program_name": "MBA", "completed_sessions": 0, "remaining_sessions": 0, "avg_overall": 4.1},
    ],
    "industry_company_hotspots": [
        {"industry": "Finance", "company": "Acme", "total_sessions": 10},
        {"industry": None, "company": "Globex", "total_sessions": 4},
        {"industry": "Finance", "company": "Initech", "total_sessions": 5},
    ],
}


def test_daily_trend_labels():
    series = daily_trend_series({"daily_trends": [{"date": "2025-03-05", "sessions": 4, "completed": 2}]})
    assert series == [{"label": "Mar 5", "sessions": 4, "completed": 2}]


def test_engagement_cards():
    cards = {card["key"]: card for card in engagement_cards(INSIGHTS)}
    assert len(cards) == 6
    assert cards["total-students"]["value"] == "1,200"
    assert cards["active-students"]["hint"] == "260 unique currently engaged"
    assert cards["avg-session"]["value"] == "2.50"
    assert cards["repeat-rate"]["hint"] == "95 total reattempts"
    assert engagement_cards(None) == []


def test_program_average_hidden_without_completions():
    data = program_chart_data(INSIGHTS)
    assert data[0]["avg_overall"] == 3.2
    assert data[1]["avg_overall"] is None


def test_completion_rate_rounds_half_up():
    assert completion_rates(INSIGHTS) == [
        {"program_name": "CS", "completion_rate": 13},
        {"program_name": "MBA", "completion_rate": 0},
    ]


def test_industry_volume_groups_unknown():
    assert industry_volume(INSIGHTS) == [
        {"industry": "Finance", "total_sessions": 15},
        {"industry": "Unknown", "total_sessions": 4},
    ]
    assert company_treemap(INSIGHTS)[1] == {"name": "Globex", "size": 4}


def test_build_analytics_tolerates_missing_payloads():
    charts = build_analytics(None, None)
    assert all(value == [] for value in charts.values())
