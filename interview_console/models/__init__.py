"""
Data models and schemas for Interview Console

Contains Pydantic mirrors of the remote API payloads for:
- Students and their sessions
- Question bank uploads
- Admin dashboard, leaderboard and imports
"""

from interview_console.models.common import APIModel, Pagination
from interview_console.models.student import (
    Student,
    StudentPage,
    StudentSessionInfo,
    ProgramInfo,
)
from interview_console.models.session import (
    InterviewSessionRecord,
    SessionPage,
    FeedbackState,
    FeedbackStatus,
    SessionRating,
    InterviewLaunch,
)
from interview_console.models.question import (
    Question,
    BulkUploadOptions,
    BulkUploadSummary,
    QUESTION_CSV_COLUMNS,
    CATEGORY_FIELDS,
)
from interview_console.models.admin import (
    AdminProfile,
    AdminLoginResult,
    DashboardStats,
    LeaderboardEntry,
    LeaderboardPage,
    ImportRowError,
    StudentImportSummary,
    ProgramRoleMapping,
)

__all__ = [
    # Common
    "APIModel",
    "Pagination",
    # Student
    "Student",
    "StudentPage",
    "StudentSessionInfo",
    "ProgramInfo",
    # Session
    "InterviewSessionRecord",
    "SessionPage",
    "FeedbackState",
    "FeedbackStatus",
    "SessionRating",
    "InterviewLaunch",
    # Question
    "Question",
    "BulkUploadOptions",
    "BulkUploadSummary",
    "QUESTION_CSV_COLUMNS",
    "CATEGORY_FIELDS",
    # Admin
    "AdminProfile",
    "AdminLoginResult",
    "DashboardStats",
    "LeaderboardEntry",
    "LeaderboardPage",
    "ImportRowError",
    "StudentImportSummary",
    "ProgramRoleMapping",
]
