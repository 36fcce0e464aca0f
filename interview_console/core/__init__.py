"""
Core presentation logic for Interview Console

Contains:
- API Client: async client for the remote mock-interview API
- Session Context and App Shell: who is signed in, and routing
- Fetcher, Filters, Cascade, Pager: the shared list-view machinery
- Multi-select: creatable multi-select with an exclusive sentinel option
- Pages: student login, dashboard, interview, mentor registration, admin console
"""

from interview_console.core.api_client import MockInterviewAPI
from interview_console.core.session_context import SessionContext
from interview_console.core.app_shell import AppShell
from interview_console.core.fetcher import LatestOnlyFetcher
from interview_console.core.multiselect import CreatableMultiSelect, SingleSelectDropdown
from interview_console.core.admin_console import AdminConsole
from interview_console.core.dashboard import StudentDashboard
from interview_console.core.interview_flow import InterviewSession
from interview_console.core.mentor import MentorRegistration
from interview_console.core.student_login import StudentLoginPage

__all__ = [
    "MockInterviewAPI",
    "SessionContext",
    "AppShell",
    "LatestOnlyFetcher",
    "CreatableMultiSelect",
    "SingleSelectDropdown",
    "AdminConsole",
    "StudentDashboard",
    "InterviewSession",
    "MentorRegistration",
    "StudentLoginPage",
]
