"""
API endpoint modules for Interview Console
"""

from interview_console.api.endpoints import admin, mentor, shell, student

__all__ = ["admin", "mentor", "shell", "student"]
