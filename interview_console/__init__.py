"""
Interview Console - Mock Interview Platform Front-End

The student, mentor and admin pages of the mock interview platform, served
as a thin presentation tier over the remote interview API.
"""

__version__ = "0.1.0"
__author__ = "Interview Console Team"
