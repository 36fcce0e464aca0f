"""
Student login page and the password reset flow.

Reset stages: request (ask for a token by email) → confirm (token + new
password) → done. Opening /login with ?email= or ?token= jumps straight into
the reset flow.
"""

import logging
import re
from enum import Enum
from typing import Any, Mapping

from interview_console.core.api_client import MockInterviewAPI
from interview_console.core.app_shell import AppShell, Route
from interview_console.core.errors import APIError

logger = logging.getLogger(__name__)

EMAIL_PATTERN = re.compile(r"\S+@\S+\.\S+")


class ResetStage(str, Enum):
    REQUEST = "request"
    CONFIRM = "confirm"
    DONE = "done"


def is_valid_email(email: str) -> bool:
    return bool(EMAIL_PATTERN.search(email or ""))


class PasswordReset:
    """State of the reset modal."""

    def __init__(self, api: MockInterviewAPI):
        self.api = api
        self.is_open = False
        self.stage = ResetStage.REQUEST
        self.email = ""
        self.token = ""
        self.new_password = ""
        self.message = ""
        self.loading = False

    def open(self, email: str = "") -> None:
        self.stage = ResetStage.REQUEST
        self.email = email.strip()
        self.token = ""
        self.new_password = ""
        self.message = ""
        self.is_open = True

    def open_from_link(self, email: str | None, token: str | None) -> None:
        self.email = email or ""
        self.token = token or ""
        self.new_password = ""
        self.stage = ResetStage.CONFIRM if token else ResetStage.REQUEST
        self.message = (
            "Enter the token you received and choose a new password."
            if token
            else "Enter your email address to request a reset token."
        )
        self.is_open = True

    def close(self) -> bool:
        if self.loading:
            return False
        self.is_open = False
        return True

    async def request(self) -> bool:
        if not self.email.strip():
            self.message = "Please enter your email to continue."
            return False
        if not is_valid_email(self.email):
            self.message = "Please enter a valid email address."
            return False

        self.loading = True
        self.message = ""
        try:
            await self.api.request_password_reset(self.email.strip())
        except APIError as e:
            logger.error(f"Password reset request failed: {e}")
            self.message = e.message("Failed to generate reset link.")
            return False
        finally:
            self.loading = False

        self.stage = ResetStage.CONFIRM
        self.message = "A reset token has been sent to your email. Enter it below to set a new password."
        return True

    async def confirm(self) -> bool:
        if not self.token.strip():
            self.message = "Please enter the reset token you received."
            return False
        if not self.new_password.strip():
            self.message = "Please enter a new password."
            return False

        self.loading = True
        self.message = ""
        try:
            await self.api.reset_password(self.email.strip(), self.token.strip(), self.new_password)
        except APIError as e:
            logger.error(f"Password reset failed: {e}")
            self.message = e.message("Failed to reset password.")
            return False
        finally:
            self.loading = False

        self.stage = ResetStage.DONE
        self.message = "Password updated successfully. You can now log in with the new password."
        self.token = ""
        self.new_password = ""
        return True

    def as_dict(self) -> dict[str, Any]:
        return {
            "open": self.is_open,
            "stage": self.stage.value,
            "email": self.email,
            "message": self.message,
            "loading": self.loading,
        }


class StudentLoginPage:
    """Email/password login for students."""

    def __init__(self, api: MockInterviewAPI, shell: AppShell):
        self.api = api
        self.shell = shell
        self.error = ""
        self.loading = False
        self.reset = PasswordReset(api)

    def handle_query(self, params: Mapping[str, str]) -> None:
        email, token = params.get("email"), params.get("token")
        if email or token:
            self.reset.open_from_link(email, token)

    def open_reset(self, email: str = "") -> None:
        self.error = ""
        self.reset.open(email)

    async def login(self, email: str, password: str) -> Route | None:
        """Returns the redirect to the dashboard on success."""
        email = email or ""
        if not email.strip():
            self.error = "Please enter your email address."
            return None
        if not is_valid_email(email):
            self.error = "Please enter a valid email address."
            return None
        if not password:
            self.error = "Please enter your password."
            return None

        self.loading = True
        self.error = ""
        try:
            data = await self.api.login_student(email.strip(), password)
        except APIError as e:
            logger.error(f"Student login failed: {e}")
            self.error = e.message("Login failed. Please check your email or register.")
            return None
        finally:
            self.loading = False

        return self.shell.handle_login(data)

    def as_dict(self) -> dict[str, Any]:
        return {"error": self.error, "loading": self.loading, "reset": self.reset.as_dict()}
