"""
Session context for Interview Console

Process-wide holder of who is signed in:
- the student session object, kept in durable storage (a JSON file that
  survives restarts, like browser local storage)
- the admin bearer token and active admin tab, kept in session-scoped
  storage (memory that ends with the process, like browser session storage)

The context is loaded once at startup, changed only through the login and
logout actions below, and torn down on shutdown.
"""

import json
import logging
from pathlib import Path
from typing import Any, Callable

from pydantic import ValidationError

from interview_console.models.admin import AdminProfile
from interview_console.models.student import StudentSessionInfo

logger = logging.getLogger(__name__)

STUDENT_KEY = "student"
ADMIN_TOKEN_KEY = "adminToken"
ADMIN_TAB_KEY = "adminActiveTab"


class SessionContextError(Exception):
    """Raised when the context is used before load() or after close()."""
    pass


class SessionContext:
    """Signed-in student/admin state shared by every page."""

    def __init__(
        self,
        storage_path: str | Path,
        on_admin_token: Callable[[str | None], None] | None = None,
    ):
        """
        Args:
            storage_path: JSON file backing durable storage
            on_admin_token: Called whenever the admin token changes
        """
        self.storage_path = Path(storage_path)
        self._on_admin_token = on_admin_token
        self._durable: dict[str, Any] = {}
        self._session: dict[str, Any] = {}
        self._loaded = False

        self.student: StudentSessionInfo | None = None
        self.admin_profile: AdminProfile | None = None

    # =========================================================================
    # LIFECYCLE
    # =========================================================================

    def load(self) -> None:
        """Read durable storage once. Corrupt content is discarded."""
        self._durable = self._read_durable()
        raw_student = self._durable.get(STUDENT_KEY)

        if raw_student is not None:
            try:
                self.student = StudentSessionInfo.model_validate(raw_student)
            except ValidationError as e:
                logger.warning(f"Discarding stored student session: {e}")
                self._durable.pop(STUDENT_KEY, None)
                self._write_durable()

        self._loaded = True
        logger.info(
            f"Session context loaded ({'student signed in' if self.student else 'no student'})"
        )

    def close(self) -> None:
        """Tear down session-scoped state. Durable storage is left intact."""
        self._session.clear()
        self.admin_profile = None
        self._notify_admin_token(None)
        self._loaded = False

    @property
    def is_loaded(self) -> bool:
        return self._loaded

    def _require_loaded(self) -> None:
        if not self._loaded:
            raise SessionContextError("Session context has not been loaded")

    # =========================================================================
    # STUDENT
    # =========================================================================

    def login_student(self, student: StudentSessionInfo | dict[str, Any]) -> StudentSessionInfo:
        self._require_loaded()
        info = (
            student if isinstance(student, StudentSessionInfo)
            else StudentSessionInfo.model_validate(student)
        )
        self.student = info
        self._durable[STUDENT_KEY] = info.model_dump(mode="json", exclude_none=True)
        self._write_durable()
        logger.info(f"Student signed in: {info.email}")
        return info

    def logout_student(self) -> None:
        self._require_loaded()
        if self.student is not None:
            logger.info(f"Student signed out: {self.student.email}")
        self.student = None
        self._durable.pop(STUDENT_KEY, None)
        self._write_durable()

    # =========================================================================
    # ADMIN
    # =========================================================================

    @property
    def admin_token(self) -> str | None:
        return self._session.get(ADMIN_TOKEN_KEY)

    @property
    def admin_tab(self) -> str | None:
        return self._session.get(ADMIN_TAB_KEY)

    def login_admin(self, token: str, profile: AdminProfile | None = None) -> None:
        self._require_loaded()
        if not token:
            raise ValueError("Admin token is required")
        self._session[ADMIN_TOKEN_KEY] = token
        self.admin_profile = profile
        self._notify_admin_token(token)
        logger.info(f"Admin signed in: {profile.email if profile else 'unknown'}")

    def set_admin_profile(self, profile: AdminProfile | None) -> None:
        self._require_loaded()
        self.admin_profile = profile

    def logout_admin(self) -> None:
        self._require_loaded()
        self._session.pop(ADMIN_TOKEN_KEY, None)
        self._session.pop(ADMIN_TAB_KEY, None)
        self.admin_profile = None
        self._notify_admin_token(None)
        logger.info("Admin signed out")

    def set_admin_tab(self, tab: str) -> None:
        self._require_loaded()
        self._session[ADMIN_TAB_KEY] = tab

    def _notify_admin_token(self, token: str | None) -> None:
        if self._on_admin_token is not None:
            self._on_admin_token(token)

    # =========================================================================
    # DURABLE STORAGE
    # =========================================================================

    def _read_durable(self) -> dict[str, Any]:
        if not self.storage_path.exists():
            return {}
        try:
            data = json.loads(self.storage_path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            logger.warning(f"Ignoring unreadable storage file {self.storage_path}: {e}")
            return {}
        return data if isinstance(data, dict) else {}

    def _write_durable(self) -> None:
        self.storage_path.parent.mkdir(parents=True, exist_ok=True)
        self.storage_path.write_text(json.dumps(self._durable, indent=2), encoding="utf-8")
