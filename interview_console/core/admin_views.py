"""
Admin list views: Students, Sessions and Leaderboard.

Each view follows the same flow:

    edit inputs ──Apply/Clear (or typing in a text field)──► applied filters
    applied filters / page change ──► debounced latest-only fetch ──► rows + pagination

Dependent cohort dropdowns (university → program → batch) load their options
as ancestors change and reset below any change.
"""

import asyncio
import logging
from typing import Any, Generic, TypeVar

from pydantic import BaseModel

from interview_console.config.settings import Settings, get_settings
from interview_console.core.api_client import MockInterviewAPI
from interview_console.core.cascade import CascadingSelect
from interview_console.core.errors import APIError
from interview_console.core.fetcher import LatestOnlyFetcher, delay_for
from interview_console.core.filters import FilterState
from interview_console.core.formatting import format_ist_datetime, format_score_display, format_status, score_class
from interview_console.core.pagination import Pager
from interview_console.models.admin import LeaderboardEntry, LeaderboardPage
from interview_console.models.common import Pagination
from interview_console.models.session import InterviewSessionRecord, SessionPage
from interview_console.models.student import Student, StudentPage

logger = logging.getLogger(__name__)

RowT = TypeVar("RowT", bound=BaseModel)

UBP_LEVELS: tuple[str, ...] = ("university_name", "program_name", "batch_label")


def parse_leaderboard(payload: Any) -> tuple[list[LeaderboardEntry], Pagination | None]:
    """The leaderboard comes back either as a bare list or as a paginated object."""
    if isinstance(payload, list):
        return [LeaderboardEntry.model_validate(item) for item in payload], None
    payload = dict(payload or {})
    if "entries" not in payload and "leaderboard" in payload:
        payload["entries"] = payload.pop("leaderboard")
    page = LeaderboardPage.model_validate(payload)
    return page.entries, page.pagination if "pagination" in payload else None


class ListView(Generic[RowT]):
    """Filter, paginate and fetch one admin listing."""

    name = "list"
    fallback_error = "Unable to load data. Please try again."

    def __init__(
        self,
        api: MockInterviewAPI,
        filters: FilterState,
        page_size: int,
        settings: Settings | None = None,
    ):
        self.api = api
        self.settings = settings or get_settings()
        self.filters = filters
        self.pager = Pager(page_size)

        self.rows: list[RowT] = []
        self.loading = False
        self.error = ""

        self.fetcher: LatestOnlyFetcher[Any] = LatestOnlyFetcher(
            self.name,
            on_result=self._apply_result,
            on_error=self._apply_error,
            on_loading=self._set_loading,
        )

    # =========================================================================
    # FETCHING
    # =========================================================================

    def filter_params(self) -> dict[str, Any]:
        return self.filters.to_params()

    def request_params(self) -> dict[str, Any]:
        return {
            "page": self.pager.page,
            "limit": self.pager.page_size,
            **self.filter_params(),
        }

    async def _load(self, params: dict[str, Any]) -> Any:
        raise NotImplementedError

    def _parse(self, payload: Any) -> tuple[list[RowT], Pagination | None]:
        raise NotImplementedError

    def refresh(self) -> asyncio.Task:
        """Fetch with the applied filters and current page."""
        params = self.request_params()
        key = tuple(sorted(params.items()))
        delay = delay_for(self.filters.applied, self.settings.filter_debounce_seconds)
        return self.fetcher.trigger(lambda: self._load(params), key=key, delay=delay)

    def _apply_result(self, payload: Any) -> None:
        self.rows, pagination = self._parse(payload)
        self.pager.update(pagination)
        self.error = ""

    def _apply_error(self, error: Exception) -> None:
        logger.error(f"Failed to load {self.name}: {error}")
        if isinstance(error, APIError):
            self.error = error.message(self.fallback_error)
        else:
            self.error = self.fallback_error

    def _set_loading(self, loading: bool) -> None:
        self.loading = loading

    async def wait(self) -> None:
        await self.fetcher.wait()

    def close(self) -> None:
        self.fetcher.close()

    # =========================================================================
    # FILTER & PAGE ACTIONS
    # =========================================================================

    def set_filter(self, name: str, value: str | None) -> asyncio.Task | None:
        """Edit a filter input. Text fields refetch (debounced) straight away."""
        if self.filters.set_input(name, value):
            self.pager.page = 1
            return self.refresh()
        return None

    def apply_filters(self) -> asyncio.Task | None:
        if not self.filters.apply():
            return None
        self.pager.page = 1
        return self.refresh()

    def clear_filters(self) -> asyncio.Task | None:
        changed = self.filters.clear()
        moved = self.pager.reset()
        if changed or moved:
            return self.refresh()
        return None

    def next_page(self) -> asyncio.Task | None:
        return self.refresh() if self.pager.next() else None

    def previous_page(self) -> asyncio.Task | None:
        return self.refresh() if self.pager.previous() else None

    def go_to_page(self, page: int) -> asyncio.Task | None:
        return self.refresh() if self.pager.go_to(page) else None

    def row_dict(self, row: RowT) -> dict[str, Any]:
        return row.model_dump(mode="json")

    def as_dict(self) -> dict[str, Any]:
        return {
            "rows": [self.row_dict(row) for row in self.rows],
            "loading": self.loading,
            "error": self.error,
            "filters": {
                "inputs": dict(self.filters.inputs),
                "applied": dict(self.filters.applied),
                "can_clear": self.filters.is_active,
                "can_apply": self.filters.has_pending_changes,
            },
            "pagination": self.pager.as_dict(),
        }


class _CohortFilteredView(ListView[RowT]):
    """A list view whose filters include the UBP cohort dropdowns."""

    def __init__(self, *args: Any, cascade: CascadingSelect, **kwargs: Any):
        super().__init__(*args, **kwargs)
        self.cascade = cascade

    def set_filter(self, name: str, value: str | None) -> asyncio.Task | None:
        if name in self.cascade.levels:
            self.cascade.select(name, value)
            for descendant in self.cascade.descendants(name):
                self.filters.set_input(descendant, "")
        return super().set_filter(name, value)

    def clear_filters(self) -> asyncio.Task | None:
        self.cascade.reset()
        return super().clear_filters()

    def load_options(self) -> asyncio.Task | None:
        return self.cascade.load_root()

    async def wait(self) -> None:
        await asyncio.gather(super().wait(), self.cascade.wait())

    def close(self) -> None:
        super().close()
        self.cascade.close()

    def as_dict(self) -> dict[str, Any]:
        data = super().as_dict()
        data["options"] = {level: list(self.cascade.options[level]) for level in self.cascade.levels}
        return data


def _ubp_cascade(name: str, api: MockInterviewAPI, universities_loader: Any = None) -> CascadingSelect:
    return CascadingSelect(
        name,
        UBP_LEVELS,
        loaders={
            "university_name": universities_loader or api.fetch_universities,
            "program_name": api.fetch_ubp_programs,
            "batch_label": api.fetch_ubp_batches,
        },
    )


class StudentsView(_CohortFilteredView[Student]):
    """Recent student progress."""

    name = "students"
    fallback_error = "Unable to load student data. Please try again."
    STATUS_OPTIONS = ("Completed", "No Sessions")

    def __init__(self, api: MockInterviewAPI, settings: Settings | None = None):
        settings = settings or get_settings()
        super().__init__(
            api,
            FilterState(("name", "status", *UBP_LEVELS), text_fields=("name",)),
            settings.students_page_size,
            settings,
            cascade=_ubp_cascade("students-ubp", api),
        )

    async def _load(self, params: dict[str, Any]) -> Any:
        return await self.api.fetch_students(params)

    def _parse(self, payload: Any) -> tuple[list[Student], Pagination | None]:
        page = StudentPage.model_validate(payload or {})
        return page.students, page.pagination if isinstance(payload, dict) and "pagination" in payload else None

    def row_dict(self, row: Student) -> dict[str, Any]:
        return {
            **super().row_dict(row),
            "avg_score_display": format_score_display(row.avg_score),
            "score_class": score_class(row.avg_score),
            "last_session_display": format_ist_datetime(row.last_session_at),
        }


class SessionsView(ListView[InterviewSessionRecord]):
    """Recent interview sessions."""

    name = "sessions"
    fallback_error = "Unable to load session data. Please try again."

    PARAM_NAMES = {"student": "student_name", "role": "job_role", "company": "company_name"}

    def __init__(self, api: MockInterviewAPI, settings: Settings | None = None):
        settings = settings or get_settings()
        super().__init__(
            api,
            FilterState(
                ("role", "student", "company", "min_score", "max_score"),
                text_fields=("role", "student", "company"),
            ),
            settings.sessions_page_size,
            settings,
        )

    @staticmethod
    def _score(value: str) -> float | None:
        try:
            return float(value)
        except (TypeError, ValueError):
            return None

    def filter_params(self) -> dict[str, Any]:
        applied = self.filters.applied
        params = {
            api_name: applied[name]
            for name, api_name in self.PARAM_NAMES.items()
            if applied[name]
        }
        for bound in ("min_score", "max_score"):
            score = self._score(applied[bound])
            if score is not None:
                params[bound] = score
        return params

    async def _load(self, params: dict[str, Any]) -> Any:
        return await self.api.fetch_sessions(params)

    def _parse(self, payload: Any) -> tuple[list[InterviewSessionRecord], Pagination | None]:
        page = SessionPage.model_validate(payload or {})
        return page.sessions, page.pagination if isinstance(payload, dict) and "pagination" in payload else None

    def row_dict(self, row: InterviewSessionRecord) -> dict[str, Any]:
        return {
            **super().row_dict(row),
            "status_display": format_status(row.status),
            "score_display": format_score_display(row.overall_score),
            "score_class": score_class(row.overall_score),
            "started_display": format_ist_datetime(row.started_at),
        }


class LeaderboardView(_CohortFilteredView[LeaderboardEntry]):
    """Top performers by average score, filterable by cohort and role."""

    name = "leaderboard"
    fallback_error = "Unable to load the leaderboard. Please try again."

    def __init__(self, api: MockInterviewAPI, settings: Settings | None = None):
        settings = settings or get_settings()
        super().__init__(
            api,
            FilterState((*UBP_LEVELS, "job_role")),
            settings.leaderboard_page_size,
            settings,
            cascade=_ubp_cascade("leaderboard-ubp", api, universities_loader=self._load_universities),
        )
        self.role_options: list[str] = []
        self.role_fetcher: LatestOnlyFetcher[Any] = LatestOnlyFetcher(
            "leaderboard-roles",
            on_result=self._set_role_options,
            on_error=self._role_options_failed,
        )

    async def _load_universities(self) -> list[str]:
        payload = await self.api.fetch_leaderboard_filters()
        universities = payload.get("universities") if isinstance(payload, dict) else payload
        return universities if isinstance(universities, list) else []

    def _set_role_options(self, payload: Any) -> None:
        self.role_options = [str(role) for role in payload or [] if role]
        applied = self.filters.applied["job_role"]
        if applied and applied not in self.role_options:
            # The list was loaded for a role the cohort no longer offers
            self.filters.drop("job_role")
            self.pager.page = 1
            self.refresh()
        elif self.filters.inputs["job_role"] not in ("", *self.role_options):
            self.filters.set_input("job_role", "")

    def _role_options_failed(self, error: Exception) -> None:
        logger.warning(f"Leaderboard role options unavailable: {error}")
        self.role_options = []

    def load_role_options(self) -> asyncio.Task:
        params = {level: self.cascade.values[level] for level in UBP_LEVELS if self.cascade.values[level]}
        return self.role_fetcher.trigger(
            lambda: self.api.fetch_role_filter_options(params),
            key=tuple(sorted(params.items())),
        )

    def load_options(self) -> asyncio.Task | None:
        self.load_role_options()
        return super().load_options()

    def set_filter(self, name: str, value: str | None) -> asyncio.Task | None:
        task = super().set_filter(name, value)
        if name in UBP_LEVELS:
            self.load_role_options()
        return task

    def clear_filters(self) -> asyncio.Task | None:
        task = super().clear_filters()
        self.load_role_options()
        return task

    async def _load(self, params: dict[str, Any]) -> Any:
        return await self.api.fetch_leaderboard(params)

    def _parse(self, payload: Any) -> tuple[list[LeaderboardEntry], Pagination | None]:
        return parse_leaderboard(payload)

    def row_dict(self, row: LeaderboardEntry) -> dict[str, Any]:
        return {
            **super().row_dict(row),
            "score_display": format_score_display(row.avg_score),
            "score_class": score_class(row.avg_score),
        }

    async def wait(self) -> None:
        # Role options can drop the applied role and refetch the list
        await self.role_fetcher.wait()
        await super().wait()

    def close(self) -> None:
        super().close()
        self.role_fetcher.close()

    def as_dict(self) -> dict[str, Any]:
        data = super().as_dict()
        data["options"]["job_role"] = list(self.role_options)
        return data
