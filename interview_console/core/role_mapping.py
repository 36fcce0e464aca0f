"""
Program role mapping overlay.

Maps job roles onto a cohort (university → program → batch) and a
work-experience level. Newly mapped role names are merged straight into the
shared upload options so the question forms can use them without a refetch.
"""

import asyncio
import logging
from typing import Any

from interview_console.core.api_client import MockInterviewAPI
from interview_console.core.cascade import CascadingSelect
from interview_console.core.errors import APIError
from interview_console.core.multiselect import CreatableMultiSelect
from interview_console.core.options_cache import OptionsCache
from interview_console.core.toasts import ToastKind, ToastQueue
from interview_console.models.admin import ProgramRoleMapping

logger = logging.getLogger(__name__)

MAPPING_LEVELS: tuple[str, ...] = (
    "university_name",
    "program_name",
    "batch_label",
    "work_experience",
)

LEVEL_ERRORS: dict[str, str] = {
    "university_name": "Select a university.",
    "program_name": "Select a program.",
    "batch_label": "Select a batch.",
    "work_experience": "Select a work experience level.",
}

UNRESOLVED_COHORT = "Could not find that university, program and batch. Please check your selection."


def resolved_ubp_id(resolved: Any) -> int | str:
    """Pull the cohort id out of a resolve response, bare or wrapped."""
    if isinstance(resolved, dict):
        resolved = resolved.get("ubp_id") or resolved.get("id")
    if isinstance(resolved, bool) or not isinstance(resolved, (int, str)) or resolved == "":
        raise APIError("Cohort could not be resolved", payload={"detail": UNRESOLVED_COHORT})
    return resolved


class ProgramRoleMappingOverlay:
    """Modal flow for mapping roles to a program cohort."""

    def __init__(self, api: MockInterviewAPI, options: OptionsCache, toasts: ToastQueue):
        self.api = api
        self.options = options
        self.toasts = toasts

        self.cascade = CascadingSelect(
            "role-mapping",
            MAPPING_LEVELS,
            loaders={
                "university_name": api.fetch_universities,
                "program_name": api.fetch_ubp_programs,
                "batch_label": api.fetch_ubp_batches,
                # Experience levels do not depend on the cohort
                "work_experience": lambda *_: api.fetch_work_experience_levels(),
            },
            on_change=lambda level, _: self.errors.pop(level, None),
        )
        self.roles = CreatableMultiSelect(
            "Job roles",
            allow_create=True,
            on_change=lambda _: self.errors.pop("job_roles", None),
        )

        self.is_open = False
        self.submitting = False
        self.errors: dict[str, str] = {}
        self.reload_requested = False

    async def open(self) -> None:
        """Show the overlay and load universities and known roles."""
        self.is_open = True
        self._reset()
        self.cascade.load_root()
        await asyncio.gather(self.cascade.wait(), self._load_roles())

    async def _load_roles(self) -> None:
        try:
            roles = await self.api.fetch_admin_job_roles()
        except APIError as e:
            logger.warning(f"Admin job roles unavailable, using cached options: {e}")
            roles = self.options.get("job_roles")
        self.roles.set_options(roles if isinstance(roles, list) else [])

    def close(self) -> None:
        self.is_open = False
        self._reset()

    def _reset(self) -> None:
        self.cascade.reset()
        self.roles.clear()
        self.roles.close()
        self.errors = {}

    def select(self, level: str, value: str | None) -> asyncio.Task | None:
        return self.cascade.select(level, value)

    def validate(self) -> bool:
        errors = {
            level: LEVEL_ERRORS[level]
            for level in MAPPING_LEVELS
            if not self.cascade.values[level]
        }
        if not self.roles.selected:
            errors["job_roles"] = "Select or add at least one job role."
        self.errors = errors
        return not errors

    async def submit(self) -> bool:
        if self.submitting:
            return False
        if not self.validate():
            return False

        values = self.cascade.values
        self.submitting = True
        try:
            resolved = await self.api.resolve_ubp(
                values["university_name"], values["program_name"], values["batch_label"]
            )
            mapping = ProgramRoleMapping(
                ubp_id=resolved_ubp_id(resolved),
                university_name=values["university_name"],
                program_name=values["program_name"],
                batch_label=values["batch_label"],
                work_experience=values["work_experience"],
                job_roles=list(self.roles.selected),
            )
            await self.api.map_program_roles(mapping.model_dump(exclude_none=True))
        except APIError as e:
            logger.error(f"Role mapping failed: {e}")
            self.toasts.add(e.message("Failed to map roles. Please try again."), ToastKind.ERROR)
            return False
        finally:
            self.submitting = False

        self.options.merge_job_roles(mapping.job_roles)
        self.toasts.add(
            f"Mapped {len(mapping.job_roles)} role(s) to {mapping.program_name} ({mapping.batch_label}).",
            ToastKind.SUCCESS,
        )
        self.close()
        self.reload_requested = True
        return True

    def as_dict(self) -> dict:
        return {
            "open": self.is_open,
            "levels": self.cascade.as_dict(),
            "roles": self.roles.as_dict(),
            "errors": dict(self.errors),
            "submitting": self.submitting,
        }
