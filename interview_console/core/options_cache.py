"""
Shared category options for the question upload forms.

Loaded once from the bulk-upload-options endpoint. The role mapping overlay
patches new role names straight into it instead of refetching.
"""

import logging
from typing import Iterable

from interview_console.core.api_client import MockInterviewAPI
from interview_console.core.errors import APIError
from interview_console.models.question import BulkUploadOptions

logger = logging.getLogger(__name__)


class OptionsCache:
    """Category option lists shared across admin forms."""

    def __init__(self, api: MockInterviewAPI):
        self.api = api
        self.options = BulkUploadOptions()
        self.loaded = False

    async def load(self, force: bool = False) -> BulkUploadOptions:
        """Fetch options unless already loaded. Failures leave empty lists."""
        if self.loaded and not force:
            return self.options
        try:
            payload = await self.api.fetch_bulk_upload_options()
        except APIError as e:
            logger.warning(f"Bulk upload options unavailable: {e}")
            return self.options
        self.options = BulkUploadOptions.model_validate(payload or {})
        self.loaded = True
        return self.options

    def get(self, field: str) -> list[str]:
        return list(getattr(self.options, field))

    def merge_job_roles(self, names: Iterable[str]) -> list[str]:
        """
        Add role names not yet known (case-insensitive), keeping order.

        Returns:
            The names actually added
        """
        known = {role.casefold() for role in self.options.job_roles}
        added: list[str] = []
        for name in names:
            cleaned = name.strip()
            if cleaned and cleaned.casefold() not in known:
                known.add(cleaned.casefold())
                added.append(cleaned)
        if added:
            self.options.job_roles = [*self.options.job_roles, *added]
            logger.info(f"Added {len(added)} mapped role(s) to upload options")
        return added
