"""
Shared response models for Interview Console.

The remote API owns every entity; these models only mirror its payloads.
"""

from pydantic import BaseModel, ConfigDict, Field


class APIModel(BaseModel):
    """Base for API payload mirrors. Unknown fields are kept, not rejected."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)


class Pagination(APIModel):
    """Pagination block supplied by list endpoints."""

    page: int = Field(default=1, ge=1)
    pages: int = Field(default=1, ge=0)
    limit: int = Field(default=10, ge=1)
    total: int = Field(default=0, ge=0)

    @property
    def has_previous(self) -> bool:
        return self.page > 1

    @property
    def has_next(self) -> bool:
        return self.page < self.pages
