"""
Pagination controls.

Page counts always come from the API; the pager only decides which page to
ask for next and which controls are enabled.
"""

from interview_console.models.common import Pagination


class Pager:
    """Previous/next state for one list view."""

    def __init__(self, page_size: int):
        self.page_size = page_size
        self.page = 1
        self.pagination = Pagination(page=1, pages=1, limit=page_size, total=0)

    def update(self, pagination: Pagination | None) -> None:
        """Take the pagination block from the latest response."""
        if pagination is None:
            self.pagination = Pagination(page=self.page, pages=1, limit=self.page_size, total=0)
            return
        self.pagination = pagination
        self.page = pagination.page

    @property
    def pages(self) -> int:
        return max(self.pagination.pages, 1)

    @property
    def can_previous(self) -> bool:
        return self.page > 1

    @property
    def can_next(self) -> bool:
        return self.page < self.pages

    def go_to(self, page: int) -> bool:
        """Move to ``page`` clamped to the known range. Returns True if it moved."""
        target = min(max(page, 1), self.pages)
        if target == self.page:
            return False
        self.page = target
        return True

    def previous(self) -> bool:
        return self.go_to(self.page - 1)

    def next(self) -> bool:
        return self.go_to(self.page + 1)

    def reset(self) -> bool:
        return self.go_to(1)

    @property
    def label(self) -> str:
        return f"Page {self.page} of {self.pages}"

    def as_dict(self) -> dict:
        return {
            "page": self.page,
            "pages": self.pages,
            "total": self.pagination.total,
            "label": self.label,
            "previous_disabled": not self.can_previous,
            "next_disabled": not self.can_next,
        }
