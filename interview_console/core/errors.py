"""
Error handling for remote API calls.

Every failed call surfaces as an APIError. The only thing the presentation
tier does with it is turn the payload's ``detail`` into a message.
"""

from typing import Any


def extract_error_detail(payload: Any, fallback: str) -> str:
    """
    Unwrap an API error payload into a user-displayable message.

    ``detail`` may be a string, a list of objects carrying ``msg``
    (validation errors), or a single object carrying ``msg``.
    Anything else yields ``fallback``.
    """
    if not isinstance(payload, dict):
        return fallback

    detail = payload.get("detail")

    if isinstance(detail, str) and detail.strip():
        return detail

    if isinstance(detail, list):
        messages = [
            str(item["msg"])
            for item in detail
            if isinstance(item, dict) and item.get("msg")
        ]
        if messages:
            return "; ".join(messages)

    if isinstance(detail, dict) and detail.get("msg"):
        return str(detail["msg"])

    return fallback


class APIError(Exception):
    """Raised when the remote API answers with an error or is unreachable."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        payload: Any = None,
    ):
        super().__init__(message)
        self.status_code = status_code
        self.payload = payload

    def message(self, fallback: str) -> str:
        """Displayable message for this failure, with a per-call-site fallback."""
        return extract_error_detail(self.payload, fallback)
