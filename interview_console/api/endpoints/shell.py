"""
Shell API endpoints

Cross-page state: toast notifications and path resolution.
"""

from typing import Any

from fastapi import APIRouter

from interview_console.api.dependencies import get_shell, get_toasts

router = APIRouter()


@router.get("/toasts")
async def list_toasts() -> list[dict[str, Any]]:
    return get_toasts().as_list()


@router.delete("/toasts/{toast_id}")
async def dismiss_toast(toast_id: int) -> list[dict[str, Any]]:
    toasts = get_toasts()
    toasts.dismiss(toast_id)
    return toasts.as_list()


@router.get("/route")
async def resolve_route(path: str = "/") -> dict[str, Any]:
    route = get_shell().resolve(path)
    return {"page": route.page, "redirect": route.redirect}
