"""
Mentor API endpoints

Bulk student registration from a CSV roster.
"""

from typing import Any

from fastapi import APIRouter, File, UploadFile
from fastapi.responses import Response

from interview_console.api.dependencies import get_mentor

router = APIRouter()


@router.get("")
async def mentor_state() -> dict[str, Any]:
    return get_mentor().as_dict()


@router.post("/import")
async def import_students(file: UploadFile | None = File(default=None)) -> dict[str, Any]:
    """Select the uploaded roster and submit it in one step."""
    mentor = get_mentor()
    if file is not None:
        mentor.select_file(file.filename, await file.read())
    await mentor.submit()
    return mentor.as_dict()


@router.get("/sample")
async def download_sample() -> Response:
    filename, content = get_mentor().sample()
    return Response(
        content=content,
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
