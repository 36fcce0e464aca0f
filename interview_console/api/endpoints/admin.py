"""
Admin API endpoints

Handles the admin console:
- Login, logout and tab navigation
- Students, sessions and leaderboard listings
- Question bank uploads and program role mapping
- Session reports
"""

from typing import Any

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile
from fastapi.responses import Response
from pydantic import BaseModel

from interview_console.api.dependencies import get_admin_console, require_admin
from interview_console.core.admin_console import AdminConsole
from interview_console.core.admin_views import ListView
from interview_console.core.csv_samples import question_sample_csv
from interview_console.core.forms import CategoryForm
from interview_console.core.multiselect import CreatableMultiSelect

router = APIRouter()


# ============================================================================
# REQUEST MODELS
# ============================================================================

class AdminLoginRequest(BaseModel):
    """Admin credentials."""
    email: str = ""
    password: str = ""


class FilterRequest(BaseModel):
    """Edit one filter input."""
    name: str
    value: str | None = None


class PageRequest(BaseModel):
    """Move to a page: either a direction or an explicit page number."""
    direction: str | None = None
    page: int | None = None


class FieldRequest(BaseModel):
    """Set a text field on the single-question form."""
    name: str
    value: str = ""


class SelectAction(BaseModel):
    """An interaction with a multi-select."""
    action: str
    value: str = ""


class LevelRequest(BaseModel):
    """Pick a value at one role-mapping level."""
    level: str
    value: str | None = None


def _view(admin: AdminConsole, name: str) -> ListView:
    views = {"students": admin.students, "sessions": admin.sessions, "leaderboard": admin.leaderboard}
    if name not in views:
        raise HTTPException(status_code=404, detail=f"Unknown view: {name}")
    return views[name]


def _form(admin: AdminConsole, name: str) -> CategoryForm:
    forms = {"question": admin.question_form, "bulk": admin.bulk_form}
    if name not in forms:
        raise HTTPException(status_code=404, detail=f"Unknown form: {name}")
    return forms[name]


def _apply_select_action(select: CreatableMultiSelect, request: SelectAction) -> None:
    actions = {
        "open": lambda: select.open(),
        "close": lambda: select.close(),
        "type": lambda: select.type(request.value),
        "toggle": lambda: select.toggle(request.value),
        "remove": lambda: select.remove(request.value),
        "clear": lambda: select.clear(),
        "create": lambda: select.create(),
        "key": lambda: select.handle_key(request.value),
    }
    if request.action not in actions:
        raise HTTPException(status_code=400, detail=f"Unknown action: {request.action}")
    actions[request.action]()


# ============================================================================
# AUTH & NAVIGATION
# ============================================================================

@router.get("")
async def console_state() -> dict[str, Any]:
    return get_admin_console().as_dict()


@router.post("/login")
async def login(request: AdminLoginRequest) -> dict[str, Any]:
    admin = get_admin_console()
    await admin.login(request.email, request.password)
    return admin.as_dict()


@router.post("/logout")
async def logout(admin: AdminConsole = Depends(require_admin)) -> dict[str, Any]:
    await admin.logout()
    return admin.as_dict()


@router.post("/tab/{tab}")
async def select_tab(tab: str, admin: AdminConsole = Depends(require_admin)) -> dict[str, Any]:
    try:
        await admin.select_tab(tab)
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return admin.as_dict()


@router.post("/reload")
async def reload(admin: AdminConsole = Depends(require_admin)) -> dict[str, Any]:
    await admin.reload()
    return admin.as_dict()


# ============================================================================
# LISTINGS
# ============================================================================

@router.post("/views/{name}/filters")
async def set_filter(name: str, request: FilterRequest, admin: AdminConsole = Depends(require_admin)) -> dict[str, Any]:
    view = _view(admin, name)
    try:
        view.set_filter(request.name, request.value)
    except KeyError as e:
        raise HTTPException(status_code=400, detail=f"Unknown filter: {request.name}") from e
    await view.wait()
    return view.as_dict()


@router.post("/views/{name}/apply")
async def apply_filters(name: str, admin: AdminConsole = Depends(require_admin)) -> dict[str, Any]:
    view = _view(admin, name)
    view.apply_filters()
    await view.wait()
    return view.as_dict()


@router.post("/views/{name}/clear")
async def clear_filters(name: str, admin: AdminConsole = Depends(require_admin)) -> dict[str, Any]:
    view = _view(admin, name)
    view.clear_filters()
    await view.wait()
    return view.as_dict()


@router.post("/views/{name}/page")
async def change_page(name: str, request: PageRequest, admin: AdminConsole = Depends(require_admin)) -> dict[str, Any]:
    view = _view(admin, name)
    if request.page is not None:
        view.go_to_page(request.page)
    elif request.direction == "next":
        view.next_page()
    elif request.direction == "previous":
        view.previous_page()
    else:
        raise HTTPException(status_code=400, detail="Give a page number or a direction")
    await view.wait()
    return view.as_dict()


# ============================================================================
# REPORTS
# ============================================================================

@router.get("/reports/{session_id}")
async def view_report(session_id: str, admin: AdminConsole = Depends(require_admin)) -> dict[str, Any]:
    await admin.view_report(session_id)
    return admin.as_dict()["report"]


@router.delete("/reports")
async def close_report(admin: AdminConsole = Depends(require_admin)) -> dict[str, Any]:
    admin.close_report()
    return admin.as_dict()["report"]


@router.get("/students/{student_id}/analytics")
async def student_analytics(student_id: str, admin: AdminConsole = Depends(require_admin)) -> dict[str, Any]:
    data = await admin.view_student_analytics(student_id)
    if data is None:
        raise HTTPException(status_code=502, detail="Unable to load student analytics.")
    return data


# ============================================================================
# QUESTION BANK
# ============================================================================

@router.post("/questions/field")
async def set_question_field(request: FieldRequest, admin: AdminConsole = Depends(require_admin)) -> dict[str, Any]:
    try:
        admin.question_form.set_field(request.name, request.value)
    except KeyError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    return admin.as_dict()["question_form"]


@router.post("/questions/dropdowns/{field}")
async def dropdown_action(field: str, request: SelectAction, admin: AdminConsole = Depends(require_admin)) -> dict[str, Any]:
    dropdown = admin.question_form.dropdowns.get(field)
    if dropdown is None:
        raise HTTPException(status_code=404, detail=f"Unknown dropdown: {field}")
    actions = {
        "open": dropdown.open,
        "close": dropdown.close,
        "type": lambda: dropdown.type(request.value),
        "select": lambda: dropdown.select(request.value),
        "clear": dropdown.clear,
        "key": lambda: dropdown.handle_key(request.value),
    }
    if request.action not in actions:
        raise HTTPException(status_code=400, detail=f"Unknown action: {request.action}")
    try:
        actions[request.action]()
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    return admin.as_dict()["question_form"]


@router.post("/questions/{form}/categories/{field}")
async def category_action(
    form: str,
    field: str,
    request: SelectAction,
    admin: AdminConsole = Depends(require_admin),
) -> dict[str, Any]:
    target = _form(admin, form)
    if field not in target.selects:
        raise HTTPException(status_code=404, detail=f"Unknown category: {field}")
    _apply_select_action(target.selects[field], request)
    return target.selects[field].as_dict()


@router.post("/questions/single")
async def submit_question(admin: AdminConsole = Depends(require_admin)) -> dict[str, Any]:
    await admin.question_form.submit()
    return admin.as_dict()["question_form"]


@router.post("/questions/bulk")
async def submit_bulk_upload(
    file: UploadFile | None = File(default=None),
    admin: AdminConsole = Depends(require_admin),
) -> dict[str, Any]:
    if file is not None:
        admin.bulk_form.set_file(file.filename, await file.read())
    await admin.bulk_form.submit()
    return admin.as_dict()["bulk_form"]


@router.post("/questions/{form}/dismiss")
async def dismiss_modal(form: str, admin: AdminConsole = Depends(require_admin)) -> dict[str, Any]:
    try:
        await admin.dismiss_upload_modal(form)
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e
    return admin.as_dict()


@router.get("/questions/sample")
async def download_question_sample() -> Response:
    return Response(
        content=question_sample_csv(),
        media_type="text/csv",
        headers={"Content-Disposition": 'attachment; filename="question-upload-sample.csv"'},
    )


# ============================================================================
# ROLE MAPPING
# ============================================================================

@router.post("/mapping/open")
async def open_mapping(admin: AdminConsole = Depends(require_admin)) -> dict[str, Any]:
    await admin.role_mapping.open()
    return admin.role_mapping.as_dict()


@router.post("/mapping/close")
async def close_mapping(admin: AdminConsole = Depends(require_admin)) -> dict[str, Any]:
    admin.role_mapping.close()
    return admin.role_mapping.as_dict()


@router.post("/mapping/select")
async def select_mapping_level(request: LevelRequest, admin: AdminConsole = Depends(require_admin)) -> dict[str, Any]:
    try:
        admin.role_mapping.select(request.level, request.value)
    except KeyError as e:
        raise HTTPException(status_code=400, detail=f"Unknown level: {request.level}") from e
    await admin.role_mapping.cascade.wait()
    return admin.role_mapping.as_dict()


@router.post("/mapping/roles")
async def mapping_roles_action(request: SelectAction, admin: AdminConsole = Depends(require_admin)) -> dict[str, Any]:
    _apply_select_action(admin.role_mapping.roles, request)
    return admin.role_mapping.as_dict()


@router.post("/mapping/submit")
async def submit_mapping(admin: AdminConsole = Depends(require_admin)) -> dict[str, Any]:
    mapped = await admin.submit_role_mapping()
    return {"mapped": mapped, "role_mapping": admin.role_mapping.as_dict()}
