# maisha_console/routers/deductions.py
from fastapi import APIRouter, Depends, Form, Request
from fastapi.responses import RedirectResponse
from pydantic import ValidationError

from maisha_console.core.api_client import ApiClient, ApiError, get_api_client
from maisha_console.core.auth import AuthContext, require_feature
from maisha_console.core.notifications import notify, notify_error
from maisha_console.core.templating import render
from maisha_console.repositories.deduction_repo import DeductionRepository
from maisha_console.schemas.deduction import DeductionUpdate
from maisha_console.services.deduction_service import DeductionService
from maisha_console.services.scope import (
    group_choices,
    require_deduction_in_scope,
    scoped_group_id,
)

router = APIRouter(prefix="/deductions", tags=["Monthly Deductions"])

repo = DeductionRepository()
service = DeductionService(repo)


def _url(group_id: int | None) -> str:
    return f"/deductions?group_id={group_id}" if group_id is not None else "/deductions"


@router.get("")
async def deductions_page(
    request: Request,
    group_id: str | None = None,
    api: ApiClient = Depends(get_api_client),
    auth: AuthContext = Depends(require_feature("deductions")),
):
    gid = scoped_group_id(auth, group_id)
    deductions, groups = [], []
    try:
        groups = await group_choices(api, auth)
        if gid is not None:
            deductions = await service.list(api, gid)
    except ApiError as e:
        notify_error(request, e.message, title="Failed to load deductions")
    return render(
        request,
        "deductions.html",
        {"group_id": gid, "groups": groups, "deductions": deductions},
    )


@router.post("")
async def create_deduction(
    request: Request,
    group_id: str = Form(""),
    name: str = Form(""),
    amount: float = Form(0),
    account_number: str = Form(""),
    day_of_month: int = Form(1),
    api: ApiClient = Depends(get_api_client),
    auth: AuthContext = Depends(require_feature("deductions")),
):
    gid = scoped_group_id(auth, group_id or None)
    if gid is None:
        notify_error(request, "Please select a group")
        return RedirectResponse(_url(gid), status_code=303)
    try:
        await service.create(
            api,
            auth,
            gid,
            name=name,
            amount=amount,
            account_number=account_number,
            day_of_month=day_of_month,
        )
    except ValidationError:
        notify_error(
            request,
            "Name, a positive amount, account number and a day between 1 and 31 are required",
        )
    except ApiError as e:
        notify_error(request, e.message, title="Failed to create deduction")
    else:
        notify(request, "Deduction created", name)
    return RedirectResponse(_url(gid), status_code=303)


@router.post("/{deduction_id}")
async def update_deduction(
    request: Request,
    deduction_id: int,
    group_id: str = Form(""),
    name: str = Form(""),
    amount: float = Form(0),
    account_number: str = Form(""),
    day_of_month: int = Form(1),
    api: ApiClient = Depends(get_api_client),
    auth: AuthContext = Depends(require_feature("deductions")),
):
    gid = scoped_group_id(auth, group_id or None)
    try:
        await require_deduction_in_scope(api, auth, gid, deduction_id)
        payload = DeductionUpdate(
            name=name.strip() or None,
            amount=amount or None,
            account_number=account_number.strip() or None,
            day_of_month=day_of_month,
        )
        await service.update(api, deduction_id, payload)
    except ValidationError:
        notify_error(request, "Invalid deduction values")
    except ApiError as e:
        notify_error(request, e.message, title="Failed to update deduction")
    else:
        notify(request, "Deduction updated")
    return RedirectResponse(_url(gid), status_code=303)


@router.post("/{deduction_id}/toggle")
async def toggle_deduction(
    request: Request,
    deduction_id: int,
    is_active: bool = Form(...),
    group_id: str = Form(""),
    api: ApiClient = Depends(get_api_client),
    auth: AuthContext = Depends(require_feature("deductions")),
):
    """`is_active` is the new state, not the current one."""
    gid = scoped_group_id(auth, group_id or None)
    try:
        await require_deduction_in_scope(api, auth, gid, deduction_id)
        await service.set_active(api, deduction_id, is_active)
    except ApiError as e:
        notify_error(request, e.message, title="Failed to update deduction")
    else:
        notify(request, "Deduction activated" if is_active else "Deduction paused")
    return RedirectResponse(_url(gid), status_code=303)


@router.post("/{deduction_id}/delete")
async def delete_deduction(
    request: Request,
    deduction_id: int,
    group_id: str = Form(""),
    api: ApiClient = Depends(get_api_client),
    auth: AuthContext = Depends(require_feature("deductions")),
):
    gid = scoped_group_id(auth, group_id or None)
    try:
        await require_deduction_in_scope(api, auth, gid, deduction_id)
        await service.delete(api, deduction_id)
    except ApiError as e:
        notify_error(request, e.message, title="Failed to delete deduction")
    else:
        notify(request, "Deduction deleted")
    return RedirectResponse(_url(gid), status_code=303)
