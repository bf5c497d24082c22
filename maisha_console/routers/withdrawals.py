# maisha_console/routers/withdrawals.py
from fastapi import APIRouter, Depends, Form, Request
from fastapi.responses import RedirectResponse

from maisha_console.core.api_client import ApiClient, ApiError, get_api_client
from maisha_console.core.auth import AuthContext, require_feature
from maisha_console.core.notifications import notify, notify_error
from maisha_console.core.templating import render
from maisha_console.repositories.withdrawal_repo import WithdrawalRepository
from maisha_console.services.scope import (
    group_choices,
    require_withdrawal_in_scope,
    scoped_group_id,
)
from maisha_console.services.withdrawal_service import WithdrawalService

router = APIRouter(prefix="/withdrawals", tags=["Withdrawals"])

repo = WithdrawalRepository()
service = WithdrawalService(repo)


def _url(group_id: int | None) -> str:
    return f"/withdrawals?group_id={group_id}" if group_id is not None else "/withdrawals"


@router.get("")
async def withdrawals_page(
    request: Request,
    group_id: str | None = None,
    status: str = "",
    api: ApiClient = Depends(get_api_client),
    auth: AuthContext = Depends(require_feature("withdrawals")),
):
    gid = scoped_group_id(auth, group_id)
    withdrawals, groups = [], []
    try:
        groups = await group_choices(api, auth)
        if gid is not None:
            withdrawals = await service.list(api, gid)
    except ApiError as e:
        notify_error(request, e.message, title="Failed to load withdrawals")
    if status:
        withdrawals = [w for w in withdrawals if w.status == status]
    return render(
        request,
        "withdrawals.html",
        {"group_id": gid, "groups": groups, "withdrawals": withdrawals, "status": status},
    )


@router.post("/{withdrawal_id}/approve")
async def approve(
    request: Request,
    withdrawal_id: int,
    group_id: str = Form(""),
    api: ApiClient = Depends(get_api_client),
    auth: AuthContext = Depends(require_feature("withdrawals")),
):
    gid = scoped_group_id(auth, group_id or None)
    try:
        await require_withdrawal_in_scope(api, auth, gid, withdrawal_id)
        await service.approve(api, auth, withdrawal_id)
    except ApiError as e:
        notify_error(request, e.message, title="Approval failed")
    else:
        notify(request, "Withdrawal approved")
    return RedirectResponse(_url(gid), status_code=303)


@router.post("/{withdrawal_id}/reject")
async def reject(
    request: Request,
    withdrawal_id: int,
    group_id: str = Form(""),
    api: ApiClient = Depends(get_api_client),
    auth: AuthContext = Depends(require_feature("withdrawals")),
):
    gid = scoped_group_id(auth, group_id or None)
    try:
        await require_withdrawal_in_scope(api, auth, gid, withdrawal_id)
        await service.reject(api, auth, withdrawal_id)
    except ApiError as e:
        notify_error(request, e.message, title="Rejection failed")
    else:
        notify(request, "Withdrawal rejected")
    return RedirectResponse(_url(gid), status_code=303)
