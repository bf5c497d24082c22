# maisha_console/routers/group_policy.py
from fastapi import APIRouter, Depends, Form, Request
from fastapi.responses import RedirectResponse
from pydantic import ValidationError

from maisha_console.core.api_client import ApiClient, ApiError, get_api_client
from maisha_console.core.auth import AuthContext, require_feature
from maisha_console.core.notifications import notify, notify_error
from maisha_console.core.templating import render
from maisha_console.repositories.policy_repo import GroupPolicyRepository
from maisha_console.schemas.policy import GroupPolicyUpdate
from maisha_console.services.policy_service import GroupPolicyService
from maisha_console.services.scope import group_choices, scoped_group_id

router = APIRouter(prefix="/group-policy", tags=["Group Policy"])

repo = GroupPolicyRepository()
service = GroupPolicyService(repo)


def _url(group_id: int | None) -> str:
    return f"/group-policy?group_id={group_id}" if group_id is not None else "/group-policy"


@router.get("")
async def policy_page(
    request: Request,
    group_id: str | None = None,
    api: ApiClient = Depends(get_api_client),
    auth: AuthContext = Depends(require_feature("group_policy")),
):
    gid = scoped_group_id(auth, group_id)
    policy, groups = None, []
    try:
        groups = await group_choices(api, auth)
        if gid is not None:
            policy = await service.get(api, gid)
    except ApiError as e:
        notify_error(request, e.message, title="Failed to load group policy")
    return render(
        request,
        "group_policy.html",
        {"group_id": gid, "groups": groups, "policy": policy},
    )


@router.post("")
async def update_policy(
    request: Request,
    group_id: str = Form(""),
    allow_group_user_cashout: bool = Form(False),
    allow_member_withdrawal: bool = Form(False),
    require_approval_for_withdrawal: bool = Form(False),
    max_cashout_amount: str = Form(""),
    max_withdrawal_amount: str = Form(""),
    api: ApiClient = Depends(get_api_client),
    auth: AuthContext = Depends(require_feature("group_policy")),
):
    """Blank limit fields mean "no limit" and are not sent."""
    gid = scoped_group_id(auth, group_id or None)
    if gid is None:
        notify_error(request, "Please select a group")
        return RedirectResponse(_url(gid), status_code=303)
    try:
        payload = GroupPolicyUpdate(
            allow_group_user_cashout=allow_group_user_cashout,
            allow_member_withdrawal=allow_member_withdrawal,
            require_approval_for_withdrawal=require_approval_for_withdrawal,
            max_cashout_amount=max_cashout_amount.strip() or None,
            max_withdrawal_amount=max_withdrawal_amount.strip() or None,
        )
        await service.update(api, gid, payload)
    except ValidationError:
        notify_error(request, "Limits must be non-negative numbers")
    except ApiError as e:
        notify_error(request, e.message, title="Failed to update policy")
    else:
        notify(request, "Policy updated")
    return RedirectResponse(_url(gid), status_code=303)
