# maisha_console/routers/groups.py
from fastapi import APIRouter, Depends, Form, Request
from fastapi.responses import RedirectResponse
from pydantic import ValidationError

from maisha_console.core.api_client import ApiClient, ApiError, get_api_client
from maisha_console.core.auth import AuthContext, require_feature
from maisha_console.core.notifications import notify, notify_error
from maisha_console.core.templating import render
from maisha_console.repositories.group_repo import GroupRepository
from maisha_console.repositories.member_repo import MemberRepository
from maisha_console.repositories.wallet_repo import WalletRepository
from maisha_console.services.group_service import SORT_KEYS, GroupService
from maisha_console.services.scope import scoped_group_id

router = APIRouter(prefix="/groups", tags=["Groups"])

repo = GroupRepository()
service = GroupService(repo, MemberRepository(), WalletRepository())


@router.get("")
async def list_groups(
    request: Request,
    q: str = "",
    sort: str = "name",
    api: ApiClient = Depends(get_api_client),
    auth: AuthContext = Depends(require_feature("groups")),
):
    if sort not in SORT_KEYS:
        sort = "name"
    try:
        groups = await service.list_groups(api, auth, q, sort)
    except ApiError as e:
        notify_error(request, e.message, title="Failed to load groups")
        groups = []
    return render(
        request,
        "groups/list.html",
        {"groups": groups, "q": q, "sort": sort, "sort_keys": SORT_KEYS},
    )


@router.post("")
async def create_group(
    request: Request,
    name: str = Form(""),
    description: str = Form(""),
    api: ApiClient = Depends(get_api_client),
    auth: AuthContext = Depends(require_feature("groups")),
):
    """Only super_admin may create groups; group_admins manage their own."""
    if not auth.has_role({"super_admin"}):
        notify_error(request, "Only super admins can create groups")
        return RedirectResponse("/groups", status_code=303)
    try:
        group = await service.create_group(api, auth, name, description)
    except ValidationError:
        notify_error(request, "Group name is required")
    except ApiError as e:
        notify_error(request, e.message, title="Failed to create group")
    else:
        notify(request, "Group created", group.name)
    return RedirectResponse("/groups", status_code=303)


@router.post("/{group_id}/delete")
async def delete_group(
    request: Request,
    group_id: str,
    api: ApiClient = Depends(get_api_client),
    auth: AuthContext = Depends(require_feature("groups")),
):
    if not auth.has_role({"super_admin"}):
        notify_error(request, "Only super admins can delete groups")
        return RedirectResponse("/groups", status_code=303)
    try:
        await service.delete_group(api, auth, group_id)
    except ApiError as e:
        notify_error(request, e.message, title="Failed to delete group")
    else:
        notify(request, "Group deleted")
    return RedirectResponse("/groups", status_code=303)


@router.get("/{group_id}")
async def group_details(
    request: Request,
    group_id: str,
    api: ApiClient = Depends(get_api_client),
    auth: AuthContext = Depends(require_feature("groups")),
):
    gid = scoped_group_id(auth, group_id)
    try:
        members = await service.group_members(api, str(gid))
    except ApiError as e:
        notify_error(request, e.message, title="Failed to load group members")
        members = []
    return render(
        request,
        "groups/detail.html",
        {"group_id": gid, "members": members},
    )
