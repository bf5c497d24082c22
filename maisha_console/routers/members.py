# maisha_console/routers/members.py
import asyncio
from datetime import date

from fastapi import APIRouter, Depends, Form, Request
from fastapi.responses import RedirectResponse
from pydantic import ValidationError

from maisha_console.core.api_client import ApiClient, ApiError, get_api_client
from maisha_console.core.auth import AuthContext, require_feature
from maisha_console.core.notifications import notify, notify_error
from maisha_console.core.templating import render
from maisha_console.repositories.member_repo import MemberRepository
from maisha_console.schemas.member import MemberWrite
from maisha_console.services.member_service import MemberService
from maisha_console.services.scope import FormError, group_choices, scoped_group_id

router = APIRouter(prefix="/members", tags=["Members"])

repo = MemberRepository()
service = MemberService(repo)


def _members_url(group_id: int | None) -> str:
    return f"/members?group_id={group_id}" if group_id is not None else "/members"


@router.get("")
async def list_members(
    request: Request,
    group_id: str | None = None,
    api: ApiClient = Depends(get_api_client),
    auth: AuthContext = Depends(require_feature("members")),
):
    gid = scoped_group_id(auth, group_id)
    groups = []
    try:
        members, groups = await asyncio.gather(
            service.list_members(api, auth, gid),
            group_choices(api, auth),
        )
    except ApiError as e:
        notify_error(request, e.message, title="Failed to load members")
        members = []
    return render(
        request,
        "members/list.html",
        {"members": members, "groups": groups, "group_id": gid},
    )


@router.get("/lookup")
async def lookup(
    request: Request,
    phone: str = "",
    api: ApiClient = Depends(get_api_client),
    auth: AuthContext = Depends(require_feature("members")),
):
    """JSON helper for the add form: pre-fill fields from the phone lookup."""
    try:
        info = await service.lookup(api, phone)
    except ApiError as e:
        return {"found": False, "error": e.message}
    if info is None:
        return {"found": False}
    return {"found": True, **info.model_dump(by_alias=True)}


@router.post("")
async def add_member(
    request: Request,
    phone: str = Form(""),
    group_id: str = Form(""),
    first_name: str = Form(""),
    last_name: str = Form(""),
    birth_date: date | None = Form(None),
    gender: str = Form(""),
    national_id: str = Form(""),
    api: ApiClient = Depends(get_api_client),
    auth: AuthContext = Depends(require_feature("members")),
):
    gid = scoped_group_id(auth, group_id or None)
    if not phone.strip():
        notify_error(request, "Phone number is required")
        return RedirectResponse(_members_url(gid), status_code=303)
    try:
        member = await service.add_member(
            api,
            auth,
            phone=phone,
            group_id=gid,
            first_name=first_name.strip(),
            last_name=last_name.strip(),
            birth_date=birth_date,
            gender=gender or None,
            national_id=national_id.strip(),
        )
    except (FormError, ValidationError) as e:
        notify_error(request, str(e))
    except ApiError as e:
        notify_error(request, e.message, title="Failed to add member")
    else:
        notify(request, "Member added", member.full_name)
    return RedirectResponse(_members_url(gid), status_code=303)


@router.post("/{member_id}")
async def update_member(
    request: Request,
    member_id: str,
    group_id: str = Form(...),
    first_name: str = Form(""),
    last_name: str = Form(""),
    birth_date: date | None = Form(None),
    gender: str = Form("OTHER"),
    national_id: str = Form(""),
    phone: str = Form(""),
    is_active: bool = Form(False),
    api: ApiClient = Depends(get_api_client),
    auth: AuthContext = Depends(require_feature("members")),
):
    gid = scoped_group_id(auth, group_id)
    try:
        payload = MemberWrite(
            first_name=first_name.strip(),
            last_name=last_name.strip(),
            birth_date=birth_date,
            gender_code=gender,
            is_active=is_active,
            national_id=national_id.strip() or None,
            phone=phone.strip() or None,
            group_id=gid,
        )
        await service.update_member(api, auth, member_id, payload)
    except (FormError, ValidationError) as e:
        notify_error(request, str(e))
    except ApiError as e:
        notify_error(request, e.message, title="Failed to update member")
    else:
        notify(request, "Member updated")
    return RedirectResponse(_members_url(gid), status_code=303)
