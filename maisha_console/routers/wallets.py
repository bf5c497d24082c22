# maisha_console/routers/wallets.py
import asyncio

from fastapi import APIRouter, Depends, Form, Request
from fastapi.responses import RedirectResponse
from pydantic import ValidationError

from maisha_console.core.api_client import ApiClient, ApiError, get_api_client
from maisha_console.core.auth import AuthContext, require_feature
from maisha_console.core.notifications import notify, notify_error
from maisha_console.core.templating import render
from maisha_console.repositories.member_repo import MemberRepository
from maisha_console.repositories.wallet_repo import WalletRepository
from maisha_console.services.scope import (
    group_choices,
    require_member_in_scope,
    scoped_group_id,
)
from maisha_console.services.wallet_service import WalletService

router = APIRouter(prefix="/wallets", tags=["Wallets"])

repo = WalletRepository()
service = WalletService(repo, MemberRepository())


def _wallets_url(group_id: int | None) -> str:
    return f"/wallets?group_id={group_id}" if group_id is not None else "/wallets"


@router.get("")
async def wallets_page(
    request: Request,
    group_id: str | None = None,
    member_id: int | None = None,
    api: ApiClient = Depends(get_api_client),
    auth: AuthContext = Depends(require_feature("wallets")),
):
    """
    Group wallets with their members; `member_id` also opens that member's
    transaction history.
    """
    gid = scoped_group_id(auth, group_id)
    wallets, members, transactions, groups = [], [], [], []
    try:
        groups = await group_choices(api, auth)
        if member_id:
            await require_member_in_scope(api, auth, gid, member_id)
        if gid is not None:
            (wallets, members), transactions = await asyncio.gather(
                service.group_wallets(api, gid),
                service.transactions(api, member_id) if member_id else _no_rows(),
            )
    except ApiError as e:
        notify_error(request, e.message, title="Failed to load wallets")
    members_by_id = {m.id: m for m in members}
    return render(
        request,
        "wallets.html",
        {
            "group_id": gid,
            "groups": groups,
            "wallets": wallets,
            "members": members,
            "members_by_id": members_by_id,
            "member_id": member_id,
            "transactions": transactions,
        },
    )


@router.post("/topup")
async def topup(
    request: Request,
    member_id: int = Form(...),
    amount: float = Form(...),
    group_id: str = Form(""),
    source: str = Form(""),
    reference: str = Form(""),
    description: str = Form(""),
    notes: str = Form(""),
    api: ApiClient = Depends(get_api_client),
    auth: AuthContext = Depends(require_feature("wallets")),
):
    gid = scoped_group_id(auth, group_id or None)
    try:
        await require_member_in_scope(api, auth, gid, member_id)
        await service.topup(
            api,
            auth,
            member_id=member_id,
            amount=amount,
            source=source,
            reference=reference,
            description=description,
            notes=notes,
        )
    except ValidationError:
        notify_error(request, "Amount must be greater than zero")
    except ApiError as e:
        notify_error(request, e.message, title="Top-up failed")
    else:
        notify(request, "Wallet topped up")
    return RedirectResponse(_wallets_url(gid), status_code=303)


@router.post("/cashout")
async def cashout(
    request: Request,
    member_id: int = Form(...),
    amount: float = Form(...),
    group_id: str = Form(""),
    method: str = Form(""),
    reference: str = Form(""),
    description: str = Form(""),
    notes: str = Form(""),
    api: ApiClient = Depends(get_api_client),
    auth: AuthContext = Depends(require_feature("wallets")),
):
    gid = scoped_group_id(auth, group_id or None)
    try:
        await require_member_in_scope(api, auth, gid, member_id)
        await service.cashout(
            api,
            auth,
            member_id=member_id,
            amount=amount,
            method=method,
            reference=reference,
            description=description,
            notes=notes,
        )
    except ValidationError:
        notify_error(request, "Amount must be greater than zero")
    except ApiError as e:
        notify_error(request, e.message, title="Cash-out failed")
    else:
        notify(request, "Cash-out recorded")
    return RedirectResponse(_wallets_url(gid), status_code=303)


async def _no_rows() -> list:
    return []
