# maisha_console/routers/member_portal.py
from fastapi import APIRouter, Depends, Form, Request
from fastapi.responses import RedirectResponse
from pydantic import ValidationError

from maisha_console.core.api_client import ApiClient, ApiError, get_api_client
from maisha_console.core.auth import AuthContext, require_feature
from maisha_console.core.notifications import notify, notify_error
from maisha_console.core.templating import render
from maisha_console.repositories.report_repo import ReportRepository
from maisha_console.repositories.withdrawal_repo import WithdrawalRepository
from maisha_console.schemas.report import MyReport
from maisha_console.services.portal_service import MemberPortalService
from maisha_console.services.scope import FormError

router = APIRouter(prefix="/member-portal", tags=["Member Portal"])

service = MemberPortalService(ReportRepository(), WithdrawalRepository())


@router.get("")
async def portal_page(
    request: Request,
    api: ApiClient = Depends(get_api_client),
    auth: AuthContext = Depends(require_feature("member_portal")),
):
    try:
        report = await service.overview(api)
    except ApiError as e:
        notify_error(request, e.message, title="Failed to load your wallet")
        report = MyReport()
    return render(request, "member_portal.html", {"report": report})


@router.post("/withdrawals")
async def request_withdrawal(
    request: Request,
    amount: float = Form(0),
    phone: str = Form(""),
    notes: str = Form(""),
    api: ApiClient = Depends(get_api_client),
    auth: AuthContext = Depends(require_feature("member_portal")),
):
    try:
        await service.request_withdrawal(api, amount, phone, notes)
    except ValidationError:
        notify_error(request, "Amount must be greater than zero")
    except FormError as e:
        notify_error(request, str(e))
    except ApiError as e:
        notify_error(request, e.message, title="Withdrawal request failed")
    else:
        notify(request, "Withdrawal requested", "An admin will review your request")
    return RedirectResponse("/member-portal", status_code=303)
