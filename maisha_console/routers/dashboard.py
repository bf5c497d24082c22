# maisha_console/routers/dashboard.py
from fastapi import APIRouter, Depends, Request

from maisha_console.core.api_client import ApiClient, ApiError, get_api_client
from maisha_console.core.auth import AuthContext, require_session
from maisha_console.core.notifications import notify_error
from maisha_console.core.templating import render
from maisha_console.repositories.deduction_repo import DeductionRepository
from maisha_console.repositories.group_repo import GroupRepository
from maisha_console.repositories.member_repo import MemberRepository
from maisha_console.repositories.report_repo import ReportRepository
from maisha_console.repositories.wallet_repo import WalletRepository
from maisha_console.repositories.withdrawal_repo import WithdrawalRepository
from maisha_console.services.dashboard_service import (
    DashboardService,
    DashboardView,
    select_dashboard,
)

router = APIRouter(prefix="/dashboard", tags=["Dashboard"])

service = DashboardService(
    GroupRepository(),
    MemberRepository(),
    WalletRepository(),
    WithdrawalRepository(),
    DeductionRepository(),
    ReportRepository(),
)


@router.get("")
async def dashboard(
    request: Request,
    api: ApiClient = Depends(get_api_client),
    auth: AuthContext = Depends(require_session),
):
    """
    Role-specific dashboard. Open to every session, including one without
    a role (it gets the fallback view).

    If any of the view's backend calls fails, the view renders empty with an
    error notification.
    """
    try:
        view = await service.build(api, auth)
    except ApiError as e:
        notify_error(request, e.message, title="Failed to load dashboard")
        view = DashboardView(select_dashboard(auth.user.role))
    return render(request, view.template, {"view": view})
