# maisha_console/routers/reports.py
from datetime import date

from fastapi import APIRouter, Depends, Request

from maisha_console.core.api_client import ApiClient, ApiError, get_api_client
from maisha_console.core.auth import AuthContext, require_feature
from maisha_console.core.downloads import csv_download
from maisha_console.core.notifications import notify_error
from maisha_console.core.templating import render
from maisha_console.repositories.group_repo import GroupRepository
from maisha_console.repositories.member_repo import MemberRepository
from maisha_console.repositories.report_repo import ReportRepository
from maisha_console.schemas.report import StatementFilters, WalletReportFilters
from maisha_console.services.report_service import ReportService
from maisha_console.services.scope import (
    group_choices,
    require_member_in_scope,
    scoped_group_id,
)

router = APIRouter(prefix="/reports", tags=["Reports"])

repo = ReportRepository()
service = ReportService(repo, GroupRepository(), MemberRepository())


@router.get("")
async def reports_page(
    request: Request,
    group_id: str | None = None,
    api: ApiClient = Depends(get_api_client),
    auth: AuthContext = Depends(require_feature("reports")),
):
    gid = scoped_group_id(auth, group_id)
    data, groups = {}, []
    try:
        groups = await group_choices(api, auth)
        data = await service.overview(api, auth, gid)
    except ApiError as e:
        notify_error(request, e.message, title="Failed to load reports")
    return render(
        request,
        "reports/index.html",
        {"group_id": gid, "groups": groups, "data": data},
    )


@router.get("/wallet/{kind}")
async def wallet_report(
    request: Request,
    kind: str,
    group_id: str | None = None,
    member_id: int | None = None,
    start_date: date | None = None,
    end_date: date | None = None,
    initiated_by: str | None = None,
    api: ApiClient = Depends(get_api_client),
    auth: AuthContext = Depends(require_feature("reports")),
):
    """Top-up (`kind=topup`) or cash-out (`kind=cashout`) report."""
    kind = "cashout" if kind == "cashout" else "topup"
    filters = WalletReportFilters(
        group_id=scoped_group_id(auth, group_id),
        member_id=member_id,
        start_date=start_date,
        end_date=end_date,
        initiated_by=initiated_by or None,
    )
    report = None
    try:
        if member_id:
            await require_member_in_scope(api, auth, filters.group_id, member_id)
        report = await service.wallet_report(api, kind, filters)
    except ApiError as e:
        notify_error(request, e.message, title="Failed to load report")
    return render(
        request,
        "reports/wallet.html",
        {"kind": kind, "filters": filters, "report": report},
    )


@router.get("/members/{member_id}")
async def member_report(
    request: Request,
    member_id: int,
    group_id: str | None = None,
    start_date: date | None = None,
    end_date: date | None = None,
    transaction_type: str | None = None,
    api: ApiClient = Depends(get_api_client),
    auth: AuthContext = Depends(require_feature("reports")),
):
    filters = StatementFilters(
        start_date=start_date,
        end_date=end_date,
        transaction_type=transaction_type or None,
    )
    report, statement = None, None
    try:
        await require_member_in_scope(api, auth, scoped_group_id(auth, group_id), member_id)
        report = await service.member_report(api, member_id)
        statement = await service.member_statement(api, member_id, filters)
    except ApiError as e:
        notify_error(request, e.message, title="Failed to load member report")
    return render(
        request,
        "reports/member.html",
        {
            "member_id": member_id,
            "filters": filters,
            "report": report,
            "statement": statement,
        },
    )


@router.get("/export/groups.csv")
async def export_groups(
    api: ApiClient = Depends(get_api_client),
    auth: AuthContext = Depends(require_feature("reports")),
):
    return csv_download(await service.groups_csv(api, auth), "groups_report.csv")


@router.get("/export/members.csv")
async def export_members(
    group_id: str | None = None,
    api: ApiClient = Depends(get_api_client),
    auth: AuthContext = Depends(require_feature("reports")),
):
    gid = scoped_group_id(auth, group_id)
    return csv_download(await service.members_csv(api, auth, gid), "members_report.csv")
