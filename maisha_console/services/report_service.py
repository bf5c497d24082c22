# maisha_console/services/report_service.py
import asyncio
from typing import Any

from maisha_console.core.api_client import ApiClient
from maisha_console.core.auth import AuthContext
from maisha_console.repositories.group_repo import GroupRepository
from maisha_console.repositories.member_repo import MemberRepository
from maisha_console.repositories.report_repo import ReportRepository
from maisha_console.schemas.report import StatementFilters, WalletReportFilters
from maisha_console.services.csv_service import records_to_csv


def groups_export_rows(groups) -> list[dict[str, Any]]:
    return [
        {
            "Group Name": g.name,
            "Description": g.description,
            "Created By": g.created_by or "",
            "Created At": g.created_at.date().isoformat(),
        }
        for g in groups
    ]


def members_export_rows(members) -> list[dict[str, Any]]:
    return [
        {
            "Full Name": m.full_name,
            "Phone": m.phone or "",
            "National ID": m.national_id or "",
            "Gender": m.gender,
            "Status": "Active" if m.is_active else "Inactive",
            "Group ID": m.group_id,
        }
        for m in members
    ]


class ReportService:
    """
    Reports page and CSV exports.

    Report bodies are shown as the backend sends them. Group-scoped staff
    only ever see their own group.
    """

    def __init__(
        self,
        repo: ReportRepository,
        groups: GroupRepository,
        members: MemberRepository,
    ):
        self.repo = repo
        self.groups = groups
        self.members = members

    async def overview(
        self,
        api: ApiClient,
        auth: AuthContext,
        group_id: int | None,
    ) -> dict[str, Any]:
        if auth.has_role({"super_admin"}) and group_id is None:
            system, audit = await asyncio.gather(
                self.repo.system(api),
                self.repo.audit_log(api),
            )
            return {"system": system, "audit": audit[:20]}
        if group_id is None:
            return {}
        group, summary = await asyncio.gather(
            self.repo.group(api, group_id),
            self.repo.group_wallet_summary(api, group_id),
        )
        return {"group": group, "wallet_summary": summary}

    async def member_report(self, api: ApiClient, member_id: int) -> Any:
        return await self.repo.member(api, member_id)

    async def wallet_report(
        self,
        api: ApiClient,
        kind: str,
        filters: WalletReportFilters,
    ) -> Any:
        if kind == "cashout":
            return await self.repo.cashout_report(api, filters)
        return await self.repo.topup_report(api, filters)

    async def member_statement(
        self,
        api: ApiClient,
        member_id: int,
        filters: StatementFilters,
    ) -> Any:
        return await self.repo.member_statement(api, member_id, filters)

    async def groups_csv(self, api: ApiClient, auth: AuthContext) -> str:
        groups = await self.groups.list(api)
        groups = [g for g in groups if auth.can_access_group(g.id)]
        return records_to_csv(groups_export_rows(groups))

    async def members_csv(
        self,
        api: ApiClient,
        auth: AuthContext,
        group_id: int | None,
    ) -> str:
        if group_id is None and not auth.has_role({"super_admin"}):
            return ""
        members = await self.members.list(api, group_id)
        return records_to_csv(members_export_rows(members))
