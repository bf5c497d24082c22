# maisha_console/services/dashboard_service.py
import asyncio
from dataclasses import dataclass, field
from typing import Any

from maisha_console.core.api_client import ApiClient
from maisha_console.core.auth import AuthContext
from maisha_console.repositories.deduction_repo import DeductionRepository
from maisha_console.repositories.group_repo import GroupRepository
from maisha_console.repositories.member_repo import MemberRepository
from maisha_console.repositories.report_repo import ReportRepository
from maisha_console.repositories.wallet_repo import WalletRepository
from maisha_console.repositories.withdrawal_repo import WithdrawalRepository

# role -> dashboard variant; anything else gets the fallback
DASHBOARD_BY_ROLE: dict[str, str] = {
    "super_admin": "super_admin",
    "group_admin": "group_admin",
    "group_user": "group_user",
    "member": "member",
}
FALLBACK_DASHBOARD = "fallback"


def select_dashboard(role: str | None) -> str:
    """Pick exactly one dashboard variant for a role."""
    return DASHBOARD_BY_ROLE.get(role or "", FALLBACK_DASHBOARD)


@dataclass
class DashboardView:
    variant: str
    stats: dict[str, Any] = field(default_factory=dict)
    details: dict[str, Any] = field(default_factory=dict)

    @property
    def template(self) -> str:
        return f"dashboard/{self.variant}.html"


class DashboardService:
    """
    Builds the role-specific dashboard.

    Each variant fetches what it shows concurrently; one failed call fails
    the whole dashboard (ApiError propagates to the page).
    """

    def __init__(
        self,
        groups: GroupRepository,
        members: MemberRepository,
        wallets: WalletRepository,
        withdrawals: WithdrawalRepository,
        deductions: DeductionRepository,
        reports: ReportRepository,
    ):
        self.groups = groups
        self.members = members
        self.wallets = wallets
        self.withdrawals = withdrawals
        self.deductions = deductions
        self.reports = reports

    async def build(self, api: ApiClient, auth: AuthContext) -> DashboardView:
        variant = select_dashboard(auth.user.role if auth.user else None)
        builder = {
            "super_admin": self._super_admin,
            "group_admin": self._group_admin,
            "group_user": self._group_user,
            "member": self._member,
        }.get(variant)
        if builder is None:
            return DashboardView(variant)
        return await builder(api, auth)

    async def _super_admin(self, api: ApiClient, auth: AuthContext) -> DashboardView:
        groups, members = await asyncio.gather(
            self.groups.list(api),
            self.members.list(api),
        )
        return DashboardView(
            "super_admin",
            stats={"total_groups": len(groups), "total_members": len(members)},
        )

    async def _group_admin(self, api: ApiClient, auth: AuthContext) -> DashboardView:
        stats = {
            "group_members": 0,
            "total_wallet_balance": 0.0,
            "pending_withdrawals": 0,
            "active_deductions": 0,
        }
        group_id = auth.user.group_id
        if group_id is None:
            return DashboardView("group_admin", stats=stats)

        members, wallets, withdrawals, deductions = await asyncio.gather(
            self.members.list(api, group_id),
            self.wallets.list_group_wallets(api, group_id),
            self.withdrawals.list_by_group(api, group_id),
            self.deductions.list(api, group_id),
        )
        stats.update(
            group_members=len(members),
            total_wallet_balance=sum(w.balance for w in wallets),
            pending_withdrawals=sum(1 for w in withdrawals if w.status == "pending"),
            active_deductions=sum(1 for d in deductions if d.is_active),
        )
        return DashboardView("group_admin", stats=stats)

    async def _group_user(self, api: ApiClient, auth: AuthContext) -> DashboardView:
        stats = {"group_members": 0, "total_wallet_balance": 0.0}
        group_id = auth.user.group_id
        if group_id is None:
            return DashboardView("group_user", stats=stats)

        members, wallets = await asyncio.gather(
            self.members.list(api, group_id),
            self.wallets.list_group_wallets(api, group_id),
        )
        stats.update(
            group_members=len(members),
            total_wallet_balance=sum(w.balance for w in wallets),
        )
        return DashboardView("group_user", stats=stats)

    async def _member(self, api: ApiClient, auth: AuthContext) -> DashboardView:
        report = await self.reports.my(api)
        balance = report.wallet.balance if report.wallet else 0.0
        pending = sum(1 for w in report.withdrawal_requests if w.status == "pending")
        return DashboardView(
            "member",
            stats={"balance": balance, "pending_withdrawals": pending},
            details={
                "wallet": report.wallet,
                "transactions": report.transactions[:5],
                "withdrawal_requests": report.withdrawal_requests[:5],
            },
        )
