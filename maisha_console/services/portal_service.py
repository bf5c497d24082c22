# maisha_console/services/portal_service.py
from maisha_console.core.api_client import ApiClient
from maisha_console.repositories.report_repo import ReportRepository
from maisha_console.repositories.withdrawal_repo import WithdrawalRepository
from maisha_console.schemas.report import MyReport
from maisha_console.schemas.withdrawal import WithdrawalCreate
from maisha_console.services.scope import FormError


class MemberPortalService:
    """The member's own wallet, history and withdrawal requests."""

    def __init__(self, reports: ReportRepository, withdrawals: WithdrawalRepository):
        self.reports = reports
        self.withdrawals = withdrawals

    async def overview(self, api: ApiClient) -> MyReport:
        return await self.reports.my(api)

    async def request_withdrawal(
        self,
        api: ApiClient,
        amount: float,
        phone: str | None = None,
        notes: str | None = None,
    ) -> None:
        """
        Ask for a withdrawal from the member's own wallet.

        The phone defaults to the one on the member record.

        Raises:
            FormError: no member record, or no phone to pay out to.
        """
        report = await self.reports.my(api)
        if not report.member or report.member.get("id") is None:
            raise FormError("No member record is linked to this account")
        phone = (phone or "").strip() or report.member.get("phone")
        if not phone:
            raise FormError("Phone number is required")
        await self.withdrawals.create(
            api,
            WithdrawalCreate(
                member_id=report.member["id"],
                amount=amount,
                phone=phone,
                notes=notes or None,
            ),
        )
