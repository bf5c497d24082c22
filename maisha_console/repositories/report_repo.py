# maisha_console/repositories/report_repo.py
from typing import Any

from maisha_console.core.api_client import ApiClient, truthy_params
from maisha_console.schemas.report import (
    MyReport,
    StatementFilters,
    WalletReportFilters,
)


class ReportRepository:
    """
    Report and wallet-report endpoints.

    Report bodies are backend-defined aggregates; they are passed through
    as plain JSON except `reports/my`, which the member portal reads.
    """

    async def system(self, api: ApiClient) -> Any:
        return await api.get("reports/system")

    async def group(self, api: ApiClient, group_id: int) -> Any:
        return await api.get(f"reports/group/{group_id}")

    async def member(self, api: ApiClient, member_id: int) -> Any:
        return await api.get(f"reports/member/{member_id}")

    async def my(self, api: ApiClient) -> MyReport:
        data = await api.get("reports/my")
        return MyReport.model_validate(data or {})

    async def audit_log(self, api: ApiClient) -> list[Any]:
        return await api.get_list("reports/audit")

    async def topup_report(self, api: ApiClient, filters: WalletReportFilters | None = None) -> Any:
        params = truthy_params(filters.model_dump() if filters else None)
        return await api.get("wallet-reports/topup", params=params)

    async def cashout_report(self, api: ApiClient, filters: WalletReportFilters | None = None) -> Any:
        params = truthy_params(filters.model_dump() if filters else None)
        return await api.get("wallet-reports/cashout", params=params)

    async def group_wallet_summary(self, api: ApiClient, group_id: int) -> Any:
        return await api.get(f"wallet-reports/group-summary/{group_id}")

    async def member_statement(
        self,
        api: ApiClient,
        member_id: int,
        filters: StatementFilters | None = None,
    ) -> Any:
        params = truthy_params(filters.model_dump() if filters else None)
        return await api.get(f"wallet-reports/member-statement/{member_id}", params=params)
