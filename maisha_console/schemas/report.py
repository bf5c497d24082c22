# maisha_console/schemas/report.py
from datetime import date

from pydantic import ConfigDict
from sqlmodel import SQLModel

from maisha_console.schemas.record import BackendRecord
from maisha_console.schemas.wallet import Wallet, WalletTransaction
from maisha_console.schemas.withdrawal import WithdrawalRequest


class WalletReportFilters(SQLModel):
    """Optional filters for top-up / cash-out reports. Falsy values are not sent."""

    model_config = ConfigDict(extra="forbid")

    group_id: int | None = None
    member_id: int | None = None
    start_date: date | None = None
    end_date: date | None = None
    initiated_by: str | None = None


class StatementFilters(SQLModel):
    model_config = ConfigDict(extra="forbid")

    start_date: date | None = None
    end_date: date | None = None
    transaction_type: str | None = None


class MyReport(BackendRecord):
    """`reports/my`: everything the member portal shows."""

    member: dict | None = None
    wallet: Wallet | None = None
    transactions: list[WalletTransaction] = []
    withdrawal_requests: list[WithdrawalRequest] = []
